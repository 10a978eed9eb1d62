from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone


class ShowBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    composer: str = ""
    lyricist: str = ""
    synopsis: str = ""
    genre: Optional[str] = None
    poster_image_url: str = ""


class ShowCreate(ShowBase):
    pass


class Show(ShowBase):
    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        from_attributes = True


class AccessSchemeBase(BaseModel):
    venue_name: str
    location: str = ""
    companion_policy: str = ""
    conditions_proof: str = ""
    how_to_book: str = ""


class AccessSchemeCreate(AccessSchemeBase):
    pass


class AccessScheme(AccessSchemeBase):
    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        from_attributes = True
