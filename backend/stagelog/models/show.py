from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from stagelog.database import Base


class Show(Base):
    __tablename__ = "shows"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False, index=True)
    composer = Column(String(200), default="")
    lyricist = Column(String(200), default="")
    synopsis = Column(Text, default="")
    genre = Column(String(50), nullable=True)
    poster_image_url = Column(String(500), default="")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    performances = relationship("Performance", back_populates="show")
