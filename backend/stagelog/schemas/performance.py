from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from stagelog.coercion import parse_date, to_bool, to_float


RATING_CATEGORIES = (
    "music_songs",
    "story_plot",
    "performance_cast",
    "stage_visuals",
    "rewatch_value",
    "theatre_experience",
    "programme",
    "atmosphere",
)
EXPENSE_FIELDS = ("ticket_price", "booking_fee", "travel_cost", "other_expenses")
MAX_RATING = 5.0

PRO_SHOT_LABEL = "Pro Shot"
IN_VENUE_LABELS = {
    "west end",
    "off-west end",
    "uk tour",
    "touring",
    "broadway",
    "off-broadway",
    "regional",
    "community",
    "fringe",
    "amateur",
    "concert",
}


class ProductionKind(str, Enum):
    IN_VENUE = "in_venue"
    PRO_SHOT = "pro_shot"
    OTHER = "other"


@dataclass(frozen=True)
class ProductionType:
    """Closed classification of a free-form production type label."""

    kind: ProductionKind
    label: str

    @classmethod
    def parse(cls, value: Any) -> "ProductionType":
        label = value.strip() if isinstance(value, str) else ""
        normalized = " ".join(label.lower().replace("-", " ").split())
        if normalized in {"pro shot", "proshot"}:
            return cls(ProductionKind.PRO_SHOT, PRO_SHOT_LABEL)
        if label.lower() in IN_VENUE_LABELS:
            return cls(ProductionKind.IN_VENUE, label)
        return cls(ProductionKind.OTHER, label)

    @property
    def is_pro_shot(self) -> bool:
        return self.kind == ProductionKind.PRO_SHOT


class CategoryRatings(BaseModel):
    """Per-category ratings; ``None`` means the category was not rated."""

    music_songs: Optional[float] = None
    story_plot: Optional[float] = None
    performance_cast: Optional[float] = None
    stage_visuals: Optional[float] = None
    rewatch_value: Optional[float] = None
    theatre_experience: Optional[float] = None
    programme: Optional[float] = None
    atmosphere: Optional[float] = None

    @field_validator(*RATING_CATEGORIES, mode="before")
    @classmethod
    def _normalize_unrated(cls, value: Any) -> Optional[float]:
        # Older records store 0 for "not rated"
        number = to_float(value, 0.0)
        return number if number != 0 else None

    @field_validator(*RATING_CATEGORIES)
    @classmethod
    def _check_range(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 0 < value <= MAX_RATING:
            raise ValueError(f"Rating must be between 0 and {MAX_RATING:g}")
        return value

    def rated(self) -> dict[str, float]:
        return {
            category: value
            for category in RATING_CATEGORIES
            if (value := getattr(self, category)) is not None
        }


class PerformanceBase(BaseModel):
    show_id: Optional[str] = None
    date_seen: Optional[date] = None
    theatre_name: str = ""
    city: str = ""
    production_type: str = ""
    is_musical: bool = True
    seat_location: str = ""
    notes_on_access: str = ""
    general_notes: str = ""
    ticket_price: float = 0.0
    booking_fee: float = 0.0
    travel_cost: float = 0.0
    other_expenses: float = 0.0
    currency: Optional[str] = None
    rating: CategoryRatings = Field(default_factory=CategoryRatings)

    @field_validator("date_seen", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator(*EXPENSE_FIELDS, mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> float:
        return to_float(value, 0.0)

    @field_validator(*EXPENSE_FIELDS)
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Expense amounts cannot be negative")
        return value

    @field_validator("is_musical", mode="before")
    @classmethod
    def _lenient_bool(cls, value: Any) -> bool:
        return to_bool(value, True)

    @field_validator(
        "theatre_name",
        "city",
        "production_type",
        "seat_location",
        "notes_on_access",
        "general_notes",
        mode="before",
    )
    @classmethod
    def _blank_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _missing_rating(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def production(self) -> ProductionType:
        return ProductionType.parse(self.production_type)

    @property
    def is_pro_shot(self) -> bool:
        return self.production.is_pro_shot

    @property
    def total_cost(self) -> float:
        return self.ticket_price + self.booking_fee + self.travel_cost + self.other_expenses


class PerformanceCreate(PerformanceBase):
    pass


class PerformanceUpdate(BaseModel):
    show_id: Optional[str] = None
    date_seen: Optional[date] = None
    theatre_name: Optional[str] = None
    city: Optional[str] = None
    production_type: Optional[str] = None
    is_musical: Optional[bool] = None
    seat_location: Optional[str] = None
    notes_on_access: Optional[str] = None
    general_notes: Optional[str] = None
    ticket_price: Optional[float] = None
    booking_fee: Optional[float] = None
    travel_cost: Optional[float] = None
    other_expenses: Optional[float] = None
    currency: Optional[str] = None
    rating: Optional[CategoryRatings] = None

    @field_validator("date_seen", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator(*EXPENSE_FIELDS, mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> Optional[float]:
        return None if value is None else to_float(value, 0.0)

    @field_validator(*EXPENSE_FIELDS)
    @classmethod
    def _non_negative(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("Expense amounts cannot be negative")
        return value


class Performance(PerformanceBase):
    id: str
    weighted_rating: float = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @field_validator("weighted_rating", mode="before")
    @classmethod
    def _lenient_weighted(cls, value: Any) -> float:
        return to_float(value, 0.0)

    def is_upcoming(self, today: date) -> bool:
        return self.date_seen is not None and self.date_seen >= today

    def is_past(self, today: date) -> bool:
        return self.date_seen is not None and self.date_seen < today
