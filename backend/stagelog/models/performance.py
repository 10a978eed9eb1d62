from sqlalchemy import Column, String, Float, Boolean, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from stagelog.database import Base


class Performance(Base):
    __tablename__ = "performances"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    show_id = Column(String(36), ForeignKey("shows.id"), nullable=True, index=True)
    date_seen = Column(Date, nullable=True, index=True)
    theatre_name = Column(String(200), default="")
    city = Column(String(100), default="", index=True)
    production_type = Column(String(50), default="")
    is_musical = Column(Boolean, default=True)
    seat_location = Column(String(100), default="")
    notes_on_access = Column(Text, default="")
    general_notes = Column(Text, default="")

    # Expenses
    ticket_price = Column(Float, default=0.0)
    booking_fee = Column(Float, default=0.0)
    travel_cost = Column(Float, default=0.0)
    other_expenses = Column(Float, default=0.0)
    currency = Column(String(3), default="GBP")

    # Category ratings; NULL means not rated
    music_songs = Column(Float, nullable=True)
    story_plot = Column(Float, nullable=True)
    performance_cast = Column(Float, nullable=True)
    stage_visuals = Column(Float, nullable=True)
    rewatch_value = Column(Float, nullable=True)
    theatre_experience = Column(Float, nullable=True)
    programme = Column(Float, nullable=True)
    atmosphere = Column(Float, nullable=True)

    # Denormalized from the category ratings on every write
    weighted_rating = Column(Float, default=0.0)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True, onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    show = relationship("Show", back_populates="performances")
