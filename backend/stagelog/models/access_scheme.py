from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, String, Text

from stagelog.database import Base


class AccessScheme(Base):
    __tablename__ = "access_schemes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    venue_name = Column(String(200), nullable=False)
    location = Column(String(100), default="")
    companion_policy = Column(Text, default="")
    conditions_proof = Column(Text, default="")
    how_to_book = Column(Text, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
