from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from stagelog.config import get_settings

DAYS_PER_MONTH = 30.44
DAYS_PER_YEAR = 365.25


def today(reference: Optional[date] = None) -> date:
    if reference is not None:
        return reference
    settings = get_settings()
    if settings.reference_date:
        return settings.reference_date
    return date.today()


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def year_key(day: date) -> str:
    return f"{day.year:04d}"


def same_month(day: date, reference: date) -> bool:
    return day.year == reference.year and day.month == reference.month


def week_window(reference: date) -> tuple[date, date]:
    """Seven calendar days ending with ``reference``."""
    return reference - timedelta(days=6), reference
