from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from stagelog.schemas.filters import PerformanceFilters, SortField
from stagelog.schemas.performance import Performance
from stagelog.schemas.show import Show
from stagelog.services.statistics import build_show_lookup, show_title


def _matches(performance: Performance, title: str, filters: PerformanceFilters) -> bool:
    if filters.search:
        needle = filters.search.lower()
        haystacks = (title, performance.theatre_name, performance.city)
        if not any(needle in (text or "").lower() for text in haystacks):
            return False
    if filters.city and performance.city != filters.city:
        return False
    if filters.date_from or filters.date_to:
        # Undated performances never satisfy a date range
        if performance.date_seen is None:
            return False
        if filters.date_from and performance.date_seen < filters.date_from:
            return False
        if filters.date_to and performance.date_seen > filters.date_to:
            return False
    return True


def filter_performances(
    performances: Sequence[Performance],
    shows: Sequence[Show],
    filters: Optional[PerformanceFilters] = None,
) -> List[Performance]:
    """Search, city and date-range filtering followed by an optional stable sort.

    Undated performances sort after dated ones in either direction.
    """
    filters = filters or PerformanceFilters()
    lookup = build_show_lookup(shows)
    titled = [(performance, show_title(performance, lookup)) for performance in performances]
    selected = [(p, title) for p, title in titled if _matches(p, title, filters)]

    field = filters.sort_field
    if field is None:
        return [p for p, _ in selected]

    descending = filters.sort_descending
    if field == SortField.DATE:
        dated = [(p, t) for p, t in selected if p.date_seen is not None]
        undated = [(p, t) for p, t in selected if p.date_seen is None]
        dated.sort(key=lambda item: item[0].date_seen, reverse=descending)
        return [p for p, _ in dated + undated]
    if field == SortField.RATING:
        selected.sort(key=lambda item: item[0].weighted_rating, reverse=descending)
    else:
        selected.sort(key=lambda item: item[1].lower(), reverse=descending)
    return [p for p, _ in selected]


def past_performances(
    performances: Sequence[Performance],
    shows: Sequence[Show],
    today: date,
    filters: Optional[PerformanceFilters] = None,
) -> List[Performance]:
    return [p for p in filter_performances(performances, shows, filters) if p.is_past(today)]


def upcoming_performances(
    performances: Sequence[Performance],
    shows: Sequence[Show],
    today: date,
    filters: Optional[PerformanceFilters] = None,
) -> List[Performance]:
    return [p for p in filter_performances(performances, shows, filters) if p.is_upcoming(today)]


def unique_cities(performances: Sequence[Performance]) -> List[str]:
    return sorted({p.city for p in performances if p.city})
