"""
Statistics engine.

Single entry point for derived data: reads the current collections from a
store, builds the snapshot slice by slice and caches the results until the
store reports a mutation.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, TypeVar

from stagelog.config import Settings, get_settings
from stagelog.schemas.filters import PerformanceFilters
from stagelog.schemas.performance import Performance
from stagelog.schemas.stats import (
    ComparisonStats,
    ExpenseStats,
    OverviewStats,
    ProductionMix,
    RatingStats,
    ShowStats,
    SpendingStats,
    StatisticsSnapshot,
    StatisticsSummary,
    TrendStats,
    VenueStats,
)
from stagelog.services import calendar, export, filters
from stagelog.services.achievements import AchievementService
from stagelog.services.cache import TTLCache
from stagelog.services.insights import generate_insights
from stagelog.services.statistics import StatisticsService
from stagelog.stores.interfaces import MutationEvent, PerformanceStore

logger = logging.getLogger(__name__)

STATISTICS_KEY = "statistics"
FILTERED_PREFIX = "filtered_performances"

T = TypeVar("T")


class StatisticsEngine:
    """Cached values stay inside the engine; callers always receive copies."""

    def __init__(
        self,
        store: PerformanceStore,
        cache: Optional[TTLCache] = None,
        settings: Optional[Settings] = None,
        today: Optional[date] = None,
    ) -> None:
        self.store = store
        self.settings = settings if settings is not None else get_settings()
        # An empty TTLCache is falsy
        self.cache = cache if cache is not None else TTLCache(default_ttl=self.settings.cache_default_ttl_seconds)
        self._today = today
        self._unsubscribe = store.subscribe(self._on_mutation)

    @property
    def today(self) -> date:
        return self._today or calendar.today(self.settings.reference_date)

    def close(self) -> None:
        self._unsubscribe()

    def _on_mutation(self, event: MutationEvent) -> None:
        logger.debug("Invalidating cached statistics after %s", event.kind.value)
        self.invalidate()

    def invalidate(self) -> None:
        self.cache.delete(STATISTICS_KEY)
        dropped = self.cache.invalidate_prefix(FILTERED_PREFIX)
        logger.debug("Cache invalidated (%s filtered views dropped)", dropped)

    @staticmethod
    def _safe_section(name: str, build: Callable[[], T], fallback: Callable[[], T]) -> T:
        try:
            return build()
        except Exception:
            logger.exception("Failed to calculate %s statistics", name)
            return fallback()

    # Snapshot
    def calculate_statistics(self) -> StatisticsSnapshot:
        performances = self.store.get_performances()
        shows = self.store.get_shows()
        today = self.today
        logger.debug("Calculating statistics over %s performances", len(performances))

        safe = self._safe_section
        snapshot = StatisticsSnapshot(
            overview=safe("overview", lambda: StatisticsService.overview(performances, today), OverviewStats),
            spending=safe("spending", lambda: StatisticsService.spending(performances), SpendingStats),
            ratings=safe("ratings", lambda: StatisticsService.ratings(performances), RatingStats),
            venues=safe("venue", lambda: StatisticsService.venues(performances), VenueStats),
            shows=safe("show", lambda: StatisticsService.shows(performances, shows), ShowStats),
            trends=safe("trend", lambda: StatisticsService.trends(performances), TrendStats),
            comparisons=safe(
                "comparison", lambda: StatisticsService.comparisons(performances, today), ComparisonStats
            ),
            expenses=safe("expense", lambda: StatisticsService.expenses(performances, shows), ExpenseStats),
            production_mix=safe(
                "production mix", lambda: StatisticsService.production_mix(performances, today), ProductionMix
            ),
        )
        snapshot.achievements = safe(
            "achievement", lambda: AchievementService.evaluate(performances, shows, today), list
        )
        snapshot.insights = safe(
            "insight", lambda: generate_insights(snapshot, self.settings.currency_symbol), list
        )
        return snapshot

    def get_statistics(self) -> StatisticsSnapshot:
        cached = self.cache.get(STATISTICS_KEY)
        if cached is not None:
            logger.debug("Using cached statistics")
            return cached.model_copy(deep=True)
        snapshot = self.calculate_statistics()
        self.cache.set(STATISTICS_KEY, snapshot, self.settings.statistics_cache_ttl_seconds)
        return snapshot.model_copy(deep=True)

    def get_summary(self) -> StatisticsSummary:
        return StatisticsService.summary(self.store.get_performances(), self.store.get_shows(), self.today)

    def get_monthly_spending(self, year: Optional[int] = None) -> List[float]:
        return StatisticsService.monthly_spending(self.store.get_performances(), year or self.today.year)

    # Views
    def get_filtered_performances(self, performance_filters: Optional[PerformanceFilters] = None) -> List[Performance]:
        performance_filters = performance_filters or PerformanceFilters()
        key = f"{FILTERED_PREFIX}:{performance_filters.cache_key()}"
        cached = self.cache.get(key)
        if cached is None:
            cached = filters.filter_performances(
                self.store.get_performances(), self.store.get_shows(), performance_filters
            )
            self.cache.set(key, cached, self.settings.filtered_cache_ttl_seconds)
        return [performance.model_copy(deep=True) for performance in cached]

    def get_past_performances(self, performance_filters: Optional[PerformanceFilters] = None) -> List[Performance]:
        today = self.today
        return [p for p in self.get_filtered_performances(performance_filters) if p.is_past(today)]

    def get_upcoming_performances(self, performance_filters: Optional[PerformanceFilters] = None) -> List[Performance]:
        today = self.today
        return [p for p in self.get_filtered_performances(performance_filters) if p.is_upcoming(today)]

    def get_unique_cities(self) -> List[str]:
        return filters.unique_cities(self.store.get_performances())

    # Exports
    def export_json(self) -> Dict[str, Any]:
        return export.export_json(
            self.store.get_performances(),
            self.store.get_shows(),
            self.store.get_access_schemes(),
            stats=self.get_statistics(),
        )

    def export_csv(self) -> str:
        return export.export_csv(self.store.get_performances(), self.store.get_shows())
