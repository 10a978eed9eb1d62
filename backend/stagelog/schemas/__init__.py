from stagelog.schemas.performance import (
    CategoryRatings, Performance, PerformanceCreate, PerformanceUpdate,
    ProductionKind, ProductionType, RATING_CATEGORIES,
)
from stagelog.schemas.show import Show, ShowCreate, AccessScheme, AccessSchemeCreate
from stagelog.schemas.filters import PerformanceFilters
from stagelog.schemas.stats import (
    Achievement, Insight, StatisticsSnapshot, StatisticsSummary, NOT_AVAILABLE,
)

__all__ = [
    "CategoryRatings", "Performance", "PerformanceCreate", "PerformanceUpdate",
    "ProductionKind", "ProductionType", "RATING_CATEGORIES",
    "Show", "ShowCreate", "AccessScheme", "AccessSchemeCreate",
    "PerformanceFilters",
    "Achievement", "Insight", "StatisticsSnapshot", "StatisticsSummary", "NOT_AVAILABLE",
]
