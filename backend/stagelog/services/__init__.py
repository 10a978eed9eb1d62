from stagelog.services.rating import compute_weighted_rating, resolve_profile
from stagelog.services.statistics import StatisticsService
from stagelog.services.achievements import AchievementService, ACHIEVEMENT_RULES
from stagelog.services.insights import generate_insights
from stagelog.services.cache import TTLCache
from stagelog.services.batching import WriteBatcher

__all__ = [
    "compute_weighted_rating",
    "resolve_profile",
    "StatisticsService",
    "AchievementService",
    "ACHIEVEMENT_RULES",
    "generate_insights",
    "TTLCache",
    "WriteBatcher",
]
