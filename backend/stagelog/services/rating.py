"""Weighted rating for a single performance.

The weight profile depends on whether the production is a musical and on
whether it was watched as a Pro Shot recording. Categories without a rating
are left out of both the score and the weight total, so the result is the
weighted mean of what was actually rated.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Union

from stagelog.coercion import to_float
from stagelog.schemas.performance import CategoryRatings, ProductionType

MUSICAL_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "music_songs": 0.25,
    "performance_cast": 0.20,
    "stage_visuals": 0.20,
    "story_plot": 0.15,
    "theatre_experience": 0.10,
    "programme": 0.05,
    "atmosphere": 0.05,
})

NON_MUSICAL_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "performance_cast": 0.25,
    "stage_visuals": 0.20,
    "story_plot": 0.20,
    "theatre_experience": 0.15,
    "programme": 0.10,
    "atmosphere": 0.10,
})

# In-person experience categories; meaningless for a recording
VENUE_CATEGORIES = frozenset({"theatre_experience", "programme", "atmosphere"})

RatingsInput = Union[CategoryRatings, Mapping[str, Any], None]


def resolve_profile(is_musical: bool, production: Union[ProductionType, str, None]) -> dict[str, float]:
    """Return the ordered category -> weight map for a performance."""
    if not isinstance(production, ProductionType):
        production = ProductionType.parse(production)
    base = MUSICAL_WEIGHTS if is_musical else NON_MUSICAL_WEIGHTS
    if production.is_pro_shot:
        return {category: weight for category, weight in base.items() if category not in VENUE_CATEGORIES}
    return dict(base)


def _rated_values(ratings: RatingsInput) -> dict[str, float]:
    if ratings is None:
        return {}
    if isinstance(ratings, CategoryRatings):
        return ratings.rated()
    values = {}
    for category, raw in ratings.items():
        value = to_float(raw, 0.0)
        if value > 0:
            values[category] = value
    return values


def compute_weighted_rating(
    ratings: RatingsInput,
    production_type: Union[ProductionType, str, None],
    is_musical: bool = True,
) -> float:
    profile = resolve_profile(is_musical, production_type)
    rated = _rated_values(ratings)

    score = 0.0
    weight_sum = 0.0
    for category, weight in profile.items():
        value = rated.get(category)
        if value is None or value <= 0:
            continue
        score += value * weight
        weight_sum += weight

    if weight_sum == 0:
        return 0.0
    return score / weight_sum
