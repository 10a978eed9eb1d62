"""Construction of validated records with a freshly derived weighted rating."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Union

from stagelog.schemas.performance import Performance, PerformanceCreate, PerformanceUpdate
from stagelog.schemas.show import AccessScheme, AccessSchemeCreate, Show, ShowCreate
from stagelog.services.rating import compute_weighted_rating


def new_id() -> str:
    return str(uuid.uuid4())


def with_weighted_rating(performance: Performance) -> Performance:
    performance.weighted_rating = compute_weighted_rating(
        performance.rating,
        performance.production,
        performance.is_musical,
    )
    return performance


def build_performance(data: Union[PerformanceCreate, Mapping[str, Any]]) -> Performance:
    """Validate creation input and return a new record. Raises ``ValidationError``."""
    if not isinstance(data, PerformanceCreate):
        data = PerformanceCreate.model_validate(data)
    return with_weighted_rating(Performance(id=new_id(), **data.model_dump()))


def merge_performance(
    existing: Performance,
    changes: Union[PerformanceUpdate, Mapping[str, Any]],
) -> Performance:
    """Apply only the fields the caller set; a provided rating replaces the old one wholesale."""
    if not isinstance(changes, PerformanceUpdate):
        changes = PerformanceUpdate.model_validate(changes)
    merged = existing.model_dump()
    merged.update(changes.model_dump(exclude_unset=True))
    merged["id"] = existing.id
    merged["created_at"] = existing.created_at
    merged["updated_at"] = datetime.now(timezone.utc)
    return with_weighted_rating(Performance.model_validate(merged))


def _with_identity(record: Mapping[str, Any]) -> dict:
    payload = dict(record)
    if not payload.get("id"):
        payload["id"] = new_id()
    if not payload.get("created_at"):
        payload.pop("created_at", None)
    return payload


def restore_performance(record: Mapping[str, Any]) -> Performance:
    """Rebuild an exported record; the stored weighted rating is re-derived, never trusted."""
    return with_weighted_rating(Performance.model_validate(_with_identity(record)))


def build_show(data: Union[ShowCreate, Mapping[str, Any]]) -> Show:
    if not isinstance(data, ShowCreate):
        data = ShowCreate.model_validate(data)
    return Show(id=new_id(), **data.model_dump())


def restore_show(record: Mapping[str, Any]) -> Show:
    return Show.model_validate(_with_identity(record))


def build_access_scheme(data: Union[AccessSchemeCreate, Mapping[str, Any]]) -> AccessScheme:
    if not isinstance(data, AccessSchemeCreate):
        data = AccessSchemeCreate.model_validate(data)
    return AccessScheme(id=new_id(), **data.model_dump())


def restore_access_scheme(record: Mapping[str, Any]) -> AccessScheme:
    return AccessScheme.model_validate(_with_identity(record))

