from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Union

from sqlalchemy.orm import Session, sessionmaker

from stagelog.models.access_scheme import AccessScheme as AccessSchemeRow
from stagelog.models.performance import Performance as PerformanceRow
from stagelog.models.show import Show as ShowRow
from stagelog.schemas.performance import RATING_CATEGORIES, CategoryRatings, Performance
from stagelog.schemas.show import AccessScheme, AccessSchemeCreate, Show, ShowCreate
from stagelog.stores.interfaces import (
    MutationKind,
    PerformanceChanges,
    PerformanceInput,
    PerformanceStore,
)
from stagelog.stores.records import (
    build_access_scheme,
    build_performance,
    build_show,
    merge_performance,
    restore_access_scheme,
    restore_performance,
    restore_show,
)

logger = logging.getLogger(__name__)

# Columns copied one-to-one between the ORM row and the record
PERFORMANCE_COLUMNS = (
    "id",
    "show_id",
    "date_seen",
    "theatre_name",
    "city",
    "production_type",
    "is_musical",
    "seat_location",
    "notes_on_access",
    "general_notes",
    "ticket_price",
    "booking_fee",
    "travel_cost",
    "other_expenses",
    "currency",
    "weighted_rating",
    "created_at",
    "updated_at",
)


def performance_from_row(row: PerformanceRow) -> Performance:
    values = {column: getattr(row, column) for column in PERFORMANCE_COLUMNS}
    values["rating"] = CategoryRatings(**{category: getattr(row, category) for category in RATING_CATEGORIES})
    return Performance.model_validate(values)


def apply_performance(row: PerformanceRow, performance: Performance) -> PerformanceRow:
    for column in PERFORMANCE_COLUMNS:
        setattr(row, column, getattr(performance, column))
    for category in RATING_CATEGORIES:
        setattr(row, category, getattr(performance.rating, category))
    return row


def show_row(show: Show) -> ShowRow:
    return ShowRow(**show.model_dump())


def access_scheme_row(scheme: AccessScheme) -> AccessSchemeRow:
    return AccessSchemeRow(**scheme.model_dump())


class SqlAlchemyPerformanceStore(PerformanceStore):
    """Relational store; one short-lived session per operation."""

    def __init__(self, session_factory: sessionmaker) -> None:
        super().__init__()
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # Performances
    def get_performances(self) -> List[Performance]:
        with self._session() as db:
            rows = db.query(PerformanceRow).order_by(PerformanceRow.created_at).all()
            return [performance_from_row(row) for row in rows]

    def get_performance(self, performance_id: str) -> Optional[Performance]:
        with self._session() as db:
            row = db.query(PerformanceRow).filter(PerformanceRow.id == performance_id).first()
            return performance_from_row(row) if row else None

    def add_performance(self, data: PerformanceInput) -> Performance:
        performance = build_performance(data)
        with self._session() as db:
            db.add(apply_performance(PerformanceRow(), performance))
        logger.debug("Added performance %s (weighted %.3f)", performance.id, performance.weighted_rating)
        self._notify(MutationKind.PERFORMANCE_ADDED, performance.id)
        return performance

    def update_performance(self, performance_id: str, data: PerformanceChanges) -> Optional[Performance]:
        with self._session() as db:
            row = db.query(PerformanceRow).filter(PerformanceRow.id == performance_id).first()
            if row is None:
                return None
            performance = merge_performance(performance_from_row(row), data)
            apply_performance(row, performance)
        self._notify(MutationKind.PERFORMANCE_UPDATED, performance_id)
        return performance

    def delete_performance(self, performance_id: str) -> bool:
        with self._session() as db:
            deleted = db.query(PerformanceRow).filter(PerformanceRow.id == performance_id).delete(
                synchronize_session=False,
            )
        if not deleted:
            return False
        self._notify(MutationKind.PERFORMANCE_DELETED, performance_id)
        return True

    # Shows
    def get_shows(self) -> List[Show]:
        with self._session() as db:
            rows = db.query(ShowRow).order_by(ShowRow.created_at).all()
            return [Show.model_validate(row) for row in rows]

    def get_show(self, show_id: str) -> Optional[Show]:
        with self._session() as db:
            row = db.query(ShowRow).filter(ShowRow.id == show_id).first()
            return Show.model_validate(row) if row else None

    def add_show(self, data: Union[ShowCreate, Mapping[str, Any]]) -> Show:
        show = build_show(data)
        with self._session() as db:
            db.add(show_row(show))
        self._notify(MutationKind.SHOW_ADDED)
        return show

    # Access schemes
    def get_access_schemes(self) -> List[AccessScheme]:
        with self._session() as db:
            rows = db.query(AccessSchemeRow).order_by(AccessSchemeRow.created_at).all()
            return [AccessScheme.model_validate(row) for row in rows]

    def add_access_scheme(self, data: Union[AccessSchemeCreate, Mapping[str, Any]]) -> AccessScheme:
        scheme = build_access_scheme(data)
        with self._session() as db:
            db.add(access_scheme_row(scheme))
        self._notify(MutationKind.ACCESS_SCHEME_ADDED)
        return scheme

    # Bulk
    def import_data(self, data: Mapping[str, Any]) -> None:
        """Replace each collection present in ``data`` in a single transaction."""
        shows = [restore_show(r) for r in data.get("shows") or []] if "shows" in data else None
        performances = (
            [restore_performance(r) for r in data.get("performances") or []]
            if "performances" in data
            else None
        )
        schemes = (
            [restore_access_scheme(r) for r in data.get("access_schemes") or []]
            if "access_schemes" in data
            else None
        )

        with self._session() as db:
            if performances is not None:
                db.query(PerformanceRow).delete(synchronize_session=False)
            if shows is not None:
                db.query(ShowRow).delete(synchronize_session=False)
                db.add_all(show_row(show) for show in shows)
            if performances is not None:
                db.flush()
                db.add_all(apply_performance(PerformanceRow(), p) for p in performances)
            if schemes is not None:
                db.query(AccessSchemeRow).delete(synchronize_session=False)
                db.add_all(access_scheme_row(scheme) for scheme in schemes)

        logger.info(
            "Imported %s shows, %s performances, %s access schemes",
            len(shows or []),
            len(performances or []),
            len(schemes or []),
        )
        self._notify(MutationKind.IMPORTED)

    def clear(self) -> None:
        with self._session() as db:
            db.query(PerformanceRow).delete(synchronize_session=False)
            db.query(ShowRow).delete(synchronize_session=False)
            db.query(AccessSchemeRow).delete(synchronize_session=False)
        self._notify(MutationKind.CLEARED)
