from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from stagelog.schemas.performance import Performance
from stagelog.schemas.show import AccessScheme, AccessSchemeCreate, Show, ShowCreate
from stagelog.services.batching import WriteBatcher
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

PersistHook = Callable[[Dict[str, Any]], None]


class InMemoryPerformanceStore(PerformanceStore):
    """Dict-backed store, insertion ordered.

    ``persist`` receives a full export after each write. When a ``batcher`` is
    given, bursts of writes collapse into a single persist call.
    """

    def __init__(
        self,
        persist: Optional[PersistHook] = None,
        batcher: Optional[WriteBatcher] = None,
    ) -> None:
        super().__init__()
        self._performances: Dict[str, Performance] = {}
        self._shows: Dict[str, Show] = {}
        self._access_schemes: Dict[str, AccessScheme] = {}
        self._persist = persist
        self._batcher = batcher
        self._persist_pending = False

    def _schedule_persist(self) -> None:
        if self._persist is None:
            return
        if self._batcher is None:
            self._persist(self.export_data())
            return
        if self._persist_pending:
            return
        self._persist_pending = True
        self._batcher.add(self._persist_snapshot)

    def _persist_snapshot(self) -> None:
        self._persist_pending = False
        self._persist(self.export_data())

    def flush(self) -> None:
        if self._batcher is not None:
            self._batcher.flush()

    def _committed(self, kind: MutationKind, performance_id: Optional[str] = None) -> None:
        self._schedule_persist()
        self._notify(kind, performance_id)

    # Performances
    def get_performances(self) -> List[Performance]:
        return list(self._performances.values())

    def get_performance(self, performance_id: str) -> Optional[Performance]:
        return self._performances.get(performance_id)

    def add_performance(self, data: PerformanceInput) -> Performance:
        performance = build_performance(data)
        self._performances[performance.id] = performance
        logger.debug("Added performance %s (weighted %.3f)", performance.id, performance.weighted_rating)
        self._committed(MutationKind.PERFORMANCE_ADDED, performance.id)
        return performance

    def update_performance(self, performance_id: str, data: PerformanceChanges) -> Optional[Performance]:
        existing = self._performances.get(performance_id)
        if existing is None:
            return None
        performance = merge_performance(existing, data)
        self._performances[performance_id] = performance
        self._committed(MutationKind.PERFORMANCE_UPDATED, performance_id)
        return performance

    def delete_performance(self, performance_id: str) -> bool:
        if self._performances.pop(performance_id, None) is None:
            return False
        self._committed(MutationKind.PERFORMANCE_DELETED, performance_id)
        return True

    # Shows
    def get_shows(self) -> List[Show]:
        return list(self._shows.values())

    def get_show(self, show_id: str) -> Optional[Show]:
        return self._shows.get(show_id)

    def add_show(self, data: Union[ShowCreate, Mapping[str, Any]]) -> Show:
        show = build_show(data)
        self._shows[show.id] = show
        self._committed(MutationKind.SHOW_ADDED)
        return show

    # Access schemes
    def get_access_schemes(self) -> List[AccessScheme]:
        return list(self._access_schemes.values())

    def add_access_scheme(self, data: Union[AccessSchemeCreate, Mapping[str, Any]]) -> AccessScheme:
        scheme = build_access_scheme(data)
        self._access_schemes[scheme.id] = scheme
        self._committed(MutationKind.ACCESS_SCHEME_ADDED)
        return scheme

    # Bulk
    def import_data(self, data: Mapping[str, Any]) -> None:
        """Replace each collection present in ``data``; absent collections are kept."""
        # Validate everything before touching current state
        shows = performances = schemes = None
        if "shows" in data:
            shows = {s.id: s for s in (restore_show(r) for r in data["shows"] or [])}
        if "performances" in data:
            performances = {p.id: p for p in (restore_performance(r) for r in data["performances"] or [])}
        if "access_schemes" in data:
            schemes = {a.id: a for a in (restore_access_scheme(r) for r in data["access_schemes"] or [])}

        if shows is not None:
            self._shows = shows
        if performances is not None:
            self._performances = performances
        if schemes is not None:
            self._access_schemes = schemes
        logger.info(
            "Imported %s shows, %s performances, %s access schemes",
            len(self._shows),
            len(self._performances),
            len(self._access_schemes),
        )
        self._committed(MutationKind.IMPORTED)

    def clear(self) -> None:
        self._performances.clear()
        self._shows.clear()
        self._access_schemes.clear()
        self._committed(MutationKind.CLEARED)
