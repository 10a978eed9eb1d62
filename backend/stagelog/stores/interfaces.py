from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from stagelog.schemas.performance import Performance, PerformanceCreate, PerformanceUpdate
from stagelog.schemas.show import AccessScheme, AccessSchemeCreate, Show, ShowCreate

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    PERFORMANCE_ADDED = "performance_added"
    PERFORMANCE_UPDATED = "performance_updated"
    PERFORMANCE_DELETED = "performance_deleted"
    SHOW_ADDED = "show_added"
    ACCESS_SCHEME_ADDED = "access_scheme_added"
    IMPORTED = "imported"
    CLEARED = "cleared"


@dataclass(frozen=True)
class MutationEvent:
    kind: MutationKind
    performance_id: Optional[str] = None


Listener = Callable[[MutationEvent], None]
PerformanceInput = Union[PerformanceCreate, Mapping[str, Any]]
PerformanceChanges = Union[PerformanceUpdate, Mapping[str, Any]]


class PerformanceStore(ABC):
    """Persistence contract for performances, shows and access schemes.

    Every successful write emits a ``MutationEvent`` to subscribers after the
    write has been applied.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: MutationKind, performance_id: Optional[str] = None) -> None:
        event = MutationEvent(kind=kind, performance_id=performance_id)
        logger.debug("Store mutation %s (%s)", kind.value, performance_id)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Mutation listener failed for %s", kind.value)

    # Performances
    @abstractmethod
    def get_performances(self) -> List[Performance]: ...

    @abstractmethod
    def get_performance(self, performance_id: str) -> Optional[Performance]: ...

    @abstractmethod
    def add_performance(self, data: PerformanceInput) -> Performance: ...

    @abstractmethod
    def update_performance(self, performance_id: str, data: PerformanceChanges) -> Optional[Performance]: ...

    @abstractmethod
    def delete_performance(self, performance_id: str) -> bool: ...

    # Shows
    @abstractmethod
    def get_shows(self) -> List[Show]: ...

    @abstractmethod
    def get_show(self, show_id: str) -> Optional[Show]: ...

    @abstractmethod
    def add_show(self, data: Union[ShowCreate, Mapping[str, Any]]) -> Show: ...

    def find_show_by_title(self, title: str) -> Optional[Show]:
        wanted = (title or "").strip().lower()
        for show in self.get_shows():
            if show.title.strip().lower() == wanted:
                return show
        return None

    def search_shows(self, query: str) -> List[Show]:
        needle = (query or "").lower()
        return [
            show
            for show in self.get_shows()
            if needle in show.title.lower()
            or needle in (show.composer or "").lower()
            or needle in (show.lyricist or "").lower()
        ]

    # Access schemes
    @abstractmethod
    def get_access_schemes(self) -> List[AccessScheme]: ...

    @abstractmethod
    def add_access_scheme(self, data: Union[AccessSchemeCreate, Mapping[str, Any]]) -> AccessScheme: ...

    # Bulk
    @abstractmethod
    def import_data(self, data: Mapping[str, Any]) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    def export_data(self) -> Dict[str, Any]:
        return {
            "shows": [show.model_dump(mode="json") for show in self.get_shows()],
            "performances": [p.model_dump(mode="json") for p in self.get_performances()],
            "access_schemes": [scheme.model_dump(mode="json") for scheme in self.get_access_schemes()],
        }
