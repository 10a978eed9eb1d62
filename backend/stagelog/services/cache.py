"""In-process TTL cache for derived results."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Key -> (value, expiry) store.

    Expired entries are evicted lazily on ``get``. ``clock`` returns seconds
    and defaults to ``time.monotonic``.
    """

    def __init__(self, default_ttl: float = 300.0, clock: Optional[Callable[[], float]] = None) -> None:
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[V, float]] = {}

    def set(self, key: str, value: V, ttl: Optional[float] = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + lifetime)

    def get(self, key: str) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self.delete(key)
            return None
        return value

    def get_or_set(self, key: str, factory: Callable[[], V], ttl: Optional[float] = None) -> V:
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached
        logger.debug("Cache miss for %s", key)
        value = factory()
        self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        return list(self._entries)

    def stats(self) -> Dict[str, Any]:
        return {"size": len(self._entries), "keys": self.keys()}

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
