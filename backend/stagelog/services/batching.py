from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Operation = Callable[[], None]


class WriteBatcher:
    """Debounces persistence writes.

    Operations queued within ``delay`` seconds of each other run together in a
    single flush once the window goes quiet. ``flush()`` runs pending work
    immediately. A failing operation aborts the rest of its batch.
    """

    def __init__(self, delay: float = 0.1) -> None:
        self.delay = delay
        self._pending: List[Operation] = []
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def add(self, operation: Operation) -> None:
        with self._lock:
            self._pending.append(operation)
            if self._timer is not None:
                self._timer.cancel()
            if self.delay <= 0:
                self._timer = None
            else:
                self._timer = threading.Timer(self.delay, self.flush)
                self._timer.daemon = True
                self._timer.start()
        if self.delay <= 0:
            self.flush()

    def flush(self) -> int:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            batch, self._pending = self._pending, []
        if not batch:
            return 0

        logger.debug("Executing batch of %s operations", len(batch))
        try:
            for operation in batch:
                operation()
        except Exception:
            logger.exception("Batch of %s operations failed", len(batch))
            return 0
        return len(batch)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = []
