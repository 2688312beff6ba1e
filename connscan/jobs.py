from __future__ import annotations

import threading
from typing import Optional

from .models import PortRange


class JobQueue:
    """
    Thread-safe, exactly-once distributor of the ports in a PortRange.

    Ports are handed out in ascending order from a cursor over the range
    rather than a materialized list, so memory stays constant regardless of
    range size. The lock only covers the compare-and-increment.
    """

    def __init__(self, port_range: PortRange):
        self._start = port_range.start
        self._size = len(port_range)
        self._cursor = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._size - self._cursor

    def take_next(self) -> Optional[int]:
        """Next unscanned port, or None once the range is exhausted."""
        with self._lock:
            if self._cursor >= self._size:
                return None
            port = self._start + self._cursor
            self._cursor += 1
        return port
