"""Request id allocation."""

from __future__ import annotations

import threading


class IdAllocator:
    """Hands out strictly increasing request ids.

    One allocator is owned by each ApiClient. Ids are never reused, which
    keeps them unique inside a batch and lets the engine reject responses
    that carry an id from an earlier, already completed round trip.
    """

    __slots__ = ("_lock", "_last")

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._lock = threading.Lock()
        self._last = start

    def next_id(self) -> int:
        """Return the next unused id."""
        with self._lock:
            self._last += 1
            return self._last

    def reserve(self, count: int) -> list[int]:
        """Return ``count`` consecutive unused ids in one step."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        with self._lock:
            first = self._last + 1
            self._last += count
            return list(range(first, self._last + 1))

    @property
    def last_id(self) -> int:
        """The most recently issued id (the start value if none yet)."""
        return self._last
