"""Injectable result cache for the search engine."""

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResultCache(Protocol):
    """Cache the engine consults before running a search."""

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None on a miss."""
        ...

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...


class TTLCache:
    """In-process cache whose entries expire ``ttl_seconds`` after being stored.

    When full, the oldest entry is evicted. Owned by whoever constructs the
    engine; nothing is shared at module level.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize with a TTL, a capacity and an optional clock for tests."""
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        item = self._entries.get(key)
        if item is None:
            return None
        expires_at, value = item
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the oldest entry when full."""
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
