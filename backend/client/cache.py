import time
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

T = TypeVar("T")

# Logical resource path, e.g. ("/api/picos",) or ("/api/products", "search", "P1")
QueryKey = Tuple[Any, ...]


class QueryCache:
    """
    Query results keyed by resource path.

    Entries never expire on their own unless a stale time is given; mutations
    are expected to call invalidate() for the resources they touch.
    Invalidation matches by prefix, so invalidating ("/api/products",) also
    drops ("/api/products", "search", "P1").
    """

    def __init__(self, stale_time: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.stale_time = stale_time
        self._clock = clock
        self._entries: Dict[QueryKey, Tuple[Any, float]] = {}

    def _is_fresh(self, stored_at: float, stale_time: Optional[float]) -> bool:
        if stale_time is None:
            return True
        return self._clock() - stored_at < stale_time

    def get(self, key: QueryKey, stale_time: Optional[float] = None) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if not self._is_fresh(stored_at, stale_time if stale_time is not None else self.stale_time):
            del self._entries[key]
            return None
        return value

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def fetch(self, key: QueryKey, fetcher: Callable[[], T], stale_time: Optional[float] = None) -> T:
        """Cached value for key, calling fetcher on a miss."""
        value = self.get(key, stale_time)
        if value is None:
            value = fetcher()
            self.set(key, value)
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        stale = [key for key in self._entries if key[:len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
