"""
In-Memory LRU Cache Service.

Holds loaded workflow configuration between warm Lambda invocations so the
SLA policy table is not read on every request.
"""

from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any, Callable, Optional


class LRUCache:
    """Thread-safe LRU cache with TTL support."""

    def __init__(self, max_size: int = 16, ttl_seconds: int = 300):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._cache: OrderedDict[str, tuple[Any, datetime]] = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if present and not expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if datetime.now(timezone.utc) - stored_at > timedelta(seconds=self.ttl_seconds):
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = (value, datetime.now(timezone.utc))

            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        """Return the cached value, calling ``loader`` on a miss."""
        value = self.get(key)
        if value is None:
            value = loader()
            self.set(key, value)
        return value

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()
