"""Key-value cache stores with TTL support.

The caching provider only needs ``get``/``set``/``delete``; any object with
those three methods satisfies ``CacheStore``. Values are JSON-compatible
projections (dicts of primitives), never live model instances.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from toolgate.foundation.errors import JsonDict

DEFAULT_TTL: int = 300  # 5 minutes


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache stores consumed by CachingToolProvider."""

    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any, ttl: int | None = None) -> None: ...
    def delete(self, key: str) -> bool: ...


@dataclass(slots=True)
class CacheEntry:
    """A cached value with expiration tracking. ``expires_at=None`` never expires."""
    value: Any
    expires_at: float | None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.time() > self.expires_at


class MemoryStore:
    """Thread-safe in-memory store with TTL-based expiration.

    Uses RLock for synchronization. When capacity is reached, expired entries
    are dropped first, then the oldest quarter by expiry time.

    Args:
        default_ttl: TTL in seconds used when ``set`` gets none (0 = no expiry)
        max_entries: Maximum number of entries before eviction

    Example:
        >>> store = MemoryStore(default_ttl=60)
        >>> store.set("k", {"a": 1})
        >>> store.get("k")
        {'a': 1}
    """

    __slots__ = ("_data", "_default_ttl", "_max_entries", "_lock")

    def __init__(self, default_ttl: int = DEFAULT_TTL, max_entries: int = 1000) -> None:
        self._data: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._lock = threading.RLock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expired:
                del self._data[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        with self._lock:
            if key not in self._data and len(self._data) >= self._max_entries:
                self._evict_unlocked()
            self._data[key] = CacheEntry(value, time.time() + ttl if ttl > 0 else None)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _evict_unlocked(self) -> None:
        """Remove expired entries, then oldest if still over capacity. Caller must hold lock."""
        for key in [k for k, v in self._data.items() if v.expired]:
            del self._data[key]
        if len(self._data) >= self._max_entries:
            oldest = sorted(self._data, key=lambda k: self._data[k].expires_at or float("inf"))
            for key in oldest[: max(1, self._max_entries // 4)]:
                del self._data[key]

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def stats(self) -> JsonDict:
        """Store statistics for monitoring."""
        with self._lock:
            expired = sum(1 for v in self._data.values() if v.expired)
            return {
                "backend": "memory",
                "total_entries": len(self._data),
                "expired_entries": expired,
                "active_entries": len(self._data) - expired,
                "default_ttl": self._default_ttl,
                "max_entries": self._max_entries,
            }
