"""Redis cache store for shared discovery and result caches.

Lightweight adapter for existing Redis deployments. Values are serialized
with orjson; TTL is handled natively by SETEX.

Requires: pip install toolgate[redis]
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import orjson

from toolgate.foundation.errors import JsonDict

from .store import DEFAULT_TTL


@runtime_checkable
class RedisClient(Protocol):
    """Protocol for the subset of a sync redis-py client we use."""
    def get(self, key: str) -> bytes | None: ...
    def set(self, name: str, value: bytes) -> bool: ...
    def setex(self, name: str, time: int, value: bytes) -> bool: ...
    def delete(self, *names: str) -> int: ...
    def scan_iter(self, match: str) -> object: ...
    def ping(self) -> bool: ...


def _import_redis() -> Any:
    try:
        import redis
        return redis
    except ImportError as e:
        raise ImportError(
            "RedisStore.from_url requires the redis package. "
            "Install with: pip install toolgate[redis]"
        ) from e


class RedisStore:
    """Redis-backed cache store.

    Keys are used as given; namespacing is the caller's prefix (the caching
    provider already prefixes every key it writes).

    Args:
        client: Existing sync Redis client
        default_ttl: TTL in seconds used when ``set`` gets none (0 = no expiry)

    Example:
        >>> import redis
        >>> store = RedisStore(redis.from_url("redis://localhost:6379/0"))
        >>> provider = CachingToolProvider(inner, store)
    """

    __slots__ = ("_client", "_default_ttl")

    def __init__(self, client: RedisClient, default_ttl: int = DEFAULT_TTL) -> None:
        self._client = client
        self._default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str, default_ttl: int = DEFAULT_TTL, **redis_kwargs: Any) -> RedisStore:
        """Create store from a Redis URL (redis://host:port/db)."""
        redis = _import_redis()
        return cls(redis.from_url(url, **redis_kwargs), default_ttl)

    def get(self, key: str) -> Any | None:
        raw = self._client.get(key)
        return orjson.loads(raw) if raw else None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        payload = orjson.dumps(value, option=orjson.OPT_NON_STR_KEYS, default=str)
        if ttl > 0:
            self._client.setex(key, int(ttl), payload)
        else:
            self._client.set(key, payload)

    def delete(self, key: str) -> bool:
        return self._client.delete(key) > 0

    def clear(self, match: str = "toolgate:*") -> int:
        """Delete all keys matching ``match`` using SCAN. Returns count removed."""
        keys = list(self._client.scan_iter(match=match))
        return self._client.delete(*keys) if keys else 0

    def ping(self) -> bool:
        """Check Redis connection health."""
        try:
            return bool(self._client.ping())
        except Exception:
            return False

    def stats(self) -> JsonDict:
        return {"backend": "redis", "default_ttl": self._default_ttl, "connected": self.ping()}
