"""Cache stores for the caching provider.

Backends:
    - MemoryStore: Thread-safe in-memory (default)
    - RedisStore: Sync redis-py adapter (requires toolgate[redis] for from_url)
"""

from .store import DEFAULT_TTL, CacheEntry, CacheStore, MemoryStore

__all__ = [
    "CacheStore",
    "CacheEntry",
    "MemoryStore",
    "DEFAULT_TTL",
    "create_store",
    # Redis (lazy import)
    "RedisStore",
]


def create_store() -> CacheStore:
    """Build the store selected by TOOLGATE_CACHE_* settings."""
    from toolgate.foundation.config import get_settings
    settings = get_settings().cache
    if settings.redis_url is not None:
        from .redis import RedisStore
        return RedisStore.from_url(settings.redis_url.get_secret_value(), default_ttl=settings.result_ttl)
    return MemoryStore(default_ttl=settings.result_ttl, max_entries=settings.max_entries)


def __getattr__(name: str) -> object:
    """Lazy import Redis store to keep the redis protocol module off the import path."""
    if name == "RedisStore":
        from .redis import RedisStore
        return RedisStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
