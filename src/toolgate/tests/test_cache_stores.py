"""Tests for MemoryStore and RedisStore (with an in-process fake client)."""

from __future__ import annotations

from typing import Any

from toolgate.io.cache import CacheStore, MemoryStore, RedisStore


# ─────────────────────────────────────────────────────────────────────────────
# Fake Redis Client
# ─────────────────────────────────────────────────────────────────────────────


class FakeRedis:
    """Sync redis-py stand-in that records TTLs."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, name: str, value: bytes) -> bool:
        self.data[name], self.ttls[name] = value, None
        return True

    def setex(self, name: str, time: int, value: bytes) -> bool:
        self.data[name], self.ttls[name] = value, time
        return True

    def delete(self, *names: str) -> int:
        return sum(self.data.pop(n, None) is not None for n in names)

    def scan_iter(self, match: str) -> Any:
        prefix = match.rstrip("*")
        return iter([k for k in self.data if k.startswith(prefix)])

    def ping(self) -> bool:
        return True


# ─────────────────────────────────────────────────────────────────────────────
# MemoryStore
# ─────────────────────────────────────────────────────────────────────────────


def test_memory_store_satisfies_protocol() -> None:
    assert isinstance(MemoryStore(), CacheStore)


def test_memory_set_get_delete() -> None:
    store = MemoryStore()
    store.set("k", {"a": 1})
    assert store.get("k") == {"a": 1}
    assert "k" in store
    assert store.delete("k") is True
    assert store.delete("k") is False
    assert store.get("k") is None


def test_memory_expired_entry_is_dropped() -> None:
    store = MemoryStore(default_ttl=60)
    store.set("k", "v")
    store._data["k"].expires_at = 0.0
    assert store.get("k") is None
    assert store.size == 0


def test_memory_zero_ttl_never_expires() -> None:
    store = MemoryStore()
    store.set("k", "v", ttl=0)
    assert store._data["k"].expires_at is None


def test_memory_eviction_respects_capacity() -> None:
    store = MemoryStore(max_entries=4)
    for i in range(10):
        store.set(f"k{i}", i)
    assert store.size <= 4
    assert store.get("k9") == 9


def test_memory_stats_and_clear() -> None:
    store = MemoryStore(default_ttl=10, max_entries=5)
    store.set("a", 1)
    stats = store.stats()
    assert stats["backend"] == "memory"
    assert stats["total_entries"] == 1
    store.clear()
    assert store.size == 0


# ─────────────────────────────────────────────────────────────────────────────
# RedisStore
# ─────────────────────────────────────────────────────────────────────────────


def test_redis_store_serializes_with_ttl() -> None:
    client = FakeRedis()
    store = RedisStore(client, default_ttl=120)

    store.set("toolgate:k", {"success": True, "data": {"n": 1}})

    assert client.ttls["toolgate:k"] == 120
    assert store.get("toolgate:k") == {"success": True, "data": {"n": 1}}


def test_redis_store_zero_ttl_uses_plain_set() -> None:
    client = FakeRedis()
    RedisStore(client).set("k", [1, 2], ttl=0)
    assert client.ttls["k"] is None


def test_redis_store_miss_and_delete() -> None:
    client = FakeRedis()
    store = RedisStore(client)
    assert store.get("absent") is None
    store.set("k", 1)
    assert store.delete("k") is True
    assert store.delete("k") is False


def test_redis_store_clear_by_pattern() -> None:
    client = FakeRedis()
    store = RedisStore(client)
    store.set("toolgate:a", 1)
    store.set("toolgate:b", 2)
    store.set("other:c", 3)

    assert store.clear("toolgate:*") == 2
    assert list(client.data) == ["other:c"]


def test_redis_store_stats() -> None:
    stats = RedisStore(FakeRedis(), default_ttl=5).stats()
    assert stats == {"backend": "redis", "default_ttl": 5, "connected": True}
