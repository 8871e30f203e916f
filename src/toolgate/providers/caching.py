"""Caching provider: memoizes discovery and read-only results in a CacheStore.

Caches:
- Tool discovery (get_tools, get_tool) under one fixed key
- Successful results of tools whose ``readOnlyHint`` annotation is true

Example:
    >>> provider = CachingToolProvider(
    ...     inner,
    ...     MemoryStore(),
    ...     discovery_ttl=3600,  # Cache tool list for 1 hour
    ...     result_ttl=300,      # Cache read-only results for 5 minutes
    ... )
"""

from __future__ import annotations

import hashlib
import math
from typing import Any

import orjson

from toolgate.foundation.config import get_settings
from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult
from toolgate.foundation.errors import ConfigurationError, JsonDict
from toolgate.io.cache import CacheStore

from .base import ToolProvider

DISCOVERY_CACHE_KEY = "tools_discovery"


def _md5(data: bytes) -> str:
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def canonical_arguments(arguments: dict[str, Any]) -> bytes | None:
    """Order-stable serialization: logically equal argument maps give equal bytes.

    Returns None for arguments JSON cannot represent faithfully (NaN,
    infinities, integers wider than 64 bits); such calls are not cacheable.
    """
    if _has_non_finite(arguments):
        return None
    try:
        return orjson.dumps(arguments, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS, default=str)
    except orjson.JSONEncodeError:
        return None


def _has_non_finite(value: Any) -> bool:
    match value:
        case float():
            return not math.isfinite(value)
        case dict():
            return any(_has_non_finite(k) or _has_non_finite(v) for k, v in value.items())
        case list() | tuple() | set() | frozenset():
            return any(_has_non_finite(v) for v in value)
        case _:
            return False


class CachingToolProvider:
    """Wraps one provider with an external key-value cache.

    Non-read-only tools bypass result caching entirely (no read, no write),
    and failed read-only results are never stored. There is no implicit
    invalidation: callers that change the wrapped provider's tool set or
    behavior call ``clear_discovery_cache`` / ``clear_result_cache``.

    Store failures propagate to the caller; there is no fallback to live
    computation.

    Args:
        inner: Provider to wrap
        cache: Store with get/set/delete
        discovery_ttl: Seconds to keep the tool list (default from settings)
        result_ttl: Seconds to keep read-only results (default from settings)
        prefix: Key prefix for namespacing (default from settings)

    Raises:
        ConfigurationError: ``cache`` does not satisfy CacheStore
    """

    __slots__ = ("_inner", "_cache", "_discovery_ttl", "_result_ttl", "_prefix")

    def __init__(
        self,
        inner: ToolProvider,
        cache: CacheStore,
        *,
        discovery_ttl: int | None = None,
        result_ttl: int | None = None,
        prefix: str | None = None,
    ) -> None:
        if not isinstance(cache, CacheStore):
            raise ConfigurationError(
                f"Cache store must provide get(key), set(key, value, ttl) and delete(key); got {type(cache).__name__}"
            )
        settings = get_settings().cache
        self._inner = inner
        self._cache = cache
        self._discovery_ttl = settings.discovery_ttl if discovery_ttl is None else discovery_ttl
        self._result_ttl = settings.result_ttl if result_ttl is None else result_ttl
        self._prefix = settings.prefix if prefix is None else prefix

    @property
    def inner(self) -> ToolProvider:
        return self._inner

    @property
    def discovery_key(self) -> str:
        return f"{self._prefix}{DISCOVERY_CACHE_KEY}"

    def result_key(self, tool_name: str, arguments: dict[str, Any]) -> str | None:
        """Deterministic result key: hash of name plus hash of canonical arguments.

        None when the arguments have no canonical form.
        """
        canonical = canonical_arguments(arguments)
        if canonical is None:
            return None
        return f"{self._prefix}result_{_md5(tool_name.encode())}_{_md5(canonical)}"

    # ─────────────────────────────────────────────────────────────────
    # ToolProvider
    # ─────────────────────────────────────────────────────────────────

    def get_tools(self) -> dict[str, ToolInfo]:
        cached = self._cache.get(self.discovery_key)
        if isinstance(cached, dict):
            return _hydrate_tools(cached)

        tools = dict(self._inner.get_tools())
        self._cache.set(self.discovery_key, _dehydrate_tools(tools), self._discovery_ttl)
        return tools

    def get_tool(self, tool_name: str) -> ToolInfo | None:
        return self.get_tools().get(tool_name)

    def execute(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        tool = self.get_tool(tool_name)
        if tool is None or tool.read_only is not True:
            return self._inner.execute(tool_name, arguments, context)

        key = self.result_key(tool_name, arguments)
        if key is None:
            return self._inner.execute(tool_name, arguments, context)

        cached = self._cache.get(key)
        if isinstance(cached, dict):
            return ToolResult.from_cache(cached)

        result = self._inner.execute(tool_name, arguments, context)
        if result.success:
            self._cache.set(key, result.to_cache(), self._result_ttl)
        return result

    # ─────────────────────────────────────────────────────────────────
    # Invalidation
    # ─────────────────────────────────────────────────────────────────

    def clear_discovery_cache(self) -> None:
        self._cache.delete(self.discovery_key)

    def clear_result_cache(self, tool_name: str, arguments: dict[str, Any]) -> None:
        if (key := self.result_key(tool_name, arguments)) is not None:
            self._cache.delete(key)


def _dehydrate_tools(tools: dict[str, ToolInfo]) -> dict[str, JsonDict]:
    return {name: info.to_dict() for name, info in tools.items()}


def _hydrate_tools(data: dict[str, JsonDict]) -> dict[str, ToolInfo]:
    return {name: ToolInfo.from_dict(item) for name, item in data.items()}
