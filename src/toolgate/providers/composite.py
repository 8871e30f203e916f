"""Composite provider: many providers behind one namespaced provider.

Example with explicit keys:
    >>> provider = CompositeToolProvider({
    ...     "crm": crm_provider,        # Tools: crm/get_users
    ...     "custom": custom_provider,  # Tools: custom/my_tool
    ... })

Example without prefixes:
    >>> provider = CompositeToolProvider([p1, p2], prefixed=False)
    >>> # Tool names must be unique across providers; last registered wins
"""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping, Sequence
from copy import deepcopy
from typing import Any

from toolgate.foundation.config import get_settings
from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult
from toolgate.foundation.errors import ToolNotFoundException
from toolgate.runtime.observability import get_logger

from .base import ToolProvider

log = get_logger("toolgate.providers.composite")

_SUFFIX = re.compile(r"(Tool)?Provider$")
_CAMEL = re.compile(r"([a-z0-9])([A-Z])")


def derive_key(provider: object) -> str:
    """Snake-case key from a provider's class name, minus a Provider/ToolProvider suffix.

    >>> derive_key(InMemoryToolProvider())
    'in_memory'
    """
    name = type(provider).__name__
    name = _SUFFIX.sub("", name) or name
    return _CAMEL.sub(r"\1_\2", name).lower()


class CompositeToolProvider:
    """Presents N wrapped providers as one.

    The merged, renamed tool map is memoized. ``add_provider`` /
    ``remove_provider`` fully invalidate it (never patch it), and
    ``clear_cache`` is exposed for callers that mutate a wrapped provider
    directly. Memo and invalidation share one lock, so a reader never sees a
    partially rebuilt map.

    Every exposed descriptor carries ``metadata.original_name`` and
    ``metadata.source_provider`` so ``execute`` can route without re-deriving.

    Args:
        providers: Mapping of namespace key -> provider, or a sequence of
            providers whose keys are derived from class names ("x", "x_1", ...)
        prefixed: Expose ``"{key}/{name}"`` or bare names (default from
            TOOLGATE_GATEWAY_PREFIXED, which defaults to True)
    """

    __slots__ = ("_providers", "_prefixed", "_tool_cache", "_lock")

    def __init__(
        self,
        providers: Mapping[str, ToolProvider] | Sequence[ToolProvider] = (),
        *,
        prefixed: bool | None = None,
    ) -> None:
        self._providers: dict[str, ToolProvider] = {}
        self._prefixed = get_settings().gateway.prefixed if prefixed is None else prefixed
        self._tool_cache: dict[str, ToolInfo] | None = None
        self._lock = threading.RLock()

        items = providers.items() if isinstance(providers, Mapping) else ((None, p) for p in providers)
        for key, provider in items:
            self._providers[key if isinstance(key, str) else self._auto_key(provider)] = provider

    def _auto_key(self, provider: object) -> str:
        base = key = derive_key(provider)
        suffix = 0
        while key in self._providers:
            suffix += 1
            key = f"{base}_{suffix}"
        return key

    @property
    def prefixed(self) -> bool:
        return self._prefixed

    # ─────────────────────────────────────────────────────────────────
    # ToolProvider
    # ─────────────────────────────────────────────────────────────────

    def get_tools(self) -> dict[str, ToolInfo]:
        with self._lock:
            if self._tool_cache is None:
                self._tool_cache = self._merge()
            return dict(self._tool_cache)

    def _merge(self) -> dict[str, ToolInfo]:
        tools: dict[str, ToolInfo] = {}
        for key, provider in self._providers.items():
            for info in provider.get_tools().values():
                name = f"{key}/{info.name}" if self._prefixed else info.name
                if name in tools:
                    log.warning(
                        "Tool name collision, last provider wins",
                        tool=name,
                        replaced=tools[name].provider,
                        provider=key,
                    )
                tools[name] = info.model_copy(update={
                    "name": name,
                    "provider": key,
                    "input_schema": deepcopy(info.input_schema),
                    "annotations": deepcopy(info.annotations),
                    "metadata": {**deepcopy(info.metadata), "original_name": info.name, "source_provider": key},
                })
        return tools

    def get_tool(self, tool_name: str) -> ToolInfo | None:
        with self._lock:
            if self._tool_cache is None:
                self._tool_cache = self._merge()
            return self._tool_cache.get(tool_name)

    def execute(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        if (tool := self.get_tool(tool_name)) is None:
            raise ToolNotFoundException(tool_name)

        key = tool.metadata.get("source_provider")
        original = tool.metadata.get("original_name", tool_name)
        with self._lock:
            provider = self._providers.get(key) if key is not None else None
        if provider is None:
            raise ToolNotFoundException(tool_name, f"Provider not found for tool: {tool_name}")
        return provider.execute(original, arguments, context)

    # ─────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────

    def add_provider(self, key: str, provider: ToolProvider) -> CompositeToolProvider:
        """Add (or replace) a provider under ``key`` and invalidate the merged map."""
        with self._lock:
            self._providers[key] = provider
            self._tool_cache = None
        return self

    def remove_provider(self, key: str) -> CompositeToolProvider:
        with self._lock:
            self._providers.pop(key, None)
            self._tool_cache = None
        return self

    def clear_cache(self) -> None:
        with self._lock:
            self._tool_cache = None

    def get_provider_keys(self) -> list[str]:
        with self._lock:
            return list(self._providers)

    def get_provider(self, key: str) -> ToolProvider | None:
        with self._lock:
            return self._providers.get(key)
