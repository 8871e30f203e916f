"""ToolProvider protocol - the capability every provider layer satisfies.

In-memory, composite, caching providers and the middleware pipeline all
implement this one contract, so they can be layered in any order.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeAlias, runtime_checkable

from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult

# Raw handler return: ToolResult, a mapping, a string, or any other value
Handler: TypeAlias = Callable[[dict[str, Any], ExecutionContext | None], Any]


@runtime_checkable
class ToolProvider(Protocol):
    """Lists, describes and executes a set of tools."""

    def get_tools(self) -> Mapping[str, ToolInfo]:
        """Return all tools keyed by their (effective) name."""
        ...

    def get_tool(self, tool_name: str) -> ToolInfo | None:
        """Return one tool's descriptor, or None if unknown."""
        ...

    def execute(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        """Execute a tool.

        Raises:
            ToolNotFoundException: ``tool_name`` is not registered
            ToolExecutionException: the handler failed
        """
        ...
