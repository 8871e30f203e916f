"""In-memory tool provider: a registry of (descriptor, handler) pairs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult
from toolgate.foundation.errors import ToolExecutionException, ToolNotFoundException

from .base import Handler

# Registration item: (ToolInfo, handler) or {"tool": ToolInfo, "handler": handler}
RegistrationItem = tuple[ToolInfo, Handler] | Mapping[str, Any]


def normalize_result(raw: Any) -> ToolResult:
    """Turn a raw handler return value into a canonical ToolResult.

    - ToolResult passes through unchanged
    - Mapping is read as ``{success?: bool = True, message?: str, **data}``
    - str becomes a success message with empty data
    - anything else becomes ``ok("OK", {"result": value})``
    """
    match raw:
        case ToolResult():
            return raw
        case Mapping():
            data = dict(raw)
            success = bool(data.pop("success", True))
            message = data.pop("message", None)
            if message is None:
                message = "OK" if success else "Failed"
            return ToolResult.ok(str(message), data) if success else ToolResult.error(str(message), data)
        case str():
            return ToolResult.ok(raw)
        case _:
            return ToolResult.ok("OK", {"result": raw})


class InMemoryToolProvider:
    """Simple in-memory provider for tests and small deployments.

    Handlers are called as ``handler(arguments, context)``. Re-registering a
    name replaces both descriptor and handler. Registration methods return
    the provider for chaining.

    Example:
        >>> provider = InMemoryToolProvider().register(
        ...     ToolInfo(name="greet", label="Greet", description="Says hello"),
        ...     lambda args, ctx: ToolResult.ok(f"Hello, {args['name']}!"),
        ... )
        >>> provider.execute("greet", {"name": "Ada"}).message
        'Hello, Ada!'
    """

    __slots__ = ("_tools", "_handlers")

    def __init__(self, tools: Mapping[str, ToolInfo] | None = None) -> None:
        self._tools: dict[str, ToolInfo] = dict(tools or {})
        self._handlers: dict[str, Handler] = {}

    def set_handler(self, tool_name: str, handler: Handler) -> InMemoryToolProvider:
        """Attach a handler to a tool given at construction time."""
        self._handlers[tool_name] = handler
        return self

    def register(self, tool: ToolInfo, handler: Handler) -> InMemoryToolProvider:
        self._tools[tool.name] = tool
        self._handlers[tool.name] = handler
        return self

    def register_many(self, items: Iterable[RegistrationItem]) -> InMemoryToolProvider:
        for item in items:
            if isinstance(item, Mapping):
                self.register(item["tool"], item["handler"])
            else:
                self.register(*item)
        return self

    def unregister(self, tool_name: str) -> bool:
        """Remove a tool by name. Returns True if found."""
        self._handlers.pop(tool_name, None)
        return self._tools.pop(tool_name, None) is not None

    def get_tools(self) -> dict[str, ToolInfo]:
        return dict(self._tools)

    def get_tool(self, tool_name: str) -> ToolInfo | None:
        return self._tools.get(tool_name)

    def execute(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        if (handler := self._handlers.get(tool_name)) is None:
            raise ToolNotFoundException(tool_name)
        try:
            raw = handler(arguments, context)
        except ToolExecutionException:
            raise
        except Exception as e:
            raise ToolExecutionException.from_exc(tool_name, e) from e
        return normalize_result(raw)

    def __contains__(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolInfo]:
        return iter(self._tools.values())
