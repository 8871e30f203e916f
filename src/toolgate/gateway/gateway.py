"""Gateway façade: three meta-tools in front of any tool provider.

Instead of registering every tool with an agent-facing transport, register
the three gateway tools. The agent then:

1. Calls ``discover-tools`` to find what is available
2. Calls ``get-tool-info`` for the input schema of one tool
3. Calls ``execute-tool`` to run it by name

The wrapped provider may be a plain provider, a composite, a caching
decorator or a middleware pipeline. No exception ever escapes the façade;
every failure becomes an error ``GatewayResult``.

Example:
    >>> gateway = ToolGateway(pipeline, tool_prefix="acme")
    >>> for tool in gateway.get_gateway_tools():
    ...     server.register(tool.name, tool.handler, tool.input_schema)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import orjson
from pydantic import BaseModel, ConfigDict, Field

from toolgate.foundation.config import get_settings
from toolgate.foundation.core import ExecutionContext
from toolgate.foundation.errors import JsonDict, ToolExecutionException, ToolNotFoundException
from toolgate.providers import ToolProvider
from toolgate.runtime.observability import get_logger

log = get_logger("toolgate.gateway")

DISCOVER_TOOL = "gateway/discover-tools"
GET_INFO_TOOL = "gateway/get-tool-info"
EXECUTE_TOOL = "gateway/execute-tool"


# ═════════════════════════════════════════════════════════════════════════════
# External Result Shape
# ═════════════════════════════════════════════════════════════════════════════


class TextContent(BaseModel):
    """Plain-text content block."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class GatewayResult(BaseModel):
    """Result handed back to the outer transport (MCP ``CallToolResult`` shape)."""

    model_config = ConfigDict(frozen=True)

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = False
    structured_content: JsonDict = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(c.text for c in self.content)

    def to_dict(self) -> JsonDict:
        return {
            "content": [c.model_dump() for c in self.content],
            "isError": self.is_error,
            "structuredContent": self.structured_content,
        }


@dataclass(frozen=True, slots=True)
class GatewayTool:
    """Registration record for one gateway meta-tool."""

    name: str
    description: str
    handler: Callable[..., GatewayResult]
    input_schema: JsonDict
    annotations: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        return {
            "name": self.name,
            "description": self.description,
            "handler": self.handler,
            "inputSchema": self.input_schema,
            "annotations": self.annotations,
        }


# ═════════════════════════════════════════════════════════════════════════════
# Gateway
# ═════════════════════════════════════════════════════════════════════════════


class ToolGateway:
    """Expose a provider through discover / describe / execute.

    Args:
        provider: Any ToolProvider, including a MiddlewarePipeline
        tool_prefix: Prepended as ``"{prefix}/"`` to the three gateway names
            (default from TOOLGATE_GATEWAY_TOOL_PREFIX)
    """

    __slots__ = ("_provider", "_tool_prefix")

    def __init__(self, provider: ToolProvider, tool_prefix: str | None = None) -> None:
        self._provider = provider
        self._tool_prefix = tool_prefix if tool_prefix is not None else get_settings().gateway.tool_prefix

    @property
    def provider(self) -> ToolProvider:
        return self._provider

    @property
    def tool_prefix(self) -> str | None:
        return self._tool_prefix

    def tool_name(self, base: str) -> str:
        return f"{self._tool_prefix}/{base}" if self._tool_prefix else base

    # ─────────────────────────────────────────────────────────────────
    # Registration Surface
    # ─────────────────────────────────────────────────────────────────

    def get_gateway_tools(self) -> list[GatewayTool]:
        """The three meta-tool definitions, in discover / info / execute order."""
        return [
            GatewayTool(
                name=self.tool_name(DISCOVER_TOOL),
                description="List available tools with optional filtering. "
                            "Returns tool names, labels, descriptions, and hints.",
                handler=self.discover_tools,
                input_schema=_build_schema({
                    "query": {
                        "type": "string",
                        "description": "Optional search term to filter tools by name, label, or description.",
                    },
                }),
                annotations={
                    "title": "Discover Tools",
                    "readOnlyHint": True,
                    "idempotentHint": True,
                    "openWorldHint": False,
                },
            ),
            GatewayTool(
                name=self.tool_name(GET_INFO_TOOL),
                description="Get detailed information about a specific tool "
                            "including its input schema and annotations.",
                handler=self.get_tool_info,
                input_schema=_build_schema({
                    "tool_name": {"type": "string", "description": "The tool name from discover-tools results."},
                }, ["tool_name"]),
                annotations={
                    "title": "Get Tool Info",
                    "readOnlyHint": True,
                    "idempotentHint": True,
                    "openWorldHint": False,
                },
            ),
            GatewayTool(
                name=self.tool_name(EXECUTE_TOOL),
                description="Execute any available tool by name with the provided arguments.",
                handler=self.execute_tool,
                input_schema=_build_schema({
                    "tool_name": {"type": "string", "description": "The tool name from discover-tools results."},
                    "arguments": {
                        "type": "object",
                        "description": "Arguments to pass to the tool (see get-tool-info for schema).",
                    },
                }, ["tool_name"]),
                annotations={
                    "title": "Execute Tool",
                    "readOnlyHint": False,
                    "openWorldHint": True,
                },
            ),
        ]

    # ─────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────

    def discover_tools(self, query: str | None = None) -> GatewayResult:
        """Case-insensitive substring match over name, label and description."""
        needle = query.strip().lower() if query is not None else ""
        try:
            tools = self._provider.get_tools()
        except Exception as e:
            return self._provider_failure("discover", e)

        summaries = [
            info.to_discovery_summary()
            for info in tools.values()
            if not needle or needle in f"{info.name} {info.label} {info.description}".lower()
        ]
        structured: JsonDict = {"success": True, "count": len(summaries), "tools": summaries}

        text = f"Found {len(summaries)} tools."
        if summaries:
            text += "\n" + _pretty(structured)
        return GatewayResult(content=[TextContent(text=text)], structured_content=structured)

    def get_tool_info(self, tool_name: str) -> GatewayResult:
        try:
            info = self._provider.get_tool(tool_name)
        except Exception as e:
            return self._provider_failure("get_tool_info", e, tool=tool_name)
        if info is None:
            return self._error_result(f"Unknown tool: {tool_name}")

        structured: JsonDict = {"success": True, **info.to_detailed_info()}
        return GatewayResult(content=[TextContent(text=_pretty(structured))], structured_content=structured)

    def execute_tool(
        self,
        tool_name: str,
        arguments: dict[str, Any] | None = None,
        context: ExecutionContext | None = None,
    ) -> GatewayResult:
        """Run a tool by name. Never raises; failures come back as error results."""
        try:
            result = self._provider.execute(tool_name, arguments or {}, context)
        except ToolNotFoundException:
            log.warning("Unknown tool requested", tool=tool_name)
            return self._error_result(f"Unknown tool: {tool_name}")
        except ToolExecutionException as e:
            log.warning("Tool execution failed", tool=tool_name, error=e.message, context=e.context)
            return self._error_result(e.message, {"tool": tool_name, **e.context})
        except Exception as e:
            log.warning(
                "Tool execution raised an unexpected error",
                tool=tool_name, exception=type(e).__name__, error=str(e),
            )
            return self._error_result(f"Tool execution failed: {e}", {"tool": tool_name})

        return GatewayResult(
            content=[TextContent(text=result.message)],
            is_error=result.is_error,
            structured_content=result.to_dict(),
        )

    def _provider_failure(self, operation: str, exc: Exception, **fields: Any) -> GatewayResult:
        log.warning(
            "Tool lookup failed",
            operation=operation, exception=type(exc).__name__, error=str(exc), **fields,
        )
        return self._error_result(f"Tool lookup failed: {exc}", fields or None)

    @staticmethod
    def _error_result(message: str, structured: JsonDict | None = None) -> GatewayResult:
        payload: JsonDict = {"success": False, "error": message, **(structured or {})}
        return GatewayResult(content=[TextContent(text=message)], is_error=True, structured_content=payload)


def _build_schema(properties: JsonDict, required: list[str] | None = None) -> JsonDict:
    schema: JsonDict = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _pretty(data: JsonDict) -> str:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2, default=str).decode()
