"""Gateway façade exposing discover / get-tool-info / execute-tool."""

from .gateway import (
    DISCOVER_TOOL,
    EXECUTE_TOOL,
    GET_INFO_TOOL,
    GatewayResult,
    GatewayTool,
    TextContent,
    ToolGateway,
)

__all__ = [
    "ToolGateway",
    "GatewayTool",
    "GatewayResult",
    "TextContent",
    "DISCOVER_TOOL",
    "GET_INFO_TOOL",
    "EXECUTE_TOOL",
]
