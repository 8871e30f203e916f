"""Core value types: ToolInfo, ExecutionContext, ToolResult."""

from .context import ExecutionContext
from .info import ToolInfo
from .result import ToolResult

__all__ = ["ExecutionContext", "ToolInfo", "ToolResult"]
