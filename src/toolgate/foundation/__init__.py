"""Foundation - value types, errors and configuration for toolgate."""

from .config import ToolgateSettings, clear_settings_cache, get_settings
from .core import ExecutionContext, ToolInfo, ToolResult
from .errors import (
    ConfigurationError,
    ErrorCode,
    ToolExecutionException,
    ToolgateError,
    ToolNotFoundException,
    classify_exception,
)

__all__ = [
    # Core
    "ExecutionContext", "ToolInfo", "ToolResult",
    # Errors
    "ErrorCode", "classify_exception",
    "ToolgateError", "ConfigurationError", "ToolNotFoundException", "ToolExecutionException",
    # Config
    "ToolgateSettings", "get_settings", "clear_settings_cache",
]
