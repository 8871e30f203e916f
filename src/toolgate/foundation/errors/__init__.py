"""Unified error handling for toolgate.

- ErrorCode: Standard error codes for wrapped handler failures
- ToolNotFoundException/ToolExecutionException: the two failures that cross providers
- ConfigurationError: collaborator contract violations detected at construction
"""

from .errors import (
    ConfigurationError,
    ErrorCode,
    ToolExecutionException,
    ToolgateError,
    ToolNotFoundException,
    classify_exception,
)
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "classify_exception",
    "ToolgateError", "ConfigurationError", "ToolNotFoundException", "ToolExecutionException",
    "JsonDict", "JsonPrimitive", "JsonValue",
]
