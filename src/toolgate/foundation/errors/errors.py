"""Exception hierarchy and error classification for tool dispatch.

Only ToolNotFoundException and ToolExecutionException are expected to cross
a provider boundary. ConfigurationError is raised eagerly when a collaborator
(validator, logger, cache store, event dispatcher) does not satisfy its protocol.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache

from .types import JsonDict


class ErrorCode(StrEnum):
    """Standard error codes attached to wrapped handler failures."""
    INVALID_PARAMS = "INVALID_PARAMS"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    PARSE_ERROR = "PARSE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


# Class-name fragments per code, checked in order; first hit wins
_CLASS_HINTS: tuple[tuple[ErrorCode, tuple[str, ...]], ...] = (
    (ErrorCode.TIMEOUT, ("timeout",)),
    (ErrorCode.NETWORK_ERROR, ("connection", "network")),
    (ErrorCode.RATE_LIMITED, ("ratelimit", "throttl")),
    (ErrorCode.PERMISSION_DENIED, ("permission", "forbidden", "unauthorized")),
    (ErrorCode.PARSE_ERROR, ("parse", "json", "decode")),
    (ErrorCode.INVALID_PARAMS, ("validation", "value", "type")),
    (ErrorCode.NOT_FOUND, ("key", "notfound", "lookup")),
)


@lru_cache(maxsize=256)
def _code_for_class(class_name: str) -> ErrorCode:
    lowered = class_name.lower()
    return next(
        (code for code, hints in _CLASS_HINTS if any(h in lowered for h in hints)),
        ErrorCode.UNKNOWN,
    )


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on class name."""
    return _code_for_class(type(exc).__name__)


class ToolgateError(Exception):
    """Base error for all toolgate failures."""


class ConfigurationError(ToolgateError):
    """A collaborator passed at construction time does not satisfy its contract."""


class ToolNotFoundException(ToolgateError):
    """Requested tool has no registered handler in the active provider chain."""

    def __init__(self, tool_name: str, message: str = "") -> None:
        self.tool_name = tool_name
        super().__init__(message or f"Tool not found: {tool_name}")


class ToolExecutionException(ToolgateError):
    """A handler ran and failed.

    Attributes:
        tool_name: Name of the tool whose handler failed
        context: Structured data merged into the gateway's error payload
        code: Optional numeric code carried over from the original failure
    """

    def __init__(
        self,
        tool_name: str,
        message: str = "",
        context: JsonDict | None = None,
        code: int = 0,
    ) -> None:
        self.tool_name = tool_name
        self.context: JsonDict = dict(context or {})
        self.code = code
        super().__init__(message or f"Failed to execute tool: {tool_name}")

    @property
    def message(self) -> str:
        return str(self)

    @classmethod
    def from_exc(cls, tool_name: str, exc: BaseException) -> ToolExecutionException:
        """Wrap an arbitrary handler failure, keeping its message and class name."""
        code = getattr(exc, "code", 0)
        return cls(
            tool_name,
            str(exc) or type(exc).__name__,
            {"exception": type(exc).__name__, "code": classify_exception(exc).value},
            code if isinstance(code, int) else 0,
        )
