"""Tool execution lifecycle events and the dispatcher protocol.

EventMiddleware emits exactly one ToolExecutionStarted per call, followed by
exactly one of ToolExecutionSucceeded / ToolExecutionFailed. Terminal events
carry both start and end timestamps (epoch seconds) so consumers can derive
duration without measuring wall-clock deltas themselves.

Use these for:
- Metrics and alerting (``to_metrics()``)
- Audit trails and log shipping (``to_dict()``)
- Circuit breaker or cache-population hooks
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from toolgate.foundation.core import ExecutionContext

if TYPE_CHECKING:
    from toolgate.foundation.core import ToolResult
    from toolgate.foundation.errors import JsonDict


class ToolEventKind(StrEnum):
    """Lifecycle event names used in serialized events."""
    STARTED = "tool_execution_started"
    SUCCEEDED = "tool_execution_succeeded"
    FAILED = "tool_execution_failed"


@runtime_checkable
class EventDispatcher(Protocol):
    """Fire-and-forget dispatcher. Returns the (possibly same) event."""

    def dispatch(self, event: object) -> object: ...


@dataclass(slots=True, frozen=True)
class ToolExecutionStarted:
    """Dispatched before execution begins."""
    tool_name: str
    arguments: dict[str, Any]
    context: ExecutionContext
    timestamp: float = field(default_factory=time.time)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since this event was created."""
        return (time.time() - self.timestamp) * 1000

    def to_dict(self) -> JsonDict:
        return {
            "event": ToolEventKind.STARTED.value,
            "tool_name": self.tool_name,
            "request_id": self.context.request_id,
            "timestamp": self.timestamp,
        }


@dataclass(slots=True, frozen=True)
class ToolExecutionSucceeded:
    """Dispatched after a successful result."""
    tool_name: str
    arguments: dict[str, Any]
    result: ToolResult
    context: ExecutionContext
    start_time: float
    end_time: float

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    def to_dict(self) -> JsonDict:
        return {
            "event": ToolEventKind.SUCCEEDED.value,
            "tool_name": self.tool_name,
            "request_id": self.context.request_id,
            "duration_ms": self.duration_ms,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    def to_metrics(self) -> JsonDict:
        return {"tool": self.tool_name, "success": True, "duration_ms": self.duration_ms}


@dataclass(slots=True, frozen=True)
class ToolExecutionFailed:
    """Dispatched after a ``success=False`` result or a raised failure.

    ``exception`` is set only when the failure was raised.
    """
    tool_name: str
    arguments: dict[str, Any]
    error: str
    context: ExecutionContext
    start_time: float
    end_time: float
    exception: BaseException | None = None

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    @property
    def has_exception(self) -> bool:
        return self.exception is not None

    def to_dict(self) -> JsonDict:
        data: JsonDict = {
            "event": ToolEventKind.FAILED.value,
            "tool_name": self.tool_name,
            "request_id": self.context.request_id,
            "error": self.error,
            "duration_ms": self.duration_ms,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
        if self.exception is not None:
            data["exception_class"] = type(self.exception).__name__
        return data

    def to_metrics(self) -> JsonDict:
        return {
            "tool": self.tool_name,
            "success": False,
            "duration_ms": self.duration_ms,
            "error_type": type(self.exception).__name__ if self.exception is not None else "tool_error",
        }


ToolEvent = ToolExecutionStarted | ToolExecutionSucceeded | ToolExecutionFailed
