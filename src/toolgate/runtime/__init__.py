"""Runtime - middleware, lifecycle events and observability for tool execution."""

from .events import (
    EventDispatcher,
    ToolEvent,
    ToolEventKind,
    ToolExecutionFailed,
    ToolExecutionStarted,
    ToolExecutionSucceeded,
)
from .middleware import (
    EventMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewarePipeline,
    Next,
    ValidatingMiddleware,
    compose,
)

__all__ = [
    # Events
    "EventDispatcher", "ToolEvent", "ToolEventKind",
    "ToolExecutionStarted", "ToolExecutionSucceeded", "ToolExecutionFailed",
    # Middleware
    "Middleware", "MiddlewarePipeline", "Next", "compose",
    "EventMiddleware", "LoggingMiddleware", "ValidatingMiddleware",
]
