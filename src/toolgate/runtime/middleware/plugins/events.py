"""Event middleware: dispatch lifecycle events around tool execution."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from toolgate.foundation.core import ExecutionContext, ToolResult
from toolgate.foundation.errors import ConfigurationError
from toolgate.runtime.events import (
    EventDispatcher,
    ToolExecutionFailed,
    ToolExecutionStarted,
    ToolExecutionSucceeded,
)

from ..middleware import Next


@dataclass(slots=True)
class EventMiddleware:
    """Dispatch ToolExecutionStarted, then exactly one of Succeeded / Failed.

    A raised failure produces a Failed event carrying the exception and is
    re-raised; a ``success=False`` result produces a Failed event without one.

    Example:
        >>> pipeline.add(EventMiddleware(dispatcher))
    """

    dispatcher: EventDispatcher

    def __post_init__(self) -> None:
        if not isinstance(self.dispatcher, EventDispatcher):
            raise ConfigurationError("Event dispatcher must provide a dispatch(event) method")

    def process(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext,
        next: Next,
    ) -> ToolResult:
        start = time.time()
        self.dispatcher.dispatch(ToolExecutionStarted(tool_name, arguments, context, start))

        try:
            result = next(tool_name, arguments, context)
        except Exception as e:
            self.dispatcher.dispatch(ToolExecutionFailed(
                tool_name, arguments, str(e), context, start, time.time(), exception=e,
            ))
            raise

        end = time.time()
        if result.success:
            self.dispatcher.dispatch(ToolExecutionSucceeded(tool_name, arguments, result, context, start, end))
        else:
            self.dispatcher.dispatch(ToolExecutionFailed(tool_name, arguments, result.message, context, start, end))
        return result
