"""Logging middleware for tool execution."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from toolgate.foundation.config import get_settings
from toolgate.foundation.core import ExecutionContext, ToolResult
from toolgate.foundation.errors import ConfigurationError, JsonDict
from toolgate.runtime.observability import StructuredLogger, as_structured_logger, get_logger

from ..middleware import Next

SENSITIVE_KEYS: tuple[str, ...] = ("password", "pass", "secret", "token", "key", "api_key", "credential", "auth")
REDACTED = "[REDACTED]"


def sanitize_arguments(arguments: Mapping[str, Any]) -> JsonDict:
    """Redact values whose key contains a sensitive substring (case-insensitive), recursing into mappings."""
    sanitized: JsonDict = {}
    for key, value in arguments.items():
        lowered = str(key).lower()
        if any(s in lowered for s in SENSITIVE_KEYS):
            sanitized[key] = REDACTED
        elif isinstance(value, Mapping):
            sanitized[key] = sanitize_arguments(value)
        else:
            sanitized[key] = value
    return sanitized


@dataclass(slots=True)
class LoggingMiddleware:
    """Log tool execution start, completion and failures.

    Logs at INFO for start and successful completion, WARNING for a
    ``success=False`` result, ERROR for a raised failure (which is re-raised;
    logging never suppresses a failure).

    Args:
        logger: Structured logger or a ``logging.Logger`` (defaults to ``toolgate.middleware``)
        log_arguments: Include sanitized arguments (default from TOOLGATE_LOG_LOG_ARGUMENTS)
        log_results: Include a short result summary on success

    Example:
        >>> pipeline.add(LoggingMiddleware(log_arguments=True))
    """

    logger: StructuredLogger = field(default_factory=lambda: get_logger("toolgate.middleware"))
    log_arguments: bool | None = None
    log_results: bool | None = None

    def __post_init__(self) -> None:
        logger = as_structured_logger(self.logger)
        if logger is None:
            raise ConfigurationError(
                "Logger must provide info(), warning() and error() accepting keyword fields, or be a logging.Logger"
            )
        self.logger = logger
        settings = get_settings().logging
        if self.log_arguments is None:
            self.log_arguments = settings.log_arguments
        if self.log_results is None:
            self.log_results = settings.log_results

    def process(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext,
        next: Next,
    ) -> ToolResult:
        start = time.perf_counter()
        log_ctx: JsonDict = {
            "tool": tool_name,
            "request_id": context.request_id if context.request_id is not None else "unknown",
        }
        if self.log_arguments:
            log_ctx["arguments"] = sanitize_arguments(arguments)

        self.logger.info(f"Tool execution started: {tool_name}", **log_ctx)

        try:
            result = next(tool_name, arguments, context)
        except Exception as e:
            log_ctx["duration_ms"] = _elapsed_ms(start)
            log_ctx["exception"] = type(e).__name__
            log_ctx["error"] = str(e)
            self.logger.error(f"Tool execution exception: {tool_name}", **log_ctx)
            raise

        log_ctx["duration_ms"] = _elapsed_ms(start)
        log_ctx["success"] = result.success
        if result.success:
            if self.log_results:
                log_ctx["result"] = {
                    "success": result.success,
                    "message": result.message[:200],
                    "has_data": bool(result.data),
                }
            self.logger.info(f"Tool execution completed: {tool_name}", **log_ctx)
        else:
            log_ctx["error"] = result.message
            self.logger.warning(f"Tool execution failed: {tool_name}", **log_ctx)
        return result


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
