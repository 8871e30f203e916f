"""Observability: structured logging with scoped context."""

from .logging import (
    BoundLogger,
    CaptureRenderer,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    NoOpRenderer,
    StdlibLogger,
    StructuredLogger,
    as_structured_logger,
    capture_logs,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)

__all__ = [
    # Loggers
    "BoundLogger",
    "StructuredLogger",
    "StdlibLogger",
    "as_structured_logger",
    "get_logger",
    "log_context",
    # Renderers
    "LogEntry",
    "LogRenderer",
    "ConsoleRenderer",
    "JsonRenderer",
    "NoOpRenderer",
    "CaptureRenderer",
    "capture_logs",
    # Configuration
    "configure_logging",
    "configure_from_settings",
]
