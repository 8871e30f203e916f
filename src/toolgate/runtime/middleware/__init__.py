"""Middleware system for tool execution hooks.

Provides composable pre/post execution hooks for cross-cutting concerns:
validation, logging, lifecycle events, and user-supplied auth, rate limiting
or audit.

Example:
    >>> from toolgate.runtime.middleware import MiddlewarePipeline, LoggingMiddleware, ValidatingMiddleware
    >>>
    >>> pipeline = MiddlewarePipeline(provider)
    >>> pipeline.add(LoggingMiddleware())                        # outermost
    >>> pipeline.add(ValidatingMiddleware(provider, validator))  # innermost
    >>>
    >>> result = pipeline.execute("my_tool", {"query": "test"})
"""

from .middleware import Middleware, MiddlewareFn, MiddlewarePipeline, Next, compose
from .plugins import (
    REDACTED,
    SENSITIVE_KEYS,
    EventMiddleware,
    LoggingMiddleware,
    SchemaValidator,
    ValidatingMiddleware,
    ValidationIssue,
    ValidationResult,
    sanitize_arguments,
)

__all__ = [
    # Core
    "Middleware",
    "MiddlewareFn",
    "MiddlewarePipeline",
    "Next",
    "compose",
    # Plugins
    "EventMiddleware",
    "LoggingMiddleware",
    "ValidatingMiddleware",
    "SchemaValidator",
    "ValidationResult",
    "ValidationIssue",
    "sanitize_arguments",
    "SENSITIVE_KEYS",
    "REDACTED",
]
