"""Built-in middleware: validation, logging, lifecycle events."""

from .events import EventMiddleware
from .logging import REDACTED, SENSITIVE_KEYS, LoggingMiddleware, sanitize_arguments
from .validation import SchemaValidator, ValidatingMiddleware, ValidationIssue, ValidationResult

__all__ = [
    "EventMiddleware",
    "LoggingMiddleware",
    "sanitize_arguments",
    "SENSITIVE_KEYS",
    "REDACTED",
    "ValidatingMiddleware",
    "SchemaValidator",
    "ValidationResult",
    "ValidationIssue",
]
