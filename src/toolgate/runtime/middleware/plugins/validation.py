"""Schema validation middleware.

Rejects calls whose arguments fail the tool's input schema before they reach
a handler, so malformed agent-generated inputs come back as a readable error
result instead of a handler failure. The schema engine itself is injected.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from toolgate.foundation.config import get_settings
from toolgate.foundation.core import ExecutionContext, ToolResult
from toolgate.foundation.errors import ConfigurationError, JsonDict

from ..middleware import Next

if TYPE_CHECKING:
    from toolgate.providers import ToolProvider


# ─────────────────────────────────────────────────────────────────────────────
# Validator Protocols
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class ValidationIssue(Protocol):
    """One validation error. ``path`` is a JSON pointer such as ``/a`` (may be empty)."""
    path: str
    message: str
    code: str


@runtime_checkable
class ValidationResult(Protocol):
    def is_valid(self) -> bool: ...
    def get_errors(self) -> Sequence[ValidationIssue]: ...


@runtime_checkable
class SchemaValidator(Protocol):
    """Validates data against a JSON Schema document."""

    def validate(self, data: dict[str, Any], schema: JsonDict) -> ValidationResult: ...


# ─────────────────────────────────────────────────────────────────────────────
# Middleware
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class ValidatingMiddleware:
    """Validate arguments against the target tool's input schema.

    - Unknown tools pass through so the terminal provider raises ToolNotFound
    - Tools with no (or empty) schema pass through unchanged
    - On failure, ``next`` is never called

    Args:
        provider: Provider used to look up schemas
        validator: Object with ``validate(data, schema)``
        strict: Forbid unknown properties on ``"type": "object"`` schemas
            (defaults to TOOLGATE_GATEWAY_STRICT_VALIDATION)

    Raises:
        ConfigurationError: ``validator`` has no usable ``validate``

    Example:
        >>> pipeline.add(ValidatingMiddleware(provider, MySchemaValidator(), strict=True))
    """

    provider: ToolProvider
    validator: SchemaValidator
    strict: bool | None = None
    _strict: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if not isinstance(self.validator, SchemaValidator) or not callable(self.validator.validate):
            raise ConfigurationError(
                "Validator must have a validate(data, schema) method returning a ValidationResult"
            )
        self._strict = get_settings().gateway.strict_validation if self.strict is None else self.strict

    def _effective_schema(self, schema: JsonDict) -> JsonDict:
        if self._strict and schema.get("type") == "object":
            return {**schema, "additionalProperties": False}
        return schema

    def process(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext,
        next: Next,
    ) -> ToolResult:
        tool = self.provider.get_tool(tool_name)
        if tool is None or not tool.input_schema:
            return next(tool_name, arguments, context)

        result = self.validator.validate(arguments, self._effective_schema(tool.input_schema))
        if result.is_valid():
            return next(tool_name, arguments, context)

        errors = [_issue_to_dict(e) for e in result.get_errors()]
        messages = [f"{e['path']}: {e['message']}" if e["path"] else e["message"] for e in errors]
        return ToolResult.error(
            "Validation failed: " + "; ".join(messages),
            {"validation_errors": errors},
        )


def _issue_to_dict(issue: object) -> JsonDict:
    """Read path/message/code from an attribute-style or mapping-style error."""
    get = issue.get if isinstance(issue, dict) else lambda k, d=None: getattr(issue, k, d)
    return {
        "path": get("path") or "",
        "message": get("message") or "Validation failed",
        "code": get("code") or "validation_error",
    }
