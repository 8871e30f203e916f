"""Test doubles shared across test modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from toolgate.foundation.core import ExecutionContext, ToolResult

ADD_SCHEMA = {
    "type": "object",
    "properties": {"a": {"type": "number"}, "b": {"type": "number"}},
    "required": ["a", "b"],
}


def add_handler(arguments: dict[str, Any], context: ExecutionContext | None) -> ToolResult:
    total = arguments["a"] + arguments["b"]
    return ToolResult.ok(f"Result: {total}", {"result": total})


class CallCounter:
    """Handler spy: records calls and returns a fixed value."""

    def __init__(self, result: Any = None) -> None:
        self.calls: list[tuple[dict[str, Any], ExecutionContext | None]] = []
        self.result = result if result is not None else ToolResult.ok("done")

    def __call__(self, arguments: dict[str, Any], context: ExecutionContext | None) -> Any:
        self.calls.append((arguments, context))
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


@dataclass
class Issue:
    path: str
    message: str
    code: str = "type"


@dataclass
class StubValidationResult:
    errors: list[Any] = field(default_factory=list)

    def is_valid(self) -> bool:
        return not self.errors

    def get_errors(self) -> list[Any]:
        return self.errors


class StubValidator:
    """Returns the injected errors, or checks ``required`` + numeric types when none are injected."""

    def __init__(self, errors: list[Any] | None = None) -> None:
        self.errors = errors
        self.schemas: list[dict[str, Any]] = []

    def validate(self, data: dict[str, Any], schema: dict[str, Any]) -> StubValidationResult:
        self.schemas.append(schema)
        if self.errors is not None:
            return StubValidationResult(list(self.errors))
        issues: list[Any] = []
        for name in schema.get("required", []):
            if name not in data:
                issues.append(Issue(f"/{name}", "Required property missing", "required"))
        for name, prop in schema.get("properties", {}).items():
            value = data.get(name)
            if name in data and prop.get("type") == "number" and not isinstance(value, (int, float)):
                issues.append(Issue(f"/{name}", f"Expected number, got {type(value).__name__}", "type"))
        return StubValidationResult(issues)


class RecordingDispatcher:
    def __init__(self) -> None:
        self.events: list[Any] = []

    def dispatch(self, event: Any) -> Any:
        self.events.append(event)
        return event


class RecordingLogger:
    """StructuredLogger that keeps (level, message, context) tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def info(self, event: str, **kw: Any) -> None:
        self.records.append(("info", event, kw))

    def warning(self, event: str, **kw: Any) -> None:
        self.records.append(("warning", event, kw))

    def error(self, event: str, **kw: Any) -> None:
        self.records.append(("error", event, kw))

    def levels(self) -> list[str]:
        return [level for level, _, _ in self.records]
