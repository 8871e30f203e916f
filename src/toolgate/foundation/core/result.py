"""Outcome of a tool execution."""

from __future__ import annotations

from copy import deepcopy

from pydantic import BaseModel, ConfigDict, Field

from toolgate.foundation.errors import JsonDict


class ToolResult(BaseModel):
    """Immutable execution outcome.

    Build through ``ok()`` / ``error()`` so that ``is_error == not success``
    holds for everything produced internally. A ``success=False`` result is
    still a well-formed, non-exceptional outcome; ``is_error`` tells the outer
    transport to flag the payload as a protocol-level error.

    Example:
        >>> ToolResult.ok("Result: 5", {"result": 5}).to_dict()
        {'success': True, 'message': 'Result: 5', 'result': 5}
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    data: JsonDict = Field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def ok(cls, message: str = "OK", data: JsonDict | None = None) -> ToolResult:
        return cls(success=True, message=message, data=data or {}, is_error=False)

    @classmethod
    def error(cls, message: str, data: JsonDict | None = None) -> ToolResult:
        return cls(success=False, message=message, data=data or {}, is_error=True)

    def to_dict(self) -> JsonDict:
        """Structured payload for transport responses: success, message, then data keys."""
        return {"success": self.success, "message": self.message, **self.data}

    def to_cache(self) -> JsonDict:
        """Detached copy; later changes to this result never reach a stored entry."""
        return {
            "success": self.success,
            "message": self.message,
            "data": deepcopy(self.data),
            "is_error": self.is_error,
        }

    @classmethod
    def from_cache(cls, data: JsonDict) -> ToolResult:
        return cls(
            success=data.get("success", False),
            message=data.get("message", ""),
            data=deepcopy(data.get("data") or {}),
            is_error=data.get("is_error", False),
        )
