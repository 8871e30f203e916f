"""Request-scoped execution context threaded through providers and middleware."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from toolgate.foundation.errors import JsonDict


class ExecutionContext(BaseModel):
    """Immutable bag of identity, authorization and trace data for one request.

    Contexts are shared by reference across middleware layers, so every
    mutator returns a new instance. Adding an attribute in one layer never
    leaks into another caller's view.

    Example:
        >>> ctx = ExecutionContext(user_id="u1", scopes=("read",))
        >>> traced = ctx.with_attribute("trace_id", "abc")
        >>> traced.get("trace_id"), ctx.get("trace_id")
        ('abc', None)
    """

    model_config = ConfigDict(frozen=True)

    request_id: str | int | None = None
    user_id: str | None = None
    scopes: tuple[str, ...] = ()
    attributes: JsonDict = Field(default_factory=dict)

    @field_validator("scopes", mode="before")
    @classmethod
    def _dedupe_scopes(cls, v: Any) -> Any:
        """Drop duplicate scopes while keeping first-seen order."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(dict.fromkeys(v))
        return v

    @classmethod
    def create(cls, **kwargs: Any) -> ExecutionContext:
        """New context with a generated request id unless one is given."""
        kwargs.setdefault("request_id", uuid.uuid4().hex)
        return cls(**kwargs)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    # Copy-on-write mutators

    def with_attribute(self, key: str, value: Any) -> ExecutionContext:
        """Return a new context with an added (or replaced) attribute."""
        return self.model_copy(update={"attributes": {**self.attributes, key: value}})

    def with_user(self, user_id: str | None) -> ExecutionContext:
        return self.model_copy(update={"user_id": user_id})

    def with_request_id(self, request_id: str | int | None) -> ExecutionContext:
        return self.model_copy(update={"request_id": request_id})

    def with_scopes(self, *scopes: str) -> ExecutionContext:
        """Return a new context with extra scopes appended (duplicates ignored)."""
        return self.model_copy(update={"scopes": tuple(dict.fromkeys((*self.scopes, *scopes)))})

    def to_dict(self) -> JsonDict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "scopes": list(self.scopes),
            "attributes": dict(self.attributes),
        }
