"""Tool descriptor: identity, input schema and behavioral hints for one tool."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from toolgate.foundation.errors import JsonDict

# MCP annotation keys -> discovery summary hint names
_HINT_KEYS: tuple[tuple[str, str], ...] = (
    ("read_only", "readOnlyHint"),
    ("destructive", "destructiveHint"),
    ("idempotent", "idempotentHint"),
)


class ToolInfo(BaseModel):
    """Immutable metadata describing a tool.

    The name is the sole identity key within one provider. Under composition
    the effective name becomes ``"{prefix}/{original}"`` and the original name
    plus owning provider key are kept in ``metadata`` for reverse routing.

    Attributes:
        name: Unique identifier within a provider's namespace
        label: Human-readable label (defaults to name)
        description: What the tool does (shown to the agent during discovery)
        input_schema: JSON Schema document for the tool's arguments
        annotations: MCP hints (readOnlyHint, destructiveHint, idempotentHint, openWorldHint)
        provider: Key of the provider that owns this tool, if known
        metadata: Free-form extra data

    Example:
        >>> info = ToolInfo(
        ...     name="greet",
        ...     label="Greet",
        ...     description="Says hello",
        ...     input_schema={"type": "object", "properties": {"name": {"type": "string"}}},
        ...     annotations={"readOnlyHint": True},
        ... )
        >>> info.read_only
        True
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    label: str = ""
    description: str = ""
    input_schema: JsonDict = Field(default_factory=dict, alias="inputSchema")
    annotations: dict[str, Any] = Field(default_factory=dict)
    provider: str | None = None
    metadata: JsonDict = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("label"):
            return {**data, "label": data.get("name", "")}
        return data

    # ─────────────────────────────────────────────────────────────────
    # Hints
    # ─────────────────────────────────────────────────────────────────

    @property
    def read_only(self) -> bool | None:
        return self.annotations.get("readOnlyHint")

    @property
    def destructive(self) -> bool | None:
        return self.annotations.get("destructiveHint")

    @property
    def idempotent(self) -> bool | None:
        return self.annotations.get("idempotentHint")

    @property
    def open_world(self) -> bool | None:
        return self.annotations.get("openWorldHint")

    # ─────────────────────────────────────────────────────────────────
    # Projections
    # ─────────────────────────────────────────────────────────────────

    def to_discovery_summary(self) -> JsonDict:
        """Lightweight summary for discovery results. Unknown hints are omitted, never null."""
        hints = {
            hint: value
            for hint, key in _HINT_KEYS
            if (value := self.annotations.get(key)) is not None
        }
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "provider": self.provider,
            "hints": hints,
        }

    def to_detailed_info(self) -> JsonDict:
        """Full detail for describe responses."""
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "provider": self.provider,
            "input_schema": self.input_schema,
            "annotations": self.annotations,
            "metadata": self.metadata,
        }

    def to_dict(self) -> JsonDict:
        """Flat, cache-safe projection (inverse of from_dict); nested dicts are copies."""
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "input_schema": deepcopy(self.input_schema),
            "annotations": deepcopy(self.annotations),
            "provider": self.provider,
            "metadata": deepcopy(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: JsonDict) -> ToolInfo:
        """Build from a mapping. Accepts ``input_schema`` or ``inputSchema``."""
        name = data.get("name", "")
        return cls(
            name=name,
            label=data.get("label") or name,
            description=data.get("description", ""),
            input_schema=deepcopy(data.get("input_schema") or data.get("inputSchema") or {}),
            annotations=deepcopy(data.get("annotations") or {}),
            provider=data.get("provider"),
            metadata=deepcopy(data.get("metadata") or {}),
        )
