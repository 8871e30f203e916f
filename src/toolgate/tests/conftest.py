"""Shared fixtures for toolgate tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from toolgate.foundation.config import clear_settings_cache
from toolgate.foundation.core import ToolInfo, ToolResult
from toolgate.providers import InMemoryToolProvider
from toolgate.runtime.observability import CaptureRenderer, capture_logs

from .support import ADD_SCHEMA, add_handler


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from TOOLGATE_* variables in the environment."""
    for key in [k for k in os.environ if k.startswith("TOOLGATE_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def captured_logs() -> Iterator[CaptureRenderer]:
    """Route structured logs to memory instead of stderr."""
    with capture_logs() as capture:
        yield capture


@pytest.fixture
def add_tool() -> ToolInfo:
    return ToolInfo(
        name="add",
        label="Add Numbers",
        description="Adds two numbers",
        input_schema=ADD_SCHEMA,
        annotations={"readOnlyHint": True, "idempotentHint": True},
    )


@pytest.fixture
def provider(add_tool: ToolInfo) -> InMemoryToolProvider:
    """Provider exposing ``add`` and ``greet``."""
    return InMemoryToolProvider().register(add_tool, add_handler).register(
        ToolInfo(name="greet", label="Greet", description="Greets a user"),
        lambda args, ctx: ToolResult.ok(f"Hello, {args.get('name', 'world')}!"),
    )
