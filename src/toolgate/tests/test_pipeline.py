"""Tests for middleware composition and MiddlewarePipeline."""

from __future__ import annotations

from typing import Any

import pytest

from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult
from toolgate.foundation.errors import ToolNotFoundException
from toolgate.providers import CompositeToolProvider, InMemoryToolProvider, ToolProvider
from toolgate.runtime.middleware import MiddlewarePipeline, Next, compose

from .support import CallCounter


# ─────────────────────────────────────────────────────────────────────────────
# Test Middleware
# ─────────────────────────────────────────────────────────────────────────────


class Tracer:
    """Records before/after markers into a shared log."""

    def __init__(self, name: str, log: list[str]) -> None:
        self.name, self.log = name, log

    def process(self, tool_name: str, arguments: dict[str, Any], context: ExecutionContext, next: Next) -> ToolResult:
        self.log.append(f"{self.name}.before")
        result = next(tool_name, arguments, context)
        self.log.append(f"{self.name}.after")
        return result


class ShortCircuit:
    def process(self, tool_name: str, arguments: dict[str, Any], context: ExecutionContext, next: Next) -> ToolResult:
        return ToolResult.error("blocked")


class Recover:
    """Turns a raised failure into an error result."""

    def process(self, tool_name: str, arguments: dict[str, Any], context: ExecutionContext, next: Next) -> ToolResult:
        try:
            return next(tool_name, arguments, context)
        except ToolNotFoundException as e:
            return ToolResult.error(f"recovered: {e}")


@pytest.fixture
def spy() -> CallCounter:
    return CallCounter(ToolResult.ok("terminal"))


@pytest.fixture
def terminal(spy: CallCounter) -> InMemoryToolProvider:
    return InMemoryToolProvider().register(ToolInfo(name="t"), spy)


# ─────────────────────────────────────────────────────────────────────────────
# Ordering
# ─────────────────────────────────────────────────────────────────────────────


def test_first_added_is_outermost(terminal: InMemoryToolProvider) -> None:
    """A then B gives A.before, B.before, B.after, A.after."""
    log: list[str] = []
    pipeline = MiddlewarePipeline(terminal).add(Tracer("A", log)).add(Tracer("B", log))

    result = pipeline.execute("t", {})

    assert result.message == "terminal"
    assert log == ["A.before", "B.before", "B.after", "A.after"]


def test_compose_with_empty_list_is_terminal() -> None:
    def terminal(name: str, args: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
        return ToolResult.ok(name)

    assert compose([], terminal) is terminal


def test_plain_callable_middleware(terminal: InMemoryToolProvider) -> None:
    seen: list[str] = []

    def mw(tool_name: str, arguments: dict[str, Any], context: ExecutionContext, next: Next) -> ToolResult:
        seen.append(tool_name)
        return next(tool_name, arguments, context)

    MiddlewarePipeline(terminal, [mw]).execute("t", {})
    assert seen == ["t"]


def test_invalid_middleware_rejected(terminal: InMemoryToolProvider) -> None:
    with pytest.raises(TypeError):
        MiddlewarePipeline(terminal).add(42)  # type: ignore[arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Short-circuit & Failures
# ─────────────────────────────────────────────────────────────────────────────


def test_short_circuit_skips_terminal(terminal: InMemoryToolProvider, spy: CallCounter) -> None:
    log: list[str] = []
    pipeline = MiddlewarePipeline(terminal).add(Tracer("A", log)).add(ShortCircuit())

    result = pipeline.execute("t", {})

    assert result.message == "blocked"
    assert spy.count == 0
    assert log == ["A.before", "A.after"]


def test_failures_propagate_without_recovery(terminal: InMemoryToolProvider) -> None:
    pipeline = MiddlewarePipeline(terminal).add(Tracer("A", []))
    with pytest.raises(ToolNotFoundException):
        pipeline.execute("missing", {})


def test_user_middleware_can_recover(terminal: InMemoryToolProvider) -> None:
    result = MiddlewarePipeline(terminal).add(Recover()).execute("missing", {})
    assert result.is_error
    assert result.message.startswith("recovered:")


# ─────────────────────────────────────────────────────────────────────────────
# Context
# ─────────────────────────────────────────────────────────────────────────────


def test_default_context_created(terminal: InMemoryToolProvider, spy: CallCounter) -> None:
    MiddlewarePipeline(terminal).execute("t", {})
    _, ctx = spy.calls[0]
    assert isinstance(ctx, ExecutionContext)


def test_middleware_extended_context_reaches_handler(terminal: InMemoryToolProvider, spy: CallCounter) -> None:
    original = ExecutionContext(user_id="u1")

    def tag(tool_name: str, arguments: dict[str, Any], context: ExecutionContext, next: Next) -> ToolResult:
        return next(tool_name, arguments, context.with_attribute("tagged", True))

    MiddlewarePipeline(terminal, [tag]).execute("t", {}, original)

    _, ctx = spy.calls[0]
    assert ctx is not None and ctx.get("tagged") is True
    assert original.get("tagged") is None


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline Management
# ─────────────────────────────────────────────────────────────────────────────


def test_count_add_many_and_clear(terminal: InMemoryToolProvider) -> None:
    pipeline = MiddlewarePipeline(terminal).add_many([Tracer("A", []), Tracer("B", [])])
    assert pipeline.count() == len(pipeline) == 2

    pipeline.clear()
    assert len(pipeline) == 0
    assert pipeline.execute("t", {}).message == "terminal"


def test_add_after_execute_rebuilds_chain(terminal: InMemoryToolProvider, spy: CallCounter) -> None:
    pipeline = MiddlewarePipeline(terminal)
    pipeline.execute("t", {})

    pipeline.add(ShortCircuit())
    assert pipeline.execute("t", {}).message == "blocked"
    assert spy.count == 1


def test_pipeline_is_a_provider(terminal: InMemoryToolProvider) -> None:
    """Discovery delegates to the wrapped provider; the pipeline nests inside a composite."""
    pipeline = MiddlewarePipeline(terminal)
    assert isinstance(pipeline, ToolProvider)
    assert set(pipeline.get_tools()) == {"t"}
    assert pipeline.get_tool("t") == terminal.get_tool("t")

    composite = CompositeToolProvider({"wrapped": pipeline})
    assert composite.execute("wrapped/t", {}).message == "terminal"
