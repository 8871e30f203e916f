"""Core middleware types, chain composition and the pipeline.

Middleware follows continuation-passing style: each middleware receives the
tool name, arguments, context, and a ``next`` function to call downstream.
It may call ``next`` (optionally with modified arguments or context), return
its own ToolResult to short-circuit, or wrap ``next`` in its own failure
handling.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

from toolgate.foundation.core import ExecutionContext, ToolInfo, ToolResult

if TYPE_CHECKING:
    from toolgate.providers import ToolProvider


# Continuation: (tool_name, arguments, context) -> result
Next: TypeAlias = Callable[[str, dict[str, Any], ExecutionContext], ToolResult]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for execution middleware.

    Example:
        >>> class TimingMiddleware:
        ...     def process(self, tool_name, arguments, context, next):
        ...         start = time.perf_counter()
        ...         result = next(tool_name, arguments, context)
        ...         print(f"{tool_name}: {time.perf_counter() - start:.3f}s")
        ...         return result
    """

    def process(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext,
        next: Next,
    ) -> ToolResult:
        """Execute middleware logic.

        Args:
            tool_name: The tool being executed
            arguments: The tool arguments
            context: Request-scoped context (user, request id, attributes)
            next: Continuation to call downstream chain

        Returns:
            Tool result (possibly replaced)
        """
        ...


# A plain callable with the same signature as Middleware.process is accepted too
MiddlewareFn: TypeAlias = Callable[[str, dict[str, Any], ExecutionContext, Next], ToolResult]
MiddlewareLike: TypeAlias = "Middleware | MiddlewareFn"


def _as_callable(mw: MiddlewareLike) -> MiddlewareFn:
    if isinstance(mw, Middleware):
        return mw.process
    if callable(mw):
        return mw
    raise TypeError(f"Middleware must define process() or be callable, got {type(mw).__name__}")


def compose(middleware: Sequence[MiddlewareLike], terminal: Next) -> Next:
    """Compose middleware around a terminal handler.

    Folds the list in reverse so the first middleware is the outermost
    wrapper: for ``[A, B]`` the order is
    ``A.before -> B.before -> terminal -> B.after -> A.after``.

    Args:
        middleware: Ordered list of middleware (first = outermost)
        terminal: Innermost handler, usually ``provider.execute``

    Returns:
        Composed function: (tool_name, arguments, context) -> result
    """
    chain: Next = terminal
    for mw in reversed(middleware):
        def make_wrapper(fn: MiddlewareFn, nxt: Next) -> Next:
            def wrapped(tool_name: str, arguments: dict[str, Any], context: ExecutionContext) -> ToolResult:
                return fn(tool_name, arguments, context, nxt)
            return wrapped
        chain = make_wrapper(_as_callable(mw), chain)
    return chain


class MiddlewarePipeline:
    """Chain of responsibility over one terminal provider.

    The pipeline is itself a ToolProvider: discovery is delegated to the
    wrapped provider, execution runs through the middleware chain. It can be
    handed to the gateway or nested inside a composite.

    The composed chain is cached and rebuilt after ``add``/``add_many``/``clear``.
    Both mutation points replace the whole middleware list.

    Example:
        >>> pipeline = MiddlewarePipeline(provider)
        >>> pipeline.add(LoggingMiddleware()).add(EventMiddleware(dispatcher))
        >>> result = pipeline.execute("tool_name", {"q": "x"}, context)
    """

    __slots__ = ("_provider", "_middleware", "_chain", "_lock")

    def __init__(self, provider: ToolProvider, middleware: Iterable[MiddlewareLike] = ()) -> None:
        self._provider = provider
        self._middleware: tuple[MiddlewareLike, ...] = tuple(middleware)
        self._chain: Next | None = None
        self._lock = threading.Lock()

    @property
    def provider(self) -> ToolProvider:
        return self._provider

    @property
    def middleware(self) -> tuple[MiddlewareLike, ...]:
        return self._middleware

    def add(self, middleware: MiddlewareLike) -> MiddlewarePipeline:
        """Append middleware. First added = outermost (runs first)."""
        _as_callable(middleware)
        with self._lock:
            self._middleware = (*self._middleware, middleware)
            self._chain = None
        return self

    def add_many(self, middleware: Iterable[MiddlewareLike]) -> MiddlewarePipeline:
        for mw in middleware:
            self.add(mw)
        return self

    def clear(self) -> MiddlewarePipeline:
        with self._lock:
            self._middleware = ()
            self._chain = None
        return self

    def count(self) -> int:
        return len(self._middleware)

    __len__ = count

    def _terminal(self, tool_name: str, arguments: dict[str, Any], context: ExecutionContext) -> ToolResult:
        return self._provider.execute(tool_name, arguments, context)

    def _get_chain(self) -> Next:
        with self._lock:
            if self._chain is None:
                self._chain = compose(self._middleware, self._terminal)
            return self._chain

    # ─────────────────────────────────────────────────────────────────
    # ToolProvider
    # ─────────────────────────────────────────────────────────────────

    def get_tools(self) -> Mapping[str, ToolInfo]:
        return self._provider.get_tools()

    def get_tool(self, tool_name: str) -> ToolInfo | None:
        return self._provider.get_tool(tool_name)

    def execute(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        """Run the chain. A fresh default context is created when none is given."""
        return self._get_chain()(tool_name, arguments, context if context is not None else ExecutionContext())
