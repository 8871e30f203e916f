"""Structured logging for tool dispatch.

Every logger carries bound key-value context and writes through one renderer
picked by ``configure_logging``: human-readable console lines, JSON lines for
aggregation, or nothing. Scoped fields added with ``log_context`` show up on
every line emitted inside the scope, which is how a transport tags all lines
of one request.

Example:
    >>> configure_logging("json", level="INFO")
    >>> log = get_logger("toolgate.gateway")
    >>> with log_context(request_id="r-1"):
    ...     log.warning("Unknown tool requested", tool="search")
    {"timestamp": "...", "level": "warning", "event": "Unknown tool requested", "request_id": "r-1", ...}
"""

from __future__ import annotations

import inspect
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TextIO, runtime_checkable

import orjson

from toolgate.foundation.errors import JsonDict, JsonValue

_FORMATS = ("console", "json", "none")


# ─────────────────────────────────────────────────────────────────────────────
# Entries & Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def clock(self) -> str:
        """HH:MM:SS.mmm in UTC."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]

    def as_dict(self) -> JsonDict:
        return {
            "timestamp": datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat(),
            "level": self.level,
            "event": self.event,
            **self.context,
        }


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """``12:00:01.250 [info] event key=value ...`` with keys sorted."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        head = f"{entry.clock} " if self.show_timestamp else ""
        fields = "".join(f" {k}={_format_value(v)}" for k, v in sorted(entry.context.items()))
        print(f"{head}[{entry.level}] {entry.event}{fields}", file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        print(orjson.dumps(entry.as_dict(), option=orjson.OPT_NON_STR_KEYS, default=str).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    def render(self, entry: LogEntry) -> None:
        return None


@dataclass(slots=True)
class CaptureRenderer:
    """Keeps entries in memory for assertions."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide State
# ─────────────────────────────────────────────────────────────────────────────

_active_renderer: ContextVar[LogRenderer | None] = ContextVar("toolgate_log_renderer", default=None)
_min_level: ContextVar[int] = ContextVar("toolgate_log_level", default=logging.INFO)
_scoped: ContextVar[JsonDict] = ContextVar("toolgate_log_scope", default={})


def _current_renderer() -> LogRenderer:
    renderer = _active_renderer.get()
    if renderer is None:
        renderer = ConsoleRenderer()
        _active_renderer.set(renderer)
    return renderer


# ─────────────────────────────────────────────────────────────────────────────
# Loggers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class StructuredLogger(Protocol):
    """What the logging middleware needs: leveled calls with an event plus fields."""

    def info(self, event: str, **kw: JsonValue) -> None: ...
    def warning(self, event: str, **kw: JsonValue) -> None: ...
    def error(self, event: str, **kw: JsonValue) -> None: ...


@dataclass(frozen=True, slots=True)
class BoundLogger:
    """Immutable logger; ``bind``/``unbind`` return new instances.

    ``renderer=None`` follows whatever ``configure_logging`` installed at
    emit time, so module-level loggers pick up later configuration.

    Example:
        >>> log = get_logger("toolgate.providers.composite").bind(provider="math")
        >>> log.warning("Tool name collision, last provider wins", tool="add")
    """

    context: JsonDict = field(default_factory=dict)
    renderer: LogRenderer | None = None
    level: int = logging.DEBUG

    def bind(self, **kw: JsonValue) -> BoundLogger:
        return BoundLogger({**self.context, **kw}, self.renderer, self.level)

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger({k: v for k, v in self.context.items() if k not in keys}, self.renderer, self.level)

    def _emit(self, level: int, event: str, fields: JsonDict) -> None:
        if level < self.level:
            return
        entry = LogEntry(time.time(), logging.getLevelName(level).lower(), event,
                         {**_scoped.get(), **self.context, **fields})
        (self.renderer or _current_renderer()).render(entry)

    def debug(self, event: str, **kw: JsonValue) -> None:
        self._emit(logging.DEBUG, event, kw)

    def info(self, event: str, **kw: JsonValue) -> None:
        self._emit(logging.INFO, event, kw)

    def warning(self, event: str, **kw: JsonValue) -> None:
        self._emit(logging.WARNING, event, kw)

    def error(self, event: str, **kw: JsonValue) -> None:
        self._emit(logging.ERROR, event, kw)


@dataclass(frozen=True, slots=True)
class StdlibLogger:
    """Structured calls onto a ``logging.Logger``; fields ride on ``record.fields``.

    Example:
        >>> log = StdlibLogger(logging.getLogger("app.tools"))
        >>> log.info("Tool execution started: add", tool="add")
    """

    logger: logging.Logger | logging.LoggerAdapter

    def debug(self, event: str, **kw: JsonValue) -> None:
        self.logger.debug(event, extra={"fields": kw})

    def info(self, event: str, **kw: JsonValue) -> None:
        self.logger.info(event, extra={"fields": kw})

    def warning(self, event: str, **kw: JsonValue) -> None:
        self.logger.warning(event, extra={"fields": kw})

    def error(self, event: str, **kw: JsonValue) -> None:
        self.logger.error(event, extra={"fields": kw})


def as_structured_logger(logger: object) -> StructuredLogger | None:
    """Wrap a stdlib logger; None when ``logger`` cannot take keyword fields."""
    if isinstance(logger, logging.Logger | logging.LoggerAdapter):
        return StdlibLogger(logger)
    if not isinstance(logger, StructuredLogger):
        return None
    if not all(_takes_fields(getattr(logger, level)) for level in ("info", "warning", "error")):
        return None
    return logger


def _takes_fields(method: object) -> bool:
    try:
        params = inspect.signature(method).parameters.values()  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return True
    return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params)


def get_logger(name: str | None = None, **context: JsonValue) -> BoundLogger:
    """Logger at the configured minimum level; ``name`` is bound as ``logger``."""
    if name:
        context["logger"] = name
    return BoundLogger(context, level=_min_level.get())


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "INFO",
    *,
    output: TextIO | None = None,
) -> LogRenderer:
    """Install the renderer for ``format`` ("console", "json" or "none") and the minimum level."""
    if format not in _FORMATS:
        raise ValueError(f"Unknown log format {format!r}; expected one of {', '.join(_FORMATS)}")
    match format:
        case "console":
            renderer: LogRenderer = ConsoleRenderer(output or sys.stderr)
        case "json":
            renderer = JsonRenderer(output or sys.stdout)
        case _:
            renderer = NoOpRenderer()
    _min_level.set(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    _active_renderer.set(renderer)
    return renderer


def configure_from_settings() -> LogRenderer:
    """Apply TOOLGATE_LOG_FORMAT / TOOLGATE_LOG_LEVEL."""
    from toolgate.foundation.config import get_settings
    settings = get_settings().logging
    return configure_logging(settings.format, settings.level)


@contextmanager
def log_context(**fields: JsonValue) -> Iterator[None]:
    """Add fields to every entry emitted inside the block."""
    token = _scoped.set({**_scoped.get(), **fields})
    try:
        yield
    finally:
        _scoped.reset(token)


@contextmanager
def capture_logs() -> Iterator[CaptureRenderer]:
    """Route all loggers without an explicit renderer into memory for the block."""
    capture = CaptureRenderer()
    token = _active_renderer.set(capture)
    try:
        yield capture
    finally:
        _active_renderer.reset(token)


def _format_value(v: object) -> str:
    match v:
        case str():
            return f'"{v}"'
        case bool():
            return "true" if v else "false"
        case int() | float():
            return str(v)
        case dict():
            return f"{{{len(v)} items}}"
        case list() | tuple():
            return f"[{len(v)} items]"
        case _:
            return repr(v)
