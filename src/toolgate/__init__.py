"""Toolgate - Dynamic tool-dispatch gateway for AI agents.

Exposes an arbitrarily large, composable set of tools through three stable
meta-tools (discover / get-tool-info / execute) instead of registering every
tool with the agent-facing transport.

Quick Start:
    >>> from toolgate import InMemoryToolProvider, ToolGateway, ToolInfo, ToolResult
    >>>
    >>> provider = InMemoryToolProvider()
    >>> provider.register(
    ...     ToolInfo(name="add", description="Adds two numbers", annotations={"readOnlyHint": True}),
    ...     lambda args, ctx: ToolResult.ok(f"Result: {args['a'] + args['b']}", {"result": args["a"] + args["b"]}),
    ... )
    >>> gateway = ToolGateway(provider)
    >>> gateway.execute_tool("add", {"a": 2, "b": 3}).structured_content
    {'success': True, 'message': 'Result: 5', 'result': 5}

Composition, Caching and Middleware:
    >>> from toolgate import CachingToolProvider, CompositeToolProvider, MiddlewarePipeline, LoggingMiddleware
    >>> from toolgate.io.cache import MemoryStore
    >>>
    >>> composite = CompositeToolProvider({"math": provider, "text": text_tools})
    >>> cached = CachingToolProvider(composite, MemoryStore())
    >>> pipeline = MiddlewarePipeline(cached).add(LoggingMiddleware())
    >>> gateway = ToolGateway(pipeline, tool_prefix="acme")
"""

from __future__ import annotations

__version__ = "0.1.0"

# Foundation
from .foundation import (
    ConfigurationError,
    ErrorCode,
    ExecutionContext,
    ToolExecutionException,
    ToolgateError,
    ToolgateSettings,
    ToolInfo,
    ToolNotFoundException,
    ToolResult,
    classify_exception,
    get_settings,
)

# Gateway
from .gateway import GatewayResult, GatewayTool, TextContent, ToolGateway

# Cache stores
from .io.cache import CacheStore, MemoryStore

# Providers
from .providers import CachingToolProvider, CompositeToolProvider, InMemoryToolProvider, ToolProvider

# Runtime
from .runtime import (
    EventDispatcher,
    EventMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewarePipeline,
    Next,
    ToolExecutionFailed,
    ToolExecutionStarted,
    ToolExecutionSucceeded,
    ValidatingMiddleware,
    compose,
)
from .runtime.middleware import SchemaValidator, ValidationResult
from .runtime.observability import configure_logging, get_logger

__all__ = [
    # Version
    "__version__",
    # Value types
    "ToolInfo",
    "ToolResult",
    "ExecutionContext",
    # Errors
    "ErrorCode",
    "classify_exception",
    "ToolgateError",
    "ConfigurationError",
    "ToolNotFoundException",
    "ToolExecutionException",
    # Config
    "ToolgateSettings",
    "get_settings",
    # Providers
    "ToolProvider",
    "InMemoryToolProvider",
    "CompositeToolProvider",
    "CachingToolProvider",
    # Cache stores
    "CacheStore",
    "MemoryStore",
    # Middleware
    "Middleware",
    "Next",
    "compose",
    "MiddlewarePipeline",
    "ValidatingMiddleware",
    "SchemaValidator",
    "ValidationResult",
    "LoggingMiddleware",
    "EventMiddleware",
    # Events
    "EventDispatcher",
    "ToolExecutionStarted",
    "ToolExecutionSucceeded",
    "ToolExecutionFailed",
    # Gateway
    "ToolGateway",
    "GatewayTool",
    "GatewayResult",
    "TextContent",
    # Logging
    "configure_logging",
    "get_logger",
]
