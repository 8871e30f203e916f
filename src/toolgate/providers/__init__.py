"""Tool providers: the list/get/execute contract and its three implementations.

Example:
    >>> from toolgate.providers import CachingToolProvider, CompositeToolProvider, InMemoryToolProvider
    >>> from toolgate.io.cache import MemoryStore
    >>>
    >>> composite = CompositeToolProvider({"math": math_tools, "text": text_tools})
    >>> provider = CachingToolProvider(composite, MemoryStore())
    >>> provider.execute("math/add", {"a": 2, "b": 3})
"""

from .base import Handler, ToolProvider
from .caching import CachingToolProvider, canonical_arguments
from .composite import CompositeToolProvider, derive_key
from .memory import InMemoryToolProvider, normalize_result

__all__ = [
    "Handler",
    "ToolProvider",
    "InMemoryToolProvider",
    "normalize_result",
    "CompositeToolProvider",
    "derive_key",
    "CachingToolProvider",
    "canonical_arguments",
]
