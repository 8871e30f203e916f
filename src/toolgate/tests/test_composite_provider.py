"""Tests for CompositeToolProvider namespacing, routing and cache invalidation."""

from __future__ import annotations

import threading

import pytest

from toolgate.foundation.config import clear_settings_cache
from toolgate.foundation.core import ToolInfo, ToolResult
from toolgate.foundation.errors import ToolNotFoundException
from toolgate.providers import CompositeToolProvider, InMemoryToolProvider, derive_key
from toolgate.runtime.observability import CaptureRenderer


def _provider(*names: str) -> InMemoryToolProvider:
    provider = InMemoryToolProvider()
    for name in names:
        provider.register(ToolInfo(name=name, description=f"{name} tool"), lambda a, c, n=name: f"ran {n}")
    return provider


# ─────────────────────────────────────────────────────────────────────────────
# Naming
# ─────────────────────────────────────────────────────────────────────────────


def test_prefixed_names_and_routing_metadata() -> None:
    """getTool("k/n") carries original_name n and source_provider k."""
    composite = CompositeToolProvider({"math": _provider("add"), "text": _provider("upper")})

    assert set(composite.get_tools()) == {"math/add", "text/upper"}
    info = composite.get_tool("math/add")
    assert info is not None
    assert info.metadata["original_name"] == "add"
    assert info.metadata["source_provider"] == "math"
    assert info.provider == "math"


def test_execute_matches_direct_sub_provider_call() -> None:
    sub = _provider("add")
    composite = CompositeToolProvider({"math": sub})
    assert composite.execute("math/add", {"a": 1}) == sub.execute("add", {"a": 1})


def test_unprefixed_mode_keeps_bare_names() -> None:
    composite = CompositeToolProvider({"a": _provider("one"), "b": _provider("two")}, prefixed=False)
    assert set(composite.get_tools()) == {"one", "two"}
    assert composite.execute("two", {}).message == "ran two"


def test_unprefixed_collision_last_wins_and_logs(captured_logs: CaptureRenderer) -> None:
    composite = CompositeToolProvider({"a": _provider("dup"), "b": _provider("dup")}, prefixed=False)

    info = composite.get_tool("dup")
    assert info is not None and info.metadata["source_provider"] == "b"
    assert any(e.level == "warning" and e.context.get("tool") == "dup" for e in captured_logs.entries)


def test_existing_metadata_is_preserved() -> None:
    sub = InMemoryToolProvider().register(ToolInfo(name="t", metadata={"owner": "ops"}), lambda a, c: "x")
    info = CompositeToolProvider({"k": sub}).get_tool("k/t")
    assert info is not None
    assert info.metadata == {"owner": "ops", "original_name": "t", "source_provider": "k"}


def test_merged_descriptor_does_not_share_nested_dicts() -> None:
    schema = {"type": "object", "properties": {"a": {"type": "number"}}}
    sub = InMemoryToolProvider().register(
        ToolInfo(name="t", input_schema=schema, annotations={"readOnlyHint": True}, metadata={"tags": ["x"]}),
        lambda a, c: "x",
    )
    info = CompositeToolProvider({"k": sub}).get_tool("k/t")
    assert info is not None

    info.input_schema["properties"]["b"] = {}
    info.annotations["readOnlyHint"] = False
    info.metadata["tags"].append("y")

    original = sub.get_tool("t")
    assert original is not None
    assert set(original.input_schema["properties"]) == {"a"}
    assert original.annotations == {"readOnlyHint": True}
    assert original.metadata == {"tags": ["x"]}


def test_derive_key_from_class_name() -> None:
    assert derive_key(InMemoryToolProvider()) == "in_memory"


def test_auto_keys_get_numeric_suffixes() -> None:
    composite = CompositeToolProvider([_provider("a"), _provider("b"), _provider("c")])
    assert composite.get_provider_keys() == ["in_memory", "in_memory_1", "in_memory_2"]
    assert set(composite.get_tools()) == {"in_memory/a", "in_memory_1/b", "in_memory_2/c"}


# ─────────────────────────────────────────────────────────────────────────────
# Routing Failures
# ─────────────────────────────────────────────────────────────────────────────


def test_unknown_tool_raises() -> None:
    composite = CompositeToolProvider({"k": _provider("t")})
    with pytest.raises(ToolNotFoundException):
        composite.execute("k/missing", {})
    with pytest.raises(ToolNotFoundException):
        composite.execute("t", {})


def test_sub_provider_failure_propagates() -> None:
    """Sub-provider not-found is not swallowed by the composite."""
    sub = _provider("t")
    composite = CompositeToolProvider({"k": sub})
    composite.get_tools()
    sub.unregister("t")

    with pytest.raises(ToolNotFoundException):
        composite.execute("k/t", {})


# ─────────────────────────────────────────────────────────────────────────────
# Cache Invalidation
# ─────────────────────────────────────────────────────────────────────────────


def test_add_provider_invalidates_memo() -> None:
    composite = CompositeToolProvider({"a": _provider("one")})
    assert set(composite.get_tools()) == {"a/one"}

    composite.add_provider("b", _provider("two"))
    assert set(composite.get_tools()) == {"a/one", "b/two"}


def test_remove_provider_invalidates_memo() -> None:
    composite = CompositeToolProvider({"a": _provider("one"), "b": _provider("two")})
    composite.get_tools()

    composite.remove_provider("b")
    assert set(composite.get_tools()) == {"a/one"}
    assert composite.get_provider("b") is None


def test_clear_cache_picks_up_direct_sub_provider_changes() -> None:
    sub = _provider("one")
    composite = CompositeToolProvider({"a": sub})
    composite.get_tools()

    sub.register(ToolInfo(name="two"), lambda a, c: "x")
    assert "a/two" not in composite.get_tools()

    composite.clear_cache()
    assert "a/two" in composite.get_tools()


def test_merge_is_memoized() -> None:
    """Repeated listings do not re-query sub-providers."""
    listings: list[int] = []

    class CountingProvider(InMemoryToolProvider):
        __slots__ = ()

        def get_tools(self) -> dict[str, ToolInfo]:
            listings.append(1)
            return super().get_tools()

    composite = CompositeToolProvider({"k": CountingProvider().register(ToolInfo(name="t"), lambda a, c: "x")})
    composite.get_tools()
    composite.get_tool("k/t")
    composite.get_tools()
    assert len(listings) == 1


def test_concurrent_listing_and_mutation() -> None:
    """Readers never observe a torn merge while providers are added and removed."""
    composite = CompositeToolProvider({"base": _provider("t")})
    errors: list[BaseException] = []

    def reader() -> None:
        try:
            for _ in range(200):
                tools = composite.get_tools()
                assert "base/t" in tools
        except BaseException as e:  # noqa: BLE001 - collected for the main thread
            errors.append(e)

    def writer() -> None:
        for i in range(100):
            composite.add_provider(f"p{i}", _provider("x"))
            composite.remove_provider(f"p{i}")

    threads = [threading.Thread(target=reader) for _ in range(4)] + [threading.Thread(target=writer)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert set(composite.get_tools()) == {"base/t"}


def test_results_from_sub_provider_are_not_renormalized() -> None:
    result = ToolResult.ok("x", {"k": 1})
    sub = InMemoryToolProvider().register(ToolInfo(name="t"), lambda a, c: result)
    assert CompositeToolProvider({"k": sub}).execute("k/t", {}) is result


def test_prefixing_default_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLGATE_GATEWAY_PREFIXED", "false")
    clear_settings_cache()
    composite = CompositeToolProvider({"k": _provider("t")})
    assert composite.prefixed is False
    assert set(composite.get_tools()) == {"t"}
