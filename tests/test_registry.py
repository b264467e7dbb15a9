"""Tests for snippetfeed.ingestion.registry: adapter registry."""

from __future__ import annotations

import snippetfeed.ingestion  # noqa: F401  registers adapters
from snippetfeed.ingestion.adapter import SourceAdapter
from snippetfeed.ingestion.devto_adapter import DevToAdapter
from snippetfeed.ingestion.registry import (
    _REGISTRY,
    build_adapters,
    get_adapter_class,
    register_adapter,
    registered_types,
)
from snippetfeed.ingestion.rss_adapter import MultiFeedRSSAdapter, RSSAdapter


class _DummyAdapter(SourceAdapter):
    def __init__(self):
        self.config = None

    @property
    def name(self) -> str:
        return "dummy"

    def configure(self, config: dict) -> None:
        self.config = config

    def units(self):
        return []

    async def fetch_unit(self, client, unit):
        return []


class TestRegistry:
    def setup_method(self):
        self._original = dict(_REGISTRY)

    def teardown_method(self):
        _REGISTRY.clear()
        _REGISTRY.update(self._original)

    def test_register_and_lookup(self):
        register_adapter("dummy", _DummyAdapter)
        assert get_adapter_class("dummy") is _DummyAdapter

    def test_lookup_unknown_returns_none(self):
        assert get_adapter_class("nonexistent") is None

    def test_registered_types_sorted(self):
        register_adapter("zzz", _DummyAdapter)
        register_adapter("aaa", _DummyAdapter)
        types = registered_types()
        assert types[0] == "aaa"
        assert "zzz" in types

    def test_builtin_adapters_registered(self):
        assert get_adapter_class("devto") is DevToAdapter
        assert get_adapter_class("rss") is RSSAdapter
        assert get_adapter_class("rss_multi") is MultiFeedRSSAdapter


class TestBuildAdapters:
    def setup_method(self):
        self._original = dict(_REGISTRY)
        register_adapter("dummy", _DummyAdapter)

    def teardown_method(self):
        _REGISTRY.clear()
        _REGISTRY.update(self._original)

    def test_configures_adapter(self):
        (adapter,) = build_adapters([{"type": "dummy", "answer": 42}])
        assert isinstance(adapter, _DummyAdapter)
        assert adapter.config["answer"] == 42

    def test_skips_unknown_type(self):
        adapters = build_adapters([{"type": "gopher"}, {"type": "dummy"}])
        assert len(adapters) == 1

    def test_skips_disabled(self):
        adapters = build_adapters([{"type": "dummy", "enabled": False}])
        assert adapters == []

    def test_preserves_order(self):
        adapters = build_adapters([
            {"type": "rss", "feeds": []},
            {"type": "devto", "tags": []},
        ])
        assert [type(a) for a in adapters] == [RSSAdapter, DevToAdapter]

    def test_custom_name(self):
        (adapter,) = build_adapters([{"type": "rss", "name": "hashnode", "feeds": []}])
        assert adapter.name == "hashnode"
