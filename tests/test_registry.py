"""Tests for the section registry."""

import logging

import pytest

from pixelprism.registry import (
    SectionHandler, SectionRegistry, MAX_CONFIG_HANDLERS, get_registry,
    register_section, find_section, for_each_section, reset_registry
)


class DummySection(SectionHandler):
    """Minimal handler recording what it was asked to do."""

    def __init__(self, name, group="styling"):
        self.name = name
        self.group = group
        self.calls = []

    def init_defaults(self, config):
        self.calls.append("init")

    def parse(self, config, key, value):
        self.calls.append((key, value))
        return key == "known"

    def write(self, config, sink):
        sink.write("known = 1\n")


class TestRegister:
    """Test handler registration."""

    def test_register_and_find(self):
        reg = SectionRegistry()
        handler = DummySection("button")
        assert reg.register(handler) is True
        assert reg.find("button") is handler
        assert len(reg) == 1

    def test_duplicate_identity_is_noop(self):
        reg = SectionRegistry()
        handler = DummySection("button")
        reg.register(handler)
        assert reg.register(handler) is False
        assert len(reg) == 1

    def test_duplicate_name_is_noop(self):
        """Test the first handler registered under a name wins."""
        reg = SectionRegistry()
        first = DummySection("button")
        second = DummySection("button")
        reg.register(first)
        assert reg.register(second) is False
        assert reg.find("button") is first

    def test_ignores_unusable_handlers(self):
        reg = SectionRegistry()
        assert reg.register(None) is False
        assert reg.register(DummySection("")) is False
        assert len(reg) == 0

    def test_idempotent_across_reinitialization(self):
        """Registering the same set twice changes nothing."""
        reg = SectionRegistry()
        handlers = [DummySection(n) for n in ("a", "b", "c")]
        for h in handlers:
            reg.register(h)
        for h in reversed(handlers):
            reg.register(h)
        assert reg.names() == ["a", "b", "c"]

    def test_registration_order_preserved(self):
        reg = SectionRegistry()
        for name in ("zoom", "button", "main"):
            reg.register(DummySection(name))
        assert reg.names() == ["zoom", "button", "main"]
        assert [h.name for h in reg] == ["zoom", "button", "main"]


class TestCapacity:
    """Test the registry bound."""

    def test_default_capacity(self):
        assert SectionRegistry().capacity == MAX_CONFIG_HANDLERS == 32

    def test_overflow_is_dropped_and_logged(self, caplog):
        reg = SectionRegistry(capacity=2)
        reg.register(DummySection("a"))
        reg.register(DummySection("b"))
        assert reg.is_full

        with caplog.at_level(logging.WARNING, logger="pixelprism.registry"):
            assert reg.register(DummySection("c")) is False

        assert reg.names() == ["a", "b"]
        assert reg.find("c") is None
        assert any("[c]" in r.getMessage() for r in caplog.records)

    def test_fill_to_default_capacity(self):
        reg = SectionRegistry()
        for i in range(MAX_CONFIG_HANDLERS + 5):
            reg.register(DummySection(f"s{i}"))
        assert len(reg) == MAX_CONFIG_HANDLERS


class TestLookupAndIteration:
    """Test find, for_each and reset."""

    def test_find_missing(self):
        reg = SectionRegistry()
        reg.register(DummySection("button"))
        assert reg.find("nope") is None
        assert reg.find("") is None
        assert reg.find(None) is None

    def test_find_is_case_sensitive(self):
        reg = SectionRegistry()
        reg.register(DummySection("button"))
        assert reg.find("Button") is None
        assert "button" in reg
        assert "Button" not in reg

    def test_for_each_visits_in_order_with_context(self):
        reg = SectionRegistry()
        for name in ("a", "b", "c"):
            reg.register(DummySection(name))
        seen = []
        reg.for_each(lambda h, ctx: ctx.append(h.name), seen)
        assert seen == ["a", "b", "c"]

    def test_for_each_without_visitor(self):
        reg = SectionRegistry()
        reg.register(DummySection("a"))
        reg.for_each(None)

    def test_reset(self):
        reg = SectionRegistry()
        reg.register(DummySection("a"))
        reg.reset()
        assert len(reg) == 0
        assert reg.register(DummySection("a")) is True


class TestDefaultRegistry:
    """Test the process-wide registry helpers."""

    def test_module_helpers(self):
        reset_registry()
        handler = DummySection("custom")
        assert register_section(handler) is True
        assert register_section(handler) is False
        assert find_section("custom") is handler
        assert get_registry().find("custom") is handler

        names = []
        for_each_section(lambda h, ctx: ctx.append(h.name), names)
        assert names == ["custom"]

        reset_registry()
        assert find_section("custom") is None

    def test_base_handler_is_abstract(self):
        handler = SectionHandler()
        with pytest.raises(NotImplementedError):
            handler.parse(None, "k", "v")
        with pytest.raises(NotImplementedError):
            handler.init_defaults(None)
