"""Tests for the name-based capability registry."""

import pytest

from pathroute.core.registry import CapabilityRegistry


class Widget:
    created = 0

    def __init__(self):
        Widget.created += 1


def test_classes_are_instantiated_on_each_resolve():
    registry = CapabilityRegistry("handler", {"Widget": Widget})
    first = registry.resolve("Widget")
    second = registry.resolve("Widget")
    assert isinstance(first, Widget)
    assert first is not second


def test_instances_are_returned_unchanged():
    widget = Widget()
    registry = CapabilityRegistry("handler")
    registry.register("shared", widget)
    assert registry.resolve("shared") is widget
    assert registry.get("shared") is widget


def test_factories_are_called_on_resolve():
    calls = []

    def factory():
        calls.append(1)
        return {"made": len(calls)}

    registry = CapabilityRegistry("gate")
    registry.register_factory("made", factory)
    assert registry.resolve("made") == {"made": 1}
    assert registry.resolve("made") == {"made": 2}


def test_factory_must_be_callable():
    with pytest.raises(TypeError):
        CapabilityRegistry("gate").register_factory("bad", 42)


def test_collision_requires_replace():
    registry = CapabilityRegistry("handler", {"Widget": Widget})
    with pytest.raises(ValueError, match="Handler name collision: Widget"):
        registry.register("Widget", object())
    replacement = object()
    registry.register("Widget", replacement, replace=True)
    assert registry.resolve("Widget") is replacement


def test_replace_factory_with_instance():
    registry = CapabilityRegistry("gate")
    registry.register_factory("g", lambda: "fresh")
    registry.register("g", "plain", replace=True)
    assert registry.resolve("g") == "plain"


def test_empty_names_rejected():
    registry = CapabilityRegistry("handler")
    with pytest.raises(ValueError):
        registry.register("", Widget)
    with pytest.raises(ValueError):
        registry.register("   ", Widget)


def test_unknown_name_raises_key_error():
    registry = CapabilityRegistry("validator")
    with pytest.raises(KeyError, match="Unknown validator 'nope'"):
        registry.resolve("nope")


def test_add_decorator_defaults_to_class_name():
    registry = CapabilityRegistry("handler")

    @registry.add()
    class Users:
        pass

    @registry.add("Orders")
    class OrdersController:
        pass

    assert registry.names() == ("Users", "Orders")
    assert "Users" in registry
    assert len(registry) == 2


def test_unregister_and_clear():
    registry = CapabilityRegistry("handler", {"a": Widget, "b": Widget})
    registry.unregister("a")
    registry.unregister("missing")
    assert registry.names() == ("b",)
    registry.clear()
    assert len(registry) == 0
