"""Tests for emitter introspection and the advisory listener cap."""

import pytest
from conftest import Recorder

from relayon import BaseEmitter, EmitterValidationError, EventEmitter


class TestEventNames:
    def test_follows_registration_order(self, emitter: EventEmitter):
        emitter.on("b", Recorder()).on("a", Recorder()).once("c", Recorder())
        assert emitter.event_names() == ["b", "a", "c"]

    def test_removed_name_disappears(self, emitter: EventEmitter):
        """Registering a then b then removing a reports only b."""
        emitter.on("a", Recorder()).on("b", Recorder())
        emitter.remove_all_listeners("a")
        assert emitter.event_names() == ["b"]

    def test_returns_copy(self, emitter: EventEmitter):
        emitter.on("a", Recorder())
        names = emitter.event_names()
        names.append("mutated")
        assert emitter.event_names() == ["a"]


class TestListenerQueries:
    def test_listener_count(self, emitter: EventEmitter):
        assert emitter.listener_count("evt") == 0
        emitter.on("evt", Recorder()).once("evt", Recorder()).once("evt", Recorder())
        assert emitter.listener_count("evt") == 3

    def test_listeners_strips_context(self, emitter: EventEmitter):
        """listeners() reports callables only, persistent ones first."""
        a, b = Recorder("a"), Recorder("b")
        emitter.once("evt", a, context="ctx")
        emitter.on("evt", b, context="ctx")
        assert emitter.listeners("evt") == [b, a]

    def test_listeners_unknown(self, emitter: EventEmitter):
        assert emitter.listeners("missing") == []

    def test_has_listeners(self, emitter: EventEmitter):
        assert emitter.has_listeners("evt") is False
        emitter.once("evt", Recorder())
        assert emitter.has_listeners("evt") is True
        emitter.emit("evt")
        assert emitter.has_listeners("evt") is False


class TestMaxListeners:
    def test_seeded_from_class_default(self):
        assert EventEmitter.default_max_listeners == 10
        assert EventEmitter().get_max_listeners() == 10

    def test_subclass_default(self):
        class Roomy(EventEmitter):
            default_max_listeners = 50

        assert Roomy().get_max_listeners() == 50
        assert EventEmitter().get_max_listeners() == 10

    def test_set_is_advisory(self, emitter: EventEmitter):
        """The cap is stored only; registering past it is allowed."""
        assert emitter.set_max_listeners(1) is emitter
        assert emitter.get_max_listeners() == 1
        emitter.on("evt", Recorder()).on("evt", Recorder()).on("evt", Recorder())
        assert emitter.listener_count("evt") == 3

    def test_set_does_not_touch_other_instances(self, emitter: EventEmitter):
        emitter.set_max_listeners(3)
        assert EventEmitter().get_max_listeners() == 10

    @pytest.mark.parametrize("value", [-1, 2.5, "7", True])
    def test_set_rejects_invalid(self, emitter: EventEmitter, value):
        with pytest.raises(EmitterValidationError):
            emitter.set_max_listeners(value)
        assert emitter.get_max_listeners() == 10


class TestBaseEmitter:
    def test_cannot_instantiate_abstract_base(self):
        with pytest.raises(TypeError):
            BaseEmitter()  # type: ignore[abstract]
