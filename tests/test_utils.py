"""Tests for copy-on-write collection helpers."""

from types import MappingProxyType

import pytest

from relayon.utils import (
    append_to_mapping,
    append_to_tuple,
    callable_name,
    merge_tuples,
    prepend_to_tuple,
    remove_key_from_mapping,
)


class TestTupleHelpers:
    def test_append_and_prepend_leave_source_untouched(self):
        """append/prepend build new tuples, source keeps its value."""
        source = (1, 2)
        assert append_to_tuple(source, 3) == (1, 2, 3)
        assert prepend_to_tuple(source, 0) == (0, 1, 2)
        assert source == (1, 2)

    def test_merge_keeps_order(self):
        """merge_tuples concatenates first then second."""
        assert merge_tuples(("a",), ("b", "c")) == ("a", "b", "c")
        assert merge_tuples((), ()) == ()


class TestMappingHelpers:
    def test_append_to_mapping_returns_read_only_copy(self):
        """append_to_mapping merges without mutating and result is read-only."""
        source = {"a": 1}
        merged = append_to_mapping(source, {"b": 2, "a": 10})

        assert merged == {"a": 10, "b": 2}
        assert list(merged) == ["a", "b"]
        assert source == {"a": 1}
        assert isinstance(merged, MappingProxyType)
        with pytest.raises(TypeError):
            merged["c"] = 3  # type: ignore[index]

    def test_remove_key(self):
        """remove_key_from_mapping drops the key; missing key is harmless."""
        source = MappingProxyType({"a": 1, "b": 2})
        assert remove_key_from_mapping(source, "a") == {"b": 2}
        assert remove_key_from_mapping(source, "zzz") == {"a": 1, "b": 2}
        assert source == {"a": 1, "b": 2}


class TestCallableName:
    def test_function_uses_qualname(self):
        def handler() -> None: ...

        assert callable_name(handler).endswith("handler")

    def test_instance_without_name_falls_back_to_repr(self):
        class Handler:
            def __call__(self) -> None: ...

            def __repr__(self) -> str:
                return "<handler>"

        assert callable_name(Handler()) == "<handler>"
