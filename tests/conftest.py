"""Shared test fixtures for all relayon tests."""

from typing import Any

import pytest

from relayon import EventEmitter


class Recorder:
    """Callable listener that records every call it receives."""

    def __init__(self, name: str = "rec", order: list[str] | None = None) -> None:
        self.name = name
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
        self._order = order

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.calls.append((args, kwargs))
        if self._order is not None:
            self._order.append(self.name)

    def __repr__(self) -> str:
        return f"Recorder({self.name!r})"


@pytest.fixture
def emitter() -> EventEmitter:
    """Fresh emitter for each test."""
    return EventEmitter()


@pytest.fixture
def order() -> list[str]:
    """Shared list that listeners append their names to."""
    return []
