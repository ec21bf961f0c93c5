"""Binding model for relayon.

This module provides the frozen records the registry and the suspension
queue are built from: ``ListenerBinding``, ``ListenerSet`` and
``QueuedEmission``, plus ``MethodSubscription`` for deferred method
registration.
"""

from collections.abc import Callable, Hashable
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from relayon.exceptions import EmitterValidationError
from relayon.utils import append_to_tuple, merge_tuples, prepend_to_tuple


class FrozenRecord(BaseModel):
    """Immutable base record. Wraps pydantic validation into relayon errors."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", strict=True, arbitrary_types_allowed=True
    )

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EmitterValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EmitterValidationError(str(exc)) from exc


class ListenerBinding(FrozenRecord):
    """A listener paired with an optional receiver.

    Example:
        >>> binding = ListenerBinding(listener=print, context=None)
        >>> binding.invoke(("hello",), {})
        hello

    Attributes:
        listener: Callable invoked on emission.
        context: Receiver passed as the first positional argument, or None
            to call the listener with the emitted arguments only.

    Raises:
        EmitterValidationError: If listener is not callable.
    """

    listener: Callable[..., Any]
    context: Any = None

    def invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Call the listener, binding ``context`` like a method receiver."""
        if self.context is None:
            return self.listener(*args, **kwargs)
        return self.listener(self.context, *args, **kwargs)

    def matches(self, listener: Callable[..., Any]) -> bool:
        """Removal identity: the listener only, never the context."""
        return self.listener == listener


class ListenerSet(FrozenRecord):
    """Per-event pair of ordered binding tuples.

    Instances are never changed; every operation returns a new set so that a
    snapshot captured by an in-flight emission is unaffected by listeners
    registering or removing bindings while it runs.

    Attributes:
        on: Persistent bindings, fired on every emission.
        once: One-shot bindings, dropped as soon as an emission captures them.
    """

    on: tuple[ListenerBinding, ...] = ()
    once: tuple[ListenerBinding, ...] = ()

    def __len__(self) -> int:
        return len(self.on) + len(self.once)

    def added(self, binding: ListenerBinding, *, once: bool, prepend: bool) -> Self:
        """Return a copy with *binding* placed at the head or tail of a list.

        Args:
            binding: Binding to insert.
            once: Insert into ``once`` instead of ``on``.
            prepend: Insert at the head instead of the tail.

        Returns:
            New ListenerSet.
        """
        field = "once" if once else "on"
        place = prepend_to_tuple if prepend else append_to_tuple
        return self.model_copy(update={field: place(getattr(self, field), binding)})

    def without(self, listener: Callable[..., Any]) -> Self:
        """Return a copy with every binding of *listener* removed from both lists."""
        return self.model_copy(
            update={
                "on": tuple(b for b in self.on if not b.matches(listener)),
                "once": tuple(b for b in self.once if not b.matches(listener)),
            }
        )

    def discarding(self, binding: ListenerBinding) -> Self:
        """Return a copy without this exact *binding* object.

        Unlike :meth:`without`, equal bindings registered separately stay.
        """
        return self.model_copy(
            update={
                "on": tuple(b for b in self.on if b is not binding),
                "once": tuple(b for b in self.once if b is not binding),
            }
        )

    def consumed(self) -> Self:
        """Return a copy whose one-shot bindings have been spent."""
        return self.model_copy(update={"once": ()})

    def bindings(self) -> tuple[ListenerBinding, ...]:
        """All bindings in invocation order: ``on`` first, then ``once``."""
        return merge_tuples(self.on, self.once)


class MethodSubscription(FrozenRecord):
    """Deferred registration stamped on a method by ``on_method``.

    Attributes:
        emitter: Emitter the bound method will be registered on.
        event_name: Event to listen for.
        once: Register as one-shot listener.
        prepend: Place before existing listeners of the same kind.
    """

    emitter: Any
    event_name: Hashable
    once: bool = False
    prepend: bool = False


class QueuedEmission(FrozenRecord):
    """An emission requested while the emitter was paused.

    Attributes:
        is_async: Replay through ``emit_async`` instead of ``emit``.
        event_name: Event to emit.
        args: Positional arguments, captured verbatim.
        kwargs: Keyword arguments, captured verbatim.
    """

    is_async: bool
    event_name: Hashable
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = Field(default_factory=dict)
