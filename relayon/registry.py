"""Registry for listener management.

This module provides ListenerRegistry, a copy-on-write store mapping event
names to immutable ListenerSet records.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from relayon._types import EventName
from relayon.bindings import ListenerBinding, ListenerSet
from relayon.utils import append_to_mapping, remove_key_from_mapping

_EMPTY_SET = ListenerSet()


class ListenerRegistry:
    """Registry table for event listeners.

    Holds one read-only mapping snapshot. Mutations never touch the current
    snapshot: they build a new mapping and swap the reference, so any
    snapshot (or ListenerSet) captured earlier keeps describing the state at
    capture time.

    A key exists only while its set holds at least one binding: a mutation
    that empties a set (``remove``, or ``take`` spending the last one-shot
    bindings of an event without persistent ones) deletes the key.
    """

    def __init__(self) -> None:
        """Initialize empty registry.

        Post:
            snapshot is an empty read-only mapping.
        """
        self._snapshot: Mapping[EventName, ListenerSet] = MappingProxyType({})

    @property
    def snapshot(self) -> Mapping[EventName, ListenerSet]:
        """Current registry version. Read-only and never mutated afterwards."""
        return self._snapshot

    def __contains__(self, event_name: EventName) -> bool:
        return event_name in self._snapshot

    def get(self, event_name: EventName) -> ListenerSet | None:
        """Return the listener set for *event_name*, or None if unknown."""
        return self._snapshot.get(event_name)

    def names(self) -> list[EventName]:
        """Registered event names in mapping iteration order."""
        return list(self._snapshot)

    def add(
        self,
        event_name: EventName,
        binding: ListenerBinding,
        *,
        once: bool = False,
        prepend: bool = False,
    ) -> None:
        """Register a binding for *event_name*.

        Args:
            event_name: Event to register for.
            binding: Listener binding to store.
            once: Store as one-shot binding.
            prepend: Store at the head of its list instead of the tail.

        Post:
            New snapshot published; entry created if absent.
        """
        current = self._snapshot.get(event_name, _EMPTY_SET)
        self._publish(event_name, current.added(binding, once=once, prepend=prepend))

    def remove(self, event_name: EventName, listener: Callable[..., Any]) -> None:
        """Remove every binding of *listener* for *event_name*.

        Unknown event names are ignored.

        Post:
            Both ``on`` and ``once`` lists no longer contain *listener*.
        """
        current = self._snapshot.get(event_name)
        if current is None:
            return
        self._publish(event_name, current.without(listener))

    def discard(self, event_name: EventName, binding: ListenerBinding) -> None:
        """Remove one exact *binding* object, leaving equal ones in place."""
        current = self._snapshot.get(event_name)
        if current is None:
            return
        self._publish(event_name, current.discarding(binding))

    def take(self, event_name: EventName) -> ListenerSet | None:
        """Capture the set for an emission and spend its one-shot bindings.

        The entry is replaced by ``{on: same, once: ()}`` (or deleted, when
        nothing persistent is left) before the caller invokes anything, so a
        listener re-registering a one-shot binding for the same event lands in
        the new entry and survives.

        Args:
            event_name: Event being emitted.

        Returns:
            The captured set (one-shot bindings included), or None if the
            event has no entry.
        """
        current = self._snapshot.get(event_name)
        if current is None:
            return None
        if current.once:
            self._publish(event_name, current.consumed())
        return current

    def delete(self, event_name: EventName) -> None:
        """Delete the entry for *event_name*. Unknown names are ignored."""
        self._snapshot = remove_key_from_mapping(self._snapshot, event_name)

    def clear(self) -> None:
        """Delete every entry."""
        self._snapshot = MappingProxyType({})

    def _publish(self, event_name: EventName, listener_set: ListenerSet) -> None:
        if len(listener_set) == 0:
            self._snapshot = remove_key_from_mapping(self._snapshot, event_name)
        else:
            self._snapshot = append_to_mapping(
                self._snapshot, {event_name: listener_set}
            )
