"""Base emitter: listener management and introspection shared by emitters."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar, Self, TypeVar

from loguru import logger
from pydantic import NonNegativeInt, TypeAdapter, ValidationError

from relayon._types import EventName, Listener
from relayon.bindings import ListenerBinding, MethodSubscription
from relayon.exceptions import EmitterValidationError
from relayon.registry import ListenerRegistry
from relayon.utils import append_to_tuple, callable_name

F = TypeVar("F", bound=Callable[..., Any])

log = logger.bind(source=__name__)

_MAX_LISTENERS = TypeAdapter(NonNegativeInt)
_ALL_EVENTS: Any = object()


class BaseEmitter(ABC):
    """Abstract base class for event emitters.

    Provides everything that does not dispatch:
    - Listener registration/unregistration
    - Registry introspection
    - The advisory max-listeners value

    Subclasses must implement:
    - emit() - Event dispatching logic
    """

    default_max_listeners: ClassVar[int] = 10
    """Process-wide default copied into each new instance. Advisory only."""

    _registry: ListenerRegistry  # Copy-on-write listener store
    _max_listeners: int

    def __init__(self) -> None:
        """Initialize emitter.

        Post:
            Registry empty; max listeners seeded from ``default_max_listeners``.
        """
        self._registry = ListenerRegistry()
        self._max_listeners = type(self).default_max_listeners

    # -- registration ---------------------------------------------------------

    def on(
        self,
        event_name: EventName,
        listener: Listener,
        context: Any = None,
        prepend: bool = False,
    ) -> Self:
        """Register a persistent listener.

        Args:
            event_name: Event to listen for.
            listener: Callable invoked on every emission.
            context: Receiver passed as the listener's first argument.
            prepend: Place before existing persistent listeners.

        Returns:
            This emitter, for chaining.

        Raises:
            EmitterValidationError: If listener is not callable.
        """
        self._add(event_name, listener, context, once=False, prepend=prepend)
        return self

    def once(
        self,
        event_name: EventName,
        listener: Listener,
        context: Any = None,
        prepend: bool = False,
    ) -> Self:
        """Register a one-shot listener, dropped on the next emission.

        Args:
            event_name: Event to listen for.
            listener: Callable invoked at most once.
            context: Receiver passed as the listener's first argument.
            prepend: Place before existing one-shot listeners.

        Returns:
            This emitter, for chaining.

        Raises:
            EmitterValidationError: If listener is not callable.
        """
        self._add(event_name, listener, context, once=True, prepend=prepend)
        return self

    def add_listener(
        self, event_name: EventName, listener: Listener, context: Any = None
    ) -> Self:
        return self.on(event_name, listener, context, False)

    def prepend_listener(
        self, event_name: EventName, listener: Listener, context: Any = None
    ) -> Self:
        return self.on(event_name, listener, context, True)

    def prepend_once_listener(
        self, event_name: EventName, listener: Listener, context: Any = None
    ) -> Self:
        return self.once(event_name, listener, context, True)

    def off(self, event_name: EventName, listener: Listener) -> Self:
        """Remove every binding of *listener* for *event_name*.

        Both persistent and one-shot bindings are removed, whatever context
        they were registered with. Unknown event names are a no-op.

        Returns:
            This emitter, for chaining.
        """
        self._registry.remove(event_name, listener)
        log.debug("Removed {} from {!r}", callable_name(listener), event_name)
        return self

    def remove_listener(self, event_name: EventName, listener: Listener) -> Self:
        return self.off(event_name, listener)

    def remove_all_listeners(self, event_name: EventName = _ALL_EVENTS) -> None:
        """Delete the entry for *event_name*, or every entry when omitted.

        ``None`` is an ordinary event name here, not a synonym for "all".
        """
        if event_name is _ALL_EVENTS:
            self._registry.clear()
            log.debug("Cleared all listeners")
        else:
            self._registry.delete(event_name)
            log.debug("Cleared listeners for {!r}", event_name)

    # -- decorators -----------------------------------------------------------

    def subscribe(
        self,
        event_name: EventName,
        *,
        once: bool = False,
        prepend: bool = False,
        context: Any = None,
    ) -> Callable[[F], F]:
        """Decorator to register a plain function as listener.

        Registers the callback immediately.  For class methods, use
        :meth:`on_method` instead so the bound method is registered at
        instantiation time via :class:`EmitterAware`.

        Args:
            event_name: Event to listen for.
            once: Register as one-shot listener.
            prepend: Place before existing listeners of the same kind.
            context: Receiver passed as the listener's first argument.

        Returns:
            Decorator function that returns the original function unchanged.
        """

        def decorator(func: F) -> F:
            self._add(event_name, func, context, once=once, prepend=prepend)
            return func

        return decorator

    def on_method(
        self,
        event_name: EventName,
        *,
        once: bool = False,
        prepend: bool = False,
    ) -> Callable[[F], F]:
        """Decorator to mark a class method for deferred registration.

        Does **not** register the callback. It appends a
        :class:`MethodSubscription` to the function's ``_relay_subscriptions``
        so that :class:`EmitterAware` can register the *bound* method when
        the owning class is instantiated. Stacking the decorator subscribes
        one method to several events.

        Must be used inside an :class:`EmitterAware` subclass.
        """
        subscription = MethodSubscription(
            emitter=self, event_name=event_name, once=once, prepend=prepend
        )

        def decorator(func: F) -> F:
            stamped = getattr(func, "_relay_subscriptions", ())
            stamped = append_to_tuple(stamped, subscription)
            func._relay_subscriptions = stamped  # type: ignore[attr-defined]
            return func

        return decorator

    # -- introspection --------------------------------------------------------

    def event_names(self) -> list[EventName]:
        """Registered event names, in mapping iteration order."""
        return self._registry.names()

    def listener_count(self, event_name: EventName) -> int:
        listener_set = self._registry.get(event_name)
        return 0 if listener_set is None else len(listener_set)

    def listeners(self, event_name: EventName) -> list[Listener]:
        """Registered callables for *event_name*: persistent first, then one-shot."""
        listener_set = self._registry.get(event_name)
        if listener_set is None:
            return []
        return [binding.listener for binding in listener_set.bindings()]

    def has_listeners(self, event_name: EventName) -> bool:
        """Whether *event_name* has a registry entry."""
        return event_name in self._registry

    def get_max_listeners(self) -> int:
        return self._max_listeners

    def set_max_listeners(self, value: int) -> Self:
        """Store the advisory listener cap. It is never enforced.

        Raises:
            EmitterValidationError: If value is not a non-negative int.
        """
        try:
            self._max_listeners = _MAX_LISTENERS.validate_python(value, strict=True)
        except ValidationError as exc:
            raise EmitterValidationError(str(exc)) from exc
        return self

    # -- dispatch -------------------------------------------------------------

    @abstractmethod
    def emit(self, event_name: EventName, /, *args: Any, **kwargs: Any) -> bool:
        """Dispatch an event to its listeners.

        Args:
            event_name: Event to dispatch.
            *args: Positional arguments for every listener.
            **kwargs: Keyword arguments for every listener.

        Returns:
            False if the event has no entry, else True.
        """
        raise NotImplementedError

    def _add(
        self,
        event_name: EventName,
        listener: Listener,
        context: Any,
        *,
        once: bool,
        prepend: bool,
    ) -> ListenerBinding:
        binding = ListenerBinding(listener=listener, context=context)
        self._registry.add(event_name, binding, once=once, prepend=prepend)
        log.debug(
            "Registered {} on {!r} (once={}, prepend={})",
            callable_name(listener),
            event_name,
            once,
            prepend,
        )
        return binding

    def _discard(self, event_name: EventName, binding: ListenerBinding) -> None:
        """Remove one binding returned by :meth:`_add`, and nothing else."""
        self._registry.discard(event_name, binding)
        log.debug(
            "Discarded binding of {} from {!r}",
            callable_name(binding.listener),
            event_name,
        )
