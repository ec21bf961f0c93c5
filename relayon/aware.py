"""Objects whose methods listen on emitters for as long as the object wants.

A class deriving from ``EmitterAware`` declares its listeners with
``@emitter.on_method(...)``. The declarations are resolved once per class,
when the class is created; each instance then registers its bound methods
after ``__init__`` and can withdraw exactly those registrations later.
"""

from collections.abc import Mapping
from types import MappingProxyType, TracebackType
from typing import Any, Self, TypeAlias

from loguru import logger

from relayon._types import EventName
from relayon.bindings import ListenerBinding, MethodSubscription

log = logger.bind(source=__name__)

SubscriptionTable: TypeAlias = Mapping[str, tuple[MethodSubscription, ...]]


def _subscriptions_of(attr: Any) -> tuple[MethodSubscription, ...]:
    if isinstance(attr, (staticmethod, classmethod)):
        attr = attr.__func__
    return getattr(attr, "_relay_subscriptions", ())


class EmitterAwareMeta(type):
    """Resolves method subscriptions at class creation, attaches after init."""

    _relay_table: SubscriptionTable

    def __init__(
        cls, name: str, bases: tuple[type, ...], namespace: dict[str, Any]
    ) -> None:
        super().__init__(name, bases, namespace)
        table: dict[str, tuple[MethodSubscription, ...]] = {}
        for base in reversed(bases):
            table.update(getattr(base, "_relay_table", {}))
        for attr_name, attr in namespace.items():
            # A redefinition replaces the inherited subscriptions, even if bare
            table.pop(attr_name, None)
            if subscriptions := _subscriptions_of(attr):
                table[attr_name] = subscriptions
        cls._relay_table = MappingProxyType(table)

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        instance = super().__call__(*args, **kwargs)
        instance.attach()
        return instance


class EmitterAware(metaclass=EmitterAwareMeta):
    """Mixin registering ``@emitter.on_method()`` methods per instance.

    Registration happens after ``__init__`` returns, whether or not the
    subclass calls ``super().__init__()``. Each registration is remembered
    as the exact binding it created, so ``unregister()`` leaves alone any other
    binding of the same bound method, including ones added by hand.

    Used as a context manager, the listeners live for the ``with`` block::

        class Thermostat(EmitterAware):
            @emitter.on_method("temperature")
            @emitter.on_method("humidity")
            def record(self, value: float) -> None:
                self.last = value

        with Thermostat() as t:
            emitter.emit("temperature", 21.5)

    Static and class methods work when ``@staticmethod``/``@classmethod``
    is the outer decorator.
    """

    _relay_table: SubscriptionTable
    _relay_bindings: list[tuple[Any, EventName, ListenerBinding]]

    def attach(self) -> None:
        """Register this instance's declared listeners.

        Called automatically after ``__init__``. Calling it again while
        attached is a no-op.
        """
        if getattr(self, "_relay_bindings", None):
            return
        self._relay_bindings = []
        for attr_name, subscriptions in self._relay_table.items():
            listener = getattr(self, attr_name)
            for sub in subscriptions:
                binding = sub.emitter._add(
                    sub.event_name, listener, None, once=sub.once, prepend=sub.prepend
                )
                self._relay_bindings.append((sub.emitter, sub.event_name, binding))
        if self._relay_bindings:
            log.debug(
                "Attached {} listener(s) of {}",
                len(self._relay_bindings),
                type(self).__qualname__,
            )

    def unregister(self) -> None:
        """Withdraw the bindings ``attach`` created. Safe to call repeatedly."""
        bindings, self._relay_bindings = self._relay_bindings, []
        for emitter, event_name, binding in bindings:
            emitter._discard(event_name, binding)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.unregister()
