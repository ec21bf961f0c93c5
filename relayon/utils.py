"""Copy-on-write collection helpers.

None of these functions mutate their inputs: each returns a new tuple or a
new read-only mapping, so a snapshot handed out earlier stays valid while
the registry moves on.
"""

from collections.abc import Hashable, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object.

    Returns:
        Display name string.
    """
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


# ---------------------------------------------------------------------------
# Sequence helpers
# ---------------------------------------------------------------------------


def append_to_tuple(items: tuple[T, ...], item: T) -> tuple[T, ...]:
    """Return a new tuple with *item* after every element of *items*."""
    return (*items, item)


def prepend_to_tuple(items: tuple[T, ...], item: T) -> tuple[T, ...]:
    """Return a new tuple with *item* before every element of *items*."""
    return (item, *items)


def merge_tuples(first: tuple[T, ...], second: tuple[T, ...]) -> tuple[T, ...]:
    """Return the concatenation of *first* and *second*."""
    return (*first, *second)


# ---------------------------------------------------------------------------
# Mapping helpers
# ---------------------------------------------------------------------------


def append_to_mapping(
    mapping: Mapping[K, V], patch: Mapping[K, V]
) -> Mapping[K, V]:
    """Shallow-merge *patch* over *mapping*.

    Keys already present keep their position; new keys are added at the
    end, following ``dict`` insertion order.

    Args:
        mapping: Source mapping (left untouched).
        patch: Entries to add or replace.

    Returns:
        New read-only mapping.
    """
    return MappingProxyType({**mapping, **patch})


def remove_key_from_mapping(
    mapping: Mapping[K, V], key: K
) -> Mapping[K, V]:
    """Return a read-only copy of *mapping* without *key*.

    A missing *key* is not an error; the copy simply equals the source.
    """
    remaining = dict(mapping)
    remaining.pop(key, None)
    return MappingProxyType(remaining)
