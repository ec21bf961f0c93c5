"""Shared type definitions for relayon.

All type aliases use PEP 695 ``type`` statement syntax.
"""

from collections.abc import Callable, Hashable
from typing import Any, TypeAlias

EventName: TypeAlias = Hashable
"""Key under which listeners are registered (usually a ``str``)."""

Listener: TypeAlias = Callable[..., Any]
"""Any callable accepted by ``on``/``once``; ``emit_async`` awaits awaitable results."""
