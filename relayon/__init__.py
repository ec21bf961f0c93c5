"""relayon - Named-event emitter for in-process notification.

This package provides an event emitter with synchronous and asynchronous
dispatch, one-shot listeners, prepend ordering and a pause/resume gate.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all relayon logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("relayon")
logger.disable("relayon")

from relayon.aware import EmitterAware
from relayon.base_emitter import BaseEmitter
from relayon.bindings import (
    ListenerBinding,
    ListenerSet,
    MethodSubscription,
    QueuedEmission,
)
from relayon.config import EmitterSettings, apply_settings, load_settings
from relayon.emitter import EventEmitter
from relayon.exceptions import EmitterValidationError, RelayonError, SettingsError

# Module-level default emitter instance
default_emitter = EventEmitter()

__all__ = [
    # Version
    "__version__",
    # Emitter classes
    "BaseEmitter",
    "EventEmitter",
    "EmitterAware",
    "default_emitter",
    # Records
    "ListenerBinding",
    "ListenerSet",
    "MethodSubscription",
    "QueuedEmission",
    # Settings
    "EmitterSettings",
    "load_settings",
    "apply_settings",
    # Exception classes
    "RelayonError",
    "EmitterValidationError",
    "SettingsError",
]
