"""Settings for relayon.

Hosts may tune process-wide defaults from the ``[tool.relayon]`` table of
their ``pyproject.toml``::

    [tool.relayon]
    default_max_listeners = 25

Typical usage::

    from relayon.config import apply_settings, load_settings

    apply_settings(load_settings(Path("pyproject.toml")))
"""

import tomllib
from pathlib import Path

from loguru import logger
from pydantic import Field

from relayon.base_emitter import BaseEmitter
from relayon.bindings import FrozenRecord
from relayon.emitter import EventEmitter
from relayon.exceptions import SettingsError

log = logger.bind(source=__name__)


class EmitterSettings(FrozenRecord):
    """Process-wide emitter defaults.

    Attributes:
        default_max_listeners: Advisory cap seeded into new emitters.

    Raises:
        EmitterValidationError: If a value fails validation.
    """

    default_max_listeners: int = Field(default=10, ge=0)


def load_settings(pyproject_path: Path) -> EmitterSettings:
    """Read ``[tool.relayon]`` from a ``pyproject.toml`` file.

    A file without the table yields default settings.

    Args:
        pyproject_path: Path to the ``pyproject.toml`` file.

    Returns:
        Validated settings.

    Raises:
        SettingsError: If the file cannot be read or is not valid TOML.
        EmitterValidationError: If the table holds invalid values.
    """
    try:
        with open(pyproject_path, "rb") as fh:
            config = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise SettingsError(f"Cannot read settings from {pyproject_path}") from exc

    relayon_config = config.get("tool", {}).get("relayon", {})
    if not relayon_config:
        log.info("No [tool.relayon] table in {}", pyproject_path)
    return EmitterSettings(**relayon_config)


def apply_settings(
    settings: EmitterSettings,
    emitter_cls: type[BaseEmitter] = EventEmitter,
) -> None:
    """Install *settings* as class-level defaults.

    Only emitters created afterwards pick up the new values.

    Args:
        settings: Settings to apply.
        emitter_cls: Emitter class whose defaults are changed.
    """
    emitter_cls.default_max_listeners = settings.default_max_listeners
    log.debug(
        "{}.default_max_listeners set to {}",
        emitter_cls.__qualname__,
        settings.default_max_listeners,
    )
