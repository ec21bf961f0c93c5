"""Exception hierarchy for relayon.

All custom exceptions inherit from RelayonError base class.
"""


class RelayonError(Exception):
    """Base exception for all relayon errors.

    All custom exceptions raised by relayon inherit from this class,
    allowing users to catch all emitter-specific errors with a single except clause.
    """


class EmitterValidationError(RelayonError, ValueError):
    """Emitter input validation failed.

    Raised when:
    - A listener passed to ``on``/``once`` is not callable
    - ``set_max_listeners`` receives a negative or non-integer value
    - Settings loaded from ``pyproject.toml`` fail validation

    This wraps pydantic.ValidationError to provide a relayon-specific exception type.
    """


class SettingsError(RelayonError):
    """Settings file could not be read.

    Raised when the ``pyproject.toml`` handed to ``load_settings`` is missing
    or is not valid TOML. The original exception is chained via ``__cause__``.
    """
