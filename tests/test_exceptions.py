"""Tests for relayon exception hierarchy.

Tests verify:
- Exception inheritance relationships
- Validation errors chain the pydantic error
"""

import pytest
from pydantic import ValidationError

from relayon import EmitterValidationError, EventEmitter, RelayonError, SettingsError


class TestExceptionHierarchy:
    def test_relayon_error_is_base_exception(self):
        assert issubclass(RelayonError, Exception)

    def test_emitter_validation_error_inheritance(self):
        """EmitterValidationError inherits from RelayonError and ValueError."""
        assert issubclass(EmitterValidationError, RelayonError)
        assert issubclass(EmitterValidationError, ValueError)

    def test_settings_error_inheritance(self):
        assert issubclass(SettingsError, RelayonError)


class TestExceptionRaising:
    def test_validation_error_chains_pydantic_error(self):
        with pytest.raises(EmitterValidationError) as exc_info:
            EventEmitter().on("evt", None)  # type: ignore[arg-type]
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_catch_all_with_base_class(self):
        with pytest.raises(RelayonError):
            EventEmitter().set_max_listeners(-5)
