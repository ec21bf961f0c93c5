"""Tests for settings loading from pyproject.toml."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from relayon import (
    EmitterSettings,
    EmitterValidationError,
    EventEmitter,
    SettingsError,
    apply_settings,
    load_settings,
)


def write_pyproject(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestLoadSettings:
    def test_reads_tool_table(self, tmp_path: Path):
        body = "[tool.relayon]\ndefault_max_listeners = 25\n"
        path = write_pyproject(tmp_path, body)
        assert load_settings(path) == EmitterSettings(default_max_listeners=25)

    def test_missing_table_gives_defaults(self, tmp_path: Path):
        path = write_pyproject(tmp_path, '[project]\nname = "host"\n')
        assert load_settings(path).default_max_listeners == 10

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SettingsError) as exc_info:
            load_settings(tmp_path / "nope.toml")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_invalid_toml(self, tmp_path: Path):
        path = write_pyproject(tmp_path, "[tool.relayon\n")
        with pytest.raises(SettingsError):
            load_settings(path)

    @pytest.mark.parametrize(
        "body",
        [
            "[tool.relayon]\ndefault_max_listeners = -1\n",
            '[tool.relayon]\ndefault_max_listeners = "ten"\n',
            "[tool.relayon]\nunknown_key = 1\n",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str):
        path = write_pyproject(tmp_path, body)
        with pytest.raises(EmitterValidationError):
            load_settings(path)


class TestApplySettings:
    def test_applies_to_new_instances_only(self):
        class Local(EventEmitter):
            pass

        existing = Local()
        apply_settings(EmitterSettings(default_max_listeners=3), Local)

        assert Local.default_max_listeners == 3
        assert Local().get_max_listeners() == 3
        assert existing.get_max_listeners() == 10
        assert EventEmitter.default_max_listeners == 10

    def test_settings_are_frozen(self):
        settings = EmitterSettings()
        with pytest.raises(ValidationError):
            settings.default_max_listeners = 1  # type: ignore[misc]
