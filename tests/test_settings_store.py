"""Tests for settings loading and environment configuration."""

import json

import pytest

from rollcall.config import Config
from rollcall.enums import ConsensusMethod, RollMode
from rollcall.settings import DEFAULT_SETTINGS, RollSettings, SettingsStore, get_settings_store


def _write(path, payload):
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Tests: RollSettings
# ---------------------------------------------------------------------------

class TestRollSettings:
    def test_defaults(self):
        settings = RollSettings()
        assert settings.public_rolls_enabled is False
        assert settings.consensus_method is ConsensusMethod.STANDARD
        assert settings.default_roll_mode is RollMode.PUBLIC
        assert settings.skip_dialogs is False

    @pytest.mark.parametrize("mode", [0, 5])
    def test_mode_out_of_range(self, mode):
        with pytest.raises(ValueError):
            RollSettings(group_roll_result_mode=mode)

    def test_frozen(self):
        with pytest.raises(ValueError):
            RollSettings().public_rolls_enabled = True


# ---------------------------------------------------------------------------
# Tests: SettingsStore
# ---------------------------------------------------------------------------

class TestSettingsStore:
    def test_no_path_gives_defaults(self):
        assert SettingsStore().load() is DEFAULT_SETTINGS

    def test_missing_file_gives_defaults(self, tmp_path):
        assert SettingsStore(tmp_path / "nope.json").load() is DEFAULT_SETTINGS

    def test_loads_file(self, tmp_path):
        path = _write(tmp_path / "s.json", {"public_rolls_enabled": True, "group_roll_result_mode": 4})
        settings = SettingsStore(path).load()
        assert settings.public_rolls_enabled is True
        assert settings.consensus_method is ConsensusMethod.WEAKEST_LINK

    def test_invalid_field_replaced_by_default(self, tmp_path, caplog):
        path = _write(tmp_path / "s.json", {"group_roll_result_mode": 7, "skip_dialogs": True})
        settings = SettingsStore(path).load()
        assert settings.group_roll_result_mode == 1
        assert settings.skip_dialogs is True
        assert "group_roll_result_mode" in caplog.text

    def test_broken_json(self, tmp_path, caplog):
        path = _write(tmp_path / "s.json", "{not json")
        assert SettingsStore(path).load() is DEFAULT_SETTINGS
        assert "Could not load settings" in caplog.text

    def test_non_object_document(self, tmp_path):
        path = _write(tmp_path / "s.json", [1, 2])
        assert SettingsStore(path).load() is DEFAULT_SETTINGS

    def test_cached_until_reload(self, tmp_path):
        path = _write(tmp_path / "s.json", {"skip_dialogs": True})
        store = SettingsStore(path)
        first = store.load()
        _write(path, {"skip_dialogs": False})
        assert store.load() is first
        assert store.reload().skip_dialogs is False


class TestGlobalStore:
    def test_singleton(self, tmp_path):
        path = _write(tmp_path / "s.json", {})
        assert get_settings_store(path) is get_settings_store()

    def test_falls_back_to_env_path(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "s.json", {"group_roll_result_mode": 2})
        monkeypatch.setattr(Config, "SETTINGS_PATH", str(path))
        assert get_settings_store().path == path
        assert get_settings_store().load().consensus_method is ConsensusMethod.GROUP_AVERAGE


# ---------------------------------------------------------------------------
# Tests: Config
# ---------------------------------------------------------------------------

class TestConfig:
    def test_debug_forces_debug_level(self, monkeypatch):
        monkeypatch.setattr(Config, "DEBUG", True)
        monkeypatch.setattr(Config, "LOG_LEVEL", "WARNING")
        assert Config.get_log_level() == "DEBUG"

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setattr(Config, "DEBUG", False)
        monkeypatch.setattr(Config, "LOG_LEVEL", "warning")
        assert Config.get_log_level() == "WARNING"

    def test_validate_reports_issues(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Config, "LOG_LEVEL", "LOUD")
        monkeypatch.setattr(Config, "SETTINGS_PATH", str(tmp_path / "missing.json"))
        issues = Config.validate()
        assert len(issues) == 2

    def test_validate_clean(self, monkeypatch):
        monkeypatch.setattr(Config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(Config, "SETTINGS_PATH", "")
        assert Config.validate() == []
        assert Config.get_settings_path() is None
