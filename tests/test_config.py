"""Tests für das Konfigurationssystem (Schema, Standardwerte, YAML-Datei)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import default_app_config, default_time_slots
from config.manager import ConfigManager
from config.schema import AppConfig, RankingConfig, RemoteConfig
from models import TimeSlotType


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_app_config_valid(self):
        """Standard-Konfiguration arbeitet lokal und mit Systemzeitzone."""
        config = default_app_config()
        assert config.school_name == "Muster-Gymnasium"
        assert config.timezone is None
        assert config.remote.enabled is False
        assert config.storage.data_file == "output/vertretung.json"
        assert config.ranking.overload_threshold == 3

    def test_default_time_slots(self):
        """Raster mit sechs Nummern, davon eine Pause."""
        slots = default_time_slots()
        assert [ts.period_number for ts in slots] == [1, 2, 3, 4, 5, 6]
        breaks = [ts for ts in slots if ts.type == TimeSlotType.BREAK]
        assert [ts.period_number for ts in breaks] == [4]
        assert slots[0].start_time == "08:00"


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_empty_timezone_is_system(self):
        assert AppConfig(timezone="  ").timezone is None
        assert AppConfig(timezone="Europe/Berlin").timezone == "Europe/Berlin"

    @pytest.mark.parametrize("name", ["Mars/Olympus", "../etc/passwd"])
    def test_unknown_timezone(self, name):
        with pytest.raises(ValidationError, match="Unbekannte Zeitzone"):
            AppConfig(timezone=name)

    def test_base_url_stripped(self):
        assert RemoteConfig(base_url=" https://example.org/exec ").base_url == \
            "https://example.org/exec"

    @pytest.mark.parametrize("timeout", [0, 500])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValidationError):
            RemoteConfig(timeout_seconds=timeout)

    def test_invalid_threshold(self):
        with pytest.raises(ValidationError):
            RankingConfig(overload_threshold=0)


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Gespeicherte Config lässt sich unverändert wieder laden."""
        config = default_app_config()
        config.remote.enabled = True
        config.remote.base_url = "https://example.org/exec"
        config.ranking.overload_threshold = 5

        mgr = ConfigManager(tmp_path / "vertretung_config.yaml")
        mgr.save(config)
        loaded = mgr.load()
        assert loaded == config

    def test_saved_file_has_comments(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "vertretung_config.yaml")
        mgr.save(default_app_config())
        text = mgr.path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "Vertretungssuche" in text
        assert "overload_threshold: 3" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        """Ohne Datei ist es ein Erstaufruf."""
        mgr = ConfigManager(tmp_path / "nonexistent.yaml")
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "vertretung_config.yaml")
        mgr.save(default_app_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("ranking:\n  overload_threshold: null\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager(path).load()

    def test_load_unknown_timezone_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "zone.yaml"
        path.write_text("timezone: Mars/Olympus\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Zeitzone"):
            ConfigManager(path).load()

    def test_load_or_default(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "fehlt.yaml")
        assert mgr.load_or_default() == default_app_config()

    def test_partial_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "teil.yaml"
        path.write_text("school_name: Gesamtschule Nord\n", encoding="utf-8")
        config = ConfigManager(path).load()
        assert config.school_name == "Gesamtschule Nord"
        assert config.ranking.overload_threshold == 3
