"""
Tests for configuration, tank system profiles and wiring
"""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from fuel_runway.config import (
    AGBOT_PROFILE,
    DATABASE,
    FORECAST,
    SMARTFILL_PROFILE,
    TankSystemProfile,
    load_tank_systems,
)


class TestForecastConfig:

    def test_defaults(self):
        assert FORECAST.DEFAULT_WINDOW_DAYS == 7
        assert FORECAST.REFILL_THRESHOLD_PCT == 10.0
        assert FORECAST.MIN_READINGS == 3
        assert FORECAST.MAX_DAYS_REMAINING == 365.0

    def test_database_url_uses_pymysql(self):
        assert DATABASE.url.startswith("mysql+pymysql://")
        assert DATABASE.POOL_SIZE > 0


class TestTankSystemProfile:

    def test_rejects_unsafe_identifier(self):
        with pytest.raises(ValueError, match="Invalid identifier"):
            replace(SMARTFILL_PROFILE, readings_table="readings; DROP TABLE tanks")

    def test_builtin_profiles(self):
        assert SMARTFILL_PROFILE.refill_flag_column == "is_refill"
        assert AGBOT_PROFILE.refill_flag_column is None
        assert AGBOT_PROFILE.customer_column is None


class TestLoadTankSystems:

    def test_missing_file_uses_builtins(self, tmp_path):
        systems = load_tank_systems(tmp_path / "absent.yaml")

        assert systems == {"agbot": AGBOT_PROFILE, "smartfill": SMARTFILL_PROFILE}

    def test_override_builtin(self, tmp_path):
        path = tmp_path / "tank_systems.yaml"
        path.write_text("systems:\n  smartfill:\n    refill_threshold_pct: 15.0\n")

        systems = load_tank_systems(path)

        assert systems["smartfill"].refill_threshold_pct == 15.0
        assert systems["smartfill"].readings_table == SMARTFILL_PROFILE.readings_table
        assert systems["agbot"] == AGBOT_PROFILE

    def test_new_system(self, tmp_path):
        path = tmp_path / "tank_systems.yaml"
        path.write_text(
            "systems:\n"
            "  depot:\n"
            "    readings_table: depot_readings\n"
            "    reading_tank_column: tank_id\n"
            "    reading_time_column: measured_at\n"
            "    percent_column: pct\n"
            "    volume_column: litres\n"
            "    tanks_table: depot_tanks\n"
            "    tank_id_column: id\n"
            "    capacity_column: capacity\n"
            "    current_level_column: pct_now\n"
            "    consumption_column: burn_rate\n"
            "    days_remaining_column: runway_days\n"
        )

        systems = load_tank_systems(path)

        assert isinstance(systems["depot"], TankSystemProfile)
        assert systems["depot"].name == "depot"
        assert systems["depot"].refill_threshold_pct == 10.0

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("systems:\n  agbot:\n    refill_threshold_pct: 8.0\n")
        monkeypatch.setenv("RUNWAY_TANK_SYSTEMS", str(path))

        assert load_tank_systems()["agbot"].refill_threshold_pct == 8.0


class TestConfigHelper:

    def test_setup_architecture_wires_one_system(self, monkeypatch, tmp_path):
        from fuel_runway.config_helper import setup_architecture
        from fuel_runway.orchestrators import RecalculationOrchestrator
        from fuel_runway.services import ForecastService

        monkeypatch.setenv("RUNWAY_TANK_SYSTEMS", str(tmp_path / "absent.yaml"))
        engine = MagicMock()

        repos, services, orchestrator = setup_architecture("agbot", engine=engine)

        assert repos["tank"].profile is AGBOT_PROFILE
        assert repos["readings"].engine is engine
        assert isinstance(services["forecast"], ForecastService)
        assert isinstance(orchestrator, RecalculationOrchestrator)
        assert orchestrator.sink is repos["tank"]

    def test_unknown_system(self, monkeypatch, tmp_path):
        from fuel_runway.config_helper import get_tank_profile

        monkeypatch.setenv("RUNWAY_TANK_SYSTEMS", str(tmp_path / "absent.yaml"))

        with pytest.raises(KeyError, match="Unknown tank system"):
            get_tank_profile("nope")
