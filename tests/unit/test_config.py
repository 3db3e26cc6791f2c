"""Unit tests for configuration loading and environment overrides."""

import json
import os
from unittest.mock import patch

import pytest

from tracklife.config import AppConfig, ConfigManager, TrackLifeConfig


@pytest.fixture
def data_dir(tmp_path):
    """Point the user data directory at a temporary directory."""
    with patch.dict(os.environ, {"TRACKLIFE_USER_DATA_DIR": str(tmp_path)}):
        yield tmp_path


@pytest.mark.unit
class TestConfigDefaults:
    """Test default tracker goals and app settings."""

    def test_app_config_defaults(self):
        config = AppConfig()

        assert config.app_name == "TrackLife"
        assert config.water_daily_goal == 8.0
        assert config.workout_weekly_target == 5
        assert config.ideal_sleep_hours == 8.0
        assert config.enable_cors is True

    def test_default_database_lives_in_data_dir(self, data_dir):
        with patch.dict(os.environ, {"TRACKLIFE_DATABASE_URL": ""}):
            config = ConfigManager().create_default_config()

        assert config.storage.url == f"sqlite:///{data_dir / 'tracklife.db'}"
        assert config.app.user_data_dir == str(data_dir)

    def test_round_trip_through_dict(self):
        config = TrackLifeConfig.from_dict({"app": {"water_daily_goal": 10.0}, "server": {"port": 9000}})

        assert config.app.water_daily_goal == 10.0
        assert config.server.port == 9000
        assert TrackLifeConfig.from_dict(config.to_dict()) == config


@pytest.mark.unit
class TestEnvironmentOverrides:
    """Test that environment variables win over defaults and the config file."""

    def test_database_url_and_debug(self, data_dir):
        env = {"TRACKLIFE_DATABASE_URL": "sqlite:///:memory:", "TRACKLIFE_DEBUG": "1"}
        with patch.dict(os.environ, env):
            config = ConfigManager().create_default_config()

        assert config.storage.url == "sqlite:///:memory:"
        assert config.server.debug is True
        assert config.app.log_level == "DEBUG"

    def test_water_goal(self, data_dir):
        with patch.dict(os.environ, {"TRACKLIFE_WATER_GOAL": "10"}):
            config = ConfigManager().create_default_config()
        assert config.app.water_daily_goal == 10.0

    def test_invalid_water_goal_is_ignored(self, data_dir):
        with patch.dict(os.environ, {"TRACKLIFE_WATER_GOAL": "lots"}):
            env_info = ConfigManager().detect_environment()
        assert "water_daily_goal" not in env_info

    def test_environment_beats_config_file(self, data_dir):
        (data_dir / "config.json").write_text(
            json.dumps({"app": {"water_daily_goal": 6.0}, "storage": {"url": "sqlite:///other.db"}}),
            encoding="utf-8",
        )
        with patch.dict(os.environ, {"TRACKLIFE_DATABASE_URL": "sqlite:///:memory:"}):
            config = ConfigManager().load_config()

        assert config.app.water_daily_goal == 6.0
        assert config.storage.url == "sqlite:///:memory:"


@pytest.mark.unit
class TestConfigFile:
    """Test loading, saving and updating the config file."""

    def test_corrupt_file_falls_back_to_defaults(self, data_dir):
        (data_dir / "config.json").write_text("{not json", encoding="utf-8")

        config = ConfigManager().load_config()

        assert config.app.water_daily_goal == 8.0

    def test_update_config_persists(self, data_dir):
        manager = ConfigManager()
        manager.load_config()

        assert manager.update_config({"app.workout_weekly_target": 3}) is True

        saved = json.loads((data_dir / "config.json").read_text(encoding="utf-8"))
        assert saved["app"]["workout_weekly_target"] == 3
        assert ConfigManager().load_config().app.workout_weekly_target == 3


@pytest.mark.unit
class TestValidateConfig:
    def test_valid_config_has_no_issues(self, data_dir):
        manager = ConfigManager()
        manager.load_config()
        assert manager.validate_config() == []

    def test_non_positive_goals_are_reported(self, data_dir):
        manager = ConfigManager()
        manager.load_config()
        manager.config.app.water_daily_goal = 0
        manager.config.app.workout_weekly_target = -1

        issues = manager.validate_config()

        assert len(issues) == 2
        assert any("Water daily goal" in issue for issue in issues)
        assert any("Workout weekly target" in issue for issue in issues)
