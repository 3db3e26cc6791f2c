"""
Configuration management for TrackLife

Handles auto-configuration with sensible defaults and environment detection.
Configuration lives in a JSON file inside the user data directory; a few
values can be overridden from the environment.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict, field
import logging

DEFAULT_DATABASE_FILENAME = "tracklife.db"


@dataclass
class StorageConfig:
    """Persistent storage configuration."""

    url: str = f"sqlite:///{DEFAULT_DATABASE_FILENAME}"
    echo: bool = False
    log_queries: bool = False  # Enable query logging for performance analysis


@dataclass
class ServerConfig:
    """Status API server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    auto_reload: bool = False


@dataclass
class AppConfig:
    """Main application configuration."""

    app_name: str = "TrackLife"
    description: str = "Personal self-tracking for sleep, period, workouts, habits, budget, mood and water"

    user_data_dir: Optional[str] = None

    # Tracker goals used by the aggregations
    water_daily_goal: float = 8.0  # glasses per day
    workout_weekly_target: int = 5  # workouts per week for a full fitness score
    ideal_sleep_hours: float = 8.0

    enable_cors: bool = True
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://127.0.0.1:5000", "http://localhost:5000"]
    )

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"  # Relative paths resolve inside user_data_dir


@dataclass
class TrackLifeConfig:
    """Complete configuration for TrackLife."""

    app: AppConfig
    server: ServerConfig
    storage: StorageConfig

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "app": asdict(self.app),
            "server": asdict(self.server),
            "storage": asdict(self.storage),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackLifeConfig":
        """Create from dictionary."""
        return cls(
            app=AppConfig(**data.get("app", {})),
            server=ServerConfig(**data.get("server", {})),
            storage=StorageConfig(**data.get("storage", {})),
        )


class ConfigManager:
    """Manages configuration loading, saving, and auto-detection."""

    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[TrackLifeConfig] = None

    def detect_environment(self) -> Dict[str, Any]:
        """Detect the current environment and return environment info."""
        env_info = {}

        env_info["user_data_dir"] = os.getenv("TRACKLIFE_USER_DATA_DIR")
        env_info["database_url"] = os.getenv("TRACKLIFE_DATABASE_URL")
        env_info["debug"] = bool(os.getenv("TRACKLIFE_DEBUG", "0") == "1")
        env_info["log_to_file"] = os.getenv("TRACKLIFE_LOG_TO_FILE", "1") != "0"

        water_goal = os.getenv("TRACKLIFE_WATER_GOAL")
        if water_goal:
            try:
                env_info["water_daily_goal"] = float(water_goal)
            except ValueError:
                logging.warning(f"Ignoring invalid TRACKLIFE_WATER_GOAL value: {water_goal!r}")

        return env_info

    def get_user_data_dir(self) -> Path:
        """Get the directory holding the config file, database and logs."""
        user_data_dir = os.getenv("TRACKLIFE_USER_DATA_DIR")
        if user_data_dir:
            data_dir = Path(user_data_dir)
        else:
            data_dir = Path.home() / ".tracklife"

        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_config_file_path(self) -> Path:
        """Get the path for the config file."""
        return self.get_user_data_dir() / "config.json"

    def create_default_config(self) -> TrackLifeConfig:
        """Create default configuration with auto-detected values."""
        env_info = self.detect_environment()
        data_dir = self.get_user_data_dir()

        db_url = env_info.get("database_url") or f"sqlite:///{data_dir / DEFAULT_DATABASE_FILENAME}"

        config = TrackLifeConfig(
            app=AppConfig(
                user_data_dir=str(data_dir),
                log_level="DEBUG" if env_info["debug"] else "INFO",
                log_to_file=env_info["log_to_file"],
            ),
            server=ServerConfig(debug=env_info["debug"]),
            storage=StorageConfig(url=db_url),
        )
        self._apply_environment(config, env_info)
        return config

    def _apply_environment(self, config: TrackLifeConfig, env_info: Dict[str, Any]) -> None:
        """Apply environment overrides that always win over the config file."""
        if env_info.get("user_data_dir"):
            config.app.user_data_dir = env_info["user_data_dir"]
        if env_info.get("database_url"):
            config.storage.url = env_info["database_url"]
        if env_info.get("water_daily_goal") is not None:
            config.app.water_daily_goal = env_info["water_daily_goal"]
        if env_info["debug"]:
            config.server.debug = True
            config.app.log_level = "DEBUG"
        if not env_info["log_to_file"]:
            config.app.log_to_file = False

    def load_config(self) -> TrackLifeConfig:
        """Load configuration from file or create default."""
        self.config_file = self.get_config_file_path()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                config = TrackLifeConfig.from_dict(data)
                self._apply_environment(config, self.detect_environment())
                self.config = config
                logging.info(f"Loaded configuration from {self.config_file}")

            except Exception as e:
                logging.warning(f"Failed to load config from {self.config_file}: {e}")
                logging.info("Creating default configuration")
                self.config = self.create_default_config()
        else:
            logging.info("No config file found, creating default configuration")
            self.config = self.create_default_config()

        return self.config

    def save_config(self, config: Optional[TrackLifeConfig] = None) -> bool:
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            logging.error("No configuration to save")
            return False

        try:
            if self.config_file is None:
                self.config_file = self.get_config_file_path()

            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)

            logging.info(f"Saved configuration to {self.config_file}")
            return True

        except Exception as e:
            logging.error(f"Failed to save config to {self.config_file}: {e}")
            return False

    def update_config(self, updates: Dict[str, Any]) -> bool:
        """Update configuration with new values.

        Keys may be nested with a dot, e.g. ``"app.water_daily_goal"``.
        """
        if self.config is None:
            self.load_config()

        try:
            config_dict = self.config.to_dict()

            for key, value in updates.items():
                if "." in key:
                    section, field_name = key.split(".", 1)
                    if section in config_dict:
                        config_dict[section][field_name] = value
                else:
                    if key in config_dict and isinstance(value, dict):
                        config_dict[key].update(value)

            self.config = TrackLifeConfig.from_dict(config_dict)
            return self.save_config()

        except Exception as e:
            logging.error(f"Failed to update configuration: {e}")
            return False

    def get_log_directory(self) -> Path:
        """Get the log directory, resolved against the user data directory."""
        if self.config is None:
            self.load_config()
        log_dir = Path(self.config.app.log_dir)
        if not log_dir.is_absolute() and self.config.app.user_data_dir:
            log_dir = Path(self.config.app.user_data_dir) / log_dir
        return log_dir

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        if self.config is None:
            self.load_config()

        issues = []

        if self.config.app.water_daily_goal <= 0:
            issues.append(f"Water daily goal must be positive: {self.config.app.water_daily_goal}")
        if self.config.app.workout_weekly_target <= 0:
            issues.append(
                f"Workout weekly target must be positive: {self.config.app.workout_weekly_target}"
            )

        db_url = self.config.storage.url
        if db_url.startswith("sqlite:///") and db_url != "sqlite:///:memory:":
            db_path = Path(db_url.replace("sqlite:///", ""))
            db_dir = db_path.parent
            if not db_dir.exists():
                try:
                    db_dir.mkdir(parents=True, exist_ok=True)
                except Exception as e:
                    issues.append(f"Cannot create database directory: {e}")
            elif not os.access(db_dir, os.W_OK):
                issues.append(f"Database directory is not writable: {db_dir}")

        return issues


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> TrackLifeConfig:
    """Get the current configuration, loading it on first use."""
    if config_manager.config is None:
        return config_manager.load_config()
    return config_manager.config
