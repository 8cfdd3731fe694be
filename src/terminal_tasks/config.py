"""Configuration management for terminal-tasks."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

from terminal_tasks.utils.logger import get_logger

_MISSING = object()


class StorageConfig(BaseModel):
    """Storage configuration."""

    db_path: Optional[str] = Field(default=None)


class UIConfig(BaseModel):
    """Terminal UI configuration."""

    poll_interval_ms: int = Field(default=50, ge=10, le=1000)
    status_ttl_seconds: float = Field(default=3.0, gt=0)
    notifications: bool = Field(default=True)


class PomodoroStepConfig(BaseModel):
    """How far the duration keys move the Pomodoro durations."""

    work_step_minutes: int = Field(default=5, ge=1)
    break_step_minutes: int = Field(default=1, ge=1)


class DaemonConfig(BaseModel):
    """Reminder daemon configuration."""

    interval_seconds: int = Field(default=60, ge=5)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")


class AppConfig(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    pomodoro: PomodoroStepConfig = Field(default_factory=PomodoroStepConfig)
    daemon: DaemonConfig = Field(default_factory=DaemonConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Loads and saves the JSON configuration file."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path(user_config_dir("terminal_tasks"))
        self.config_file = self.config_dir / "config.json"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from file, falling back to defaults."""
        if not self.config_file.exists():
            return AppConfig()
        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = json.load(f)
            return AppConfig(**data)
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            get_logger().warning(
                "ignoring unreadable config %s: %s", self.config_file, e
            )
            return AppConfig()

    def save_config(self, config: Optional[AppConfig] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not name a configuration field
            pydantic.ValidationError: If the value is rejected
        """
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise KeyError(key)
            current = current[k]
        if keys[-1] not in current:
            raise KeyError(key)
        current[keys[-1]] = value

        self._config = AppConfig(**config_dict)
        self.save_config()

    def reset(self, key: Optional[str] = None) -> None:
        """Reset configuration (or a single key) to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value = ConfigManager._lookup(AppConfig(), key)
        if default_value is _MISSING:
            raise KeyError(key)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)

    @staticmethod
    def _lookup(config: AppConfig, key: str) -> Any:
        value: Any = config
        for k in key.split("."):
            if not isinstance(value, BaseModel) or k not in type(value).model_fields:
                return _MISSING
            value = getattr(value, k)
        return value


@lru_cache(maxsize=1)
def get_config_manager() -> ConfigManager:
    """Return the process-wide configuration manager."""
    return ConfigManager()
