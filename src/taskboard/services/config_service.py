"""Configuration service for taskboard.

This module provides the ConfigService class, the single source of truth
for configuration management. It handles:

- Loading and saving config.json under the platform config dir
- Reading and writing individual values by dot-separated key
- Resetting values to their defaults
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from taskboard.models.config_models import AppConfig

_MISSING = object()


class ConfigService:
    """Service for loading, editing and saving the application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("taskboard"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("taskboard"))

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, falling back to defaults.

        Raises:
            RuntimeError: If the config file exists but cannot be parsed
        """
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run: defaults are used until something is saved
            self._config = AppConfig()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (e.g., "storage.backend").

        Raises:
            KeyError: If the key does not name a configuration field
        """
        value = _lookup(self.config, key, missing=_MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save.

        The updated configuration is re-validated, so string values from
        the command line are coerced to the field type.

        Raises:
            KeyError: If the key does not name a configuration field
            pydantic.ValidationError: If the value is invalid for the field
        """
        self.get(key)

        keys = key.split(".")
        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset one value, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return
        self.set(key, _lookup(AppConfig(), key))

    def state_location(self) -> Path:
        """Resolve the configured storage path, defaulting under the data dir."""
        storage = self.config.storage
        if storage.path:
            return Path(storage.path).expanduser()
        if storage.backend == "json":
            return self.data_dir / "states"
        return self.data_dir / "taskboard.db"


def _lookup(config: BaseModel, key: str, missing: Any = None) -> Any:
    value: Any = config
    for k in key.split("."):
        if not isinstance(value, BaseModel) or k not in type(value).model_fields:
            return missing
        value = getattr(value, k)
    return value


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get the process-wide ConfigService."""
    return ConfigService()
