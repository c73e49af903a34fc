"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from ..utils.time import minutes
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator

CONFIG_FILENAME = "pomo.yaml"


@dataclass(frozen=True)
class Settings:
    """Resolved engine settings."""
    pomodoro_duration: Optional[timedelta]
    short_break_duration: Optional[timedelta]
    long_break_duration: Optional[timedelta]
    tick_interval: float
    backend: str
    db_path: str
    log_level: str
    log_json: bool


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from pomo.yaml, or nothing if the file is absent."""
        if not self.config_file.exists():
            return {}

        with open(self.config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{self.config_file} must contain a mapping",
                field=str(self.config_file),
                value=file_config
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides, e.g. command line flags (highest priority)
        2. pomo.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(self, overrides: Optional[dict[str, Any]] = None) -> Settings:
        """Merge, validate and convert configuration into Settings."""
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(
                f"Invalid configuration: {details}",
                field=errors[0].field,
                value=errors[0].value,
                context={"errors": errors}
            )

        durations = config["durations"]
        return Settings(
            pomodoro_duration=self._minutes_or_none(durations.get("pomodoro")),
            short_break_duration=self._minutes_or_none(durations.get("short_break")),
            long_break_duration=self._minutes_or_none(durations.get("long_break")),
            tick_interval=float(config["timer"]["tick_interval"]),
            backend=config["storage"]["backend"],
            db_path=config["storage"]["db_path"],
            log_level=config["logging"]["level"].upper(),
            log_json=config["logging"]["format_json"],
        )

    @staticmethod
    def _minutes_or_none(value: Optional[float]) -> Optional[timedelta]:
        if value is None:
            return None
        return minutes(value)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries; None in the override means unset."""
        result = base.copy()

        for key, value in override.items():
            if value is None:
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
