"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..persistence import BACKENDS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_durations(params: dict[str, Any]) -> list[ValidationError]:
        """
        Validate interval durations.

        Non-positive durations are accepted here; they fall back to the
        defaults when the interval config is built.
        """
        errors = []

        for name in ("pomodoro", "short_break", "long_break"):
            if name not in params or params[name] is None:
                continue
            value = params[name]
            if not _is_number(value):
                errors.append(ValidationError(
                    field=f"durations.{name}",
                    message="Must be a number of minutes",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_timer_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timer pacing parameters."""
        errors = []

        if "tick_interval" in params:
            value = params["tick_interval"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timer.tick_interval",
                    message="Must be a positive number of seconds",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate repository backend parameters."""
        errors = []

        if "backend" in params:
            value = params["backend"]
            if value not in BACKENDS:
                errors.append(ValidationError(
                    field="storage.backend",
                    message=f"Must be one of {', '.join(BACKENDS)}",
                    value=value
                ))

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="storage.db_path",
                    message="Must be a non-empty path",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="logging.format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration."""
        errors = []

        validators = {
            "durations": cls.validate_durations,
            "timer": cls.validate_timer_params,
            "storage": cls.validate_storage_params,
            "logging": cls.validate_logging_params,
        }

        for section, value in config.items():
            if section not in validators:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=value
                ))
            elif not isinstance(value, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=value
                ))
            else:
                errors.extend(validators[section](value))

        return errors
