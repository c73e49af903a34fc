"""Default configuration parameters for the interval engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DurationParams:
    """Interval lengths in minutes."""
    pomodoro: float = 25.0
    short_break: float = 5.0
    long_break: float = 15.0


@dataclass(frozen=True)
class TimerParams:
    """Timer pacing."""
    tick_interval: float = 1.0                     # Wall-clock seconds per tick


@dataclass(frozen=True)
class StorageParams:
    """Repository backend selection."""
    backend: str = "sqlite"                        # "sqlite" or "memory"
    db_path: str = "pomo.db"


@dataclass(frozen=True)
class LoggingParams:
    """Logging output."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    durations: DurationParams
    timer: TimerParams
    storage: StorageParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        durations=DurationParams(),
        timer=TimerParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
