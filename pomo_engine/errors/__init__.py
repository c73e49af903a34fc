"""
Error classification for the interval engine.

Interval errors describe rule violations detected by the engine or the
repository contract; system failures describe storage and configuration
problems that need outside intervention.
"""

from .interval import (
    IntervalError,
    InvalidIDError,
    NoIntervalsError,
    IntervalNotRunningError,
    IntervalCompletedError,
    InvalidStateError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Interval rule violations
    "IntervalError",
    "InvalidIDError",
    "NoIntervalsError",
    "IntervalNotRunningError",
    "IntervalCompletedError",
    "InvalidStateError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
]
