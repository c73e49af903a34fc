"""
Interval error classifications.

These exceptions are raised by repositories and by the orchestrator when an
operation is attempted on an interval that does not exist or is not in the
state the operation requires.
"""

from typing import Optional, Dict, Any


class IntervalError(Exception):
    """Base class for interval rule violations."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidIDError(IntervalError):
    """Identifier is zero or unknown to the repository."""

    def __init__(self, interval_id: int, message: str = "invalid ID", **kwargs):
        super().__init__(f"{message}: {interval_id}", **kwargs)
        self.interval_id = interval_id


class NoIntervalsError(IntervalError):
    """History query issued against an empty store."""

    def __init__(self, message: str = "no intervals", **kwargs):
        super().__init__(message, **kwargs)


class IntervalNotRunningError(IntervalError):
    """Operation requires a running interval."""

    def __init__(self, message: str = "interval not running",
                 interval_id: Optional[int] = None, state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.interval_id = interval_id
        self.state = state


class IntervalCompletedError(IntervalError):
    """Interval is already done or cancelled."""

    def __init__(self, message: str = "interval is completed or cancelled",
                 interval_id: Optional[int] = None, state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.interval_id = interval_id
        self.state = state


class InvalidStateError(IntervalError):
    """Interval state does not allow the requested operation."""

    def __init__(self, message: str = "invalid state", state: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.state = state
