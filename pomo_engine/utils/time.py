"""
Time helpers for interval timestamps and durations.

This module centralizes local-time handling so that the repositories and
the orchestrator agree on what "the same calendar day" means.
"""

from datetime import date, datetime, timedelta
from typing import Union


def now_local() -> datetime:
    """Current wall-clock time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def ensure_aware(ts: datetime) -> datetime:
    """
    Attach the local timezone to a naive datetime.

    Args:
        ts: Naive or aware datetime

    Returns:
        Aware datetime; aware inputs are returned unchanged
    """
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        return ts.astimezone()
    return ts


def local_day(day: Union[date, datetime]) -> date:
    """
    Resolve the local calendar day a date or datetime refers to.

    Args:
        day: A plain date, or a datetime that is converted to local time first

    Returns:
        Local calendar date
    """
    if isinstance(day, datetime):
        return ensure_aware(day).astimezone().date()
    return day


def to_microseconds(duration: timedelta) -> int:
    """Convert a duration to integer microseconds for storage."""
    return (duration.days * 86400 + duration.seconds) * 1_000_000 + duration.microseconds


def from_microseconds(value: int) -> timedelta:
    """Convert stored integer microseconds back to a duration."""
    return timedelta(microseconds=value or 0)


def minutes(value: float) -> timedelta:
    """Duration of the given number of minutes."""
    return timedelta(minutes=value)


def format_duration(duration: timedelta) -> str:
    """
    Format a duration as MM:SS, rolling hours into the minutes field.

    Args:
        duration: Duration to format

    Returns:
        String such as "24:59" or "125:00"
    """
    total = int(duration.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    return f"{sign}{total // 60:02d}:{total % 60:02d}"
