"""
Interval data models for the pomodoro state machine.

This module defines the immutable interval record tracked by the engine,
its category and lifecycle state enumerations, and copy-on-write helpers
used by the timer to advance an interval without sharing mutable state.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional

from ..utils.time import ensure_aware, now_local


class Category(str, Enum):
    """Kinds of interval."""
    POMODORO = "Pomodoro"
    SHORT_BREAK = "ShortBreak"
    LONG_BREAK = "LongBreak"


class IntervalState(IntEnum):
    """Interval lifecycle states, persisted as their integer code."""
    NOT_STARTED = 0
    RUNNING = 1
    PAUSED = 2
    DONE = 3
    CANCELLED = 4


BREAK_CATEGORIES = frozenset({Category.SHORT_BREAK, Category.LONG_BREAK})
TERMINAL_STATES = frozenset({IntervalState.DONE, IntervalState.CANCELLED})

ONE_SECOND = timedelta(seconds=1)


@dataclass(frozen=True)
class Interval:
    """One timed work or break session."""

    category: Category
    planned_duration: timedelta
    start_time: datetime

    # Progress
    actual_duration: timedelta = timedelta(0)
    state: IntervalState = IntervalState.NOT_STARTED

    # Assigned by the repository on create; 0 means not stored yet
    id: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", Category(self.category))
        object.__setattr__(self, "state", IntervalState(self.state))
        object.__setattr__(self, "start_time", ensure_aware(self.start_time))

    @classmethod
    def new(cls, category: Category, planned_duration: timedelta,
            start_time: Optional[datetime] = None) -> 'Interval':
        """Build an unsaved interval stamped with the current local time."""
        return cls(
            category=category,
            planned_duration=planned_duration,
            start_time=start_time or now_local(),
        )

    @property
    def remaining(self) -> timedelta:
        """Planned duration not yet ticked off."""
        return max(self.planned_duration - self.actual_duration, timedelta(0))

    @property
    def is_break(self) -> bool:
        return self.category in BREAK_CATEGORIES

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def with_id(self, interval_id: int) -> 'Interval':
        """Copy carrying a repository-assigned id."""
        return replace(self, id=interval_id)

    def with_state(self, new_state: IntervalState) -> 'Interval':
        """Copy with an updated lifecycle state."""
        return replace(self, state=new_state)

    def with_tick(self) -> 'Interval':
        """Copy advanced by one second, capped at the planned duration."""
        return replace(
            self,
            actual_duration=min(self.actual_duration + ONE_SECOND, self.planned_duration),
        )
