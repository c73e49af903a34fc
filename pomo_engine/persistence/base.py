"""Repository contract shared by every interval storage backend."""

from datetime import date, datetime, timedelta
from typing import Protocol, Union, runtime_checkable

from ..state.models import Interval


@runtime_checkable
class IntervalRepository(Protocol):
    """
    Persistence boundary for intervals.

    Implementations must be safe to call from several threads at once,
    serialize conflicting writes, and let a writer observe its own writes.
    Intervals are append-only: there is no delete operation.
    """

    def create(self, interval: Interval) -> int:
        """Store a new interval and return its freshly assigned id."""
        ...

    def update(self, interval: Interval) -> None:
        """Write progress and state of record ``interval.id``; InvalidIDError if unknown.

        Category, planned duration and start time keep their stored values.
        """
        ...

    def by_id(self, interval_id: int) -> Interval:
        """Exact lookup; InvalidIDError if zero or unknown."""
        ...

    def last(self) -> Interval:
        """Most recently created interval; NoIntervalsError if empty."""
        ...

    def breaks(self, n: int) -> list[Interval]:
        """Up to ``n`` most recent break intervals, most recent first."""
        ...

    def category_summary(self, day: Union[date, datetime], category_filter: str) -> timedelta:
        """Sum of actual durations on a local calendar day for matching categories."""
        ...


def normalize_filter(category_filter: str) -> str:
    """Strip SQL-style ``%`` wildcard decoration from a category filter."""
    return (category_filter or "").strip("%")
