"""Volatile, list-backed interval store."""

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Union

import structlog

from ..errors import InvalidIDError, NoIntervalsError
from ..state.models import BREAK_CATEGORIES, Interval
from ..utils.time import local_day
from .base import normalize_filter

logger = structlog.get_logger(__name__)


class MemoryIntervalStore:
    """In-process interval store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self.logger = logger
        self._lock = threading.RLock()
        self._intervals: list[Interval] = []

    def create(self, interval: Interval) -> int:
        with self._lock:
            interval_id = len(self._intervals) + 1
            self._intervals.append(interval.with_id(interval_id))

        self.logger.debug(
            "Interval created",
            interval_id=interval_id,
            category=interval.category.value
        )
        return interval_id

    def update(self, interval: Interval) -> None:
        with self._lock:
            self._check_id(interval.id)
            stored = self._intervals[interval.id - 1]
            self._intervals[interval.id - 1] = replace(
                stored,
                actual_duration=interval.actual_duration,
                state=interval.state
            )

    def by_id(self, interval_id: int) -> Interval:
        with self._lock:
            self._check_id(interval_id)
            return self._intervals[interval_id - 1]

    def last(self) -> Interval:
        with self._lock:
            if not self._intervals:
                raise NoIntervalsError()
            return self._intervals[-1]

    def breaks(self, n: int) -> list[Interval]:
        found: list[Interval] = []
        if n <= 0:
            return found

        with self._lock:
            for interval in reversed(self._intervals):
                if interval.category not in BREAK_CATEGORIES:
                    continue
                found.append(interval)
                if len(found) == n:
                    break
        return found

    def category_summary(self, day: Union[date, datetime], category_filter: str) -> timedelta:
        target = local_day(day)
        needle = normalize_filter(category_filter)
        total = timedelta(0)

        with self._lock:
            for interval in self._intervals:
                if local_day(interval.start_time) != target:
                    continue
                if needle in interval.category.value:
                    total += interval.actual_duration
        return total

    def _check_id(self, interval_id: int) -> None:
        """Raise InvalidIDError unless the id refers to a stored interval."""
        if interval_id <= 0 or interval_id > len(self._intervals):
            raise InvalidIDError(interval_id)
