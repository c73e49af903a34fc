"""Tests for time helpers."""

import pytest
from datetime import date, datetime, timedelta, timezone

from pomo_engine.utils.time import (
    ensure_aware,
    format_duration,
    from_microseconds,
    local_day,
    minutes,
    now_local,
    to_microseconds,
)


class TestTimestamps:
    """Aware timestamps and local days."""

    def test_now_local_is_aware(self):
        assert now_local().tzinfo is not None

    def test_ensure_aware_attaches_local_zone(self):
        naive = datetime(2026, 10, 18, 9, 30)
        aware = ensure_aware(naive)

        assert aware.tzinfo is not None
        assert aware.replace(tzinfo=None) == naive

    def test_ensure_aware_keeps_aware_values(self):
        ts = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
        assert ensure_aware(ts) is ts

    def test_local_day_of_date(self):
        assert local_day(date(2026, 10, 18)) == date(2026, 10, 18)

    def test_local_day_of_local_datetime(self):
        assert local_day(datetime(2026, 10, 18, 23, 59).astimezone()) == date(2026, 10, 18)

    def test_local_day_converts_other_zones(self):
        ts = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        assert local_day(ts) == ts.astimezone().date()


class TestDurations:
    """Storage conversion and formatting."""

    @pytest.mark.parametrize("duration, expected", [
        (timedelta(0), 0),
        (timedelta(seconds=1), 1_000_000),
        (timedelta(minutes=25), 1_500_000_000),
        (timedelta(days=1, microseconds=5), 86_400_000_005),
    ])
    def test_to_microseconds(self, duration, expected):
        assert to_microseconds(duration) == expected
        assert from_microseconds(expected) == duration

    def test_from_microseconds_null(self):
        assert from_microseconds(None) == timedelta(0)

    def test_minutes(self):
        assert minutes(0.5) == timedelta(seconds=30)

    @pytest.mark.parametrize("duration, expected", [
        (timedelta(0), "00:00"),
        (timedelta(seconds=59), "00:59"),
        (timedelta(minutes=24, seconds=59), "24:59"),
        (timedelta(hours=2, minutes=5), "125:00"),
        (timedelta(seconds=-61), "-01:01"),
    ])
    def test_format_duration(self, duration, expected):
        assert format_duration(duration) == expected
