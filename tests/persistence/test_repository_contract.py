"""Repository contract tests run against every backend."""

import threading
import pytest
from datetime import date, datetime, timedelta

from pomo_engine.errors import ConfigurationError, InvalidIDError, NoIntervalsError
from pomo_engine.persistence import (
    IntervalRepository, MemoryIntervalStore, SQLiteIntervalStore, create_repository
)
from pomo_engine.state.models import Category, IntervalState

P = Category.POMODORO
SB = Category.SHORT_BREAK
LB = Category.LONG_BREAK


class TestCreateAndLookup:
    """create, by_id and last."""

    def test_satisfies_protocol(self, repository):
        assert isinstance(repository, IntervalRepository)

    def test_ids_are_sequential_from_one(self, repository, make_interval):
        ids = [repository.create(make_interval()) for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_round_trip(self, repository, make_interval):
        """A stored interval reads back equal apart from its new id."""
        original = make_interval(
            category=LB,
            planned=timedelta(minutes=15),
            actual=timedelta(seconds=42),
            state=IntervalState.PAUSED,
        )

        interval_id = repository.create(original)

        assert repository.by_id(interval_id) == original.with_id(interval_id)

    def test_create_ignores_incoming_id(self, repository, make_interval):
        interval_id = repository.create(make_interval().with_id(50))
        assert interval_id == 1
        assert repository.by_id(1).id == 1

    @pytest.mark.parametrize("bad_id", [0, -1, 99])
    def test_by_id_rejects_bad_ids(self, repository, make_interval, bad_id):
        repository.create(make_interval())
        with pytest.raises(InvalidIDError) as exc_info:
            repository.by_id(bad_id)
        assert exc_info.value.interval_id == bad_id

    def test_last_on_empty_store(self, repository):
        with pytest.raises(NoIntervalsError):
            repository.last()

    def test_last_returns_most_recent(self, repository, make_interval):
        repository.create(make_interval(category=P))
        repository.create(make_interval(category=SB))

        last = repository.last()

        assert last.id == 2
        assert last.category == SB


class TestUpdate:
    """update replaces the record with the same id."""

    def test_update_is_visible_to_reads(self, repository, make_interval):
        interval_id = repository.create(make_interval(planned=timedelta(seconds=10)))
        stored = repository.by_id(interval_id)

        repository.update(stored.with_tick().with_state(IntervalState.RUNNING))

        reread = repository.by_id(interval_id)
        assert reread.actual_duration == timedelta(seconds=1)
        assert reread.state == IntervalState.RUNNING
        assert repository.last() == reread

    @pytest.mark.parametrize("bad_id", [0, 7])
    def test_update_rejects_bad_ids(self, repository, make_interval, bad_id):
        repository.create(make_interval())
        with pytest.raises(InvalidIDError):
            repository.update(make_interval().with_id(bad_id))

    def test_update_leaves_other_records_alone(self, repository, make_interval):
        first = repository.create(make_interval(category=P))
        second = repository.create(make_interval(category=SB))

        repository.update(repository.by_id(second).with_state(IntervalState.DONE))

        assert repository.by_id(first).state == IntervalState.NOT_STARTED
        assert repository.by_id(second).state == IntervalState.DONE

    def test_update_keeps_creation_fields(self, repository, make_interval):
        """Only progress and state change; the rest stays as created."""
        original = make_interval(category=P, planned=timedelta(minutes=25))
        interval_id = repository.create(original)

        repository.update(make_interval(
            category=LB,
            planned=timedelta(minutes=1),
            actual=timedelta(seconds=5),
            state=IntervalState.RUNNING,
            start_time=datetime(2026, 10, 19, 8, 0).astimezone(),
        ).with_id(interval_id))

        reread = repository.by_id(interval_id)
        assert reread.category == P
        assert reread.planned_duration == timedelta(minutes=25)
        assert reread.start_time == original.start_time
        assert reread.actual_duration == timedelta(seconds=5)
        assert reread.state == IntervalState.RUNNING


class TestBreaks:
    """breaks(n) returns recent break intervals, newest first."""

    def test_empty_store_gives_empty_list(self, repository):
        assert repository.breaks(3) == []

    def test_only_pomodoros_gives_empty_list(self, repository, seed_history):
        seed_history(repository, [P, P])
        assert repository.breaks(3) == []

    def test_skips_pomodoros_newest_first(self, repository, seed_history):
        ids = seed_history(repository, [P, SB, P, LB, P, SB, P])

        found = repository.breaks(3)

        assert [i.id for i in found] == [ids[5], ids[3], ids[1]]
        assert [i.category for i in found] == [SB, LB, SB]

    def test_limits_to_n(self, repository, seed_history):
        seed_history(repository, [SB, SB, SB, SB])
        assert len(repository.breaks(2)) == 2

    def test_fewer_than_n(self, repository, seed_history):
        seed_history(repository, [P, SB])
        assert len(repository.breaks(3)) == 1

    def test_non_positive_n(self, repository, seed_history):
        seed_history(repository, [SB, LB])
        assert repository.breaks(0) == []
        assert repository.breaks(-1) == []


class TestCategorySummary:
    """Per-day totals filtered by category substring."""

    def _store(self, repository, make_interval, category, seconds, start_time):
        repository.create(make_interval(
            category=category,
            planned=timedelta(minutes=30),
            actual=timedelta(seconds=seconds),
            start_time=start_time,
            state=IntervalState.DONE,
        ))

    def test_empty_store_is_zero(self, repository):
        assert repository.category_summary(date(2026, 10, 18), "Pomodoro") == timedelta(0)

    def test_sums_matching_day_and_category(self, repository, make_interval):
        day = datetime(2026, 10, 18, 9, 0).astimezone()
        self._store(repository, make_interval, P, 60, day)
        self._store(repository, make_interval, P, 30, day.replace(hour=23, minute=30))
        self._store(repository, make_interval, SB, 300, day)
        self._store(repository, make_interval, P, 1000, day - timedelta(days=1))

        assert repository.category_summary(date(2026, 10, 18), "Pomodoro") == timedelta(seconds=90)

    def test_wildcard_filter_matches_both_breaks(self, repository, make_interval):
        day = datetime(2026, 10, 18, 12, 0).astimezone()
        self._store(repository, make_interval, SB, 300, day)
        self._store(repository, make_interval, LB, 900, day)
        self._store(repository, make_interval, P, 1500, day)

        assert repository.category_summary(day, "%Break") == timedelta(seconds=1200)
        assert repository.category_summary(day, "Break%") == timedelta(seconds=1200)

    def test_filter_is_case_sensitive(self, repository, make_interval):
        day = datetime(2026, 10, 18, 12, 0).astimezone()
        self._store(repository, make_interval, SB, 300, day)

        assert repository.category_summary(day, "break") == timedelta(0)
        assert repository.category_summary(day, "Short") == timedelta(seconds=300)

    def test_no_match_is_zero(self, repository, make_interval):
        day = datetime(2026, 10, 18, 12, 0).astimezone()
        self._store(repository, make_interval, P, 300, day)

        assert repository.category_summary(date(2026, 10, 19), "Pomodoro") == timedelta(0)


class TestConcurrentAccess:
    """Writers on several threads never collide."""

    def test_concurrent_creates_get_unique_ids(self, repository, make_interval):
        ids = []
        ids_lock = threading.Lock()

        def writer():
            for _ in range(10):
                interval_id = repository.create(make_interval())
                with ids_lock:
                    ids.append(interval_id)

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(ids) == list(range(1, 41))
        assert repository.last().id == 40


class TestCreateRepository:
    """Backend selection at composition time."""

    def test_memory_backend(self):
        assert isinstance(create_repository("memory"), MemoryIntervalStore)

    def test_sqlite_backend(self, tmp_path):
        repo = create_repository("sqlite", tmp_path / "x.db")
        assert isinstance(repo, SQLiteIntervalStore)

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_repository("redis")
        assert exc_info.value.field == "storage.backend"
