"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta
from typing import Callable, List

from pomo_engine.engine import IntervalConfig, PomodoroEngine
from pomo_engine.persistence import MemoryIntervalStore, SQLiteIntervalStore
from pomo_engine.state.models import Category, Interval, IntervalState
from pomo_engine.state.timer import IntervalTimer

# Wall-clock seconds per tick used by timer tests
FAST_TICK = 0.01


@pytest.fixture
def memory_store() -> MemoryIntervalStore:
    """Empty volatile store."""
    return MemoryIntervalStore()


@pytest.fixture
def sqlite_store(tmp_path) -> SQLiteIntervalStore:
    """Empty durable store in a temporary directory."""
    return SQLiteIntervalStore(tmp_path / "pomo.db")


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    """Every repository backend, for contract tests."""
    if request.param == "memory":
        return MemoryIntervalStore()
    return SQLiteIntervalStore(tmp_path / "contract.db")


@pytest.fixture
def make_interval() -> Callable[..., Interval]:
    """Factory for unsaved intervals with sensible defaults."""
    def _make(
        category: Category = Category.POMODORO,
        planned: timedelta = timedelta(minutes=25),
        actual: timedelta = timedelta(0),
        state: IntervalState = IntervalState.NOT_STARTED,
        start_time: datetime = None,
    ) -> Interval:
        return Interval(
            category=category,
            planned_duration=planned,
            start_time=start_time or datetime(2026, 10, 18, 9, 30).astimezone(),
            actual_duration=actual,
            state=state,
        )
    return _make


@pytest.fixture
def seed_history(make_interval) -> Callable[..., List[int]]:
    """Store a sequence of completed intervals of the given categories."""
    def _seed(repo, categories: List[Category]) -> List[int]:
        return [
            repo.create(make_interval(category=category, state=IntervalState.DONE))
            for category in categories
        ]
    return _seed


@pytest.fixture
def fast_engine(repository) -> PomodoroEngine:
    """Engine over each backend with short durations and an accelerated clock."""
    config = IntervalConfig.create(
        repository,
        pomodoro=timedelta(seconds=3),
        short_break=timedelta(seconds=2),
        long_break=timedelta(seconds=4),
    )
    return PomodoroEngine(config, IntervalTimer(repository, tick_interval=FAST_TICK))
