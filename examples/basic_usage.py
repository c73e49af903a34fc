#!/usr/bin/env python3
"""
Basic Usage Example - Pomo Engine

This script runs a short work/break cycle on an accelerated clock. It shows
how to:
- Build an engine over the in-memory repository
- Let the scheduler pick each interval's category
- Receive progress through callbacks and through a progress queue
- Pause an interval and resume it later

Run: python examples/basic_usage.py
"""

import threading
from datetime import timedelta

from pomo_engine.engine import IntervalConfig, PomodoroEngine
from pomo_engine.logging.config import configure_logging
from pomo_engine.persistence import MemoryIntervalStore
from pomo_engine.state.models import Interval
from pomo_engine.state.progress import ProgressKind, ProgressQueue
from pomo_engine.state.timer import IntervalTimer
from pomo_engine.utils.time import format_duration

# One simulated second every 50 ms
TICK_INTERVAL = 0.05


def print_start(interval: Interval) -> None:
    print(f"▶ {interval.category.value} #{interval.id} "
          f"({format_duration(interval.remaining)} to go)")


def print_tick(interval: Interval) -> None:
    print(f"  {format_duration(interval.actual_duration)} / "
          f"{format_duration(interval.planned_duration)}")


def print_end(interval: Interval) -> None:
    print(f"✅ {interval.category.value} #{interval.id} done")


def build_demo_engine() -> PomodoroEngine:
    repository = MemoryIntervalStore()
    config = IntervalConfig.create(
        repository,
        pomodoro=timedelta(seconds=5),
        short_break=timedelta(seconds=2),
        long_break=timedelta(seconds=4),
    )
    return PomodoroEngine(config, IntervalTimer(repository, tick_interval=TICK_INTERVAL))


def run_cycle(engine: PomodoroEngine) -> None:
    """Run a full cycle ending in a long break."""
    print("\n📋 Running a full cycle")
    for _ in range(8):
        interval = engine.current_interval()
        engine.start(interval, on_start=print_start, on_tick=print_tick, on_end=print_end)


def pause_and_resume(engine: PomodoroEngine) -> None:
    """Pause halfway through a pomodoro, then finish it."""
    print("\n⏸ Pausing and resuming")
    interval = engine.current_interval()

    def pause_halfway(current: Interval) -> None:
        print_tick(current)
        if current.actual_duration >= current.planned_duration / 2:
            engine.pause(current)

    engine.start(interval, on_start=print_start, on_tick=pause_halfway, on_end=print_end)
    paused = engine.repository.by_id(interval.id)
    print(f"  paused at {format_duration(paused.actual_duration)}")

    engine.start(paused, on_start=print_start, on_tick=print_tick, on_end=print_end)


def queue_driven(engine: PomodoroEngine) -> None:
    """Consume progress as messages from a background run."""
    print("\n📨 Queue-driven progress")
    progress = ProgressQueue()
    handle = engine.start_background(
        engine.current_interval(),
        cancel=threading.Event(),
        on_start=progress.on_start,
        on_tick=progress.on_tick,
        on_end=progress.on_end,
    )

    while True:
        event = progress.events.get(timeout=5)
        print(f"  {event.kind.value}: {format_duration(event.interval.actual_duration)}")
        if event.kind == ProgressKind.ENDED:
            break
    handle.join()


def main() -> None:
    configure_logging(level="WARNING")
    engine = build_demo_engine()

    run_cycle(engine)
    pause_and_resume(engine)
    queue_driven(engine)

    summary = engine.daily_summary()
    print("\n📊 Today")
    for name, total in summary.items():
        print(f"  {name}: {format_duration(total)}")


if __name__ == "__main__":
    main()
