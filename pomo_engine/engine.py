"""
Interval engine orchestrator.

Ties the category scheduler, the repository and the interval timer
together and exposes the operations an outside driver (a UI, the CLI)
uses to create, start, pause and summarize intervals.
"""

import threading
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Optional, Union

import structlog

from .config.defaults import get_default_config
from .errors import (
    IntervalCompletedError,
    IntervalNotRunningError,
    InvalidStateError,
    NoIntervalsError,
)
from .logging.config import get_timer_logger, log_state_transition
from .persistence import IntervalRepository, create_repository
from .state.models import Category, Interval, IntervalState
from .state.scheduler import next_category
from .state.timer import Callback, IntervalTimer, TimerHandle
from .utils.time import minutes, now_local

if TYPE_CHECKING:
    from .config.loader import Settings

logger = structlog.get_logger(__name__)
state_logger = get_timer_logger(__name__)

# Extra wait, beyond two ticks, for a paused run to exit before a resume
STOP_GRACE_SECONDS = 1.0


def _duration_or_default(value: Optional[timedelta], default_minutes: float,
                         name: str) -> timedelta:
    """Use the override when positive, otherwise the default."""
    if value is None:
        return minutes(default_minutes)
    if value <= timedelta(0):
        logger.warning(
            "Non-positive duration, using default",
            duration=name,
            value_seconds=value.total_seconds(),
            default_minutes=default_minutes
        )
        return minutes(default_minutes)
    return value


@dataclass(frozen=True)
class IntervalConfig:
    """Interval durations plus the repository they are recorded in."""

    repository: IntervalRepository
    pomodoro_duration: timedelta
    short_break_duration: timedelta
    long_break_duration: timedelta

    @classmethod
    def create(
        cls,
        repository: IntervalRepository,
        pomodoro: Optional[timedelta] = None,
        short_break: Optional[timedelta] = None,
        long_break: Optional[timedelta] = None
    ) -> "IntervalConfig":
        """Build a config, replacing unset or non-positive durations with defaults."""
        defaults = get_default_config().durations
        return cls(
            repository=repository,
            pomodoro_duration=_duration_or_default(pomodoro, defaults.pomodoro, "pomodoro"),
            short_break_duration=_duration_or_default(short_break, defaults.short_break, "short_break"),
            long_break_duration=_duration_or_default(long_break, defaults.long_break, "long_break"),
        )

    def duration_for(self, category: Category) -> timedelta:
        """Planned duration for intervals of the given category."""
        if category == Category.POMODORO:
            return self.pomodoro_duration
        if category == Category.SHORT_BREAK:
            return self.short_break_duration
        if category == Category.LONG_BREAK:
            return self.long_break_duration
        raise InvalidStateError(f"unknown category: {category!r}", state=category)


class PomodoroEngine:
    """
    Entry point for drivers of the interval engine.

    At most one interval runs per engine at a time. Pausing is done by
    writing through the repository, so a different engine or process
    sharing the same store can pause an interval this engine is running.
    """

    def __init__(self, config: IntervalConfig, timer: Optional[IntervalTimer] = None) -> None:
        self.config = config
        self.repository = config.repository
        self.timer = timer or IntervalTimer(config.repository)
        self.logger = logger
        self.state_logger = state_logger

        self._active: Optional[TimerHandle] = None
        self._active_lock = threading.Lock()
        self._released = threading.Condition(self._active_lock)

    def next_category(self) -> Category:
        """Category the next new interval will get."""
        return next_category(self.repository)

    def new_interval(self) -> Interval:
        """Create and store a fresh interval of the scheduled category."""
        category = next_category(self.repository)
        interval = Interval.new(category, self.config.duration_for(category))
        interval_id = self.repository.create(interval)

        self.logger.info(
            "Interval created",
            interval_id=interval_id,
            category=category.value,
            planned_seconds=interval.planned_duration.total_seconds()
        )
        return interval.with_id(interval_id)

    def current_interval(self) -> Interval:
        """
        Interval a driver should work with now.

        Returns the most recent interval while it is still unfinished,
        otherwise creates the next one.
        """
        try:
            last = self.repository.last()
        except NoIntervalsError:
            return self.new_interval()

        if last.is_terminal:
            return self.new_interval()
        return last

    def start(
        self,
        interval: Interval,
        cancel: Optional[threading.Event] = None,
        on_start: Optional[Callback] = None,
        on_tick: Optional[Callback] = None,
        on_end: Optional[Callback] = None
    ) -> None:
        """
        Run an interval in the calling thread until it ends, pauses or is cancelled.

        Raises:
            IntervalCompletedError: interval is DONE or CANCELLED
            InvalidStateError: another interval is already running on this engine
        """
        current = self.repository.by_id(interval.id)
        self._check_startable(current)

        handle = TimerHandle(current.id, cancel or threading.Event())
        if self._claim(handle, resuming=current.state == IntervalState.PAUSED) is not None:
            self.logger.info("Interval already running", interval_id=current.id)
            return

        self._run_claimed(current, handle, on_start, on_tick, on_end)

    def start_background(
        self,
        interval: Interval,
        cancel: Optional[threading.Event] = None,
        on_start: Optional[Callback] = None,
        on_tick: Optional[Callback] = None,
        on_end: Optional[Callback] = None
    ) -> TimerHandle:
        """
        Run an interval on a daemon thread.

        Returns:
            Handle to cancel or join the run; errors that end the run are
            stored on ``handle.error``
        """
        current = self.repository.by_id(interval.id)
        self._check_startable(current)

        handle = TimerHandle(current.id, cancel or threading.Event())
        existing = self._claim(handle, resuming=current.state == IntervalState.PAUSED)
        if existing is not None:
            return existing

        def worker() -> None:
            try:
                self._run_claimed(current, handle, on_start, on_tick, on_end)
            except Exception as e:
                handle.error = e
                self.logger.error(
                    "Interval run failed",
                    interval_id=current.id,
                    error=str(e),
                    exc_info=True
                )

        thread = threading.Thread(
            target=worker,
            name=f"interval-timer-{current.id}",
            daemon=True
        )
        handle._attach(thread)
        thread.start()
        return handle

    def pause(self, interval: Interval) -> Interval:
        """
        Request a pause by writing PAUSED through the repository.

        The timer running the interval notices on its next tick.

        Raises:
            IntervalNotRunningError: interval is not RUNNING
        """
        current = self.repository.by_id(interval.id)
        if current.state != IntervalState.RUNNING:
            raise IntervalNotRunningError(
                interval_id=current.id,
                state=current.state.name
            )

        paused = current.with_state(IntervalState.PAUSED)
        self.repository.update(paused)

        log_state_transition(
            self.state_logger,
            interval_id=current.id,
            from_state=current.state.name,
            to_state=paused.state.name,
            trigger="pause_requested",
            context={"actual_seconds": paused.actual_duration.total_seconds()}
        )
        return paused

    def daily_summary(self, day: Optional[Union[date, datetime]] = None) -> dict[str, timedelta]:
        """Total pomodoro and break time recorded on a local calendar day."""
        day = day or now_local()
        return {
            "Pomodoro": self.repository.category_summary(day, Category.POMODORO.value),
            "Breaks": self.repository.category_summary(day, "%Break"),
        }

    @property
    def active_interval_id(self) -> Optional[int]:
        with self._active_lock:
            return self._active.interval_id if self._active else None

    def _check_startable(self, current: Interval) -> None:
        if current.is_terminal:
            raise IntervalCompletedError(
                "Cannot start: interval is completed or cancelled",
                interval_id=current.id,
                state=current.state.name
            )

    def _claim(self, handle: TimerHandle, resuming: bool = False) -> Optional[TimerHandle]:
        """
        Register the active run.

        Returns the existing handle if the same interval is already running
        here, None once the new handle is registered. When resuming a paused
        interval whose previous run has not yet observed the pause, waits for
        that run to exit first.
        """
        with self._released:
            if resuming and self._is_active(handle.interval_id):
                # The paused run exits on its next tick
                self._released.wait_for(
                    lambda: not self._is_active(handle.interval_id),
                    timeout=2 * self.timer.tick_interval + STOP_GRACE_SECONDS
                )
                if self._is_active(handle.interval_id):
                    raise InvalidStateError(
                        "previous run of this interval has not stopped",
                        state=IntervalState.PAUSED,
                        context={"interval_id": handle.interval_id}
                    )

            if self._active is None:
                self._active = handle
                return None
            if self._active.interval_id == handle.interval_id:
                return self._active
            raise InvalidStateError(
                "another interval is already running",
                state=IntervalState.RUNNING,
                context={"active_id": self._active.interval_id,
                         "requested_id": handle.interval_id}
            )

    def _is_active(self, interval_id: int) -> bool:
        return self._active is not None and self._active.interval_id == interval_id

    def _release(self, handle: TimerHandle) -> None:
        with self._released:
            if self._active is handle:
                self._active = None
                self._released.notify_all()

    def _run_claimed(
        self,
        current: Interval,
        handle: TimerHandle,
        on_start: Optional[Callback],
        on_tick: Optional[Callback],
        on_end: Optional[Callback]
    ) -> None:
        try:
            if current.state in (IntervalState.NOT_STARTED, IntervalState.PAUSED):
                running = current.with_state(IntervalState.RUNNING)
                self.repository.update(running)
                log_state_transition(
                    self.state_logger,
                    interval_id=current.id,
                    from_state=current.state.name,
                    to_state=running.state.name,
                    trigger="start" if current.state == IntervalState.NOT_STARTED else "resume",
                    context={"actual_seconds": current.actual_duration.total_seconds()}
                )
            elif current.state == IntervalState.RUNNING:
                # Left RUNNING by a driver that stopped without pausing
                self.logger.warning(
                    "Resuming interrupted interval",
                    interval_id=current.id,
                    actual_seconds=current.actual_duration.total_seconds()
                )
            else:
                raise InvalidStateError(state=current.state)

            self.timer.run(current.id, handle.cancel_event, on_start, on_tick, on_end)
        finally:
            self._release(handle)


def build_engine(settings: "Settings") -> PomodoroEngine:
    """Compose repository, config and timer from loaded settings."""
    repository = create_repository(settings.backend, settings.db_path)
    config = IntervalConfig.create(
        repository,
        pomodoro=settings.pomodoro_duration,
        short_break=settings.short_break_duration,
        long_break=settings.long_break_duration,
    )
    timer = IntervalTimer(repository, tick_interval=settings.tick_interval)
    return PomodoroEngine(config, timer)
