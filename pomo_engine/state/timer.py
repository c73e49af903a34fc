"""
Interval timer.

Drives one interval from its current progress to a terminal outcome,
persisting one second of progress per tick. Pause is never signalled to
the timer directly: it re-reads the interval on every tick and exits
quietly once someone has written ``PAUSED`` through the repository.
"""

import threading
import time
from typing import Callable, Optional

from ..logging.config import get_timer_logger, log_state_transition
from ..persistence.base import IntervalRepository
from .models import Interval, IntervalState

timer_logger = get_timer_logger(__name__)

Callback = Callable[[Interval], None]


def _noop(interval: Interval) -> None:
    pass


class IntervalTimer:
    """Ticks a stored interval until it expires, is cancelled or is paused."""

    def __init__(
        self,
        repository: IntervalRepository,
        tick_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Args:
            repository: Store the interval is read from and written to
            tick_interval: Wall-clock seconds per tick; each tick always
                advances actual_duration by one second
            clock: Monotonic clock used for tick and expiration deadlines
        """
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick_interval}")

        self.repository = repository
        self.tick_interval = tick_interval
        self.logger = timer_logger
        self._clock = clock

    def run(
        self,
        interval_id: int,
        cancel: Optional[threading.Event] = None,
        on_start: Optional[Callback] = None,
        on_tick: Optional[Callback] = None,
        on_end: Optional[Callback] = None
    ) -> None:
        """
        Run the interval until a terminal outcome.

        Args:
            interval_id: ID of a stored interval
            cancel: Cancellation token; setting it cancels the interval
            on_start: Called once with the loaded interval before ticking
            on_tick: Called after each persisted tick
            on_end: Called after the interval is persisted as DONE; never on
                pause or cancellation

        Raises:
            Any repository error, unchanged
        """
        cancel = cancel or threading.Event()
        on_start = on_start or _noop
        on_tick = on_tick or _noop
        on_end = on_end or _noop

        interval = self.repository.by_id(interval_id)

        started = self._clock()
        expires_at = started + interval.remaining.total_seconds() * self.tick_interval
        ticks = 0

        self.logger.info(
            "Timer started",
            interval_id=interval_id,
            category=interval.category.value,
            planned_seconds=interval.planned_duration.total_seconds(),
            actual_seconds=interval.actual_duration.total_seconds()
        )
        on_start(interval)

        while True:
            next_tick = started + (ticks + 1) * self.tick_interval
            deadline = min(next_tick, expires_at)

            if cancel.wait(max(0.0, deadline - self._clock())):
                self._cancel(interval_id)
                return

            now = self._clock()

            if now >= next_tick:
                ticks += 1
                current = self.repository.by_id(interval_id)
                if current.state == IntervalState.PAUSED:
                    self.logger.info(
                        "Pause observed, timer exiting",
                        interval_id=interval_id,
                        actual_seconds=current.actual_duration.total_seconds()
                    )
                    return

                current = current.with_tick()
                self.repository.update(current)
                self.logger.debug(
                    "Tick",
                    interval_id=interval_id,
                    actual_seconds=current.actual_duration.total_seconds()
                )
                on_tick(current)

            # A tick that falls due with expiration is handled first
            tick_pending = started + (ticks + 1) * self.tick_interval <= expires_at
            if now >= expires_at and not tick_pending:
                self._finish(interval_id, on_end)
                return

    def _finish(self, interval_id: int, on_end: Callback) -> None:
        """Mark the interval DONE, persist it and report the end."""
        current = self.repository.by_id(interval_id)
        done = current.with_state(IntervalState.DONE)
        self.repository.update(done)

        log_state_transition(
            self.logger,
            interval_id=interval_id,
            from_state=current.state.name,
            to_state=done.state.name,
            trigger="expired",
            context={"actual_seconds": done.actual_duration.total_seconds()}
        )
        on_end(done)

    def _cancel(self, interval_id: int) -> None:
        """Mark the interval CANCELLED and persist it."""
        current = self.repository.by_id(interval_id)
        cancelled = current.with_state(IntervalState.CANCELLED)
        self.repository.update(cancelled)

        log_state_transition(
            self.logger,
            interval_id=interval_id,
            from_state=current.state.name,
            to_state=cancelled.state.name,
            trigger="cancelled",
            context={"actual_seconds": cancelled.actual_duration.total_seconds()}
        )


class TimerHandle:
    """Handle on a timer run executing on a background thread."""

    def __init__(self, interval_id: int, cancel_event: threading.Event) -> None:
        self.interval_id = interval_id
        self.error: Optional[BaseException] = None
        self._cancel_event = cancel_event
        self._thread: Optional[threading.Thread] = None

    def _attach(self, thread: threading.Thread) -> None:
        self._thread = thread

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    def cancel(self) -> None:
        """Request cancellation; observed within one tick."""
        self._cancel_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the run to end. Returns True if it has ended."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
