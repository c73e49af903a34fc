"""Message-passing adapter for timer progress callbacks."""

import queue
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import Interval


class ProgressKind(str, Enum):
    """Progress message types, one per timer callback."""
    STARTED = "started"
    TICKED = "ticked"
    ENDED = "ended"


@dataclass(frozen=True)
class ProgressEvent:
    """Snapshot of an interval reported by the timer."""
    kind: ProgressKind
    interval: Interval


class ProgressQueue:
    """
    Delivers on_start/on_tick/on_end as messages on a single queue.

    Pass ``on_start``, ``on_tick`` and ``on_end`` to the timer and consume
    ``events`` from the driver thread.
    """

    def __init__(self, events: Optional["queue.Queue[ProgressEvent]"] = None) -> None:
        self.events: "queue.Queue[ProgressEvent]" = events if events is not None else queue.Queue()

    def on_start(self, interval: Interval) -> None:
        self.events.put(ProgressEvent(ProgressKind.STARTED, interval))

    def on_tick(self, interval: Interval) -> None:
        self.events.put(ProgressEvent(ProgressKind.TICKED, interval))

    def on_end(self, interval: Interval) -> None:
        self.events.put(ProgressEvent(ProgressKind.ENDED, interval))

    def drain(self) -> list[ProgressEvent]:
        """Return every message queued so far without blocking."""
        drained = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained
