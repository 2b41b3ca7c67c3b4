from __future__ import annotations

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """A scheduled callback. Cancelling is idempotent and safe from inside callbacks."""

    def __init__(self, seq: int, due: float, callback: Callback, interval: Optional[float] = None) -> None:
        self.seq = seq
        self.due = due
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return (
            f"TimerHandle(seq={self.seq}, due={self.due:.3f}, interval={self.interval}, "
            f"cancelled={self.cancelled})"
        )


class Scheduler(ABC):
    """Delayed and periodic callbacks on a single cooperative thread."""

    @abstractmethod
    def now(self) -> float:
        """Current scheduler time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Run callback once after delay seconds."""

    @abstractmethod
    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        """Run callback every interval seconds, first after one interval."""


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler advanced explicitly by the caller.

    Tests advance it by exact amounts; frame-driven UIs and SchedulerLoop advance
    it by measured frame deltas. Due callbacks fire in (due time, scheduling
    order) order, and callbacks scheduled while advancing fire within the same
    advance when they fall due before its end.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        return self._push(TimerHandle(next(self._seq), self._now + delay, callback))

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        return self._push(TimerHandle(next(self._seq), self._now + interval, callback, interval))

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) timers."""
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def advance(self, dt: float) -> int:
        """Move the clock forward by dt seconds; returns the number of callbacks fired."""
        if dt < 0:
            raise ValueError("dt must be >= 0")
        return self.advance_to(self._now + dt)

    def advance_to(self, target: float) -> int:
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = due
            if handle.repeating:
                # Re-arm before running so the callback may cancel its own handle.
                handle.due = due + handle.interval
                handle.seq = next(self._seq)
                heapq.heappush(self._heap, (handle.due, handle.seq, handle))
            else:
                handle.cancelled = True
            handle.callback()
            fired += 1
        self._now = max(self._now, target)
        return fired

    def _push(self, handle: TimerHandle) -> TimerHandle:
        heapq.heappush(self._heap, (handle.due, handle.seq, handle))
        logger.debug("Scheduled %r", handle)
        return handle
