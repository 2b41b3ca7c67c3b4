from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .scheduler import ManualScheduler

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Pacing of the real-time loop.

    Attributes:
        tick_rate: Frames per second to aim for; 0 or None runs unthrottled.
        max_steps: Stop automatically after this many frames when set.
        max_frame_dt: Longest delta fed to the scheduler in one frame, so a
            stalled process does not fire a burst of overdue game timers.
    """

    tick_rate: float = 60.0
    max_steps: Optional[int] = None
    max_frame_dt: float = 0.25


class SchedulerLoop:
    """Feeds measured monotonic frame deltas into a ManualScheduler.

    Session engines only ever see the virtual clock, so the same engine code is
    driven by explicit ``advance`` calls in tests and by this loop at runtime.
    """

    def __init__(self, scheduler: ManualScheduler, config: Optional[LoopConfig] = None) -> None:
        self.scheduler = scheduler
        self.config = config or LoopConfig()
        self._running = False
        self._step = 0
        self._last_frame: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Arm the loop; a second call while running does nothing."""
        if self._running:
            logger.debug("SchedulerLoop already running")
            return
        self._running = True
        self._step = 0
        self._last_frame = time.perf_counter()
        logger.info("SchedulerLoop started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("SchedulerLoop stopped after %d frames (clock=%.3fs)", self._step, self.scheduler.now())

    def update(self, dt: float) -> int:
        """Advance the virtual clock by one frame of dt seconds; returns callbacks fired."""
        if not self._running:
            logger.debug("update(%.4f) while stopped; ignored", dt)
            return 0
        if self.config.max_frame_dt and dt > self.config.max_frame_dt:
            logger.debug("Frame delta %.3fs clamped to %.3fs", dt, self.config.max_frame_dt)
            dt = self.config.max_frame_dt
        fired = self.scheduler.advance(dt)
        self._step += 1
        if self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()
        return fired

    def run(self, until: Optional[Callable[[], bool]] = None) -> None:
        """Block, one frame per tick, until stopped, max_steps or until() is true."""
        self.start()
        frame_budget = 1.0 / float(self.config.tick_rate) if self.config.tick_rate else 0.0

        while self._running:
            frame_start = time.perf_counter()
            dt = frame_start - (self._last_frame or frame_start)
            self._last_frame = frame_start

            self.update(dt)
            if until is not None and until():
                self.stop()
                break

            if frame_budget > 0:
                spare = frame_budget - (time.perf_counter() - frame_start)
                if spare > 0:
                    time.sleep(spare)
