from .loop import LoopConfig, SchedulerLoop
from .scheduler import Callback, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "Callback",
    "LoopConfig",
    "ManualScheduler",
    "Scheduler",
    "SchedulerLoop",
    "TimerHandle",
]
