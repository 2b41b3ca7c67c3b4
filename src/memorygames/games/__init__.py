from .base import Feedback, SessionEngine
from .lanes import LaneMemorySession, LanePhase, LaneState
from .mathdrops import MathdropsPhase, MathdropsSession, MathdropsState
from .tiles import MemoryTilesSession, MemoryTilesState, TilesPhase

__all__ = [
    "Feedback",
    "SessionEngine",
    "LaneMemorySession",
    "LanePhase",
    "LaneState",
    "MathdropsSession",
    "MathdropsPhase",
    "MathdropsState",
    "MemoryTilesSession",
    "MemoryTilesState",
    "TilesPhase",
]
