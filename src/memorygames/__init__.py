"""
Memory Games core package.

Headless logic for three timed memory mini-games:
- Lane Memory: replay growing sequences of lit lanes
- Mathdrops: answer falling arithmetic expressions before they land
- Memory Tiles: recall highlighted cells on a growing grid

Shared services:
- ScoreLedger with a JSON file store (atomic writes, backup recovery)
- A virtual-clock Scheduler and a real-time SchedulerLoop driving it
- GameTuning loaded from packaged YAML defaults plus an optional overlay

UI layers should create sessions through the catalog and render from
``session.state``.
"""
from importlib.metadata import PackageNotFoundError, version

from .catalog import GAMES, GameInfo, create_session, get_game, select_tier
from .core import DEFAULT_TIER, RNG, DifficultyTier
from .logging_config import configure_logging
from .errors import (
    ConfigError,
    CorruptLedgerError,
    LedgerError,
    LedgerValidationError,
    MemoryGamesError,
    UnknownGameError,
)
from .ledger import InMemoryLedgerStore, JsonFileLedgerStore, ScoreEntry, ScoreLedger, score_key
from .scheduling import LoopConfig, ManualScheduler, Scheduler, SchedulerLoop
from .tuning import GameTuning

try:
    __version__ = version("memorygames")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "configure_logging",
    "GAMES",
    "GameInfo",
    "create_session",
    "get_game",
    "select_tier",
    "DEFAULT_TIER",
    "DifficultyTier",
    "RNG",
    "MemoryGamesError",
    "LedgerError",
    "LedgerValidationError",
    "CorruptLedgerError",
    "UnknownGameError",
    "ConfigError",
    "ScoreLedger",
    "ScoreEntry",
    "score_key",
    "JsonFileLedgerStore",
    "InMemoryLedgerStore",
    "Scheduler",
    "ManualScheduler",
    "SchedulerLoop",
    "LoopConfig",
    "GameTuning",
]
