from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Type, Union

from .core.difficulty import DifficultyTier
from .core.rng import RNG
from .errors import UnknownGameError
from .games import LaneMemorySession, MathdropsSession, MemoryTilesSession, SessionEngine
from .ledger import ScoreLedger
from .scheduling import Scheduler
from .tuning import GameTuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameInfo:
    id: str
    title: str
    description: str
    has_tiers: bool = True


GAMES: List[GameInfo] = [
    GameInfo("mathdrops", "Mathdrops", "Solve falling math expressions"),
    GameInfo("memory-tiles", "Memory Tiles", "Remember and tap the colored tiles"),
    GameInfo("lane-memory", "Lane Memory", "Memorize and replay the lane sequences"),
]

_SESSIONS: Dict[str, Type[SessionEngine]] = {
    MathdropsSession.game_id: MathdropsSession,
    MemoryTilesSession.game_id: MemoryTilesSession,
    LaneMemorySession.game_id: LaneMemorySession,
}


def get_game(game_id: str) -> GameInfo:
    for info in GAMES:
        if info.id == game_id:
            return info
    raise UnknownGameError(f"Unknown game: {game_id!r}")


def select_tier(ledger: ScoreLedger, game_id: str, tier: Union[DifficultyTier, str]) -> DifficultyTier:
    """Remember the tier picked in the menu; the next session of game_id reads it."""
    get_game(game_id)
    parsed = DifficultyTier.parse(tier)
    ledger.set_selected_difficulty(game_id, parsed)
    return parsed


def create_session(
    game_id: str,
    ledger: ScoreLedger,
    scheduler: Scheduler,
    rng: Optional[RNG] = None,
    tuning: Optional[GameTuning] = None,
) -> SessionEngine:
    """Build the session engine for game_id. Raises UnknownGameError for unknown ids."""
    try:
        cls = _SESSIONS[game_id]
    except KeyError:
        raise UnknownGameError(f"Unknown game: {game_id!r}") from None
    session = cls(ledger, scheduler, rng=rng, tuning=tuning)
    logger.debug("Created %s session (tier=%s)", game_id, session.tier.value)
    return session
