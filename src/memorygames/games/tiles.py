"""Memory Tiles: memorize the highlighted cells of a grid, then tap them all.

The grid starts at a tier-dependent size and grows by one row or column at the
start of every 3-round cycle. Within a cycle the share of target cells rises
30% -> 35% -> 40%.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ..core.difficulty import DifficultyTier
from ..core.rng import RNG
from ..tuning import TilesTuning
from .base import Feedback, SessionEngine

logger = logging.getLogger(__name__)

GAME_ID = "memory-tiles"

ROUNDS_PER_EXPANSION = 3
# Target share in percent by position within the 3-round cycle
TARGET_PERCENTAGES: Tuple[int, ...] = (30, 35, 40)


@dataclass(frozen=True)
class GridSize:
    rows: int
    cols: int

    @property
    def total(self) -> int:
        return self.rows * self.cols


INITIAL_GRID: Dict[DifficultyTier, GridSize] = {
    DifficultyTier.EASY: GridSize(3, 3),
    DifficultyTier.MEDIUM: GridSize(4, 4),
    DifficultyTier.HARD: GridSize(5, 5),
}

MAX_SIDE: Dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 5,
    DifficultyTier.MEDIUM: 6,
    DifficultyTier.HARD: 7,
}


def initial_grid_size(tier: DifficultyTier) -> GridSize:
    return INITIAL_GRID[DifficultyTier.parse(tier)]


def cycle_position(round_number: int) -> int:
    """Position 1, 2 or 3 of the round within its cycle."""
    return ((round_number - 1) % ROUNDS_PER_EXPANSION) + 1


def is_expansion_round(round_number: int) -> bool:
    """Rounds 4, 7, 10, ... open a new cycle and grow the grid."""
    return round_number > 1 and (round_number - 1) % ROUNDS_PER_EXPANSION == 0


def grow_grid(size: GridSize, tier: DifficultyTier) -> GridSize:
    """Add a column while cols <= rows, otherwise a row; each side capped per tier."""
    cap = MAX_SIDE[DifficultyTier.parse(tier)]
    if size.cols <= size.rows:
        return GridSize(size.rows, min(size.cols + 1, cap))
    return GridSize(min(size.rows + 1, cap), size.cols)


def grid_size_for_round(tier: DifficultyTier, round_number: int) -> GridSize:
    size = initial_grid_size(tier)
    for r in range(2, round_number + 1):
        if is_expansion_round(r):
            size = grow_grid(size, tier)
    return size


def target_count(total: int, position: int) -> int:
    """min(floor(total * pct) + 1, total - 1) for the cycle position."""
    pct = TARGET_PERCENTAGES[position - 1]
    return min(total * pct // 100 + 1, total - 1)


def generate_targets(size: GridSize, round_number: int, rng: RNG) -> FrozenSet[int]:
    count = target_count(size.total, cycle_position(round_number))
    return frozenset(rng.sample(range(size.total), count))


def show_duration(size: GridSize, tuning: TilesTuning) -> float:
    if size.total > tuning.large_grid_threshold:
        return tuning.large_grid_show_duration
    return tuning.show_duration


@dataclass(frozen=True)
class Tile:
    id: int
    is_target: bool
    is_clicked: bool = False
    is_wrong: bool = False


def build_tiles(size: GridSize, targets: FrozenSet[int]) -> Tuple[Tile, ...]:
    return tuple(Tile(id=i, is_target=i in targets) for i in range(size.total))


class TilesPhase(str, Enum):
    SHOWING = "showing"
    PLAYING = "playing"
    FEEDBACK = "feedback"
    NEXT_ROUND = "nextRound"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class MemoryTilesState:
    lives: int
    grid: GridSize
    phase: TilesPhase = TilesPhase.SHOWING
    round: int = 1
    score: int = 0
    tiles: Tuple[Tile, ...] = ()
    feedback: Optional[Feedback] = None

    @property
    def targets(self) -> FrozenSet[int]:
        return frozenset(t.id for t in self.tiles if t.is_target)

    @property
    def targets_remaining(self) -> int:
        return sum(1 for t in self.tiles if t.is_target and not t.is_clicked)


class MemoryTilesSession(SessionEngine[MemoryTilesState]):
    """Memory Tiles state machine.

    showing -> playing -> feedback -> nextRound -> showing (loop) | game-over
    """

    game_id = GAME_ID
    game_over_phase = TilesPhase.GAME_OVER

    def _initial_state(self) -> MemoryTilesState:
        return MemoryTilesState(lives=self.tuning.lives, grid=initial_grid_size(self.tier))

    def _begin(self) -> None:
        state = self._state
        self._show_round(generate_targets(state.grid, state.round, self.rng))

    def end_game(self) -> None:
        """Player chose to stop: commit the score now and end the session."""
        if not self._started or self.is_over:
            return
        logger.info("%s: ended by player in round %d", self.game_id, self._state.round)
        self._finish(feedback=None)

    # --------------- Round flow ---------------

    def _show_round(self, targets: FrozenSet[int]) -> None:
        state = self._commit(
            phase=TilesPhase.SHOWING,
            tiles=build_tiles(self._state.grid, targets),
            feedback=None,
        )
        logger.debug(
            "%s: round %d showing %d targets on %dx%d",
            self.game_id, state.round, len(targets), state.grid.rows, state.grid.cols,
        )
        self._schedule(show_duration(state.grid, self.tuning.memory_tiles), self._start_playing, "show")

    def _start_playing(self) -> None:
        self._commit(phase=TilesPhase.PLAYING)

    def _handle_input(self, event: Any) -> None:
        state = self._state
        if state.phase != TilesPhase.PLAYING:
            return
        if isinstance(event, bool) or not isinstance(event, int) or not 0 <= event < len(state.tiles):
            logger.debug("%s: tap %r ignored", self.game_id, event)
            return
        tile = state.tiles[event]
        if tile.is_clicked:
            return
        if not tile.is_target:
            self._miss(tile.id)
            return

        tiles = tuple(
            Tile(t.id, t.is_target, is_clicked=True) if t.id == tile.id else t for t in state.tiles
        )
        if all(t.is_clicked for t in tiles if t.is_target):
            self._succeed(tiles)
        else:
            self._commit(tiles=tiles)

    def _miss(self, tile_id: int) -> None:
        state = self._state
        lives = max(0, state.lives - 1)
        # Mark the wrong tile and reveal every target.
        tiles = tuple(
            Tile(t.id, t.is_target, is_clicked=t.is_clicked or t.is_target or t.id == tile_id, is_wrong=t.id == tile_id)
            for t in state.tiles
        )
        logger.info("%s: wrong tile %d in round %d; lives %d -> %d", self.game_id, tile_id, state.round, state.lives, lives)
        self._commit(phase=TilesPhase.FEEDBACK, feedback=Feedback.INCORRECT, tiles=tiles, lives=lives)
        self._schedule(self.tuning.memory_tiles.feedback_duration, self._after_miss, "miss-feedback")

    def _after_miss(self) -> None:
        state = self._state
        if state.lives == 0:
            self._finish(feedback=None)
            return
        # Same round again: same grid, same targets.
        self._show_round(state.targets)

    def _succeed(self, tiles: Tuple[Tile, ...]) -> None:
        state = self._state
        score = state.score + 1
        self.ledger.update_score(self.score_key, score)
        logger.info("%s: round %d cleared (score=%d)", self.game_id, state.round, score)
        self._commit(phase=TilesPhase.FEEDBACK, feedback=Feedback.CORRECT, tiles=tiles, score=score)
        self._schedule(self.tuning.memory_tiles.feedback_duration, self._enter_next_round, "success-feedback")

    def _enter_next_round(self) -> None:
        state = self._state
        next_round = state.round + 1
        grid = grow_grid(state.grid, self.tier) if is_expansion_round(next_round) else state.grid
        if grid != state.grid:
            logger.info("%s: grid grows to %dx%d for round %d", self.game_id, grid.rows, grid.cols, next_round)
        self._commit(phase=TilesPhase.NEXT_ROUND, round=next_round, grid=grid, tiles=(), feedback=None)
        self._schedule(
            self.tuning.memory_tiles.next_round_delay,
            lambda: self._show_round(generate_targets(grid, next_round, self.rng)),
            "next-round",
        )
