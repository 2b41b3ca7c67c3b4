"""Lane Memory: watch lanes light up turn by turn, then tap them back.

Round r plays ``initial_turns_for_tier(tier) + (r - 1)`` turns. Each turn lights
one or two of the three lanes at once; the player taps every lit lane of the
current turn (in any order) before moving on. A wrong lane costs a life and
replays the same sequence from its first turn.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..core.difficulty import DifficultyTier
from ..core.rng import RNG
from .base import Feedback, SessionEngine

logger = logging.getLogger(__name__)

GAME_ID = "lane-memory"


class Lane(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


LANES: Tuple[Lane, ...] = (Lane.LEFT, Lane.CENTER, Lane.RIGHT)

INITIAL_TURNS: Dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 2,
    DifficultyTier.MEDIUM: 4,
    DifficultyTier.HARD: 6,
}


def initial_turns_for_tier(tier: DifficultyTier) -> int:
    return INITIAL_TURNS[DifficultyTier.parse(tier)]


@dataclass(frozen=True)
class Turn:
    """Lanes lit together as one unit of the sequence."""

    lanes: Tuple[Lane, ...]


def generate_turn(rng: RNG) -> Turn:
    """Pick 1 or 2 lanes (50/50) without replacement."""
    count = 1 if rng.random() < 0.5 else 2
    pool = list(LANES)
    lanes = []
    for _ in range(count):
        lanes.append(pool.pop(rng.randint(0, len(pool) - 1)))
    return Turn(lanes=tuple(lanes))


def generate_sequence(tier: DifficultyTier, round_number: int, rng: RNG) -> Tuple[Turn, ...]:
    if round_number < 1:
        raise ValueError("round_number must be >= 1")
    count = initial_turns_for_tier(tier) + (round_number - 1)
    return tuple(generate_turn(rng) for _ in range(count))


class LanePhase(str, Enum):
    PLAYING_SEQUENCE = "playing-sequence"
    WAITING_INPUT = "waiting-input"
    VALIDATING = "validating"
    TURN_COMPLETE = "turn-complete"
    ROUND_COMPLETE = "round-complete"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class LaneState:
    lives: int
    phase: LanePhase = LanePhase.PLAYING_SEQUENCE
    round: int = 1
    score: int = 0
    sequence: Tuple[Turn, ...] = ()
    turn_index: int = 0
    turn_clicks: Tuple[Lane, ...] = ()
    active_lanes: Tuple[Lane, ...] = ()
    validation: Optional[Feedback] = None
    wrong_lane: Optional[Lane] = None

    @property
    def turn_count(self) -> int:
        return len(self.sequence)

    @property
    def current_turn(self) -> Optional[Turn]:
        if 0 <= self.turn_index < len(self.sequence):
            return self.sequence[self.turn_index]
        return None


class LaneMemorySession(SessionEngine[LaneState]):
    """Lane Memory state machine.

    playing-sequence -> waiting-input -> {validating -> waiting-input | turn-complete}
    -> round-complete -> playing-sequence (next round) | game-over
    """

    game_id = GAME_ID
    game_over_phase = LanePhase.GAME_OVER

    def _initial_state(self) -> LaneState:
        return LaneState(lives=self.tuning.lives)

    def _begin(self) -> None:
        sequence = generate_sequence(self.tier, 1, self.rng)
        self._play_sequence(sequence=sequence, round=1)

    # --------------- Playback ---------------

    def _play_sequence(self, **changes: Any) -> None:
        sequence = changes.get("sequence", self._state.sequence)
        state = self._commit(
            phase=LanePhase.PLAYING_SEQUENCE,
            turn_index=0,
            turn_clicks=(),
            active_lanes=sequence[0].lanes,
            validation=None,
            wrong_lane=None,
            **changes,
        )
        logger.debug("%s: round %d playback of %d turns", self.game_id, state.round, state.turn_count)
        self._schedule_end_highlight(0)

    def _highlight_turn(self, index: int) -> None:
        self._commit(turn_index=index, active_lanes=self._state.sequence[index].lanes)
        self._schedule_end_highlight(index)

    def _schedule_end_highlight(self, index: int) -> None:
        self._schedule(
            self.tuning.lane_memory.activation_duration,
            lambda: self._end_highlight(index),
            "highlight",
        )

    def _end_highlight(self, index: int) -> None:
        if index < self._state.turn_count - 1:
            self._commit(active_lanes=())
            self._schedule(
                self.tuning.lane_memory.pause_between_turns,
                lambda: self._highlight_turn(index + 1),
                "pause",
            )
            return
        self._commit(phase=LanePhase.WAITING_INPUT, turn_index=0, active_lanes=())

    # --------------- Input ---------------

    def _handle_input(self, event: Any) -> None:
        try:
            lane = Lane(event)
        except ValueError:
            logger.debug("%s: unknown lane %r ignored", self.game_id, event)
            return
        state = self._state
        if state.phase != LanePhase.WAITING_INPUT:
            return
        turn = state.current_turn
        if lane not in turn.lanes:
            self._miss(lane)
            return
        if lane in state.turn_clicks:
            return

        clicks = state.turn_clicks + (lane,)
        complete = set(clicks) == set(turn.lanes)
        self._commit(
            turn_clicks=clicks,
            active_lanes=clicks,
            validation=Feedback.CORRECT,
            phase=LanePhase.TURN_COMPLETE if complete else LanePhase.WAITING_INPUT,
        )
        if complete:
            self._schedule(self.tuning.lane_memory.turn_complete_delay, self._after_turn_complete, "turn-complete")

    def _miss(self, lane: Lane) -> None:
        state = self._state
        lives = max(0, state.lives - 1)
        logger.info("%s: wrong lane %s on turn %d; lives %d -> %d", self.game_id, lane.value, state.turn_index + 1, state.lives, lives)
        self._commit(
            phase=LanePhase.VALIDATING,
            lives=lives,
            validation=Feedback.INCORRECT,
            wrong_lane=lane,
            active_lanes=state.current_turn.lanes + (lane,),
        )
        self._schedule(self.tuning.lane_memory.miss_feedback_duration, self._after_miss, "miss-feedback")

    def _after_miss(self) -> None:
        if self._state.lives == 0:
            self._finish(active_lanes=(), validation=None, wrong_lane=None)
            return
        # Same sequence again from the first turn; the round is not regenerated.
        self._play_sequence()

    def _after_turn_complete(self) -> None:
        state = self._state
        next_index = state.turn_index + 1
        if next_index >= state.turn_count:
            self._commit(phase=LanePhase.ROUND_COMPLETE, active_lanes=(), validation=None, wrong_lane=None)
            self._schedule(self.tuning.lane_memory.round_complete_delay, self._complete_round, "round-complete")
            return
        self._commit(
            phase=LanePhase.WAITING_INPUT,
            turn_index=next_index,
            turn_clicks=(),
            active_lanes=(),
            validation=None,
            wrong_lane=None,
        )

    def _complete_round(self) -> None:
        state = self._state
        score = state.score + 1
        self.ledger.update_score(self.score_key, score)
        next_round = state.round + 1
        logger.info("%s: round %d complete (score=%d)", self.game_id, state.round, score)
        self._play_sequence(
            score=score,
            round=next_round,
            sequence=generate_sequence(self.tier, next_round, self.rng),
        )
