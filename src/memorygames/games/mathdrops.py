"""Mathdrops: arithmetic expressions fall down the play area.

Typing an answer clears every falling drop with that answer. Drops that fall
past the bottom cost one life each. Operand ranges widen with an internal level
that rises every 5 points.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.difficulty import DifficultyTier
from ..core.rng import RNG
from .base import SessionEngine

logger = logging.getLogger(__name__)

GAME_ID = "mathdrops"

BASE_BY_TIER: Dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 10,
    DifficultyTier.MEDIUM: 15,
    DifficultyTier.HARD: 20,
}
MAX_OPERAND = 50
MULTIPLY_CAP = 12
DIVIDE_CAP = 10


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "/"


OPERATORS: Tuple[Operator, ...] = tuple(Operator)


@dataclass(frozen=True)
class NumberRange:
    min_num: int
    max_num: int


def number_range(tier: DifficultyTier, level: int) -> NumberRange:
    base = BASE_BY_TIER[DifficultyTier.parse(tier)]
    return NumberRange(
        min_num=max(base - 10 + 2 * level, 1),
        max_num=min(base + 2 * level, MAX_OPERAND),
    )


@dataclass(frozen=True)
class Expression:
    left: int
    operator: Operator
    right: int
    answer: int

    @property
    def text(self) -> str:
        return f"{self.left} {self.operator.value} {self.right}"


def _draw(rng: RNG, low: int, high: int) -> int:
    # At high levels the floor can pass the cap; collapse onto the cap.
    return rng.randint(min(low, high), high)


def generate_expression(
    tier: DifficultyTier,
    level: int,
    rng: RNG,
    operator: Optional[Operator] = None,
) -> Expression:
    """Random expression for the tier and level with an integer, non-negative answer."""
    op = operator or rng.choice(OPERATORS)
    bounds = number_range(tier, level)
    lo, hi = bounds.min_num, bounds.max_num

    if op is Operator.ADD:
        a = _draw(rng, lo, hi)
        b = _draw(rng, lo, hi)
        return Expression(a, op, b, a + b)
    if op is Operator.SUBTRACT:
        a = _draw(rng, lo + 5, hi)
        b = _draw(rng, lo, min(a - 1, hi))
        return Expression(a, op, b, a - b)
    if op is Operator.MULTIPLY:
        m_lo = max(lo // 2, 1)
        m_hi = min(hi // 2, MULTIPLY_CAP)
        a = _draw(rng, m_lo, m_hi)
        b = _draw(rng, m_lo, m_hi)
        return Expression(a, op, b, a * b)
    d_lo = max(lo // 2, 1)
    d_hi = min(hi // 2, DIVIDE_CAP)
    divisor = _draw(rng, d_lo, d_hi)
    quotient = _draw(rng, d_lo, d_hi)
    return Expression(divisor * quotient, op, divisor, quotient)


@dataclass(frozen=True)
class Drop:
    id: int
    expression: str
    answer: int
    x: float
    y: float
    speed: float
    created: float


def advance_drops(drops: Tuple[Drop, ...], bottom: float) -> Tuple[Tuple[Drop, ...], Tuple[Drop, ...]]:
    """Move every drop by its speed; split into (still falling, fell past bottom)."""
    moved = [replace(d, y=d.y + d.speed) for d in drops]
    kept = tuple(d for d in moved if d.y <= bottom)
    missed = tuple(d for d in moved if d.y > bottom)
    return kept, missed


class MathdropsPhase(str, Enum):
    PLAYING = "playing"
    GAME_OVER = "game-over"


# Keypad alphabet
KEY_CLEAR = "C"
KEY_BACKSPACE = "←"
KEY_SUBMIT = "✓"
KEY_MINUS = "-"
DIGITS = frozenset("0123456789")
KEYBOARD_ALIASES = {"Enter": KEY_SUBMIT, "Backspace": KEY_CLEAR}


@dataclass(frozen=True)
class MathdropsState:
    lives: int
    phase: MathdropsPhase = MathdropsPhase.PLAYING
    score: int = 0
    level: int = 1
    drops: Tuple[Drop, ...] = ()
    entry: str = ""


class MathdropsSession(SessionEngine[MathdropsState]):
    """Continuous Mathdrops session driven by a repeating tick and a spawner."""

    game_id = GAME_ID
    game_over_phase = MathdropsPhase.GAME_OVER

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._drop_ids = itertools.count(1)

    def _initial_state(self) -> MathdropsState:
        return MathdropsState(lives=self.tuning.lives)

    def _begin(self) -> None:
        cfg = self.tuning.mathdrops
        self._schedule_repeating(cfg.tick_interval, self._tick, "tick")
        self._schedule_repeating(cfg.spawn_interval, self.spawn_drop, "spawn")
        self._commit(phase=MathdropsPhase.PLAYING)

    # --------------- Simulation ---------------

    def spawn_drop(self, expression: Optional[Expression] = None) -> Optional[Drop]:
        """Add one drop at the top; the spawner calls this every period."""
        if not self._started or self.is_over:
            return None
        cfg = self.tuning.mathdrops
        state = self._state
        expr = expression or generate_expression(self.tier, state.level, self.rng)
        drop = Drop(
            id=next(self._drop_ids),
            expression=expr.text,
            answer=expr.answer,
            x=self.rng.random() * max(0.0, cfg.play_width - cfg.drop_width),
            y=cfg.spawn_y,
            speed=cfg.drop_speed,
            created=self.scheduler.now(),
        )
        self._commit(drops=state.drops + (drop,))
        logger.debug("%s: spawned drop %d '%s'", self.game_id, drop.id, drop.expression)
        return drop

    def _tick(self) -> None:
        state = self._state
        kept, missed = advance_drops(state.drops, self.tuning.mathdrops.play_height)
        if not missed:
            self._commit(drops=kept)
            return
        lives = max(0, state.lives - len(missed))
        logger.info("%s: %d drop(s) missed; lives %d -> %d", self.game_id, len(missed), state.lives, lives)
        if lives == 0:
            self._finish(drops=kept, lives=0, entry="")
            return
        self._commit(drops=kept, lives=lives)

    # --------------- Input ---------------

    def _handle_input(self, event: Any) -> None:
        if isinstance(event, int) and not isinstance(event, bool):
            self.submit_answer(event)
            return
        if not isinstance(event, str):
            return
        key = KEYBOARD_ALIASES.get(event, event)
        entry = self._state.entry
        if key in DIGITS:
            self._commit(entry=entry + key)
        elif key == KEY_MINUS:
            if entry == "":
                self._commit(entry=KEY_MINUS)
        elif key == KEY_CLEAR:
            self._commit(entry="")
        elif key == KEY_BACKSPACE:
            self._commit(entry=entry[:-1])
        elif key == KEY_SUBMIT:
            self._submit_entry()
        else:
            logger.debug("%s: key %r ignored", self.game_id, event)

    def _submit_entry(self) -> None:
        try:
            value = int(self._state.entry)
        except ValueError:
            return
        self.submit_answer(value)

    def submit_answer(self, value: int) -> List[Drop]:
        """Clear every live drop whose answer equals value; returns the cleared drops."""
        if not self._started or self.is_over:
            return []
        state = self._state
        matched = [d for d in state.drops if d.answer == value]
        if not matched:
            self._commit(entry="")
            return []
        score = state.score + len(matched)
        step = self.tuning.mathdrops.level_step
        level = state.level + (score // step - state.score // step)
        self.ledger.update_score(self.score_key, score)
        self._commit(
            drops=tuple(d for d in state.drops if d.answer != value),
            score=score,
            level=level,
            entry="",
        )
        if level != state.level:
            logger.info("%s: level up %d -> %d at score %d", self.game_id, state.level, level, score)
        return matched
