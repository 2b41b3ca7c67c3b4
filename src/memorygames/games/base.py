from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..core.rng import RNG
from ..ledger import ScoreEntry, ScoreLedger, score_key
from ..scheduling import Scheduler, TimerHandle
from ..tuning import GameTuning

logger = logging.getLogger(__name__)

S = TypeVar("S")
Listener = Callable[[Any], None]


class Feedback(str, Enum):
    """Result shown to the player after a tap has been judged."""

    CORRECT = "correct"
    INCORRECT = "incorrect"


class SessionEngine(ABC, Generic[S]):
    """Base state machine for one play-through of a mini-game.

    Subclasses keep their whole session in one frozen state dataclass exposing at
    least ``phase``, ``score`` and ``lives``. Every transition goes through
    :meth:`_commit`, which swaps in the new value and notifies listeners.

    Timers are issued through :meth:`_schedule` / :meth:`_schedule_repeating`.
    Each callback captures the session token current at scheduling time and is
    dropped if the token moved on; reset, teardown and game over also cancel
    every outstanding handle. A callback therefore never touches the state of a
    superseded session.

    Usage:
        session = LaneMemorySession(ledger, scheduler)
        if session.rules_pending:
            ...  # UI shows the rules overlay first
        session.start(dont_show_again=True)
        session.submit_input("left")
    """

    game_id: str = ""
    game_over_phase: Enum

    def __init__(
        self,
        ledger: ScoreLedger,
        scheduler: Scheduler,
        rng: Optional[RNG] = None,
        tuning: Optional[GameTuning] = None,
    ) -> None:
        self.ledger = ledger
        self.scheduler = scheduler
        self.rng = rng or RNG()
        self.tuning = tuning or GameTuning()
        self.tier = ledger.get_selected_difficulty(self.game_id)
        self._token = 0
        self._handles: List[TimerHandle] = []
        self._listeners: List[Listener] = []
        self._started = False
        self._state: S = self._initial_state()

    # --------------- Public API ---------------

    @property
    def state(self) -> S:
        return self._state

    @property
    def token(self) -> int:
        return self._token

    @property
    def started(self) -> bool:
        return self._started

    @property
    def is_over(self) -> bool:
        return self._state.phase == self.game_over_phase

    @property
    def score_key(self) -> str:
        return score_key(self.game_id, self.tier)

    @property
    def rules_pending(self) -> bool:
        """True until the player ticked "don't show again" on the rules overlay."""
        return not self.ledger.has_seen_rules(self.game_id)

    def add_listener(self, listener: Listener) -> None:
        """Subscribe to state changes; called with the new state after every transition."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self, dont_show_again: bool = False) -> None:
        """Start the first round. Safe to call twice; the second call is a no-op."""
        if self._started:
            logger.debug("%s: start() called while already started", self.game_id)
            return
        if dont_show_again:
            self.ledger.set_rules_shown(self.game_id, True)
        self._started = True
        logger.info("%s: session started (tier=%s)", self.game_id, self.tier.value)
        self._begin()

    def reset(self) -> None:
        """Discard the current session and start a fresh one (the "play again" path)."""
        self._invalidate()
        self.tier = self.ledger.get_selected_difficulty(self.game_id)
        self.ledger.reset_current_score(self.score_key)
        self._state = self._initial_state()
        self._started = True
        logger.info("%s: session reset (tier=%s, token=%d)", self.game_id, self.tier.value, self._token)
        self._notify()
        self._begin()

    def teardown(self) -> None:
        """Stop all pending callbacks; the UI is leaving the game."""
        self._invalidate()
        self._started = False
        logger.debug("%s: torn down (token=%d)", self.game_id, self._token)

    def submit_input(self, event: Any) -> None:
        """Single input entry point. Events outside an accepting phase are ignored."""
        if not self._started or self.is_over:
            logger.debug("%s: input %r ignored (started=%s, over=%s)", self.game_id, event, self._started, self.is_over)
            return
        self._handle_input(event)

    def final_score(self) -> ScoreEntry:
        """Ledger entry for the end screen (current and best for this tier)."""
        return self.ledger.get_current_score(self.score_key)

    # --------------- Subclass hooks ---------------

    @abstractmethod
    def _initial_state(self) -> S:
        """Fresh state for a new session at the current tier."""

    @abstractmethod
    def _begin(self) -> None:
        """Kick off the first round once the session has started."""

    @abstractmethod
    def _handle_input(self, event: Any) -> None:
        """Validate and apply one input event."""

    # --------------- Internal helpers ---------------

    def _commit(self, **changes: Any) -> S:
        self._state = replace(self._state, **changes)
        self._notify()
        return self._state

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as ex:  # listeners belong to the UI layer
                logger.exception("%s: listener errored: %s", self.game_id, ex)

    def _guard(self, fn: Callable[[], None], label: str) -> Callable[[], None]:
        token = self._token

        def fire() -> None:
            if token != self._token:
                logger.debug("%s: stale %s callback ignored (token %d, now %d)", self.game_id, label, token, self._token)
                return
            fn()

        return fire

    def _schedule(self, delay: float, fn: Callable[[], None], label: str) -> TimerHandle:
        handle = self.scheduler.call_later(delay, self._guard(fn, label))
        self._track(handle)
        return handle

    def _schedule_repeating(self, interval: float, fn: Callable[[], None], label: str) -> TimerHandle:
        handle = self.scheduler.call_every(interval, self._guard(fn, label))
        self._track(handle)
        return handle

    def _track(self, handle: TimerHandle) -> None:
        self._handles = [h for h in self._handles if not h.cancelled]
        self._handles.append(handle)

    def _invalidate(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        self._token += 1

    def _finish(self, **changes: Any) -> None:
        """Enter game over and commit the session score to the ledger."""
        self._invalidate()
        state = self._commit(phase=self.game_over_phase, **changes)
        entry = self.ledger.update_score(self.score_key, state.score)
        logger.info(
            "%s: game over (score=%d, best=%d, key=%s)", self.game_id, state.score, entry.highest, self.score_key
        )
