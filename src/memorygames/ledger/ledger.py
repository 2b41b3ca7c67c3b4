from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Optional, Union

from ..core.difficulty import DEFAULT_TIER, DifficultyTier
from ..errors import LedgerError, LedgerValidationError
from .models import LedgerSnapshot, ScoreEntry
from .store import InMemoryLedgerStore, LedgerStore

logger = logging.getLogger(__name__)


def score_key(game_id: str, tier: Optional[Union[DifficultyTier, str]] = None) -> str:
    """Build the ledger key for a game: "<game>-<tier>", or bare "<game>"."""
    if tier is None:
        return game_id
    return f"{game_id}-{DifficultyTier.parse(tier).value}"


class ScoreLedger:
    """Persisted score and preference records shared by every game session.

    The ledger loads its store on construction and flushes the full snapshot on
    every mutating call. Each mutation is a read-modify-write on a copy of the
    snapshot under a re-entrant lock; the copy only replaces the live snapshot
    once the store accepted it, so a failed write leaves the ledger unchanged.
    """

    def __init__(self, store: Optional[LedgerStore] = None) -> None:
        self.store = store or InMemoryLedgerStore()
        self._lock = RLock()
        self._snapshot = self.store.load()
        logger.info(
            "Ledger loaded: %d score entries, %d tiers, %d rules flags",
            len(self._snapshot.scores),
            len(self._snapshot.selected_difficulties),
            len(self._snapshot.rules_shown),
        )

    # Scores

    def update_score(self, game_id: str, score: int) -> ScoreEntry:
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise LedgerValidationError(f"Score must be a non-negative integer, got {score!r}")

        def apply(snap: LedgerSnapshot) -> None:
            entry = snap.scores.get(game_id, ScoreEntry())
            snap.scores[game_id] = entry.with_score(score)

        snap = self._mutate(apply)
        entry = snap.scores[game_id]
        logger.debug("Score updated for %s: current=%d highest=%d", game_id, entry.current, entry.highest)
        return entry

    def get_current_score(self, game_id: str) -> ScoreEntry:
        with self._lock:
            return self._snapshot.scores.get(game_id, ScoreEntry())

    def reset_current_score(self, game_id: str) -> ScoreEntry:
        def apply(snap: LedgerSnapshot) -> None:
            entry = snap.scores.get(game_id, ScoreEntry())
            snap.scores[game_id] = entry.with_current_reset()

        return self._mutate(apply).scores[game_id]

    # Rules overlay

    def set_rules_shown(self, game_id: str, shown: bool) -> None:
        def apply(snap: LedgerSnapshot) -> None:
            snap.rules_shown[game_id] = bool(shown)

        self._mutate(apply)

    def has_seen_rules(self, game_id: str) -> bool:
        with self._lock:
            return self._snapshot.rules_shown.get(game_id, False)

    # Difficulty

    def set_selected_difficulty(self, game_id: str, tier: Union[DifficultyTier, str]) -> None:
        parsed = DifficultyTier.parse(tier)

        def apply(snap: LedgerSnapshot) -> None:
            snap.selected_difficulties[game_id] = parsed

        self._mutate(apply)
        logger.info("Selected difficulty for %s: %s", game_id, parsed.value)

    def get_selected_difficulty(self, game_id: str) -> DifficultyTier:
        with self._lock:
            return self._snapshot.selected_difficulties.get(game_id, DEFAULT_TIER)

    def snapshot(self) -> LedgerSnapshot:
        """Return a copy of the full ledger for read-only display."""
        with self._lock:
            return self._snapshot.copy()

    # Internal

    def _mutate(self, fn: Callable[[LedgerSnapshot], None]) -> LedgerSnapshot:
        with self._lock:
            working = self._snapshot.copy()
            fn(working)
            working.touch()
            try:
                self.store.save(working)
            except LedgerError:
                logger.error("Ledger write failed; in-memory ledger left unchanged")
                raise
            self._snapshot = working
            return working
