from __future__ import annotations

import pytest

from memorygames.core.difficulty import DifficultyTier
from memorygames.errors import LedgerError, LedgerValidationError
from memorygames.ledger import InMemoryLedgerStore, ScoreEntry, ScoreLedger, score_key


def test_highest_tracks_running_maximum(ledger):
    running = 0
    for score in [3, 1, 7, 0, 5, 7, 2]:
        entry = ledger.update_score("mathdrops-easy", score)
        running = max(running, score)
        assert entry.current == score
        assert entry.highest == running
    assert ledger.get_current_score("mathdrops-easy") == ScoreEntry(current=2, highest=7)


def test_reset_current_score_keeps_highest(ledger):
    ledger.update_score("lane-memory-hard", 4)
    entry = ledger.reset_current_score("lane-memory-hard")
    assert entry == ScoreEntry(current=0, highest=4)
    # Resetting an unknown key creates a zero entry.
    assert ledger.reset_current_score("memory-tiles-easy") == ScoreEntry()


def test_unknown_key_reads_zero(ledger):
    assert ledger.get_current_score("nope") == ScoreEntry(0, 0)


@pytest.mark.parametrize("bad", [-1, 1.5, "3", True, None])
def test_update_score_rejects_invalid_values(ledger, bad):
    with pytest.raises(LedgerValidationError):
        ledger.update_score("mathdrops-easy", bad)
    assert ledger.get_current_score("mathdrops-easy") == ScoreEntry()


def test_rules_flags(ledger):
    assert ledger.has_seen_rules("mathdrops") is False
    ledger.set_rules_shown("mathdrops", True)
    assert ledger.has_seen_rules("mathdrops") is True
    assert ledger.has_seen_rules("lane-memory") is False


def test_selected_difficulty_defaults_to_easy(ledger):
    assert ledger.get_selected_difficulty("memory-tiles") is DifficultyTier.EASY
    ledger.set_selected_difficulty("memory-tiles", "HARD")
    assert ledger.get_selected_difficulty("memory-tiles") is DifficultyTier.HARD
    with pytest.raises(LedgerValidationError):
        ledger.set_selected_difficulty("memory-tiles", "impossible")


def test_score_key():
    assert score_key("lane-memory", DifficultyTier.MEDIUM) == "lane-memory-medium"
    assert score_key("mathdrops", "hard") == "mathdrops-hard"
    assert score_key("memory-tiles") == "memory-tiles"


def test_every_mutation_flushes_to_store():
    store = InMemoryLedgerStore()
    ledger = ScoreLedger(store)
    ledger.update_score("a-easy", 1)
    ledger.set_rules_shown("a", True)
    ledger.set_selected_difficulty("a", "medium")
    assert store.save_count == 3

    reloaded = ScoreLedger(store)
    assert reloaded.get_current_score("a-easy") == ScoreEntry(1, 1)
    assert reloaded.has_seen_rules("a")
    assert reloaded.get_selected_difficulty("a") is DifficultyTier.MEDIUM


class FailingStore(InMemoryLedgerStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, snapshot) -> None:
        if self.fail:
            raise LedgerError("disk full")
        super().save(snapshot)


def test_failed_write_leaves_ledger_unchanged():
    store = FailingStore()
    ledger = ScoreLedger(store)
    ledger.update_score("mathdrops-easy", 2)

    store.fail = True
    with pytest.raises(LedgerError):
        ledger.update_score("mathdrops-easy", 9)
    assert ledger.get_current_score("mathdrops-easy") == ScoreEntry(2, 2)


def test_snapshot_is_a_copy(ledger):
    ledger.update_score("mathdrops-easy", 2)
    snap = ledger.snapshot()
    snap.scores["mathdrops-easy"] = ScoreEntry(99, 99)
    assert ledger.get_current_score("mathdrops-easy") == ScoreEntry(2, 2)
