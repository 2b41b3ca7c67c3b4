from __future__ import annotations

import logging

from memorygames.games.lanes import LaneMemorySession, LanePhase
from memorygames.games.mathdrops import MathdropsSession
from memorygames.games.tiles import MemoryTilesSession, TilesPhase
from memorygames.ledger import ScoreEntry


def test_rules_overlay_flag(ledger, scheduler, rng):
    session = LaneMemorySession(ledger, scheduler, rng=rng)
    assert session.rules_pending
    session.start(dont_show_again=True)
    assert ledger.has_seen_rules("lane-memory")
    assert not LaneMemorySession(ledger, scheduler, rng=rng).rules_pending


def test_start_without_dont_show_again_keeps_rules(ledger, scheduler, rng):
    session = MemoryTilesSession(ledger, scheduler, rng=rng)
    session.start()
    session.start()  # second call is a no-op
    assert session.rules_pending
    assert scheduler.pending == 1


def test_listeners_see_every_transition(ledger, scheduler, rng):
    session = LaneMemorySession(ledger, scheduler, rng=rng)
    phases = []
    session.add_listener(lambda state: phases.append(state.phase))
    session.start()
    scheduler.advance(5.0)
    assert phases[0] == LanePhase.PLAYING_SEQUENCE
    assert phases[-1] == LanePhase.WAITING_INPUT

    count = len(phases)
    session.remove_listener(phases.append)  # unknown listener is ignored
    session.submit_input("nothing")
    assert len(phases) == count


def test_listener_errors_are_logged_not_raised(ledger, scheduler, rng, caplog):
    session = MemoryTilesSession(ledger, scheduler, rng=rng)

    def boom(state):
        raise RuntimeError("render failed")

    session.add_listener(boom)
    with caplog.at_level(logging.ERROR):
        session.start()
    assert session.state.phase == TilesPhase.SHOWING
    assert any("listener errored" in rec.message for rec in caplog.records)


def test_reset_discards_pending_callbacks(ledger, scheduler, rng):
    session = MemoryTilesSession(ledger, scheduler, rng=rng)
    session.start()
    scheduler.advance(3.0)
    for tile_id in sorted(session.state.targets):
        session.submit_input(tile_id)
    assert session.state.phase == TilesPhase.FEEDBACK
    token = session.token

    session.reset()
    assert session.token == token + 1
    assert session.state.round == 1
    assert session.state.score == 0
    assert session.state.lives == 3
    assert session.state.phase == TilesPhase.SHOWING
    assert ledger.get_current_score("memory-tiles-easy") == ScoreEntry(0, 1)

    # The old success-feedback timer must not advance the new session's round.
    scheduler.advance(3.0)
    assert session.state.round == 1
    assert session.state.phase == TilesPhase.PLAYING


def test_stale_callback_is_ignored_after_reset(ledger, scheduler, rng, caplog):
    session = LaneMemorySession(ledger, scheduler, rng=rng)
    session.start()
    fired = []
    stale = session._guard(lambda: fired.append(True), "probe")

    session.reset()
    with caplog.at_level(logging.DEBUG, logger="memorygames.games.base"):
        stale()
    assert fired == []
    assert any("stale probe callback ignored" in rec.message for rec in caplog.records)


def test_teardown_stops_everything(ledger, scheduler, rng):
    session = MathdropsSession(ledger, scheduler, rng=rng)
    session.start()
    scheduler.advance(3.0)
    assert scheduler.pending == 2

    session.teardown()
    drops = session.state.drops
    assert scheduler.pending == 0
    assert not session.started
    scheduler.advance(10.0)
    assert session.state.drops == drops
    session.submit_input("5")
    assert session.state.entry == ""


def test_tier_change_applies_on_reset(ledger, scheduler, rng):
    session = LaneMemorySession(ledger, scheduler, rng=rng)
    session.start()
    assert session.state.turn_count == 2

    ledger.set_selected_difficulty("lane-memory", "medium")
    assert session.state.turn_count == 2  # fixed for the running session
    session.reset()
    assert session.score_key == "lane-memory-medium"
    assert session.state.turn_count == 4
