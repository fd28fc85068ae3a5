"""Tests for snakes_ladders.game (turn engine)."""

import random

import pytest

from snakes_ladders import game
from snakes_ladders.config import GameConfig, PlayerSpec
from snakes_ladders.game import (
    ListObserver,
    TurnEngine,
    TurnPhase,
    compute_move,
)


class DeferredScheduler:
    """Holds callbacks until the test decides to fire them."""

    def __init__(self):
        self.pending: list = []

    def call_later(self, delay, callback):
        self.pending.append((delay, callback))

    def run_pending(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def _kinds(engine: TurnEngine) -> list[str]:
    return [e.kind for e in engine.state.log]


# ── compute_move ─────────────────────────────────────────────────────

def test_plain_move():
    move = compute_move(10, 3)
    assert move.landed == 13
    assert move.final == 13
    assert move.kind is None
    assert not move.won


def test_move_onto_ladder():
    move = compute_move(1, 6)
    assert move.landed == 7
    assert move.final == 14
    assert move.kind == "ladder"


def test_move_onto_snake():
    move = compute_move(10, 6)
    assert move.landed == 16
    assert move.final == 6
    assert move.final < move.landed
    assert move.kind == "snake"


def test_exact_landing_on_100_wins():
    move = compute_move(95, 5)
    assert move.final == 100
    assert move.won


def test_overshoot_stays_put():
    move = compute_move(98, 5)
    assert move.overshoot
    assert move.final == 98
    assert not move.won


@pytest.mark.parametrize("roll", [0, 7, -1])
def test_rejects_impossible_roll(roll):
    with pytest.raises(ValueError):
        compute_move(10, roll)


# ── resolve ──────────────────────────────────────────────────────────

def test_new_game_seeds_one_info_entry():
    engine = TurnEngine()
    assert [p.position for p in engine.state.players] == [1, 1]
    assert _kinds(engine) == ["info"]
    assert engine.state.log.entries()[0].message == "Game started! Player 1 goes first."
    assert engine.phase is TurnPhase.IDLE


def test_first_roll_six_climbs_ladder_and_passes_turn():
    engine = TurnEngine()
    engine.resolve(6)
    assert engine.state.players[0].position == 14
    assert engine.state.active_index == 1
    assert _kinds(engine) == ["ladder", "move", "info"]
    assert "ladder at 7 to 14" in engine.state.log.entries()[0].message
    assert engine.state.dice_value == 6
    assert engine.snapshot().dice_value == 6


def test_snake_sends_player_down():
    engine = TurnEngine()
    engine.state.players[0].position = 10
    engine.resolve(6)
    assert engine.state.players[0].position == 6
    assert _kinds(engine)[0] == "snake"
    assert "snake at 16 and fell to 6" in engine.state.log.entries()[0].message


def test_plain_move_logs_only_the_roll():
    engine = TurnEngine()
    engine.resolve(2)
    assert engine.state.players[0].position == 3
    assert _kinds(engine) == ["move", "info"]
    assert engine.state.log.entries()[0].message == "Player 1 rolled a 2."


def test_overshoot_keeps_position_and_still_passes_turn():
    engine = TurnEngine()
    engine.state.players[0].position = 98
    move = engine.resolve(5)
    assert move is not None and move.overshoot
    assert engine.state.players[0].position == 98
    assert engine.state.winner is None
    assert engine.state.active_index == 1
    assert _kinds(engine)[:2] == ["info", "move"]
    assert engine.state.log.entries()[0].message == "Player 1 needs exactly 2 to win."


def test_landing_on_100_declares_winner():
    engine = TurnEngine()
    engine.state.players[0].position = 95
    engine.resolve(5)
    assert engine.state.winner is engine.state.players[0]
    assert engine.phase is TurnPhase.GAME_OVER
    assert engine.state.active_index == 0
    assert _kinds(engine)[0] == "win"


def test_no_rolls_after_game_over():
    engine = TurnEngine()
    engine.state.players[0].position = 95
    engine.resolve(5)
    log_len = len(engine.state.log)

    assert engine.roll() is False
    assert engine.resolve(3) is None
    assert engine.play_turn(3) is None
    assert [p.position for p in engine.state.players] == [100, 1]
    assert len(engine.state.log) == log_len


def test_turn_order_wraps_for_three_players():
    config = GameConfig(players=[PlayerSpec("A", "#111"), PlayerSpec("B", "#222"), PlayerSpec("C", "#333")])
    engine = TurnEngine(config=config)
    for expected in [1, 2, 0, 1]:
        engine.resolve(1)
        assert engine.state.active_index == expected


def test_second_player_moves_on_their_turn():
    engine = TurnEngine()
    engine.resolve(3)   # Player 1: 1 → 4
    engine.resolve(4)   # Player 2: 1 → 5
    assert [p.position for p in engine.state.players] == [4, 5]
    assert engine.state.active_index == 0


# ── roll / rolling guard ─────────────────────────────────────────────

def test_roll_waits_for_scheduler():
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)

    assert engine.roll() is True
    assert engine.phase is TurnPhase.ROLLING
    assert engine.state.dice_value is None
    assert len(sched.pending) == 1
    assert sched.pending[0][0] == pytest.approx(0.6)

    sched.run_pending()
    assert engine.phase is TurnPhase.IDLE
    assert 1 <= engine.state.dice_value <= 6
    assert "move" in _kinds(engine)


def test_roll_while_rolling_is_ignored():
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)
    engine.roll()
    assert engine.roll() is False
    assert len(sched.pending) == 1


def test_scheduled_roll_uses_random_die(monkeypatch):
    monkeypatch.setattr(game, "roll_die", lambda: 6)
    engine = TurnEngine()
    engine.roll()
    assert engine.state.dice_value == 6
    assert engine.state.players[0].position == 14


def test_roll_die_range():
    random.seed(0)
    values = {game.roll_die() for _ in range(200)}
    assert values == {1, 2, 3, 4, 5, 6}


def test_reset_mid_roll_cancels_the_pending_roll():
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)
    engine.roll()
    engine.reset()
    sched.run_pending()

    assert _kinds(engine) == ["info"]
    assert engine.state.dice_value is None
    assert engine.phase is TurnPhase.IDLE


def test_stale_callback_does_not_finish_a_newer_roll():
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)
    engine.roll()
    engine.reset()
    engine.roll()
    sched.run_pending()

    assert _kinds(engine).count("move") == 1


def test_resolve_during_pending_roll_is_ignored():
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)
    engine.roll()

    assert engine.resolve(3) is None
    assert engine.state.players[0].position == 1

    sched.run_pending()
    assert _kinds(engine).count("move") == 1
    assert engine.state.active_index == 1


def test_rejected_die_value_leaves_roll_pending():
    obs = ListObserver()
    sched = DeferredScheduler()
    engine = TurnEngine(scheduler=sched)
    engine.subscribe(obs)
    engine.roll()
    seen = len(obs.snapshots)

    with pytest.raises(ValueError):
        engine.finish_roll(9)

    assert engine.state.dice_value is None
    assert engine.phase is TurnPhase.ROLLING
    assert len(obs.snapshots) == seen
    assert engine.finish_roll(2) is not None
    assert engine.state.dice_value == 2


def test_play_turn_rejects_bad_value_without_starting_a_roll():
    engine = TurnEngine()
    with pytest.raises(ValueError):
        engine.play_turn(0)
    assert engine.phase is TurnPhase.IDLE
    assert engine.state.dice_value is None


def test_finish_roll_without_pending_roll_is_ignored():
    engine = TurnEngine()
    assert engine.finish_roll(3) is None
    assert engine.state.players[0].position == 1


# ── reset ────────────────────────────────────────────────────────────

def test_reset_after_win():
    engine = TurnEngine()
    engine.state.players[0].position = 95
    engine.resolve(5)
    engine.state.dice_value = 5
    engine.reset()

    assert [p.position for p in engine.state.players] == [1, 1]
    assert engine.state.winner is None
    assert engine.state.dice_value is None
    assert engine.state.active_index == 0
    entries = engine.state.log.entries()
    assert len(entries) == 1
    assert entries[0].kind == "info"
    assert entries[0].message == "Game reset! Player 1 goes first."
    assert engine.roll() is True


# ── observers ────────────────────────────────────────────────────────

def test_observer_sees_every_change():
    obs = ListObserver()
    engine = TurnEngine()
    engine.subscribe(obs)
    engine.roll()

    # subscribe, rolling, resolved
    assert len(obs.snapshots) == 3
    assert obs.snapshots[1].rolling is True
    assert obs.snapshots[1].dice_value is None
    assert obs.latest.rolling is False
    assert obs.latest.dice_value is not None


def test_snapshot_is_a_copy():
    engine = TurnEngine()
    snap = engine.snapshot()
    engine.resolve(2)
    assert snap.players[0].position == 1
    assert len(snap.log) == 1


def test_snapshot_winner_and_phase():
    engine = TurnEngine()
    engine.state.players[1].position = 97
    engine.resolve(1)
    engine.resolve(3)
    snap = engine.snapshot()
    assert snap.winner is not None and snap.winner.name == "Player 2"
    assert snap.phase is TurnPhase.GAME_OVER


# ── autoplay ─────────────────────────────────────────────────────────

def test_play_to_end_finds_a_winner():
    random.seed(42)
    engine = TurnEngine()
    turns = engine.play_to_end(max_turns=10_000)
    assert engine.state.winner is not None
    assert engine.state.winner.position == 100
    assert 0 < turns < 10_000


def test_play_to_end_respects_turn_cap():
    engine = TurnEngine()
    assert engine.play_to_end(max_turns=3) == 3
    assert engine.state.log.entries()[-1].message.startswith("Game started!")


def test_config_needs_two_players():
    with pytest.raises(ValueError):
        GameConfig(players=[PlayerSpec("Solo", "#fff")])
