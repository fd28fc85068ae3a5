"""Turn engine — owns the game state and resolves dice rolls."""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

from snakes_ladders.board import (
    START_SQUARE,
    TOTAL_SQUARES,
    TransitionKind,
    lookup_transition,
    transition_kind,
)
from snakes_ladders.config import GameConfig
from snakes_ladders.gamelog import GameLog, LogEntry

logger = logging.getLogger("snakes_ladders.game")

DIE_FACES = 6


# ── Players and state ───────────────────────────────────────────────

@dataclass
class Player:
    id: int
    name: str
    color: str
    position: int = START_SQUARE


class TurnPhase(enum.Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class PlayerView:
    """Read-only copy of a player for renderers."""

    id: int
    name: str
    color: str
    position: int


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable picture of the game handed to observers and renderers."""

    players: tuple[PlayerView, ...]
    active_index: int
    dice_value: int | None
    rolling: bool
    winner_id: int | None
    log: tuple[LogEntry, ...]

    @property
    def active_player(self) -> PlayerView:
        return self.players[self.active_index]

    @property
    def winner(self) -> PlayerView | None:
        for p in self.players:
            if p.id == self.winner_id:
                return p
        return None

    @property
    def phase(self) -> TurnPhase:
        if self.winner_id is not None:
            return TurnPhase.GAME_OVER
        return TurnPhase.ROLLING if self.rolling else TurnPhase.IDLE


@dataclass
class GameState:
    """Mutable state that evolves during a game."""

    players: list[Player]
    active_index: int = 0
    dice_value: int | None = None
    rolling: bool = False
    winner: Player | None = None
    log: GameLog = field(default_factory=GameLog)

    @classmethod
    def from_config(cls, config: GameConfig) -> GameState:
        players = [
            Player(id=i + 1, name=spec.name, color=spec.color)
            for i, spec in enumerate(config.players)
        ]
        return cls(players=players)

    @property
    def active_player(self) -> Player:
        return self.players[self.active_index]

    @property
    def phase(self) -> TurnPhase:
        if self.winner is not None:
            return TurnPhase.GAME_OVER
        return TurnPhase.ROLLING if self.rolling else TurnPhase.IDLE

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            players=tuple(
                PlayerView(p.id, p.name, p.color, p.position) for p in self.players
            ),
            active_index=self.active_index,
            dice_value=self.dice_value,
            rolling=self.rolling,
            winner_id=self.winner.id if self.winner is not None else None,
            log=self.log.entries(),
        )


# ── Move arithmetic ─────────────────────────────────────────────────

@dataclass(frozen=True)
class MoveResult:
    """What a roll does to a piece, before anything is committed."""

    start: int
    roll: int
    landed: int
    final: int
    kind: TransitionKind | None = None
    overshoot: bool = False

    @property
    def won(self) -> bool:
        return self.final == TOTAL_SQUARES


def check_roll(roll: int) -> None:
    if not 1 <= roll <= DIE_FACES:
        raise ValueError(f"roll must be between 1 and {DIE_FACES}, got {roll}")


def compute_move(position: int, roll: int) -> MoveResult:
    """Compute where a piece on *position* ends up after rolling *roll*.

    Pure — the caller decides whether to commit.
    """
    check_roll(roll)
    if not START_SQUARE <= position <= TOTAL_SQUARES:
        raise ValueError(f"position {position} is off the board")

    tentative = position + roll

    # Overshoot → stay put
    if tentative > TOTAL_SQUARES:
        return MoveResult(
            start=position, roll=roll, landed=position, final=position,
            overshoot=True,
        )

    dest = lookup_transition(tentative)
    if dest is None:
        return MoveResult(start=position, roll=roll, landed=tentative, final=tentative)
    return MoveResult(
        start=position, roll=roll, landed=tentative, final=dest,
        kind=transition_kind(tentative),
    )


def roll_die() -> int:
    return random.randint(1, DIE_FACES)


# ── Observers and schedulers ────────────────────────────────────────

class GameObserver(Protocol):
    """Receives a fresh snapshot after every state change."""

    def on_change(self, snapshot: GameSnapshot) -> None: ...


@dataclass
class ListObserver:
    """Collects every snapshot it is shown."""

    snapshots: list[GameSnapshot] = field(default_factory=list)

    def on_change(self, snapshot: GameSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def latest(self) -> GameSnapshot | None:
        return self.snapshots[-1] if self.snapshots else None


@runtime_checkable
class Scheduler(Protocol):
    """Runs *callback* once, *delay* seconds from now."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...


class ImmediateScheduler:
    """Runs callbacks straight away, ignoring the delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        callback()


class SleepScheduler:
    """Blocks for the delay, then runs the callback. For terminal play."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        if delay > 0:
            time.sleep(delay)
        callback()


# ── Engine ──────────────────────────────────────────────────────────

class TurnEngine:
    """Drives one game: roll, resolve, advance, reset."""

    def __init__(
        self,
        config: GameConfig | None = None,
        scheduler: Scheduler | None = None,
        observers: list[GameObserver] | None = None,
    ):
        self.config = config or GameConfig()
        self.scheduler = scheduler or ImmediateScheduler()
        self.observers: list[GameObserver] = list(observers or [])
        self.state = GameState.from_config(self.config)
        self._roll_seq = 0
        first = self.state.players[0].name
        self.state.log.append(f"Game started! {first} goes first.", "info")

    # -- observation --

    def subscribe(self, observer: GameObserver) -> None:
        self.observers.append(observer)
        observer.on_change(self.snapshot())

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    def _notify(self) -> None:
        snap = self.state.snapshot()
        for observer in self.observers:
            observer.on_change(snap)

    # -- actions --

    @property
    def phase(self) -> TurnPhase:
        return self.state.phase

    def roll(self) -> bool:
        """Start a roll. Returns False (and does nothing) if one can't start."""
        phase = self.state.phase
        if phase is not TurnPhase.IDLE:
            logger.debug("roll ignored in phase %s", phase.value)
            return False

        self.state.rolling = True
        self.state.dice_value = None
        self._roll_seq += 1
        seq = self._roll_seq
        self._notify()
        self.scheduler.call_later(self.config.roll_delay, lambda: self._finish_scheduled(seq))
        return True

    def _finish_scheduled(self, seq: int) -> None:
        # a reset (or a newer roll) since scheduling makes this callback stale
        if seq != self._roll_seq:
            logger.debug("roll #%d superseded, ignoring", seq)
            return
        self.finish_roll()

    def finish_roll(self, value: int | None = None) -> MoveResult | None:
        """Complete a pending roll by drawing (or taking) the die value."""
        if not self.state.rolling or self.state.winner is not None:
            logger.debug("stale roll callback ignored")
            return None

        roll = roll_die() if value is None else value
        # nothing is committed for an impossible value
        check_roll(roll)
        self.state.rolling = False
        return self.resolve(roll)

    def resolve(self, roll: int) -> MoveResult | None:
        """Apply *roll* to the active player, then declare a winner or pass the turn."""
        state = self.state
        if state.winner is not None:
            logger.debug("resolve ignored, game is over")
            return None
        if state.rolling:
            logger.debug("resolve ignored, a roll is pending")
            return None

        player = state.active_player
        move = compute_move(player.position, roll)
        state.dice_value = roll
        log = state.log

        log.append(f"{player.name} rolled a {roll}.", "move")
        if move.overshoot:
            log.append(
                f"{player.name} needs exactly {TOTAL_SQUARES - player.position} to win.",
                "info",
            )
        elif move.kind == "snake":
            log.append(
                f"Oh no! {player.name} hit a snake at {move.landed} and fell to {move.final}!",
                "snake",
            )
        elif move.kind == "ladder":
            log.append(
                f"Great! {player.name} climbed a ladder at {move.landed} to {move.final}!",
                "ladder",
            )

        player.position = move.final
        logger.debug(
            "%s: %d + %d -> %d (landed %d)",
            player.name, move.start, roll, move.final, move.landed,
        )

        if move.won:
            state.winner = player
            log.append(f"{player.name} wins the game!", "win")
            logger.info("%s wins", player.name)
        else:
            state.active_index = (state.active_index + 1) % len(state.players)

        self._notify()
        return move

    def reset(self) -> None:
        """Start over. Allowed at any time, including mid-roll."""
        state = self.state
        for p in state.players:
            p.position = START_SQUARE
        state.active_index = 0
        state.dice_value = None
        state.rolling = False
        state.winner = None
        self._roll_seq += 1
        state.log.clear()
        state.log.append(f"Game reset! {state.players[0].name} goes first.", "info")
        logger.debug("game reset")
        self._notify()

    # -- headless play --

    def play_turn(self, value: int | None = None) -> MoveResult | None:
        """Roll and resolve in one step, bypassing the scheduler."""
        if self.state.phase is not TurnPhase.IDLE:
            return None
        if value is not None:
            check_roll(value)
        self.state.rolling = True
        self.state.dice_value = None
        return self.finish_roll(value)

    def play_to_end(self, max_turns: int = 1000) -> int:
        """Autoplay until someone wins or *max_turns* rolls have resolved.

        Returns the number of turns played.
        """
        turns = 0
        while turns < max_turns and self.state.winner is None:
            self.play_turn()
            turns += 1
        return turns
