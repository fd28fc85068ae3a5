"""CLI entry point: python -m snakes_ladders {window,play,simulate,render}."""

from __future__ import annotations

import argparse
import logging
import random
import sys

from snakes_ladders.config import ROLL_DELAY_MS, GameConfig
from snakes_ladders.game import GameSnapshot, SleepScheduler, TurnEngine, TurnPhase
from snakes_ladders.render import render_snapshot
from snakes_ladders.text import render_text


def _make_config(args: argparse.Namespace) -> GameConfig:
    return GameConfig.from_names(args.names, roll_delay_ms=getattr(args, "delay", ROLL_DELAY_MS))


def _seed(args: argparse.Namespace) -> None:
    if getattr(args, "seed", None) is not None:
        random.seed(args.seed)


# ── window ───────────────────────────────────────────────────────────

def cmd_window(args: argparse.Namespace) -> None:
    """Open the interactive board."""
    from snakes_ladders.app import run_window

    _seed(args)
    run_window(_make_config(args))


# ── play ─────────────────────────────────────────────────────────────

PLAY_HELP = "[Enter]/r roll   n reset   q quit"


def cmd_play(args: argparse.Namespace) -> None:
    """Play in the terminal, one command per line."""
    _seed(args)
    engine = TurnEngine(config=_make_config(args), scheduler=SleepScheduler())
    print(render_text(engine.snapshot()))
    print(PLAY_HELP)

    for line in sys.stdin:
        command = line.strip().lower()
        if command in ("q", "quit"):
            break
        if command in ("n", "reset"):
            engine.reset()
        elif command in ("", "r", "roll"):
            if not engine.roll() and engine.phase is TurnPhase.GAME_OVER:
                print("The game is over. Press n to start again.")
                continue
        else:
            print(PLAY_HELP)
            continue
        print(render_text(engine.snapshot()))


# ── simulate ─────────────────────────────────────────────────────────

class TranscriptObserver:
    """Keeps every log line in order, past the log's own capacity."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self._seen: set[str] = set()

    def on_change(self, snapshot: GameSnapshot) -> None:
        for entry in reversed(snapshot.log):
            if entry.id not in self._seen:
                self._seen.add(entry.id)
                self.lines.append(entry.message)


def cmd_simulate(args: argparse.Namespace) -> None:
    """Autoplay one game and print its log oldest-first."""
    _seed(args)
    engine = TurnEngine(config=_make_config(args))
    transcript = TranscriptObserver()
    engine.subscribe(transcript)

    turns = engine.play_to_end(max_turns=args.max_turns)

    for line in transcript.lines:
        print(line)
    winner = engine.snapshot().winner
    print()
    print(f"{turns} turns. " + (f"Winner: {winner.name}" if winner else "No winner."))


# ── render ───────────────────────────────────────────────────────────

def cmd_render(args: argparse.Namespace) -> None:
    """Autoplay a few turns and save the board as a PNG."""
    _seed(args)
    engine = TurnEngine(config=_make_config(args))
    engine.play_to_end(max_turns=args.turns)
    out = args.output or "board.png"
    render_snapshot(engine.snapshot(), output_path=out)
    print(f"Board saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snakes_ladders",
        description="Two-player Snakes & Ladders",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    def add_names(p: argparse.ArgumentParser) -> None:
        p.add_argument("--names", nargs="+", metavar="NAME", help="Player names in turn order (at least two)")

    def add_seed(p: argparse.ArgumentParser) -> None:
        p.add_argument("--seed", type=int, help="Seed the dice for a repeatable game")

    p_window = sub.add_parser("window", help="Open the interactive board")
    p_window.add_argument("--delay", type=int, default=ROLL_DELAY_MS, help=f"Roll delay in ms (default {ROLL_DELAY_MS})")
    add_names(p_window)
    add_seed(p_window)

    p_play = sub.add_parser("play", help="Play in the terminal")
    p_play.add_argument("--delay", type=int, default=ROLL_DELAY_MS, help=f"Roll delay in ms (default {ROLL_DELAY_MS})")
    add_names(p_play)
    add_seed(p_play)

    p_sim = sub.add_parser("simulate", help="Autoplay one game and print the log")
    p_sim.add_argument("--max-turns", type=int, default=1000, help="Stop after this many turns")
    add_names(p_sim)
    add_seed(p_sim)

    p_render = sub.add_parser("render", help="Save the board as a PNG")
    p_render.add_argument("--output", "-o", help="Output PNG path")
    p_render.add_argument("--turns", type=int, default=0, help="Turns to autoplay before rendering")
    add_names(p_render)
    add_seed(p_render)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    commands = {
        "window": cmd_window,
        "play": cmd_play,
        "simulate": cmd_simulate,
        "render": cmd_render,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
