"""Plain-text rendering for terminal play."""

from __future__ import annotations

from snakes_ladders.board import GRID_SIZE, LADDERS, SNAKES, square_at
from snakes_ladders.game import GameSnapshot
from snakes_ladders.render import status_line

CELL_WIDTH = 5
LOG_LINES_SHOWN = 6

_KIND_MARKS = {"move": " ", "snake": "v", "ladder": "^", "win": "*", "info": "-"}


def _cell(square: int, tokens: list[str]) -> str:
    if tokens:
        label = "".join(tokens)
        if len(label) > CELL_WIDTH:
            label = f"x{len(tokens)}"
    elif square in SNAKES:
        label = f"{square}v"
    elif square in LADDERS:
        label = f"{square}^"
    else:
        label = str(square)
    return label.center(CELL_WIDTH)


def render_board_text(snapshot: GameSnapshot) -> str:
    """ASCII board, top row first.

    Squares holding players show their initials, or a head count when those
    don't fit the cell.
    """
    occupants: dict[int, list[str]] = {}
    for p in snapshot.players:
        occupants.setdefault(p.position, []).append(p.name[:1].upper() + str(p.id))

    border = "+" + ("-" * CELL_WIDTH + "+") * GRID_SIZE
    lines = [border]
    for row in reversed(range(GRID_SIZE)):
        cells = [_cell(square_at(col, row), occupants.get(square_at(col, row), [])) for col in range(GRID_SIZE)]
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return "\n".join(lines)


def render_log_text(snapshot: GameSnapshot, lines: int = LOG_LINES_SHOWN) -> str:
    return "\n".join(
        f" {_KIND_MARKS.get(e.kind, ' ')} {e.message}" for e in snapshot.log[:lines]
    )


def render_text(snapshot: GameSnapshot, log_lines: int = LOG_LINES_SHOWN) -> str:
    positions = "   ".join(f"{p.name}: {p.position}" for p in snapshot.players)
    parts = [
        render_board_text(snapshot),
        positions,
        status_line(snapshot),
    ]
    if snapshot.log:
        parts.append(render_log_text(snapshot, log_lines))
    return "\n".join(parts)
