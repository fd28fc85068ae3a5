"""Draw the board, tokens and game log with matplotlib."""

from __future__ import annotations

from pathlib import Path

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle, PathPatch, Rectangle
from matplotlib.path import Path as MplPath

from snakes_ladders.board import GRID_SIZE, LADDERS, SNAKES, coordinates, square_at
from snakes_ladders.config import COLORS
from snakes_ladders.game import GameSnapshot

LOG_LINES_SHOWN = 14

# Token offsets (in cells) so two players on one square don't hide each other
_TOKEN_OFFSETS = [(-0.18, 0.12), (0.18, 0.12), (-0.18, -0.18), (0.18, -0.18)]

_KIND_COLORS = {
    "move": COLORS["text"],
    "snake": COLORS["snake"],
    "ladder": COLORS["ladder"],
    "win": COLORS["p2"],
    "info": "#94a3b8",
}


def cell_center(square: int) -> tuple[float, float]:
    col, row = coordinates(square)
    return col + 0.5, row + 0.5


def _snake_path(start: int, end: int) -> MplPath:
    """Quadratic curve from head to tail, bowed by a per-snake offset."""
    sx, sy = cell_center(start)
    ex, ey = cell_center(end)
    offset = (start % 3 - 1) * 0.3
    mid = ((sx + ex) / 2 + offset, (sy + ey) / 2 + offset)
    return MplPath(
        [(sx, sy), mid, (ex, ey)],
        [MplPath.MOVETO, MplPath.CURVE3, MplPath.CURVE3],
    )


def draw_board(ax: Axes, snapshot: GameSnapshot) -> None:
    """Draw cells, snakes, ladders and player tokens onto *ax*."""
    ax.clear()
    ax.set_xlim(0, GRID_SIZE)
    ax.set_ylim(0, GRID_SIZE)
    ax.set_aspect("equal")
    ax.set_axis_off()
    ax.set_facecolor(COLORS["bg"])

    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            num = square_at(col, row)
            alpha = 0.4 if (row + col) % 2 == 0 else 0.2
            if num in SNAKES:
                face, alpha = COLORS["snake"], 0.15
            elif num in LADDERS:
                face, alpha = COLORS["ladder"], 0.15
            else:
                face = COLORS["cell"]
            ax.add_patch(Rectangle((col, row), 1, 1, facecolor=face, alpha=alpha, edgecolor=COLORS["bg"]))
            ax.text(col + 0.08, row + 0.9, str(num), fontsize=6, color=COLORS["text"], alpha=0.6, va="top")

    for start, end in LADDERS.items():
        (sx, sy), (ex, ey) = cell_center(start), cell_center(end)
        ax.plot([sx, ex], [sy, ey], color=COLORS["ladder"], linewidth=3, alpha=0.6, solid_capstyle="round")

    for start, end in SNAKES.items():
        ax.add_patch(PathPatch(
            _snake_path(start, end), facecolor="none",
            edgecolor=COLORS["snake"], linewidth=3, alpha=0.6,
        ))

    for i, player in enumerate(snapshot.players):
        cx, cy = cell_center(player.position)
        dx, dy = _TOKEN_OFFSETS[i % len(_TOKEN_OFFSETS)]
        is_active = i == snapshot.active_index and snapshot.winner_id is None
        ax.add_patch(Circle(
            (cx + dx, cy + dy), 0.2,
            facecolor=player.color,
            edgecolor="white" if is_active else COLORS["bg"],
            linewidth=2 if is_active else 1,
            zorder=5,
        ))


def status_line(snapshot: GameSnapshot) -> str:
    winner = snapshot.winner
    if winner is not None:
        return f"{winner.name} wins!"
    active = snapshot.active_player
    if snapshot.rolling:
        return f"{active.name} is rolling..."
    dice = f"Last roll: {snapshot.dice_value}" if snapshot.dice_value is not None else "No roll yet"
    return f"{active.name}'s turn ({dice})"


def draw_log(ax: Axes, snapshot: GameSnapshot, lines: int = LOG_LINES_SHOWN) -> None:
    """Write the newest log entries top-down onto *ax*."""
    ax.clear()
    ax.set_axis_off()
    ax.set_facecolor(COLORS["card"])
    ax.text(0.02, 0.98, "Game log", fontsize=10, fontweight="bold", color=COLORS["text"], va="top")
    step = 0.9 / max(lines, 1)
    for i, entry in enumerate(snapshot.log[:lines]):
        ax.text(
            0.02, 0.9 - i * step, entry.message,
            fontsize=7, color=_KIND_COLORS.get(entry.kind, COLORS["text"]), va="top",
        )


def layout(fig: Figure) -> tuple[Axes, Axes]:
    """Add board and log axes side by side on *fig*. Returns (board_ax, log_ax)."""
    fig.patch.set_facecolor(COLORS["bg"])
    board_ax = fig.add_axes((0.02, 0.12, 0.6, 0.8))
    log_ax = fig.add_axes((0.64, 0.12, 0.34, 0.8))
    return board_ax, log_ax


def draw_snapshot(fig: Figure, board_ax: Axes, log_ax: Axes, snapshot: GameSnapshot) -> None:
    draw_board(board_ax, snapshot)
    draw_log(log_ax, snapshot)
    fig.suptitle(status_line(snapshot), color=COLORS["text"], fontsize=13, fontweight="bold")


def render_snapshot(snapshot: GameSnapshot, output_path: str | Path = "board.png") -> str:
    """Render *snapshot* to a PNG.

    Returns the path to the saved PNG.
    """
    fig = Figure(figsize=(12, 7))
    board_ax, log_ax = layout(fig)
    draw_snapshot(fig, board_ax, log_ax, snapshot)
    fig.savefig(str(output_path), dpi=120, facecolor=fig.get_facecolor())
    return str(output_path)
