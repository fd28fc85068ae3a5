"""Board layout and transition tables for Snakes & Ladders."""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping

GRID_SIZE = 10
TOTAL_SQUARES = GRID_SIZE * GRID_SIZE
START_SQUARE = 1

TransitionKind = Literal["snake", "ladder"]

# fmt: off
SNAKES: Mapping[int, int] = MappingProxyType({
    99: 80,  95: 75,  92: 88,  89: 68,
    64: 60,  49: 11,  46: 25,  16:  6,
})

LADDERS: Mapping[int, int] = MappingProxyType({
     2: 38,   7: 14,   8: 31,  15: 26,  21: 42,  28: 84,
    36: 44,  51: 67,  71: 91,  78: 98,  87: 94,
})
# fmt: on


def is_snake(square: int) -> bool:
    return square in SNAKES


def is_ladder(square: int) -> bool:
    return square in LADDERS


def lookup_transition(square: int) -> int | None:
    """Where a piece that lands on *square* ends up, or None if it stays.

    Snakes are checked before ladders.
    """
    if square in SNAKES:
        return SNAKES[square]
    return LADDERS.get(square)


def transition_kind(square: int) -> TransitionKind | None:
    if square in SNAKES:
        return "snake"
    if square in LADDERS:
        return "ladder"
    return None


def coordinates(square: int) -> tuple[int, int]:
    """Project *square* onto the grid as ``(col, row)``.

    Row 0 is the bottom of the board. Even rows run left to right, odd rows
    right to left, so square 1 is bottom-left and square 100 is top-left.
    """
    if not START_SQUARE <= square <= TOTAL_SQUARES:
        raise ValueError(f"square {square} is off the board")
    row, offset = divmod(square - 1, GRID_SIZE)
    col = offset if row % 2 == 0 else GRID_SIZE - 1 - offset
    return col, row


def square_at(col: int, row: int) -> int:
    """Inverse of :func:`coordinates`."""
    if not (0 <= col < GRID_SIZE and 0 <= row < GRID_SIZE):
        raise ValueError(f"cell ({col}, {row}) is off the board")
    offset = col if row % 2 == 0 else GRID_SIZE - 1 - col
    return row * GRID_SIZE + offset + 1
