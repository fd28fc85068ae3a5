"""Game configuration: player roster, colours, and the roll delay."""

from __future__ import annotations

from dataclasses import dataclass, field

ROLL_DELAY_MS = 600

# fmt: off
COLORS: dict[str, str] = {
    "snake":  "#f43f5e",
    "ladder": "#10b981",
    "p1":     "#8b5cf6",
    "p2":     "#f59e0b",
    "bg":     "#0f172a",
    "card":   "#1e293b",
    "cell":   "#334155",
    "text":   "#f8fafc",
}
# fmt: on

DEFAULT_PLAYER_COLORS = (COLORS["p1"], COLORS["p2"])


@dataclass
class PlayerSpec:
    """How to seat one player at the start of a game."""

    name: str
    color: str


def _default_players() -> list[PlayerSpec]:
    return [
        PlayerSpec("Player 1", COLORS["p1"]),
        PlayerSpec("Player 2", COLORS["p2"]),
    ]


@dataclass
class GameConfig:
    players: list[PlayerSpec] = field(default_factory=_default_players)
    roll_delay_ms: int = ROLL_DELAY_MS

    def __post_init__(self) -> None:
        if len(self.players) < 2:
            raise ValueError("a game needs at least two players")
        if self.roll_delay_ms < 0:
            raise ValueError("roll delay cannot be negative")

    @property
    def roll_delay(self) -> float:
        """Roll delay in seconds."""
        return self.roll_delay_ms / 1000.0

    @classmethod
    def from_names(cls, names: list[str] | None, roll_delay_ms: int = ROLL_DELAY_MS) -> GameConfig:
        """Build a config from display names, cycling through the default colours."""
        if not names:
            return cls(roll_delay_ms=roll_delay_ms)
        players = [
            PlayerSpec(name, DEFAULT_PLAYER_COLORS[i % len(DEFAULT_PLAYER_COLORS)])
            for i, name in enumerate(names)
        ]
        return cls(players=players, roll_delay_ms=roll_delay_ms)
