"""Bounded, newest-first record of what happened during a game."""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Literal

LOG_CAPACITY = 50

EntryKind = Literal["move", "snake", "ladder", "win", "info"]


def _new_entry_id() -> str:
    return uuid.uuid4().hex[:12]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    """One line in the game log."""

    message: str
    kind: EntryKind = "info"
    id: str = field(default_factory=_new_entry_id)
    timestamp: datetime = field(default_factory=_now)


class GameLog:
    """Newest-first log that silently drops its oldest entry when full."""

    def __init__(self, capacity: int = LOG_CAPACITY):
        if capacity < 1:
            raise ValueError("log capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def append(self, message: str, kind: EntryKind = "info") -> LogEntry:
        entry = LogEntry(message=message, kind=kind)
        # appendleft on a full deque pushes the oldest entry off the right end
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)
