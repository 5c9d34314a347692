from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .grid import Pos
from .moves import Move


@dataclass(frozen=True)
class HistoryEntry:
    """Where the moved block was before and after; enough to invert the move."""
    src: Pos
    dst: Pos

    def as_move(self) -> Move:
        return Move(self.src, self.dst)


class History:
    """LIFO of player moves, oldest first."""

    def __init__(self) -> None:
        self._entries: List[HistoryEntry] = []

    def push(self, move: Move) -> None:
        self._entries.append(HistoryEntry(move.src, move.dst))

    def pop(self) -> Optional[HistoryEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
