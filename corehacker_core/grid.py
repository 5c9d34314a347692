from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Tuple

GRID_SIZE = 3

Pos = Tuple[int, int, int]


class CellType(IntEnum):
    """Cell contents. The integer values double as the level-data codes."""
    EMPTY = 0
    DATA = 1
    CORE = 2
    FIREWALL = 3


MOVABLE = (CellType.DATA, CellType.CORE)

_GLYPHS = {
    CellType.EMPTY: '.',
    CellType.DATA: 'D',
    CellType.CORE: 'C',
    CellType.FIREWALL: '#',
}


def in_bounds(pos) -> bool:
    """True for an integer triple inside the grid; malformed input is simply out of bounds."""
    if not isinstance(pos, (tuple, list)) or len(pos) != 3:
        return False
    for v in pos:
        if isinstance(v, bool) or not isinstance(v, int):
            return False
        if v < 0 or v >= GRID_SIZE:
            return False
    return True


def all_coords() -> Iterator[Pos]:
    """Iterates over every cell in x, y, z order."""
    for x in range(GRID_SIZE):
        for y in range(GRID_SIZE):
            for z in range(GRID_SIZE):
                yield (x, y, z)


class Grid:
    """The 3x3x3 occupancy store. The cell array is the only record of where blocks are."""

    __slots__ = ('_cells',)

    def __init__(self) -> None:
        self._cells: List[CellType] = [CellType.EMPTY] * (GRID_SIZE ** 3)

    @classmethod
    def from_blocks(cls, blocks: Iterable[Tuple[Pos, CellType]]) -> 'Grid':
        """Builds a grid from (pos, type) pairs, ignoring entries that fall outside the grid."""
        grid = cls()
        for pos, cell in blocks:
            if not in_bounds(pos):
                continue
            grid._cells[grid.index(pos)] = CellType(cell)
        return grid

    def index(self, pos: Pos) -> int:
        if not in_bounds(pos):
            raise IndexError(f'cell out of range: {pos!r}')
        x, y, z = pos
        return (x * GRID_SIZE + y) * GRID_SIZE + z

    def occupancy(self, pos: Pos) -> CellType:
        return self._cells[self.index(pos)]

    def is_empty(self, pos: Pos) -> bool:
        return self.occupancy(pos) == CellType.EMPTY

    def place(self, pos: Pos, cell: CellType) -> None:
        self._cells[self.index(pos)] = CellType(cell)

    def clear(self, pos: Pos) -> None:
        self._cells[self.index(pos)] = CellType.EMPTY

    def coords(self) -> Iterator[Pos]:
        return all_coords()

    def blocks(self) -> List[Tuple[Pos, CellType]]:
        """Non-empty cells as (pos, type), in scan order."""
        return [(p, self._cells[self.index(p)]) for p in all_coords() if self._cells[self.index(p)] != CellType.EMPTY]

    def find(self, cell: CellType) -> List[Pos]:
        return [p for p in all_coords() if self._cells[self.index(p)] == cell]

    def count(self, cell: CellType) -> int:
        return sum(1 for c in self._cells if c == cell)

    def copy(self) -> 'Grid':
        other = Grid()
        other._cells = list(self._cells)
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    def pretty(self, target: Optional[Pos] = None) -> str:
        """Renders one z-layer per block of rows, with the target cell marked '*' while empty."""
        lines: List[str] = []
        for z in range(GRID_SIZE):
            lines.append(f'z={z}')
            for y in reversed(range(GRID_SIZE)):
                row: List[str] = []
                for x in range(GRID_SIZE):
                    cell = self._cells[self.index((x, y, z))]
                    if cell == CellType.EMPTY and target == (x, y, z):
                        row.append('*')
                    else:
                        row.append(_GLYPHS[cell])
                lines.append(' '.join(row))
        return '\n'.join(lines)
