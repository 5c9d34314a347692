from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from .grid import CellType, Grid, Pos, in_bounds

AXES = ('x', 'y', 'z')
DIRECTIONS = (1, -1)


class Rejection(Enum):
    """Why a move request was refused. Rejections never touch the grid."""
    FORBIDDEN = 'forbidden'
    OUT_OF_BOUNDS = 'out_of_bounds'
    OCCUPIED = 'occupied'
    LOCKED = 'locked'
    CLEARED = 'cleared'


@dataclass(frozen=True)
class Move:
    src: Pos
    dst: Pos

    def inverse(self) -> 'Move':
        return Move(self.dst, self.src)


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    reason: Optional[Rejection] = None
    move: Optional[Move] = None


def unit(axis: str, direction: int) -> Pos:
    """Unit step along an axis; raises ValueError for anything but x/y/z and +1/-1."""
    if axis not in AXES:
        raise ValueError(f'unknown axis: {axis!r}')
    if isinstance(direction, bool) or not isinstance(direction, int) or direction not in DIRECTIONS:
        raise ValueError(f'direction must be +1 or -1, got {direction!r}')
    i = AXES.index(axis)
    return tuple(direction if k == i else 0 for k in range(3))  # type: ignore[return-value]


def step(pos: Pos, axis: str, direction: int) -> Pos:
    dx, dy, dz = unit(axis, direction)
    x, y, z = pos
    return (x + dx, y + dy, z + dz)


def check_move(grid: Grid, pos: Pos, axis: str, direction: int) -> Union[Move, Rejection]:
    """Validates a unit move of the block at pos without mutating anything."""
    if not in_bounds(pos) or grid.is_empty(pos):
        return Rejection.OUT_OF_BOUNDS
    if grid.occupancy(pos) == CellType.FIREWALL:
        return Rejection.FORBIDDEN
    dst = step(pos, axis, direction)
    if not in_bounds(dst):
        return Rejection.OUT_OF_BOUNDS
    if not grid.is_empty(dst):
        return Rejection.OCCUPIED
    return Move(tuple(pos), dst)  # type: ignore[arg-type]


def valid_moves(grid: Grid, pos: Pos) -> List[Tuple[str, int, Pos]]:
    """Lists (axis, direction, destination) for every move the block at pos could take now."""
    out: List[Tuple[str, int, Pos]] = []
    for axis in AXES:
        for direction in DIRECTIONS:
            res = check_move(grid, pos, axis, direction)
            if isinstance(res, Move):
                out.append((axis, direction, res.dst))
    return out


def apply_move(grid: Grid, move: Move) -> CellType:
    """Moves the block at move.src to move.dst and returns its type.
    Callers validate first; the destination is assumed empty."""
    grid.index(move.dst)  # raises before anything is cleared
    cell = grid.occupancy(move.src)
    grid.clear(move.src)
    grid.place(move.dst, cell)
    return cell
