from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .generator import difficulty, generate_level
from .grid import CellType, Pos
from .level import Level

D, C, F = CellType.DATA, CellType.CORE, CellType.FIREWALL


def _blocks(entries: Iterable[Tuple[int, int, int, CellType]]) -> Tuple[Tuple[Pos, CellType], ...]:
    return tuple(((x, y, z), t) for x, y, z, t in entries)


LEVELS: List[Level] = [
    Level(
        id='boot',
        name='Boot Sector',
        move_limit=12,
        target=(2, 2, 2),
        blocks=_blocks([
            (0, 0, 0, C),
            (0, 0, 1, D),
            (0, 1, 0, D),
            (1, 0, 1, D),
            (1, 1, 0, D),
            (2, 0, 0, D),
            (2, 1, 1, D),
        ]),
    ),
    Level(
        id='firewall',
        name='Firewall Maze',
        move_limit=16,
        target=(2, 2, 2),
        blocks=_blocks([
            (0, 0, 0, C),
            (0, 0, 1, D),
            (1, 0, 1, D),
            (2, 0, 1, D),
            (0, 1, 0, D),
            (2, 0, 0, D),
            (1, 0, 2, D),
            (1, 1, 1, F),
            (1, 2, 1, F),
            (2, 1, 2, F),
        ]),
    ),
    Level(
        id='core-lock',
        name='Core Lock',
        move_limit=20,
        target=(2, 2, 2),
        blocks=_blocks([
            (0, 0, 0, C),
            (0, 0, 1, D),
            (0, 1, 1, D),
            (1, 0, 1, D),
            (1, 0, 2, D),
            (2, 0, 1, D),
            (2, 1, 1, D),
            (0, 2, 1, D),
            (2, 2, 0, D),
            (1, 1, 1, F),
            (2, 1, 0, F),
            (1, 2, 0, F),
        ]),
    ),
]


def is_generated(index: int) -> bool:
    return index >= len(LEVELS)


def level_for_index(index: int, seed: Optional[int] = None) -> Level:
    """Hand-authored levels first; past the end of the catalog, level index+1 is generated."""
    if index < 0:
        raise ValueError(f'level index must be non-negative, got {index}')
    if index < len(LEVELS):
        return LEVELS[index]
    return generate_level(index + 1, seed=seed)


def move_limit_for_index(index: int) -> int:
    if index < len(LEVELS):
        return LEVELS[index].move_limit
    return difficulty(index + 1).move_limit
