from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .grid import CellType, Pos, in_bounds

Block = Tuple[Pos, CellType]


@dataclass(frozen=True)
class Level:
    """A puzzle definition: block placements, the target cell and an advisory move budget."""
    id: str
    name: str
    move_limit: int
    target: Pos
    blocks: Tuple[Block, ...]

    def validate(self) -> None:
        """Raises ValueError unless the level describes a loadable puzzle."""
        if not in_bounds(self.target):
            raise ValueError(f'target out of range: {self.target!r}')
        seen = set()
        cores = 0
        for pos, cell in self.blocks:
            if cell == CellType.EMPTY:
                raise ValueError(f'empty block entry at {pos!r}')
            if pos in seen:
                raise ValueError(f'two blocks share cell {pos!r}')
            seen.add(pos)
            if cell == CellType.CORE:
                cores += 1
        if cores != 1:
            raise ValueError(f'expected exactly one core block, found {cores}')

    def count(self, cell: CellType) -> int:
        return sum(1 for _, c in self.blocks if c == cell)


def _pos_from_json(obj: Dict[str, Any]) -> Pos:
    return (int(obj['x']), int(obj['y']), int(obj['z']))


def level_to_json(level: Level) -> Dict[str, Any]:
    tx, ty, tz = level.target
    return {
        'id': level.id,
        'name': level.name,
        'moveLimit': int(level.move_limit),
        'target': {'x': tx, 'y': ty, 'z': tz},
        'blocks': [{'x': x, 'y': y, 'z': z, 'type': int(cell)} for (x, y, z), cell in level.blocks],
    }


def level_from_json(obj: Dict[str, Any]) -> Level:
    blocks: List[Block] = []
    for b in obj.get('blocks', []):
        blocks.append((_pos_from_json(b), CellType(int(b['type']))))
    return Level(
        id=str(obj.get('id', 'custom')),
        name=str(obj.get('name', 'Custom')),
        move_limit=int(obj.get('moveLimit', 0)),
        target=_pos_from_json(obj['target']),
        blocks=tuple(blocks),
    )
