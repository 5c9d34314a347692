from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .grid import CellType, Grid, Pos, all_coords, in_bounds, GRID_SIZE, MOVABLE
from .level import Level
from .moves import AXES, Move, apply_move, check_move

logger = logging.getLogger(__name__)

GENERATED_TARGET: Pos = (2, 2, 2)
MAX_SCRAMBLE_ATTEMPTS = 500
NEIGHBOR_OFFSETS = ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1))


@dataclass(frozen=True)
class Difficulty:
    scramble_moves: int
    data_blocks: int
    firewalls: int
    move_limit: int


@dataclass(frozen=True)
class GenerationReport:
    """What happened while building one level: moves played against the
    requested scramble length, and how the core was kept off the target
    ('ok', 'nudged' or 'fallback')."""
    played: int
    scramble_moves: int
    settle: str

    @property
    def short(self) -> bool:
        return self.played < self.scramble_moves

    @property
    def used_fallback(self) -> bool:
        return self.settle == 'fallback'


def difficulty(level_num: int) -> Difficulty:
    """Difficulty knobs for the 1-based level number."""
    scramble = 5 + int(level_num * 1.5)
    return Difficulty(
        scramble_moves=scramble,
        data_blocks=min(8 + int(level_num * 0.5), 18),
        firewalls=min(level_num // 5, 4),
        move_limit=int(scramble * 1.5),
    )


def _random_cell(rng: random.Random) -> Pos:
    return (rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE))


def _scatter(grid: Grid, rng: random.Random, cell: CellType, count: int, exclude: Sequence[Pos] = ()) -> None:
    """Places count blocks on distinct empty cells by rejection sampling."""
    free = sum(1 for p in all_coords() if grid.is_empty(p) and p not in exclude)
    if count > free:
        raise ValueError(f'cannot place {count} blocks into {free} free cells')
    placed = 0
    while placed < count:
        pos = _random_cell(rng)
        if grid.is_empty(pos) and pos not in exclude:
            grid.place(pos, cell)
            placed += 1


def _scramble(grid: Grid, rng: random.Random, moves: int) -> int:
    """Plays up to `moves` random legal moves of Data/Core blocks. Returns how many were played."""
    played = 0
    attempts = 0
    while played < moves and attempts < MAX_SCRAMBLE_ATTEMPTS:
        attempts += 1
        axis = AXES[rng.randrange(3)]
        direction = 1 if rng.random() > 0.5 else -1
        candidates = []
        for pos in all_coords():
            if grid.occupancy(pos) not in MOVABLE:
                continue
            res = check_move(grid, pos, axis, direction)
            if isinstance(res, Move):
                candidates.append(res)
        if candidates:
            apply_move(grid, candidates[rng.randrange(len(candidates))])
            played += 1
    return played


def _settle_core(grid: Grid, target: Pos) -> str:
    """Makes sure the puzzle does not start solved.

    Returns 'ok' when the Core is already off the target, 'nudged' when it
    was stepped onto an adjacent empty cell, and 'fallback' when it had to be
    swapped with the first non-firewall cell in scan order.
    """
    if grid.occupancy(target) != CellType.CORE:
        return 'ok'
    tx, ty, tz = target
    for dx, dy, dz in NEIGHBOR_OFFSETS:
        adj = (tx + dx, ty + dy, tz + dz)
        if in_bounds(adj) and grid.is_empty(adj):
            apply_move(grid, Move(target, adj))
            return 'nudged'
    # Boxed in: evict whatever sits in the fallback cell into the target.
    for pos in all_coords():
        if pos == target or grid.occupancy(pos) == CellType.FIREWALL:
            continue
        displaced = grid.occupancy(pos)
        grid.place(pos, CellType.CORE)
        grid.clear(target)
        if displaced != CellType.EMPTY:
            grid.place(target, displaced)
        logger.warning('core boxed in at target; swapped with %s at %s', displaced.name, pos)
        return 'fallback'
    raise RuntimeError('no cell available for the core')


def build_level(level_num: int, seed: Optional[int] = None) -> Tuple[Level, GenerationReport]:
    """Builds a level by scrambling a solved grid with random legal moves.

    The result is reachable from the solved state, so it is solvable in at
    most the number of moves actually played, but nothing here checks that
    bound is tight.
    """
    if level_num < 1:
        raise ValueError(f'level numbers start at 1, got {level_num}')
    rng = random.Random(seed)
    knobs = difficulty(level_num)
    target = GENERATED_TARGET

    grid = Grid()
    grid.place(target, CellType.CORE)
    _scatter(grid, rng, CellType.FIREWALL, knobs.firewalls, exclude=(target,))
    _scatter(grid, rng, CellType.DATA, knobs.data_blocks)

    played = _scramble(grid, rng, knobs.scramble_moves)
    if played < knobs.scramble_moves:
        logger.info('level %d scrambled with %d of %d moves', level_num, played, knobs.scramble_moves)
    settle = _settle_core(grid, target)

    level = Level(
        id=f'gen-{level_num}',
        name=f'Sector {level_num}',
        move_limit=knobs.move_limit,
        target=target,
        blocks=tuple(grid.blocks()),
    )
    return level, GenerationReport(played=played, scramble_moves=knobs.scramble_moves, settle=settle)


def generate_level(level_num: int, seed: Optional[int] = None) -> Level:
    return build_level(level_num, seed)[0]
