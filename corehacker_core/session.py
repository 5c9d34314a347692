from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .catalog import level_for_index
from .db import ProgressStore
from .grid import CellType, Grid, Pos
from .history import History
from .level import Level
from .moves import Move, MoveResult, Rejection, apply_move, check_move, valid_moves
from .win import core_at_target, locate_core

logger = logging.getLogger(__name__)

# Called as transition(move, done) after every applied move; the lock is held until done() runs.
TransitionHook = Callable[[Move, Callable[[], None]], None]


class PuzzleSession:
    """One player's puzzle: grid, undo history and the move/cleared flags.

    Every mutation goes through try_move or undo. Both update the grid at
    once, then hold `is_locked` until the transition collaborator signals
    completion. Without a collaborator the transition is instant.
    """

    def __init__(
        self,
        index: int = 0,
        seed: Optional[int] = None,
        transition: Optional[TransitionHook] = None,
        progress: Optional[ProgressStore] = None,
    ) -> None:
        self.transition = transition
        self.progress = progress
        self.seed = seed
        self.grid = Grid()
        self.history = History()
        self.level: Level
        self.level_index = index
        self.move_count = 0
        self.is_locked = False
        self.is_cleared = False
        self._core_pos: Optional[Pos] = None
        self._ticket = 0
        self.load_level(index, seed)

    # -- level lifecycle ------------------------------------------------------

    def load_level(self, index: int, seed: Optional[int] = None) -> Level:
        level = level_for_index(index, seed=seed)
        self.level_index = index
        self.seed = seed
        if self.progress is not None:
            self.progress.save(index)
        self._install(level)
        return level

    def load_custom(self, level: Level) -> Level:
        """Plays an arbitrary level without touching the saved progress."""
        level.validate()
        self._install(level)
        return level

    def reset(self) -> Level:
        """Restarts the current level with the same layout."""
        self._install(self.level)
        return self.level

    def next_level(self) -> Level:
        return self.load_level(self.level_index + 1)

    def _install(self, level: Level) -> None:
        grid = Grid.from_blocks(level.blocks)
        cores = grid.count(CellType.CORE)
        if cores != 1:
            raise ValueError(f'level {level.id!r} has {cores} core blocks on the grid')
        self.level = level
        self.grid = grid
        self.history.clear()
        self.move_count = 0
        self.is_locked = False
        self.is_cleared = False
        self._core_pos = locate_core(grid)
        self._ticket += 1
        logger.info('loaded level %s (%s), limit %d', level.id, level.name, level.move_limit)

    # -- moves ----------------------------------------------------------------

    def try_move(self, pos: Pos, axis: str, direction: int) -> MoveResult:
        """Slides the block at pos one cell. Raises ValueError only for a bad axis or direction."""
        if self.is_locked:
            return MoveResult(False, Rejection.LOCKED)
        if self.is_cleared:
            return MoveResult(False, Rejection.CLEARED)
        res = check_move(self.grid, pos, axis, direction)
        if isinstance(res, Rejection):
            logger.debug('move %s %s%+d rejected: %s', pos, axis, direction, res.value)
            return MoveResult(False, res)
        self._commit(res, record=True)
        return MoveResult(True, move=res)

    def undo(self) -> bool:
        if self.is_locked or self.is_cleared:
            return False
        entry = self.history.pop()
        if entry is None:
            return False
        self._commit(entry.as_move().inverse(), record=False)
        return True

    def _commit(self, move: Move, record: bool) -> None:
        cell = apply_move(self.grid, move)
        if cell == CellType.CORE:
            self._core_pos = move.dst
        if record:
            self.history.push(move)
            self.move_count += 1
        else:
            self.move_count = max(0, self.move_count - 1)
        if cell == CellType.CORE and core_at_target(self._core_pos, self.level.target):
            self.is_cleared = True
            logger.info('level %s cleared in %d moves', self.level.id, self.move_count)

        self.is_locked = True
        self._ticket += 1
        ticket = self._ticket

        def done() -> None:
            self._release(ticket)

        if self.transition is None:
            done()
        else:
            self.transition(move, done)

    def _release(self, ticket: int) -> bool:
        # Stale callbacks (an earlier move, or a level reload since) are ignored.
        if ticket != self._ticket or not self.is_locked:
            return False
        self.is_locked = False
        return True

    def complete_transition(self) -> bool:
        """Completion signal for the in-flight move. Returns False if nothing was pending."""
        return self._release(self._ticket)

    # -- queries --------------------------------------------------------------

    def is_won(self) -> bool:
        return self.is_cleared

    def history_depth(self) -> int:
        return len(self.history)

    def occupancy(self, pos: Pos) -> CellType:
        return self.grid.occupancy(pos)

    def target_position(self) -> Pos:
        return self.level.target

    def core_position(self) -> Optional[Pos]:
        return self._core_pos

    def blocks(self) -> List[Tuple[Pos, CellType]]:
        return self.grid.blocks()

    def valid_moves(self, pos: Pos) -> List[Tuple[str, int, Pos]]:
        """Move hints for the block at pos; none while a move is in flight or after the win."""
        if self.is_locked or self.is_cleared:
            return []
        return valid_moves(self.grid, pos)

    def is_over_limit(self) -> bool:
        return self.level.move_limit > 0 and self.move_count > self.level.move_limit
