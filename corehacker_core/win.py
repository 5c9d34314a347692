from __future__ import annotations

from typing import Optional

from .grid import CellType, Grid, Pos


def core_at_target(core_pos: Optional[Pos], target: Pos) -> bool:
    """Victory predicate: the Core sits exactly on the target cell."""
    return core_pos is not None and tuple(core_pos) == tuple(target)


def locate_core(grid: Grid) -> Optional[Pos]:
    """Scans the grid for the Core. Returns None if there is none."""
    found = grid.find(CellType.CORE)
    return found[0] if found else None
