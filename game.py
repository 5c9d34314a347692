from __future__ import annotations

# Facade module that re-exports the Core Hacker puzzle API.
# The Flask app and tests import from here; single-responsibility modules live under corehacker_core/*.

from corehacker_core.grid import CellType, Grid, Pos, GRID_SIZE, in_bounds  # noqa: F401
from corehacker_core.level import Level, level_from_json, level_to_json  # noqa: F401
from corehacker_core.moves import (  # noqa: F401
    AXES,
    Move,
    MoveResult,
    Rejection,
    apply_move,
    check_move,
    unit,
    valid_moves,
)
from corehacker_core.history import History, HistoryEntry  # noqa: F401
from corehacker_core.win import core_at_target, locate_core  # noqa: F401
from corehacker_core.generator import (  # noqa: F401
    Difficulty,
    GENERATED_TARGET,
    GenerationReport,
    MAX_SCRAMBLE_ATTEMPTS,
    build_level,
    difficulty,
    generate_level,
)
from corehacker_core.catalog import LEVELS, is_generated, level_for_index, move_limit_for_index  # noqa: F401
from corehacker_core.db import PROGRESS_KEY, ProgressStore, load_progress, save_progress  # noqa: F401
from corehacker_core.session import PuzzleSession  # noqa: F401


def load_level(index: int, seed: int | None = None, **kwargs) -> PuzzleSession:
    """Starts a fresh session on the given level index."""
    return PuzzleSession(index=index, seed=seed, **kwargs)


def main() -> None:
    from corehacker_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
