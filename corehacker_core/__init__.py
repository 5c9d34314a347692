"""
Core Hacker puzzle package.

Pure-logic pieces of the 3x3x3 sliding-block puzzle, kept apart from the
HTTP app so they can be tested on their own.
Modules:
- grid.py: CellType, Grid, Pos
- level.py: Level and its JSON layout
- moves.py: legality checks and move application
- history.py: undo stack
- win.py: victory predicate
- generator.py / catalog.py: where levels come from
- session.py: PuzzleSession, the state machine tying it together
- db.py: saved level index
"""
