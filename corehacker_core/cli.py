from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Tuple

from .catalog import is_generated
from .db import ProgressStore
from .generator import difficulty
from .grid import CellType
from .moves import AXES
from .session import PuzzleSession

Command = Tuple[str, tuple]

HELP = (
    'Commands: m x y z axis dir | u (undo) | r (reset) | n (next) | '
    'h x y z (hints) | q (quit)'
)


def configure_logging() -> None:
    debug = os.getenv('CORE_HACKER_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format='[%(name)s] %(message)s')


def parse_command(text: str) -> Optional[Command]:
    """Parses one line of player input. Returns None if it cannot be understood."""
    parts = text.replace(',', ' ').split()
    if not parts:
        return None
    op = parts[0].lower()
    args = parts[1:]
    if op in ('u', 'r', 'n', 'q') and not args:
        return (op, ())
    try:
        if op == 'h' and len(args) == 3:
            return (op, (tuple(int(a) for a in args),))
        if op == 'm' and len(args) == 5:
            pos = tuple(int(a) for a in args[:3])
            axis = args[3].lower()
            direction = int(args[4])
            if axis not in AXES or direction not in (1, -1):
                return None
            return (op, (pos, axis, direction))
    except ValueError:
        return None
    return None


def print_level(session: PuzzleSession) -> None:
    level = session.level
    print(f'Level {session.level_index + 1}: {level.name} [{level.id}]')
    print(session.grid.pretty(target=level.target))
    limit = f'/{level.move_limit}' if level.move_limit else ''
    flag = ' (over limit)' if session.is_over_limit() else ''
    print(f'Moves: {session.move_count}{limit}{flag}')


def main() -> None:
    parser = argparse.ArgumentParser(description='Core Hacker: slide the core to the exit')
    parser.add_argument('--level', type=int, default=None, help='0-based level index (defaults to saved progress)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for generated levels')
    parser.add_argument('--db', default=os.getenv('CORE_HACKER_DB', 'data/progress.db'), help='SQLite progress file')
    parser.add_argument('--play', action='store_true', help='Play interactively')
    parser.add_argument('--show-moves', action='store_true', help='List legal moves of every movable block')
    args = parser.parse_args()
    configure_logging()

    store = ProgressStore(args.db)
    index = args.level
    if index is None:
        index = store.load() or 0
    session = PuzzleSession(index=index, seed=args.seed, progress=store)

    if not args.play:
        print_level(session)
        if is_generated(index):
            knobs = difficulty(index + 1)
            print(f'Scramble moves: {knobs.scramble_moves}, data: {knobs.data_blocks}, firewalls: {knobs.firewalls}')
        if args.show_moves:
            for pos, cell in session.blocks():
                if cell == CellType.FIREWALL:
                    continue
                for axis, direction, dst in session.valid_moves(pos):
                    print(f'{cell.name} {pos} -> {dst} ({axis}{direction:+d})')
        return

    print(HELP)
    print_level(session)
    while True:
        try:
            text = input('> ')
        except EOFError:
            print()
            return
        cmd = parse_command(text)
        if cmd is None:
            print('Could not parse. ' + HELP)
            continue
        op, cargs = cmd
        if op == 'q':
            return
        if op == 'u':
            if not session.undo():
                print('Nothing to undo.')
        elif op == 'r':
            session.reset()
        elif op == 'n':
            session.next_level()
        elif op == 'h':
            hints = session.valid_moves(cargs[0])
            print('Moves:', [f'{a}{d:+d} -> {dst}' for a, d, dst in hints] or 'none')
            continue
        elif op == 'm':
            res = session.try_move(*cargs)
            if not res.accepted:
                assert res.reason is not None
                print(f'Rejected: {res.reason.value}')
                continue
        print_level(session)
        if session.is_won():
            print('Core extracted! Type n for the next level.')
