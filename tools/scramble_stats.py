#!/usr/bin/env python3
"""
Sample the level generator and report how often scrambling falls short
and how often the boxed-in core fallback fires.

Usage:
  python tools/scramble_stats.py            # levels 1..40, 50 seeds each
  python tools/scramble_stats.py 80 200     # levels 1..80, 200 seeds each
"""
from __future__ import annotations
import os, sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import game  # type: ignore


def sample(level_num: int, seeds: int):
    short = 0
    fallbacks = 0
    for seed in range(seeds):
        _, report = game.build_level(level_num, seed=seed)
        short += report.short
        fallbacks += report.used_fallback
    return game.difficulty(level_num), short, fallbacks


def main() -> int:
    top = int(sys.argv[1]) if len(sys.argv) > 1 else 40
    seeds = int(sys.argv[2]) if len(sys.argv) > 2 else 50
    print("level scramble data fw limit  short  fallback")
    for n in range(1, top + 1):
        knobs, short, fallbacks = sample(n, seeds)
        print(f"{n:5d} {knobs.scramble_moves:8d} {knobs.data_blocks:4d} {knobs.firewalls:2d} {knobs.move_limit:5d}"
              f"  {short:5d}  {fallbacks:8d}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
