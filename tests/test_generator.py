import random
import unittest

from corehacker_core.generator import _scramble, _settle_core
from game import (
    CellType,
    GENERATED_TARGET,
    Grid,
    build_level,
    difficulty,
    generate_level,
)


class TestGenerator(unittest.TestCase):
    def test_given_level_numbers_when_computing_difficulty_then_formulas_and_caps_hold(self):
        d1 = difficulty(1)
        self.assertEqual((d1.scramble_moves, d1.data_blocks, d1.firewalls, d1.move_limit), (6, 8, 0, 9))
        d4 = difficulty(4)
        self.assertEqual((d4.scramble_moves, d4.data_blocks, d4.firewalls, d4.move_limit), (11, 10, 0, 16))
        d5 = difficulty(5)
        self.assertEqual((d5.scramble_moves, d5.data_blocks, d5.firewalls, d5.move_limit), (12, 10, 1, 18))
        d20 = difficulty(20)
        self.assertEqual((d20.scramble_moves, d20.data_blocks, d20.firewalls, d20.move_limit), (35, 18, 4, 52))
        d99 = difficulty(99)
        self.assertEqual(d99.data_blocks, 18)
        self.assertEqual(d99.firewalls, 4)

    def test_given_level_four_when_generated_then_metadata_matches(self):
        lv = generate_level(4, seed=123)
        self.assertEqual(lv.id, 'gen-4')
        self.assertEqual(lv.name, 'Sector 4')
        self.assertEqual(lv.move_limit, 16)
        self.assertEqual(lv.target, (2, 2, 2))
        self.assertEqual(lv.count(CellType.DATA), 10)
        self.assertEqual(lv.count(CellType.FIREWALL), 0)
        self.assertEqual(lv.count(CellType.CORE), 1)

    def test_given_many_seeds_when_generating_then_invariants_hold(self):
        for n in (1, 2, 5, 9, 14, 20, 33, 60):
            knobs = difficulty(n)
            for seed in range(12):
                lv = generate_level(n, seed=seed)
                lv.validate()
                self.assertEqual(lv.count(CellType.DATA), knobs.data_blocks)
                self.assertEqual(lv.count(CellType.FIREWALL), knobs.firewalls)
                self.assertLessEqual(lv.count(CellType.DATA), 18)
                self.assertLessEqual(lv.count(CellType.FIREWALL), 4)
                core = [p for p, c in lv.blocks if c == CellType.CORE]
                self.assertEqual(len(core), 1)
                self.assertNotEqual(core[0], GENERATED_TARGET, (n, seed))

    def test_given_same_seed_when_generating_then_same_level(self):
        self.assertEqual(generate_level(7, seed=3), generate_level(7, seed=3))

    def test_given_seed_when_building_then_report_matches_generated_level(self):
        for n in (1, 4, 20, 60):
            knobs = difficulty(n)
            for seed in range(8):
                lv, report = build_level(n, seed=seed)
                self.assertEqual(lv, generate_level(n, seed=seed))
                self.assertEqual(report.scramble_moves, knobs.scramble_moves)
                self.assertGreaterEqual(report.played, 0)
                self.assertLessEqual(report.played, knobs.scramble_moves)
                self.assertEqual(report.short, report.played < knobs.scramble_moves)
                self.assertIn(report.settle, ('ok', 'nudged', 'fallback'))
                self.assertEqual(report.used_fallback, report.settle == 'fallback')

    def test_given_level_zero_when_building_then_value_error(self):
        with self.assertRaises(ValueError):
            build_level(0)

    def test_given_level_zero_when_generating_then_value_error(self):
        with self.assertRaises(ValueError):
            generate_level(0)

    def test_given_firewalls_when_scrambling_then_they_never_move(self):
        g = Grid()
        walls = [(1, 1, 1), (0, 2, 1), (2, 0, 2)]
        for p in walls:
            g.place(p, CellType.FIREWALL)
        g.place((2, 2, 2), CellType.CORE)
        for p in [(0, 0, 0), (1, 0, 0), (0, 1, 0), (2, 1, 1), (1, 2, 2)]:
            g.place(p, CellType.DATA)
        played = _scramble(g, random.Random(1), 40)
        self.assertEqual(played, 40)
        self.assertEqual(sorted(g.find(CellType.FIREWALL)), sorted(walls))
        self.assertEqual(g.count(CellType.DATA), 5)
        self.assertEqual(g.count(CellType.CORE), 1)

    def test_given_full_grid_when_scrambling_then_gives_up_after_ceiling(self):
        g = Grid()
        for p in g.coords():
            g.place(p, CellType.DATA)
        g.place((2, 2, 2), CellType.CORE)
        before = g.copy()
        self.assertEqual(_scramble(g, random.Random(0), 10), 0)
        self.assertEqual(g, before)

    def test_given_core_off_target_when_settling_then_untouched(self):
        g = Grid()
        g.place((0, 0, 0), CellType.CORE)
        self.assertEqual(_settle_core(g, (2, 2, 2)), 'ok')
        self.assertEqual(g.occupancy((0, 0, 0)), CellType.CORE)

    def test_given_core_on_target_with_free_neighbor_when_settling_then_nudged(self):
        g = Grid()
        g.place((2, 2, 2), CellType.CORE)
        g.place((2, 1, 2), CellType.DATA)
        self.assertEqual(_settle_core(g, (2, 2, 2)), 'nudged')
        self.assertEqual(g.occupancy((1, 2, 2)), CellType.CORE)
        self.assertTrue(g.is_empty((2, 2, 2)))

    def test_given_boxed_in_core_when_settling_then_swapped_with_first_non_firewall_cell(self):
        g = Grid()
        g.place((2, 2, 2), CellType.CORE)
        for p in [(1, 2, 2), (2, 1, 2), (2, 2, 1)]:
            g.place(p, CellType.DATA)
        g.place((0, 0, 0), CellType.FIREWALL)
        g.place((0, 0, 1), CellType.DATA)
        self.assertEqual(_settle_core(g, (2, 2, 2)), 'fallback')
        self.assertEqual(g.occupancy((0, 0, 1)), CellType.CORE)
        self.assertEqual(g.occupancy((2, 2, 2)), CellType.DATA)
        self.assertEqual(g.occupancy((0, 0, 0)), CellType.FIREWALL)
        self.assertEqual(g.count(CellType.CORE), 1)
        self.assertEqual(g.count(CellType.DATA), 4)

    def test_given_boxed_in_core_and_empty_fallback_cell_when_settling_then_target_left_empty(self):
        g = Grid()
        g.place((2, 2, 2), CellType.CORE)
        for p in [(1, 2, 2), (2, 1, 2), (2, 2, 1)]:
            g.place(p, CellType.DATA)
        self.assertEqual(_settle_core(g, (2, 2, 2)), 'fallback')
        self.assertEqual(g.occupancy((0, 0, 0)), CellType.CORE)
        self.assertTrue(g.is_empty((2, 2, 2)))


if __name__ == '__main__':
    unittest.main(verbosity=2)
