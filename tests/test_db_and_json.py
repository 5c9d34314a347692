import os
import tempfile
import unittest

from game import (
    LEVELS,
    CellType,
    ProgressStore,
    PuzzleSession,
    level_from_json,
    level_to_json,
    load_progress,
    save_progress,
)


class TestDbAndJson(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self._tmp.name, 'nested', 'progress.db')

    def tearDown(self):
        self._tmp.cleanup()

    def test_given_fresh_db_when_loading_then_none(self):
        self.assertIsNone(load_progress(self.db_path))
        self.assertTrue(os.path.isfile(self.db_path))

    def test_given_saved_index_when_loading_then_latest_value(self):
        save_progress(self.db_path, 2)
        self.assertEqual(load_progress(self.db_path), 2)
        save_progress(self.db_path, 7)
        self.assertEqual(load_progress(self.db_path), 7)

    def test_given_two_keys_when_saving_then_isolated(self):
        a = ProgressStore(self.db_path, key='alice')
        b = ProgressStore(self.db_path, key='bob')
        a.save(4)
        self.assertEqual(a.load(), 4)
        self.assertIsNone(b.load())

    def test_given_session_with_store_when_loading_levels_then_progress_saved(self):
        store = ProgressStore(self.db_path)
        s = PuzzleSession(index=1, progress=store)
        self.assertEqual(store.load(), 1)
        s.next_level()
        self.assertEqual(store.load(), 2)
        s.reset()
        self.assertEqual(store.load(), 2)
        s.load_custom(LEVELS[0])
        self.assertEqual(store.load(), 2)

    def test_given_level_when_roundtrip_json_then_equal(self):
        for lv in LEVELS:
            data = level_to_json(lv)
            self.assertEqual(data['moveLimit'], lv.move_limit)
            self.assertEqual(data['target'], {'x': 2, 'y': 2, 'z': 2})
            self.assertEqual(level_from_json(data), lv)

    def test_given_json_with_two_cores_when_validated_then_value_error(self):
        data = {
            'target': {'x': 2, 'y': 2, 'z': 2},
            'blocks': [
                {'x': 0, 'y': 0, 'z': 0, 'type': 2},
                {'x': 1, 'y': 0, 'z': 0, 'type': 2},
            ],
        }
        lv = level_from_json(data)
        self.assertEqual(lv.id, 'custom')
        self.assertEqual(lv.count(CellType.CORE), 2)
        with self.assertRaises(ValueError):
            lv.validate()

    def test_given_json_with_shared_cell_when_validated_then_value_error(self):
        data = {
            'target': {'x': 2, 'y': 2, 'z': 2},
            'blocks': [
                {'x': 0, 'y': 0, 'z': 0, 'type': 2},
                {'x': 0, 'y': 0, 'z': 0, 'type': 1},
            ],
        }
        with self.assertRaises(ValueError):
            level_from_json(data).validate()


if __name__ == '__main__':
    unittest.main(verbosity=2)
