# ==============================================================================
# Файл: tests/test_classifier.py
# Назначение: Юнит-тесты определения типа тайла по цвету.
# ==============================================================================
import unittest
from collections import Counter

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from wbox_mapgen.core.errors import ConfigError
from wbox_mapgen.core.utils.colors import hex_to_rgb, normalize_color_key, rgb_to_hex
from wbox_mapgen.imaging.classifier import TileClassifier
from wbox_mapgen.palette.color_table import ColorTable


class TestColorHelpers(unittest.TestCase):

    def test_rgb_hex(self):
        self.assertEqual(rgb_to_hex(171, 205, 239), "ABCDEF")
        self.assertEqual(rgb_to_hex(0, 8, 255), "0008FF")
        self.assertEqual(hex_to_rgb("ABCDEF"), (171, 205, 239))

    def test_normalize_color_key(self):
        self.assertEqual(normalize_color_key(" #abcdef "), "ABCDEF")
        self.assertEqual(normalize_color_key(0x000080), "000080")
        self.assertIsNone(normalize_color_key("XYZ123"))
        self.assertIsNone(normalize_color_key("ABCD"))
        self.assertIsNone(normalize_color_key(None))
        self.assertIsNone(normalize_color_key(0x1000000))


class TestTileClassifier(unittest.TestCase):

    def setUp(self):
        self.table = ColorTable({"FF0000": "lava0", "00FF00": "grass_low", "ABCDEF": "sand"})

    def test_exact_match(self):
        clf = TileClassifier(self.table)
        self.assertEqual(clf.match((171, 205, 239)), "sand")
        self.assertEqual(clf.classify((255, 0, 0)), "lava0")

    def test_unmatched_fallback_and_tally(self):
        """Цвета нет в таблице (допуск 0) -> soil_low и +1 в счётчике."""
        print("\n[TEST] Running test_unmatched_fallback_and_tally...")
        clf = TileClassifier(self.table, tolerance=0)
        tally = Counter()
        self.assertEqual(clf.classify((1, 2, 3), tally), "soil_low")
        self.assertEqual(tally, Counter({"010203": 1}))
        clf.classify((1, 2, 3), tally)
        self.assertEqual(tally["010203"], 2)
        # найденный цвет в счётчик не попадает
        clf.classify((255, 0, 0), tally)
        self.assertEqual(len(tally), 1)

    def test_configurable_fallback(self):
        clf = TileClassifier(self.table, fallback="deep_ocean")
        self.assertEqual(clf.classify((9, 9, 9)), "deep_ocean")

    def test_tolerance_match(self):
        # (250, 0, 0) отстоит от FF0000 на 5 / 441.67 ~ 1.13%
        self.assertEqual(TileClassifier(self.table, tolerance=2).match((250, 0, 0)), "lava0")
        self.assertIsNone(TileClassifier(self.table, tolerance=1).match((250, 0, 0)))

    def test_tolerance_picks_nearest(self):
        table = ColorTable({"000000": "deep_ocean", "640000": "lava0"})
        clf = TileClassifier(table, tolerance=50)
        self.assertEqual(clf.match((90, 0, 0)), "lava0")
        self.assertEqual(clf.match((10, 0, 0)), "deep_ocean")

    def test_tolerance_tie_break_by_table_order(self):
        """Равные расстояния: выигрывает запись, стоящая в таблице раньше."""
        forward = ColorTable({"000000": "first", "0A0000": "second"})
        backward = ColorTable({"0A0000": "second", "000000": "first"})
        self.assertEqual(TileClassifier(forward, tolerance=5).match((5, 0, 0)), "first")
        self.assertEqual(TileClassifier(backward, tolerance=5).match((5, 0, 0)), "second")

    def test_exact_match_beats_tolerance(self):
        table = ColorTable({"0A0000": "near", "0B0000": "exact"})
        clf = TileClassifier(table, tolerance=100)
        self.assertEqual(clf.match((11, 0, 0)), "exact")

    def test_determinism(self):
        clf = TileClassifier(self.table, tolerance=30)
        results = {clf.match((120, 130, 140)) for _ in range(20)}
        self.assertEqual(len(results), 1)

    def test_full_tolerance_matches_everything(self):
        clf = TileClassifier(self.table, tolerance=100)
        self.assertIsNotNone(clf.match((0, 0, 0)))
        self.assertIsNotNone(clf.match((255, 255, 255)))

    def test_invalid_tolerance(self):
        with self.assertRaises(ConfigError):
            TileClassifier(self.table, tolerance=101)
        with self.assertRaises(ConfigError):
            TileClassifier(self.table, tolerance=-1)

    def test_distances_are_percent(self):
        clf = TileClassifier(ColorTable({"000000": "a", "FFFFFF": "b"}))
        d = clf.distances((0, 0, 0))
        self.assertAlmostEqual(float(d[0]), 0.0)
        self.assertAlmostEqual(float(d[1]), 100.0)


if __name__ == '__main__':
    unittest.main()
