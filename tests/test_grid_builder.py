# ==============================================================================
# Файл: tests/test_grid_builder.py
# Назначение: Тесты обрезки изображения и построения сетки тайлов.
# ==============================================================================
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from wbox_mapgen.core.errors import SizeTooSmallError
from wbox_mapgen.imaging.classifier import TileClassifier
from wbox_mapgen.imaging.grid_builder import GridBuilder, crop_to_blocks
from wbox_mapgen.palette.color_table import ColorTable

SAND = (0xAB, 0xCD, 0xEF)
OCEAN = (0x3E, 0x61, 0xAE)
HILLS = (0x5F, 0x6A, 0x5B)
UNKNOWN = (1, 2, 3)


def _table():
    return ColorTable({"ABCDEF": "sand", "3E61AE": "deep_ocean", "5F6A5B": "hills"})


def _image(w: int, h: int, color=SAND, channels: int = 3) -> np.ndarray:
    img = np.zeros((h, w, channels), dtype=np.uint8)
    img[..., :3] = color
    return img


class TestCropToBlocks(unittest.TestCase):

    def test_crop_130x70(self):
        """130x70 -> 128x64, без масштабирования."""
        print("\n[TEST] Running test_crop_130x70...")
        img = _image(130, 70)
        img[0, 127] = HILLS
        cropped = crop_to_blocks(img)
        self.assertEqual(cropped.shape, (64, 128, 3))
        self.assertEqual(tuple(cropped[0, 127]), HILLS)

    def test_exact_multiple_untouched(self):
        img = _image(128, 64)
        self.assertEqual(crop_to_blocks(img).shape, (64, 128, 3))

    def test_too_small(self):
        with self.assertRaises(SizeTooSmallError):
            crop_to_blocks(_image(63, 64))
        with self.assertRaises(SizeTooSmallError):
            crop_to_blocks(_image(64, 10))

    def test_crop_logs_warning(self):
        with self.assertLogs("wbox_mapgen.imaging.grid_builder", level="WARNING"):
            crop_to_blocks(_image(65, 64))


class TestGridBuilder(unittest.TestCase):

    def test_solid_image(self):
        result = GridBuilder(TileClassifier(_table())).build(_image(64, 64))
        self.assertEqual(result.grid.width, 64)
        self.assertEqual(result.grid.height, 64)
        self.assertTrue(all(t == "sand" for row in result.grid.tolist() for t in row))
        self.assertEqual(len(result.unmatched), 0)
        self.assertFalse(result.cropped)

    def test_row_major_layout(self):
        """Строка 0 - верх изображения, колонка 0 - левый край."""
        img = _image(128, 128, OCEAN)
        img[:64, 64:] = HILLS
        img[64:, :] = SAND
        grid = GridBuilder(TileClassifier(_table())).build(img).grid
        self.assertEqual(grid.tiles[0, 0], "deep_ocean")
        self.assertEqual(grid.tiles[0, 127], "hills")
        self.assertEqual(grid.tiles[127, 0], "sand")

    def test_alpha_is_ignored(self):
        img = _image(64, 64, SAND, channels=4)
        img[..., 3] = 0
        grid = GridBuilder(TileClassifier(_table())).build(img).grid
        self.assertEqual(grid.tiles[10, 10], "sand")

    def test_unmatched_tally(self):
        img = _image(64, 64)
        img[0, :5] = UNKNOWN
        img[63, 63] = UNKNOWN
        result = GridBuilder(TileClassifier(_table())).build(img)
        self.assertEqual(dict(result.unmatched), {"010203": 6})
        self.assertEqual(result.grid.tiles[0, 0], "soil_low")

    def test_cropped_source_dimensions(self):
        result = GridBuilder(TileClassifier(_table())).build(_image(130, 70))
        self.assertTrue(result.cropped)
        self.assertEqual((result.source_width, result.source_height), (130, 70))
        self.assertEqual((result.grid.width, result.grid.height), (128, 64))

    def test_grid_is_read_only(self):
        grid = GridBuilder(TileClassifier(_table())).build(_image(64, 64)).grid
        with self.assertRaises(ValueError):
            grid.tiles[0, 0] = "hills"

    def test_progress_monotonic_with_final(self):
        calls = []
        builder = GridBuilder(TileClassifier(_table()), progress_every=1000)
        builder.build(_image(128, 128), progress=lambda cur, total: calls.append((cur, total)))
        self.assertGreater(len(calls), 1)
        currents = [c for c, _ in calls]
        self.assertEqual(currents, sorted(currents))
        self.assertEqual(calls[-1], (128 * 128, 128 * 128))

    def test_parallel_matches_serial(self):
        """Результат не зависит от числа потоков: та же сетка и тот же счётчик."""
        print("\n[TEST] Running test_parallel_matches_serial...")
        rng = np.random.default_rng(42)
        palette = np.array([SAND, OCEAN, HILLS, UNKNOWN, (9, 9, 9)], dtype=np.uint8)
        img = palette[rng.integers(0, len(palette), size=(192, 128))]

        classifier = TileClassifier(_table())
        serial = GridBuilder(classifier, workers=1, progress_every=300).build(img)

        calls = []
        parallel = GridBuilder(classifier, workers=4, progress_every=300).build(
            img, progress=lambda cur, total: calls.append(cur)
        )

        self.assertEqual(serial.grid.tolist(), parallel.grid.tolist())
        self.assertEqual(serial.unmatched, parallel.unmatched)
        self.assertEqual(calls, sorted(calls))
        self.assertEqual(calls[-1], 192 * 128)
        print("[TEST] test_parallel_matches_serial: OK")

    def test_progress_does_not_change_grid(self):
        classifier = TileClassifier(_table())
        img = _image(128, 64)
        img[:, 100:] = OCEAN
        a = GridBuilder(classifier, progress_every=1).build(img, progress=lambda c, t: None)
        b = GridBuilder(classifier, progress_every=10 ** 6).build(img)
        self.assertEqual(a.grid.tolist(), b.grid.tolist())


if __name__ == '__main__':
    unittest.main()
