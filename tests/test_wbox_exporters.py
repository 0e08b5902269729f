# ==============================================================================
# Файл: tests/test_wbox_exporters.py
# Назначение: Тесты сериализации и zlib-сжатия документа в .wbox.
# ==============================================================================
import json
import os
import tempfile
import unittest
import zlib

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from wbox_mapgen.core.config import StatsConfig
from wbox_mapgen.core.errors import ResourceError
from wbox_mapgen.core.types import TileGrid
from wbox_mapgen.export.image_exporters import render_tile_preview, tile_palette, write_tile_preview
from wbox_mapgen.export.save_document import assemble_save_document
from wbox_mapgen.export.wbox_exporters import (
    compress_bytes,
    compress_document,
    read_wbox,
    serialize_document,
    write_document_json,
    write_wbox,
)
from wbox_mapgen.palette.color_table import ColorTable


def _document():
    rows = [["sand"] * 32 + ["hills"] * 32 for _ in range(64)]
    return assemble_save_document(TileGrid.from_rows(rows), StatsConfig(player_name="Tester"))


class TestSerialization(unittest.TestCase):

    def test_compact_json(self):
        text = serialize_document(_document())
        self.assertNotIn("\n", text)
        self.assertNotIn('": ', text)
        self.assertTrue(text.startswith('{"saveVersion":17,"width":1,"height":1,'))

    def test_beautify(self):
        text = serialize_document(_document(), beautify=True)
        self.assertIn("\n  ", text)
        self.assertEqual(json.loads(text), _document().to_dict())


class TestCompression(unittest.TestCase):

    def test_zlib_header_max_level(self):
        """Заголовок zlib 78 DA: deflate, окно 32 KB, максимальный уровень."""
        print("\n[TEST] Running test_zlib_header_max_level...")
        data = compress_document(_document())
        self.assertEqual(data[:2], b"\x78\xda")

    def test_decompress_restores_document(self):
        doc = _document()
        data = compress_document(doc)
        restored = json.loads(zlib.decompress(data).decode("utf-8"))
        self.assertEqual(restored, doc.to_dict())
        self.assertEqual(read_wbox(data), doc.to_dict())

    def test_deterministic_output(self):
        self.assertEqual(compress_document(_document()), compress_document(_document()))

    def test_compress_bytes_matches_zlib(self):
        payload = b"tileMap" * 500
        expected = zlib.compressobj(9, zlib.DEFLATED, 15, 9)
        self.assertEqual(compress_bytes(payload), expected.compress(payload) + expected.flush())

    def test_read_invalid(self):
        with self.assertRaises(ResourceError):
            read_wbox(b"definitely not zlib")


class TestFileWriters(unittest.TestCase):

    def test_write_and_read_wbox(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "map.wbox")
            data = write_wbox(path, _document())

            self.assertTrue(os.path.exists(path))
            self.assertFalse(os.path.exists(path + ".tmp"))
            with open(path, "rb") as f:
                self.assertEqual(f.read(), data)
            self.assertEqual(read_wbox(path)["tileMap"], ["sand", "hills"])

    def test_read_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ResourceError):
                read_wbox(os.path.join(tmp, "missing.wbox"))

    def test_write_document_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "map.json")
            write_document_json(path, _document())
            with open(path, "r", encoding="utf-8") as f:
                self.assertEqual(json.load(f)["mapStats"]["player_name"], "Tester")


class TestPreview(unittest.TestCase):

    def test_preview_colors(self):
        table = ColorTable({"ABCDEF": "sand", "5F6A5B": "hills"})
        grid = TileGrid.from_rows([["sand", "hills", "soil_low"]] * 2)
        img = render_tile_preview(grid, table, scale=2)
        self.assertEqual(img.size, (6, 4))
        self.assertEqual(img.getpixel((0, 0)), (0xAB, 0xCD, 0xEF))
        self.assertEqual(img.getpixel((2, 0)), (0x5F, 0x6A, 0x5B))
        self.assertEqual(img.getpixel((4, 0)), (0xFF, 0x00, 0xFF))

    def test_write_preview(self):
        table = ColorTable({"ABCDEF": "sand"})
        grid = TileGrid.from_rows([["sand"] * 4] * 4)
        with tempfile.TemporaryDirectory() as tmp:
            path = write_tile_preview(os.path.join(tmp, "preview.png"), grid, table)
            self.assertTrue(path.exists())

    def test_write_preview_unwritable(self):
        table = ColorTable({"ABCDEF": "sand"})
        grid = TileGrid.from_rows([["sand"] * 4] * 4)
        with tempfile.TemporaryDirectory() as tmp:
            blocker = os.path.join(tmp, "blocker")
            with open(blocker, "w", encoding="utf-8") as f:
                f.write("x")
            with self.assertRaises(ResourceError):
                write_tile_preview(os.path.join(blocker, "preview.png"), grid, table)
            with self.assertRaises(ResourceError):
                write_wbox(os.path.join(blocker, "map.wbox"), _document())

    def test_palette_uses_first_color(self):
        table = ColorTable({"111111": "sand", "222222": "hills", "333333": "sand"})
        self.assertEqual(tile_palette(table), {"sand": "111111", "hills": "222222"})


if __name__ == '__main__':
    unittest.main()
