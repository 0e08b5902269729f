# ==============================================================================
# Файл: wbox_mapgen/export/__init__.py
# Назначение: Точка входа в пакет для экспорта данных (.wbox, JSON, превью).
# ==============================================================================
from __future__ import annotations

from .image_exporters import render_tile_preview, write_tile_preview
from .save_document import (
    MapStats,
    SaveDocument,
    assemble_save_document,
    build_save_document,
    months_to_world_time,
    tiles_to_zones,
)
from .wbox_exporters import (
    compress_bytes,
    compress_document,
    read_wbox,
    serialize_document,
    write_document_json,
    write_wbox,
    write_wbox_bytes,
)

__all__ = [
    "MapStats",
    "SaveDocument",
    "assemble_save_document",
    "build_save_document",
    "months_to_world_time",
    "tiles_to_zones",
    "compress_bytes",
    "compress_document",
    "read_wbox",
    "serialize_document",
    "write_document_json",
    "write_wbox",
    "write_wbox_bytes",
    "render_tile_preview",
    "write_tile_preview",
]
