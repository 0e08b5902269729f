# ==============================================================================
# Файл: wbox_mapgen/imaging/__init__.py
# Назначение: Чтение изображения и построение сетки тайлов.
# ==============================================================================
from __future__ import annotations

from .classifier import TileClassifier
from .grid_builder import GridBuilder, crop_to_blocks
from .image_loader import load_rgb_pixels

__all__ = ["TileClassifier", "GridBuilder", "crop_to_blocks", "load_rgb_pixels"]
