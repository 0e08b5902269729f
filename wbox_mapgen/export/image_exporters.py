# ==============================================================================
# Файл: wbox_mapgen/export/image_exporters.py
# Назначение: Превью сетки тайлов в PNG (цвета берутся из таблицы цветов).
# ==============================================================================
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Dict, Union

import numpy as np
from PIL import Image

from ..core.errors import ResourceError
from ..core.types import TileGrid
from ..core.utils.colors import hex_to_rgb
from ..palette.color_table import ColorTable

logger = logging.getLogger(__name__)

# Тайлы, для которых в таблице нет цвета (например fallback), красятся этим цветом.
MISSING_TILE_COLOR = "FF00FF"


def tile_palette(color_table: ColorTable) -> Dict[str, str]:
    """Тип тайла -> первый цвет таблицы, который в него отображается."""
    return {tile: color_table.first_color_for(tile) for tile in color_table.tile_types()}


def render_tile_preview(grid: TileGrid, color_table: ColorTable, scale: int = 1) -> Image.Image:
    """Рисует сетку: один тайл = scale x scale пикселей."""
    palette = tile_palette(color_table)
    missing = [t for t in set(grid.tiles.ravel().tolist()) if t not in palette]
    if missing:
        logger.warning("[Preview] Нет цвета для тайлов %s, используем #%s", sorted(missing), MISSING_TILE_COLOR)

    rgb = np.zeros((grid.height, grid.width, 3), dtype=np.uint8)
    for tile in set(grid.tiles.ravel().tolist()):
        rgb[grid.tiles == tile] = hex_to_rgb(palette.get(tile, MISSING_TILE_COLOR))

    img = Image.fromarray(rgb)
    if scale > 1:
        img = img.resize((grid.width * scale, grid.height * scale), Image.Resampling.NEAREST)
    return img


def write_tile_preview(
        path: Union[str, os.PathLike], grid: TileGrid, color_table: ColorTable, scale: int = 1
) -> Path:
    """Сохраняет PNG-превью сетки. Ошибки записи -> ResourceError."""
    target = Path(path)
    img = render_tile_preview(grid, color_table, scale)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        img.save(target, format="PNG")
    except (OSError, ValueError) as e:
        raise ResourceError(f"Cannot write preview {target}: {e}") from e
    logger.info("--- EXPORT: превью сохранено: %s", target)
    return target
