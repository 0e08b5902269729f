# ==============================================================================
# Файл: wbox_mapgen/pipeline.py
# Назначение: Полный конвейер "изображение -> .wbox":
#             таблица цветов -> сетка тайлов -> RLE -> SavedMap -> zlib.
# ==============================================================================
from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from .core.config import StatsConfig
from .core.constants import DEFAULT_TILE_TYPE, UNMATCHED_REPORT_TOP_N
from .core.types import TileGrid
from .core.utils.metrics import tile_counts, unmatched_summary
from .core.utils.rle import build_tile_catalog, encode_rle_rows
from .export.save_document import SaveDocument, build_save_document
from .export.wbox_exporters import compress_document
from .imaging.classifier import TileClassifier
from .imaging.grid_builder import GridBuilder
from .imaging.image_loader import ImageSource, load_rgb_pixels
from .palette.color_table import ColorTable, load_color_table, load_default_color_table

logger = logging.getLogger(__name__)

PercentCallback = Callable[[float], None]


@dataclass
class ConversionResult:
    data: bytes
    document: SaveDocument
    grid: TileGrid
    color_table: ColorTable
    unmatched: Counter = field(default_factory=Counter)
    source_width: int = 0
    source_height: int = 0

    @property
    def zone_width(self) -> int:
        return self.document.width

    @property
    def zone_height(self) -> int:
        return self.document.height


def report_unmatched(unmatched: Mapping[str, int], top_n: int = UNMATCHED_REPORT_TOP_N) -> None:
    """Один сводный warning по непойманным цветам (top-N по частоте)."""
    if not unmatched:
        return
    summary = unmatched_summary(unmatched, top_n)
    lines = [f"  #{color}: {count} пикселей" for color, count in summary["top"]]
    logger.warning(
        "Найдено %d непойманных цветов, %d пикселей получили тайл по умолчанию\n%s",
        summary["distinct_colors"], summary["pixels"], "\n".join(lines),
    )


def convert_image(
        source: ImageSource,
        color_table: Union[ColorTable, Mapping[str, Any], str, None] = None,
        stats: Optional[StatsConfig] = None,
        *,
        workers: int = 1,
        fallback: str = DEFAULT_TILE_TYPE,
        progress: Optional[PercentCallback] = None,
        top_n: int = UNMATCHED_REPORT_TOP_N,
) -> ConversionResult:
    """
    Конвертирует изображение в байты .wbox.

    progress получает проценты: 10 - таблица цветов, 20..90 - пиксели,
    90 - документ, 95 - сжатие, 100 - готово. Значения не убывают.
    Любая ошибка прерывает конвейер целиком, частичный результат не возвращается.
    """
    stats = stats or StatsConfig()
    stats.validate()

    def _percent(value: float):
        if progress is not None:
            progress(value)

    _percent(0)

    # 1. Таблица цветов
    table = load_default_color_table() if color_table is None else load_color_table(color_table)
    _percent(10)

    # 2. Пиксели -> сетка тайлов
    pixels = load_rgb_pixels(source)
    _percent(20)
    classifier = TileClassifier(table, tolerance=stats.tolerance_level, fallback=fallback)
    builder = GridBuilder(classifier, workers=workers)
    grid_result = builder.build(pixels, lambda cur, total: _percent(20 + cur / total * 70))
    grid = grid_result.grid
    report_unmatched(grid_result.unmatched, top_n)

    # 3. Документ
    catalog = build_tile_catalog(grid)
    rows = encode_rle_rows(grid, catalog)
    document = build_save_document(grid.width, grid.height, grid, catalog, rows, stats)
    _percent(90)
    logger.debug("Тайлы на карте: %s", tile_counts(grid.rows()))

    # 4. Сжатие
    _percent(95)
    data = compress_document(document)
    _percent(100)

    logger.info(
        "Карта готова: %dx%d тайлов (%dx%d зон), типов тайлов: %d",
        grid.width, grid.height, document.width, document.height, len(catalog),
    )
    return ConversionResult(
        data=data,
        document=document,
        grid=grid,
        color_table=table,
        unmatched=grid_result.unmatched,
        source_width=grid_result.source_width,
        source_height=grid_result.source_height,
    )
