# ==============================================================================
# Файл: wbox_mapgen/__init__.py
# Назначение: Генератор карт WorldBox (.wbox) из изображений.
# ==============================================================================
from __future__ import annotations

from .core.config import StatsConfig, load_stats_config
from .export.wbox_exporters import read_wbox, write_wbox
from .palette.color_table import ColorTable, load_color_table, load_default_color_table
from .pipeline import ConversionResult, convert_image

__version__ = "0.1.0"

__all__ = [
    "StatsConfig",
    "load_stats_config",
    "ColorTable",
    "load_color_table",
    "load_default_color_table",
    "ConversionResult",
    "convert_image",
    "read_wbox",
    "write_wbox",
]
