# ==============================================================================
# Файл: wbox_mapgen/core/__init__.py
# Назначение: Общие типы, константы, ошибки и конфигурация генератора.
# ==============================================================================
from __future__ import annotations

from .config import StatsConfig, load_stats_config
from .errors import (
    ColorTableError,
    CompressionError,
    ConfigError,
    ImageReadError,
    MapGenError,
    ResourceError,
    SizeTooSmallError,
    ValidationError,
)
from .types import GridResult, RLERow, TileGrid

__all__ = [
    "StatsConfig",
    "load_stats_config",
    "MapGenError",
    "ValidationError",
    "SizeTooSmallError",
    "ColorTableError",
    "ConfigError",
    "ResourceError",
    "ImageReadError",
    "CompressionError",
    "GridResult",
    "RLERow",
    "TileGrid",
]
