# ==============================================================================
# Файл: wbox_mapgen/palette/color_table.py
# Назначение: Таблица "цвет -> тип тайла" и её загрузка из JSON / CSV / TSV.
# ==============================================================================
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Tuple, Union

import numpy as np
import polars as pl

from ..core.errors import ColorTableError
from ..core.utils.colors import hex_to_rgb, normalize_color_key

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent / "data" / "default_colors.json"


class ColorTable(Mapping[str, str]):
    """
    Неизменяемое отображение ColorKey ('RRGGBB') -> TileTypeId.
    Порядок ключей сохраняется: он задаёт tie-break при поиске по допуску.
    """

    def __init__(self, mapping: Mapping[str, str]):
        entries: Dict[str, str] = {}
        for key, tile in mapping.items():
            color = normalize_color_key(key)
            if color is None:
                raise ColorTableError(f"Invalid color key: {key!r}")
            entries[color] = str(tile)
        if not entries:
            raise ColorTableError("Color table is empty")

        self._entries = MappingProxyType(entries)
        self._keys: Tuple[str, ...] = tuple(entries)
        # (n, 3) float-массив каналов для поиска по допуску
        self._rgb = np.array([hex_to_rgb(k) for k in self._keys], dtype=np.float64)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"ColorTable({len(self)} colors)"

    @property
    def keys_in_order(self) -> Tuple[str, ...]:
        return self._keys

    @property
    def rgb_array(self) -> np.ndarray:
        return self._rgb

    def tile_types(self) -> Tuple[str, ...]:
        """Уникальные типы тайлов в порядке первого появления."""
        return tuple(dict.fromkeys(self._entries.values()))

    def first_color_for(self, tile: str) -> str | None:
        for color, t in self._entries.items():
            if t == tile:
                return color
        return None


# =======================================================================
# ЗАГРУЗКА
# =======================================================================

def _rows_to_table(rows, source: str) -> ColorTable:
    """rows: итерируемое пар (tile_type, color_cell). Битые строки пропускаются с предупреждением."""
    mapping: Dict[str, str] = {}
    for i, (tile_type, color_value) in enumerate(rows, start=1):
        tile = "" if tile_type is None else str(tile_type).strip()
        # пустая ячейка или числовой 0 - строка пропускается молча
        if not tile or color_value is None or color_value == "" or color_value == 0:
            continue
        color = normalize_color_key(color_value)
        if color is None:
            logger.warning("%s: строка %d - неверный формат цвета: %r", source, i, color_value)
            continue
        mapping[color] = tile

    if not mapping:
        raise ColorTableError(f"No valid color mappings found in {source}")
    logger.info("Загружено %d цветов из %s", len(mapping), source)
    return ColorTable(mapping)


def _load_json_table(path: Path) -> ColorTable:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ColorTableError(f"Cannot read color table '{path}': {e}") from e

    if isinstance(data, dict):
        # {"RRGGBB": "tile_type"}
        rows = [(tile, color) for color, tile in data.items()]
    elif isinstance(data, list):
        # [{"tile": "...", "color": "..."}]
        rows = []
        for item in data:
            if isinstance(item, dict):
                rows.append((item.get("tile"), item.get("color")))
    else:
        raise ColorTableError(f"Color table '{path}' must be a JSON object or list")
    return _rows_to_table(rows, path.name)


def _load_delimited_table(path: Path, separator: str) -> ColorTable:
    """
    CSV/TSV: колонка 0 - тип тайла, колонка 1 - цвет, первая строка - заголовок.
    Все ячейки читаются как строки, чтобы '000080' не превратился в число.
    """
    try:
        df = pl.read_csv(
            path,
            separator=separator,
            has_header=True,
            infer_schema_length=0,
            truncate_ragged_lines=True,
        )
    except (OSError, pl.exceptions.PolarsError) as e:
        raise ColorTableError(f"Cannot read color table '{path}': {e}") from e

    if df.width < 2:
        raise ColorTableError(f"Color table '{path}' needs at least 2 columns, got {df.width}")

    tile_col, color_col = df.columns[0], df.columns[1]
    rows = zip(df.get_column(tile_col).to_list(), df.get_column(color_col).to_list())
    return _rows_to_table(rows, path.name)


def load_color_table(source: Union[str, os.PathLike, Mapping[str, Any]]) -> ColorTable:
    """
    Загружает таблицу цветов из словаря или файла (.json, .csv, .tsv/.txt).
    Пустая или нечитаемая таблица - ColorTableError.
    """
    if isinstance(source, ColorTable):
        return source
    if isinstance(source, Mapping):
        return _rows_to_table([(tile, color) for color, tile in source.items()], "<mapping>")

    path = Path(source)
    if not path.is_file():
        raise ColorTableError(f"Color table file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return _load_json_table(path)
    if suffix == ".csv":
        return _load_delimited_table(path, ",")
    if suffix in (".tsv", ".txt"):
        return _load_delimited_table(path, "\t")
    raise ColorTableError(f"Unsupported color table format '{suffix}' (expected .json, .csv or .tsv)")


def load_default_color_table() -> ColorTable:
    """Таблица, поставляемая вместе с пакетом."""
    return _load_json_table(DEFAULT_TABLE_PATH)
