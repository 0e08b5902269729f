# ==============================================================================
# Файл: wbox_mapgen/export/save_document.py
# Назначение: Сборка документа SavedMap (формат сохранения WorldBox).
#             Размеры хранятся в зонах (тайлы / 64), тайлы - в RLE по строкам.
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..core.config import StatsConfig
from ..core.constants import (
    CAMERA_POS_X,
    CAMERA_POS_Y,
    CAMERA_ZOOM,
    DEFAULT_PLAYER_NAME,
    ENTITY_COLLECTION_FIELDS,
    SAVE_VERSION,
    WORLD_TIME_MONTH_FACTOR,
    ZONE_SIZE,
)
from ..core.errors import ValidationError
from ..core.types import RLERow, TileGrid
from ..core.utils.rle import build_tile_catalog, encode_rle_rows, split_rle_rows


@dataclass(frozen=True)
class MapStats:
    population: int = 0
    deaths: int = 0
    player_name: str = DEFAULT_PLAYER_NAME
    world_time: int = 0  # секунды

    def to_dict(self) -> Dict[str, Any]:
        return {
            "population": self.population,
            "deaths": self.deaths,
            "player_name": self.player_name,
            "world_time": self.world_time,
        }


@dataclass(frozen=True)
class SaveDocument:
    """
    Контракт файла .wbox (после распаковки - JSON).
    Имена и порядок ключей в to_dict() совпадают с тем, что ожидает парсер игры.
    """

    width: int  # зоны
    height: int  # зоны
    tile_map: List[str]
    tile_array: List[List[int]]
    tile_amounts: List[List[int]]
    map_stats: MapStats = field(default_factory=MapStats)
    creatures_born: int = 0
    save_version: int = SAVE_VERSION
    camera_pos_x: int = CAMERA_POS_X
    camera_pos_y: int = CAMERA_POS_Y
    camera_zoom: float = CAMERA_ZOOM

    @property
    def tile_width(self) -> int:
        return self.width * ZONE_SIZE

    @property
    def tile_height(self) -> int:
        return self.height * ZONE_SIZE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "saveVersion": self.save_version,
            "width": self.width,
            "height": self.height,
            "hotkey_tabs_data": None,
            "camera_pos_x": self.camera_pos_x,
            "camera_pos_y": self.camera_pos_y,
            "camera_zoom": self.camera_zoom,
            "mapStats": self.map_stats.to_dict(),
            "worldLaws": {},
            "tileString": None,
            "tileMap": list(self.tile_map),
            "tileArray": [list(r) for r in self.tile_array],
            "tileAmounts": [list(r) for r in self.tile_amounts],
        }
        # Коллекции сущностей: парсер игры ожидает их наличие, даже пустых.
        for name in ENTITY_COLLECTION_FIELDS:
            data[name] = []
        data["creaturesBorn"] = self.creatures_born
        return data


def months_to_world_time(months: int) -> int:
    return int(months) * WORLD_TIME_MONTH_FACTOR


def tiles_to_zones(tile_width: int, tile_height: int) -> tuple[int, int]:
    """Пиксельные (тайловые) размеры -> количество зон. Обе стороны обязаны быть кратны 64."""
    if tile_width <= 0 or tile_height <= 0 or tile_width % ZONE_SIZE or tile_height % ZONE_SIZE:
        raise ValidationError(
            f"Размер в тайлах должен быть кратен {ZONE_SIZE}, получено {tile_width}x{tile_height}"
        )
    return tile_width // ZONE_SIZE, tile_height // ZONE_SIZE


def build_save_document(
        tile_width: int,
        tile_height: int,
        grid: TileGrid | None,
        catalog: Sequence[str],
        rows: Sequence[RLERow],
        stats: StatsConfig | None = None,
) -> SaveDocument:
    """Собирает SaveDocument из готовых каталога и RLE-строк."""
    zone_w, zone_h = tiles_to_zones(tile_width, tile_height)
    if grid is not None and (grid.width, grid.height) != (tile_width, tile_height):
        raise ValidationError(
            f"Сетка {grid.width}x{grid.height} не совпадает с размером {tile_width}x{tile_height}"
        )
    if len(rows) != tile_height:
        raise ValidationError(f"RLE-строк {len(rows)}, ожидалось {tile_height}")

    stats = stats or StatsConfig()
    tile_array, tile_amounts = split_rle_rows(rows)
    return SaveDocument(
        width=zone_w,
        height=zone_h,
        tile_map=list(catalog),
        tile_array=tile_array,
        tile_amounts=tile_amounts,
        map_stats=MapStats(
            population=stats.population,
            deaths=stats.deaths,
            player_name=stats.player_name or DEFAULT_PLAYER_NAME,
            world_time=months_to_world_time(stats.world_time),
        ),
        creatures_born=stats.creatures_born,
    )


def assemble_save_document(grid: TileGrid, stats: StatsConfig | None = None) -> SaveDocument:
    """Каталог + RLE + документ за один вызов."""
    catalog = build_tile_catalog(grid)
    rows = encode_rle_rows(grid, catalog)
    return build_save_document(grid.width, grid.height, grid, catalog, rows, stats)
