# ==============================================================================
# Файл: wbox_mapgen/core/constants.py
# Назначение: Константы формата сохранения WorldBox (.wbox) и конвейера.
# Значения ниже - часть контракта с движком игры, менять их нельзя.
# ==============================================================================
from __future__ import annotations
from typing import Tuple

# =======================================================================
# СЕТКА И ЗОНЫ
# =======================================================================
# Размер блока: карта режется до кратного ему размера, одна зона = 64x64 тайла.
BLOCK_SIZE = 64
ZONE_SIZE = BLOCK_SIZE

# Тайл, который подставляется, если цвет пикселя не найден в таблице.
DEFAULT_TILE_TYPE = "soil_low"

# =======================================================================
# ДОКУМЕНТ СОХРАНЕНИЯ
# =======================================================================
SAVE_VERSION = 17
DEFAULT_PLAYER_NAME = "The Creator"

CAMERA_POS_X = 0
CAMERA_POS_Y = 0
CAMERA_ZOOM = 1.0

# "Месяц" игрового времени в секундах: месяцы * 5 * 60.
# Это константа формата, а не физический пересчёт.
WORLD_TIME_MONTH_FACTOR = 5 * 60

# Коллекции сущностей, которые парсер игры ожидает увидеть (всегда пустые).
# Порядок совпадает с порядком полей в документе.
ENTITY_COLLECTION_FIELDS: Tuple[str, ...] = (
    "fire",
    "conwayEater",
    "conwayCreator",
    "frozen_tiles",
    "tiles",
    "cities",
    "actors_data",
    "buildings",
    "kingdoms",
    "clans",
    "alliances",
    "wars",
    "plots",
    "relations",
    "cultures",
    "books",
    "subspecies",
    "languages",
    "religions",
    "families",
    "armies",
    "items",
)

# =======================================================================
# СЖАТИЕ (zlib)
# =======================================================================
ZLIB_LEVEL = 9
ZLIB_WBITS = 15  # окно 32 KB
ZLIB_MEM_LEVEL = 9

WBOX_EXTENSION = ".wbox"

# =======================================================================
# ДОПУСК ПО ЦВЕТУ И ДИАГНОСТИКА
# =======================================================================
TOLERANCE_MIN = 0
TOLERANCE_MAX = 100

# Как часто (в пикселях) сообщать о прогрессе построения сетки.
PROGRESS_EVERY_PIXELS = 1000

# Сколько самых частых "непойманных" цветов выводить в отчёт.
UNMATCHED_REPORT_TOP_N = 10
