# ==============================================================================
# Файл: wbox_mapgen/imaging/classifier.py
# Назначение: Определение типа тайла по цвету пикселя (точное совпадение
#             + поиск ближайшего цвета в пределах допуска).
# ==============================================================================
from __future__ import annotations
import math
from collections import Counter
from typing import Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_TILE_TYPE, TOLERANCE_MAX, TOLERANCE_MIN
from ..core.errors import ConfigError
from ..core.utils.colors import rgb_to_hex
from ..palette.color_table import ColorTable

# Максимальное евклидово расстояние в RGB: от 000000 до FFFFFF.
MAX_RGB_DISTANCE = math.sqrt(3 * 255.0 ** 2)


class TileClassifier:
    """
    Отображает цвет пикселя в тип тайла.

    Порядок проверки:
    1. Точное совпадение ColorKey в таблице - всегда побеждает.
    2. Если tolerance > 0: ближайший цвет таблицы по нормированному
       евклидову расстоянию (в процентах от MAX_RGB_DISTANCE), если оно <= tolerance.
       При равенстве расстояний выигрывает цвет, стоящий в таблице раньше.
    3. Иначе - fallback-тип, а цвет учитывается в счётчике непойманных.
    """

    def __init__(self, color_table: ColorTable, tolerance: float = 0, fallback: str = DEFAULT_TILE_TYPE):
        if not TOLERANCE_MIN <= tolerance <= TOLERANCE_MAX:
            raise ConfigError(f"tolerance must be in [{TOLERANCE_MIN}, {TOLERANCE_MAX}], got {tolerance}")
        self.color_table = color_table
        self.tolerance = float(tolerance)
        self.fallback = fallback

    def distances(self, rgb: Sequence[int]) -> np.ndarray:
        """Расстояние от цвета до каждой записи таблицы, в процентах (0..100)."""
        q = np.asarray(rgb[:3], dtype=np.float64)
        diff = self.color_table.rgb_array - q
        return np.sqrt((diff * diff).sum(axis=1)) / MAX_RGB_DISTANCE * 100.0

    def match(self, rgb: Sequence[int]) -> Optional[str]:
        """Тип тайла или None, если ни точного, ни допустимого совпадения нет."""
        color = rgb_to_hex(rgb[0], rgb[1], rgb[2])
        tile = self.color_table.get(color)
        if tile is not None:
            return tile
        if self.tolerance <= 0:
            return None

        d = self.distances(rgb)
        within = d <= self.tolerance
        if not within.any():
            return None
        # argmin отдаёт первый минимум -> tie-break по порядку таблицы
        idx = int(np.argmin(np.where(within, d, np.inf)))
        return self.color_table[self.color_table.keys_in_order[idx]]

    def classify(self, rgb: Sequence[int], tally: Counter | None = None, count: int = 1) -> str:
        """
        Как match(), но никогда не возвращает None: подставляет fallback
        и увеличивает tally[ColorKey] на count.
        """
        tile = self.match(rgb)
        if tile is not None:
            return tile
        if tally is not None:
            tally[rgb_to_hex(rgb[0], rgb[1], rgb[2])] += count
        return self.fallback
