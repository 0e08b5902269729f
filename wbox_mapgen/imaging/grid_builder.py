# ==============================================================================
# Файл: wbox_mapgen/imaging/grid_builder.py
# Назначение: Построение сетки тайлов из пиксельного буфера.
#             Обрезка до кратного 64 размера, классификация полосами строк
#             (при желании - в пуле потоков), сбор непойманных цветов.
# ==============================================================================
from __future__ import annotations
import concurrent.futures
import logging
from collections import Counter
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.constants import BLOCK_SIZE, PROGRESS_EVERY_PIXELS
from ..core.errors import SizeTooSmallError
from ..core.types import GridResult, ProgressCallback, TileGrid
from ..core.utils.colors import pack_rgb, packed_to_hex
from ..core.utils.metrics import merge_tallies
from .classifier import TileClassifier

logger = logging.getLogger(__name__)

_MISSING = object()


def crop_to_blocks(pixels: np.ndarray, block_size: int = BLOCK_SIZE) -> np.ndarray:
    """
    Обрезает буфер (h, w, ...) справа и снизу до ближайших кратных block_size.
    Никакого масштабирования. Если хотя бы одна сторона становится 0 - SizeTooSmallError.
    """
    h, w = pixels.shape[:2]
    ch = h - h % block_size
    cw = w - w % block_size
    if ch == 0 or cw == 0:
        raise SizeTooSmallError(
            f"Изображение {w}x{h} меньше одного блока {block_size}x{block_size}"
        )
    if (cw, ch) != (w, h):
        logger.warning(
            "Размер %dx%d не кратен %d, изображение обрезано до %dx%d", w, h, block_size, cw, ch
        )
    return pixels[:ch, :cw]


class GridBuilder:
    """
    Превращает пиксельный буфер в TileGrid.

    Работа режется на полосы строк примерно по progress_every пикселей.
    Каждая полоса классифицируется независимо со своим локальным счётчиком,
    счётчики потом суммируются, а сетка собирается строго в порядке полос,
    так что результат не зависит от числа потоков.
    """

    def __init__(
            self,
            classifier: TileClassifier,
            workers: int = 1,
            progress_every: int = PROGRESS_EVERY_PIXELS,
            block_size: int = BLOCK_SIZE,
    ):
        self.classifier = classifier
        self.workers = max(1, int(workers))
        self.progress_every = max(1, int(progress_every))
        self.block_size = block_size

    def _band_bounds(self, height: int, width: int) -> List[Tuple[int, int]]:
        rows_per_band = max(1, -(-self.progress_every // width))
        return [(z, min(z + rows_per_band, height)) for z in range(0, height, rows_per_band)]

    def _classify_band(self, packed: np.ndarray, known: Dict[int, Optional[str]]) -> Tuple[np.ndarray, Counter]:
        """Классифицирует каждый уникальный цвет полосы один раз и раскладывает по пикселям."""
        flat = packed.ravel()
        uniq, inverse, counts = np.unique(flat, return_inverse=True, return_counts=True)
        lut = np.empty(len(uniq), dtype=object)
        tally: Counter = Counter()

        for i, p in enumerate(uniq.tolist()):
            tile = known.get(p, _MISSING)
            if tile is _MISSING:
                tile = self.classifier.match(((p >> 16) & 0xFF, (p >> 8) & 0xFF, p & 0xFF))
                known[p] = tile
            if tile is None:
                tally[packed_to_hex(p)] += int(counts[i])
                tile = self.classifier.fallback
            lut[i] = tile

        return lut[inverse.ravel()].reshape(packed.shape), tally

    def build(self, pixels: np.ndarray, progress: ProgressCallback | None = None) -> GridResult:
        """pixels: uint8 (h, w, 3|4). Возвращает GridResult с сеткой и счётчиком непойманных цветов."""
        source_h, source_w = pixels.shape[:2]
        cropped = crop_to_blocks(pixels, self.block_size)
        height, width = cropped.shape[:2]
        packed = pack_rgb(cropped)
        total = height * width

        bounds = self._band_bounds(height, width)
        known: Dict[int, Optional[str]] = {}
        band_tiles: List[np.ndarray] = [None] * len(bounds)
        band_tallies: List[Counter] = [Counter() for _ in bounds]
        done = 0
        last_reported = -1

        def _report(current: int):
            nonlocal last_reported
            if progress is not None and current > last_reported:
                last_reported = current
                progress(current, total)

        if self.workers == 1 or len(bounds) == 1:
            for i, (z0, z1) in enumerate(bounds):
                band_tiles[i], band_tallies[i] = self._classify_band(packed[z0:z1], known)
                done += (z1 - z0) * width
                _report(done)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as executor:
                future_to_band = {
                    executor.submit(self._classify_band, packed[z0:z1], known): i
                    for i, (z0, z1) in enumerate(bounds)
                }
                # Прогресс считаем по мере завершения, собираем - по индексу полосы.
                for future in concurrent.futures.as_completed(future_to_band):
                    i = future_to_band[future]
                    band_tiles[i], band_tallies[i] = future.result()
                    z0, z1 = bounds[i]
                    done += (z1 - z0) * width
                    _report(done)

        _report(total)

        tiles = np.concatenate(band_tiles, axis=0)
        unmatched = merge_tallies(band_tallies)
        logger.debug(
            "Сетка %dx%d построена (%d полос, потоков: %d), непойманных цветов: %d",
            width, height, len(bounds), self.workers, len(unmatched),
        )
        return GridResult(
            grid=TileGrid(tiles),
            unmatched=unmatched,
            source_width=source_w,
            source_height=source_h,
        )
