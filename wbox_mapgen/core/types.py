# wbox_mapgen/core/types.py
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, List, Protocol

import numpy as np


@dataclass(frozen=True, eq=False)
class TileGrid:
    """
    Плотная сетка типов тайлов [row][col], строка 0 - верх изображения.
    Массив хранится только для чтения: сетка строится один раз и дальше не меняется.
    """

    tiles: np.ndarray

    def __post_init__(self):
        if self.tiles.ndim != 2:
            raise ValueError(f"TileGrid ожидает 2D-массив, получено ndim={self.tiles.ndim}")
        self.tiles.flags.writeable = False

    @classmethod
    def from_rows(cls, rows: List[List[str]]) -> "TileGrid":
        width = len(rows[0]) if rows else 0
        arr = np.empty((len(rows), width), dtype=object)
        for z, row in enumerate(rows):
            arr[z, :] = row
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.tiles.shape[1])

    @property
    def height(self) -> int:
        return int(self.tiles.shape[0])

    def rows(self) -> Iterator[List[str]]:
        for z in range(self.height):
            yield self.tiles[z].tolist()

    def tolist(self) -> List[List[str]]:
        return self.tiles.tolist()


@dataclass(frozen=True)
class RLERow:
    """Одна строка сетки в RLE: индексы в каталоге тайлов и длины серий."""

    run_indices: List[int] = field(default_factory=list)
    run_lengths: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.run_indices)

    @property
    def width(self) -> int:
        return sum(self.run_lengths)


@dataclass
class GridResult:
    """Результат GridBuilder: сетка + статистика цветов, не найденных в таблице."""

    grid: TileGrid
    unmatched: Counter = field(default_factory=Counter)
    source_width: int = 0
    source_height: int = 0

    @property
    def cropped(self) -> bool:
        return (self.source_width, self.source_height) != (self.grid.width, self.grid.height)


class ProgressCallback(Protocol):
    """(обработано, всего) - рекомендательный прогресс, на результат не влияет."""

    def __call__(self, current: int, total: int) -> None: ...
