# ==============================================================================
# Файл: wbox_mapgen/core/utils/rle.py
# Назначение: RLE-кодирование сетки тайлов по строкам в формат SavedMap
#             (tileMap + tileArray + tileAmounts).
# ==============================================================================
from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..types import RLERow, TileGrid


def build_tile_catalog(grid: TileGrid | Iterable[Sequence[str]]) -> List[str]:
    """
    Каталог уникальных типов тайлов в порядке первого появления
    (построчно, слева направо). Порядок важен: индексы в tileArray ссылаются на него.
    """
    rows = grid.rows() if isinstance(grid, TileGrid) else grid
    seen: Dict[str, None] = {}
    for row in rows:
        for tile in row:
            if tile not in seen:
                seen[tile] = None
    return list(seen)


def catalog_index(catalog: Sequence[str]) -> Dict[str, int]:
    return {tile: i for i, tile in enumerate(catalog)}


def encode_rle_row(line: Sequence[str], index_of: Mapping[str, int]) -> RLERow:
    """Кодирует одну строку: максимальные серии одинаковых тайлов -> (индекс, длина)."""
    indices: List[int] = []
    lengths: List[int] = []
    if len(line) == 0:
        return RLERow(indices, lengths)

    cur = line[0]
    run = 1
    for v in line[1:]:
        if v == cur:
            run += 1
        else:
            indices.append(index_of[cur])
            lengths.append(run)
            cur = v
            run = 1
    # последняя серия сбрасывается всегда
    indices.append(index_of[cur])
    lengths.append(run)
    return RLERow(indices, lengths)


def encode_rle_rows(grid: TileGrid, catalog: Sequence[str]) -> List[RLERow]:
    """Кодирует всю сетку построчно. Тайл, которого нет в каталоге, - KeyError."""
    index_of = catalog_index(catalog)
    return [encode_rle_row(row, index_of) for row in grid.rows()]


def split_rle_rows(rows: Sequence[RLERow]) -> Tuple[List[List[int]], List[List[int]]]:
    """RLERow[] -> (tileArray, tileAmounts) в том виде, в котором их ждёт SavedMap."""
    tile_array = [list(r.run_indices) for r in rows]
    tile_amounts = [list(r.run_lengths) for r in rows]
    return tile_array, tile_amounts


def decode_rle_rows(
        rows: Sequence[RLERow], catalog: Sequence[str], width: int | None = None
) -> List[List[str]]:
    """Обратно: RLE-строки -> grid[h][w]. Если задан width, проверяет сумму серий."""
    grid: List[List[str]] = []
    for z, r in enumerate(rows):
        if len(r.run_indices) != len(r.run_lengths):
            raise ValueError(
                f"RLE row {z}: len(indices)={len(r.run_indices)} != len(lengths)={len(r.run_lengths)}"
            )
        line: List[str] = []
        for idx, run in zip(r.run_indices, r.run_lengths):
            if run < 1:
                raise ValueError(f"RLE row {z}: run length {run} < 1")
            line.extend([catalog[idx]] * int(run))
        if width is not None and len(line) != width:
            raise ValueError(f"RLE row {z}: sum(run)={len(line)} != w={width}")
        grid.append(line)
    return grid


def rows_from_arrays(tile_array: Sequence[Sequence[int]], tile_amounts: Sequence[Sequence[int]]) -> List[RLERow]:
    """Собирает RLERow из tileArray/tileAmounts прочитанного документа."""
    if len(tile_array) != len(tile_amounts):
        raise ValueError(f"tileArray rows={len(tile_array)} != tileAmounts rows={len(tile_amounts)}")
    return [RLERow(list(a), list(b)) for a, b in zip(tile_array, tile_amounts)]
