# wbox_mapgen/core/utils/metrics.py
from __future__ import annotations
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Tuple


def merge_tallies(tallies: Iterable[Mapping[str, int]]) -> Counter:
    """Сводит локальные счётчики воркеров в один (сумма по ключу, порядок не важен)."""
    total: Counter = Counter()
    for t in tallies:
        total.update(t)
    return total


def top_unmatched(tally: Mapping[str, int], n: int = 10) -> List[Tuple[str, int]]:
    """
    Самые частые непойманные цвета. При равных счётчиках - по цвету,
    чтобы отчёт был воспроизводимым.
    """
    return sorted(tally.items(), key=lambda kv: (-kv[1], kv[0]))[:n]


def unmatched_summary(tally: Mapping[str, int], n: int = 10) -> Dict[str, object]:
    return {
        "distinct_colors": len(tally),
        "pixels": int(sum(tally.values())),
        "top": top_unmatched(tally, n),
    }


def tile_counts(rows: Iterable[Iterable[str]]) -> Dict[str, int]:
    """Сколько клеток каждого типа на карте."""
    counts: Dict[str, int] = {}
    for row in rows:
        for v in row:
            counts[v] = counts.get(v, 0) + 1
    return counts
