# wbox_mapgen/core/utils/colors.py
from __future__ import annotations
import re
from typing import Any, Optional, Tuple

import numpy as np

_HEX_RE = re.compile(r"^[0-9A-F]{6}$")


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """(171, 205, 239) -> 'ABCDEF'. Альфа-канал сюда не передаётся."""
    return f"{int(r) & 0xFF:02X}{int(g) & 0xFF:02X}{int(b) & 0xFF:02X}"


def hex_to_rgb(color_hex: str) -> Tuple[int, int, int]:
    value = int(color_hex, 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def packed_to_hex(packed: int) -> str:
    return f"{int(packed) & 0xFFFFFF:06X}"


def pack_rgb(pixels: np.ndarray) -> np.ndarray:
    """
    Упаковывает RGB(A)-массив (h, w, 3|4) в один int32 на пиксель: R<<16 | G<<8 | B.
    Альфа отбрасывается.
    """
    r = pixels[..., 0].astype(np.int32)
    g = pixels[..., 1].astype(np.int32)
    b = pixels[..., 2].astype(np.int32)
    return (r << 16) | (g << 8) | b


def normalize_color_key(value: Any) -> Optional[str]:
    """
    Приводит значение ячейки таблицы к ColorKey 'RRGGBB'.
    Строки: обрезка пробелов, верхний регистр, без ведущего '#'.
    Целые числа: переводятся в 6-значный hex.
    Возвращает None, если значение не похоже на цвет.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        if value < 0 or value > 0xFFFFFF:
            return None
        return f"{int(value):06X}"
    text = str(value).strip().upper()
    if text.startswith("#"):
        text = text[1:]
    if _HEX_RE.match(text):
        return text
    return None
