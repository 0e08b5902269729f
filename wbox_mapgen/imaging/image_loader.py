# wbox_mapgen/imaging/image_loader.py
from __future__ import annotations
import io
import logging
import os
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import ImageReadError

logger = logging.getLogger(__name__)

ImageSource = Union[str, os.PathLike, bytes, bytearray, Image.Image]


def load_rgb_pixels(source: ImageSource) -> np.ndarray:
    """
    Декодирует изображение (путь, сырые байты или PIL.Image) в массив uint8 (h, w, 3).
    Альфа-канал отбрасывается, цвет больше никак не преобразуется.
    """
    if isinstance(source, Image.Image):
        return np.asarray(source.convert("RGB"), dtype=np.uint8)

    try:
        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise ImageReadError("Image data is empty")
            with Image.open(io.BytesIO(source)) as img:
                pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
            name = "<bytes>"
        else:
            path = Path(source)
            with Image.open(path) as img:
                pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
            name = path.name
    except (UnidentifiedImageError, OSError) as e:
        raise ImageReadError(f"Cannot read image: {e}") from e

    logger.debug("Изображение %s: %dx%d", name, pixels.shape[1], pixels.shape[0])
    return pixels
