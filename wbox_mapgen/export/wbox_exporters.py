# ==============================================================================
# Файл: wbox_mapgen/export/wbox_exporters.py
# Назначение: Сериализация SaveDocument в JSON и сжатие в .wbox (zlib).
# ==============================================================================
from __future__ import annotations
import json
import logging
import os
import zlib
from pathlib import Path
from typing import Any, Dict, Union

from ..core.constants import ZLIB_LEVEL, ZLIB_MEM_LEVEL, ZLIB_WBITS
from ..core.errors import CompressionError, ResourceError
from .save_document import SaveDocument

logger = logging.getLogger(__name__)


def _ensure_path_exists(path: str) -> None:
    """Убеждается, что директория для файла существует."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _atomic_write_bytes(path: str, payload: bytes) -> None:
    """Пишет во временный файл и переименовывает, чтобы не оставлять битых файлов."""
    tmp_path = path + ".tmp"
    try:
        _ensure_path_exists(path)
        with open(tmp_path, "wb") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ResourceError(f"Cannot write {path}: {e}") from e


def serialize_document(document: SaveDocument | Dict[str, Any], beautify: bool = False) -> str:
    """Документ -> JSON-строка. По умолчанию компактная, без пробелов."""
    data = document.to_dict() if isinstance(document, SaveDocument) else document
    if beautify:
        return json.dumps(data, ensure_ascii=False, indent=2)
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def compress_bytes(payload: bytes) -> bytes:
    """zlib deflate: уровень 9, окно 32 KB (wbits=15), memLevel=9, одним вызовом."""
    try:
        compressor = zlib.compressobj(
            level=ZLIB_LEVEL,
            method=zlib.DEFLATED,
            wbits=ZLIB_WBITS,
            memLevel=ZLIB_MEM_LEVEL,
        )
        return compressor.compress(payload) + compressor.flush()
    except (zlib.error, MemoryError) as e:
        raise CompressionError(f"Сжатие не удалось: {e}") from e


def compress_document(document: SaveDocument | Dict[str, Any]) -> bytes:
    """Полный .wbox: компактный JSON в UTF-8 -> zlib."""
    raw = serialize_document(document).encode("utf-8")
    data = compress_bytes(raw)
    logger.debug("Документ: %d байт JSON -> %d байт .wbox", len(raw), len(data))
    return data


def write_wbox(path: Union[str, os.PathLike], document: SaveDocument | Dict[str, Any]) -> bytes:
    """Сжимает документ и атомарно записывает его в файл. Возвращает записанные байты."""
    data = compress_document(document)
    write_wbox_bytes(path, data)
    return data


def write_document_json(
        path: Union[str, os.PathLike], document: SaveDocument | Dict[str, Any], beautify: bool = True
) -> None:
    """Несжатый JSON документа - для отладки."""
    _atomic_write_bytes(os.fspath(path), serialize_document(document, beautify).encode("utf-8"))


def read_wbox(source: Union[str, os.PathLike, bytes, bytearray]) -> Dict[str, Any]:
    """Распаковывает .wbox (путь или байты) и возвращает JSON-документ как dict."""
    if isinstance(source, (bytes, bytearray)):
        blob = bytes(source)
    else:
        try:
            blob = Path(source).read_bytes()
        except OSError as e:
            raise ResourceError(f"Cannot read {source}: {e}") from e
    try:
        return json.loads(zlib.decompress(blob).decode("utf-8"))
    except (zlib.error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ResourceError(f"Not a valid .wbox document: {e}") from e


def write_wbox_bytes(path: Union[str, os.PathLike], data: bytes) -> None:
    """Атомарно записывает уже сжатые байты .wbox."""
    _atomic_write_bytes(os.fspath(path), data)
    logger.info("Сохранён %s (%d байт)", path, len(data))
