from __future__ import annotations
import logging
import sys
from pathlib import Path


def setup_logging(verbose: bool = False, log_file: str | None = None):
    """
    Настраивает глобальный логгер для приложения.
    - Устанавливает формат сообщений.
    - Выводит логи в консоль (stderr).
    - При необходимости дублирует их в файл.
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, mode="w", encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,  # убирает старые хендлеры, чтобы не было дублей
    )

    # детальные логи только нашего пакета, остальное приглушим
    logging.getLogger("wbox_mapgen").setLevel(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger("PIL").setLevel(logging.WARNING)
