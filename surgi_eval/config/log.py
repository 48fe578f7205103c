"""SurgiEval — Налаштування логування"""
import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
LOG_FILENAME = "surgi_eval.log"


def setup_logging(level: str = "INFO", logs_dir: Optional[str] = None) -> logging.Logger:
    """
    Stream handler для кореневого логера пакету;
    з logs_dir — ще й файл logs_dir/surgi_eval.log.

    Повторний виклик не дублює handler'и.
    """
    logger = logging.getLogger("surgi_eval")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    formatter = logging.Formatter(LOG_FORMAT)

    # FileHandler теж StreamHandler
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if logs_dir:
        log_path = Path(logs_dir) / LOG_FILENAME
        has_file = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_path)
            for h in logger.handlers
        )
        if not has_file:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
