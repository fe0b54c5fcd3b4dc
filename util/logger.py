# util/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Tuple
from config.settings import settings

logging.captureWarnings(True)

TEXT_FMT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FMT = "%Y-%m-%dT%H:%M:%S%z"

# Libraries whose INFO chatter drowns out queue events.
NOISY_LOGGERS: Tuple[Tuple[str, int], ...] = (
    ("redis", logging.WARNING),
    ("asyncio", logging.WARNING),
    ("uvicorn.error", logging.INFO),
    ("uvicorn.access", logging.WARNING),
)


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colorize a copy so file handlers sharing the record stay plain.
        colored = logging.makeLogRecord(record.__dict__)
        lvl = record.levelname
        colored.levelname = f"{self.COLORS.get(lvl, self.RESET)}{lvl}{self.RESET}"
        return super().format(colored)


def _console_handler(level: int) -> logging.Handler:
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(ColoredFormatter(TEXT_FMT, datefmt=DATE_FMT))
    return ch


def _file_handler(level: int) -> logging.Handler:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    fh = RotatingFileHandler(
        os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(TEXT_FMT, datefmt=DATE_FMT))
    return fh


def init_logger(level_name: Optional[str] = None) -> logging.Logger:
    """
    Idempotent root logger setup for the queue service:
    - stdout always, colored by level.
    - rotating file under settings.LOG_DIR when settings.LOG_TO_FILE is set.
    - level from `level_name`, else settings.LOG_LEVEL.
    """
    root = logging.getLogger()
    if getattr(root, "_blockqueue_inited", False):
        return logging.getLogger(settings.LOGGER_NAME)

    name = (level_name or settings.LOG_LEVEL or "INFO").upper()
    level = getattr(logging, name, logging.INFO)
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(_console_handler(level))
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(level))

    for noisy, noisy_level in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(noisy_level)

    root._blockqueue_inited = True  # type: ignore[attr-defined]
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("logger.ready level=%s file=%s", name, settings.LOG_TO_FILE)
    return logger
