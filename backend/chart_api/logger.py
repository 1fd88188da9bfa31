# backend/chart_api/logger.py
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from chart_api.core.config import Settings, settings

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def log_file_path(s: Settings = settings) -> Optional[Path]:
    """Where the rotating log goes, or None when file logging is off."""
    if not s.LOG_FILE.strip():
        return None
    log_dir = Path(s.LOG_DIR).expanduser() if s.LOG_DIR.strip() else DEFAULT_LOG_DIR
    return log_dir / s.LOG_FILE.strip()


def _level(s: Settings) -> int:
    return getattr(logging, str(s.LOG_LEVEL).upper(), logging.INFO)


def get_logger(name: str, s: Settings = settings) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(_level(s))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    path = log_file_path(s)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=s.LOG_MAX_BYTES, backupCount=s.LOG_BACKUP_COUNT, encoding="utf-8"
        )
        rotating.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(rotating)
    return logger
