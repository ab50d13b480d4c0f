"""
Logging setup for the API process and the command-line scripts.

Everything goes through the root logger: a stdout handler always, plus a
size-rotated file under logs/ when a file name is given. Records carry the
thread name because enrichment lookups run on worker threads.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Libraries that log every request or statement at INFO/DEBUG
QUIET_LOGGERS = ('urllib3', 'sqlalchemy.engine', 'httpx')


def setup_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    log_dir: str = "logs",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        log_file: File name inside log_dir, or None for stdout only
        level: Level name; unknown names mean INFO
        log_dir: Directory for the log file, created if missing
        max_bytes: Size at which the file is rotated
        backup_count: Rotated files kept
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    full_log_path = None
    if log_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        full_log_path = Path(log_dir) / log_file
        handlers.append(RotatingFileHandler(full_log_path, maxBytes=max_bytes, backupCount=backup_count))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if full_log_path:
        root_logger.info(f"Logging to file: {full_log_path}")


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Named logger, optionally pinned to its own level."""
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper()))
    return logger


def configure_api_logging(level: str = "INFO", log_file: Optional[str] = "api.log"):
    """Logging for the FastAPI process (stdout + logs/api.log)."""
    setup_logging(log_file=log_file, level=level)


def configure_script_logging(debug: bool = False):
    """Stdout-only logging for scripts/."""
    setup_logging(level="DEBUG" if debug else "INFO")
