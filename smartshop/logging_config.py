"""
Logging for the SmartShop service.

Everything logs under the `smartshop` logger: stdout for the operator,
a rotating `app.log` with debug detail, and `error.log` beside it so failed
syncs and storage errors are easy to find after the fact.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "smartshop"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "sqlalchemy.engine", "aiosqlite")


def _rotating(path: Path, level: int, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_file: str = "./logs/app.log",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the `smartshop` logger once per process.

    Args:
        log_level: Level for the application loggers (DEBUG, INFO, ...)
        log_file: Path of the general log; error.log is written beside it
        max_bytes: Rotation size for each log file
        backup_count: Rotated files to keep

    Returns:
        The `smartshop` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level.upper())

    if logger.handlers:
        return logger

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))

    logger.addHandler(console)
    logger.addHandler(_rotating(log_path, logging.DEBUG, max_bytes, backup_count))
    logger.addHandler(_rotating(log_path.with_name("error.log"), logging.ERROR, max_bytes, backup_count))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the `smartshop` logger, e.g. `get_logger("sync")` -> `smartshop.sync`."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
