"""
Logging setup for cipherchain.

Modules log through ``logging.getLogger(__name__)``; this module attaches
handlers to the package logger once, at application or CLI start-up:
a colour Rich console handler on stderr and, optionally, a rotating file.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "cipherchain"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    *,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Minimum severity name (DEBUG, INFO, WARNING, ...)
        log_file: Optional path for a rotating plain-text log file
        max_bytes: Size at which the log file rotates
        backup_count: Number of rotated files to keep

    Returns:
        The configured package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.propagate = False
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=numeric_level,
        show_path=False,
        rich_tracebacks=True,
    )
    logger.addHandler(console_handler)

    if log_file is not None:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(file_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter(fmt=_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
        )
        logger.addHandler(file_handler)

    return logger
