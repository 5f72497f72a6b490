"""Logging configuration."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Send logs to stderr and, when ``log_file`` is set, to a rotating file.

    Args:
        log_level: Minimum level for every sink.
        log_file: Optional path of the rotating file sink.
    """
    logger.remove()
    logger.add(sys.stderr, level=log_level, format=LOG_FORMAT, colorize=True, backtrace=True)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention=5,
            compression="zip",
            backtrace=True,
        )

    logger.debug(f"Logging initialized - Level: {log_level}, File: {log_file}")
