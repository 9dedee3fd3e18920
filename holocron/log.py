"""Logging setup."""

import sys

from loguru import logger

from .config import LOG_LEVEL

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def setup_logger(level: str | None = None):
    """Configure loguru with a single stderr handler."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=(level or LOG_LEVEL).upper(),
    )
    return logger
