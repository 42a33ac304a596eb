"""Loguru setup for the command line.

Logs go to stderr so stdout carries only the report.
"""

import sys

from loguru import logger

LOG_LEVELS = ("debug", "info", "warning", "error")
DEFAULT_LOG_LEVEL = "warning"

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Replace Loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper(), colorize=None)
