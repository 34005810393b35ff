"""
Logging configuration for the command line.

Library modules only emit through loguru's logger; sinks are configured
here, once, by the CLI.
"""

import sys

from loguru import logger


def setup_logging(level: str = "INFO") -> None:
    """
    Send log records at or above level to stderr.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )
    logger.debug("Logging configured: level={}", level)
