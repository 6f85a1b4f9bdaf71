"""
Logging configuration for the feed viewer.

This module sets up logging using loguru with a human-readable console
format for development and optional JSON output and file rotation for
deployed instances.
"""

import sys
from typing import Optional

from loguru import logger

from ..config import get_settings


FORMAT_STRING = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()

    # Remove default handler
    logger.remove()

    level = (log_level or settings.log_level).upper()
    as_json = settings.log_format == "json"

    logger.add(
        sys.stderr,
        format=FORMAT_STRING,
        level=level,
        colorize=not as_json,
        serialize=as_json,
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode
    )

    if settings.log_file:
        logger.add(
            settings.log_file,
            format=FORMAT_STRING,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="gz",
            serialize=as_json,
            backtrace=False,
            diagnose=False
        )

    logger.info(f"Logging initialized with level: {level}, format: {settings.log_format}")

