"""Logging configuration for the mdxld CLI."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, level: str | None = None) -> None:
    """Configure loguru with one stderr sink. verbose wins over level."""
    logger.remove()
    level = "DEBUG" if verbose else (level or "INFO").upper()
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
