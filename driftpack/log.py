"""Logging setup for the DriftKit CLI."""

from __future__ import annotations

import sys

from loguru import logger

_CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging(*, verbose: bool = False) -> None:
    """Route driftpack log records to stderr when verbose, silence them otherwise."""
    logger.remove()
    if not verbose:
        logger.disable("driftpack")
        return

    logger.add(sys.stderr, format=_CONSOLE_FORMAT, level="DEBUG")
    logger.enable("driftpack")
