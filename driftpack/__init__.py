"""Implementation packages for DriftKit."""

from loguru import logger

__version__ = "0.1.0"

logger.disable("driftpack")
