"""
Catalog context logger.

Provides logging interface for the catalog context with automatic [catalog] prefix.
All catalog modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[catalog]"


def _log_info(message: str) -> None:
    """Log info message with [catalog] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [catalog] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [catalog] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
