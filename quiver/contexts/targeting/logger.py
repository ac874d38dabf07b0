"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from quiver.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Optional[Path] = None, layout=None) -> Path:
    """
    Setup logger for a targeting session.

    Args:
        log_dir: Directory for this session (default: LOGS_PATH)
        layout: PageLayout in effect, recorded in the provenance header

    Returns:
        Path to log file
    """
    extra = layout.to_dict() if layout is not None else None
    return _setup_logger(context_name="target", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_allocation_result(result, elapsed_time: float) -> None:
    """
    Log allocation outcome with page usage.

    Args:
        result: AllocationResult from allocate()
        elapsed_time: Time taken to allocate
    """
    space = result.page_space_used
    details = result.optimization_details
    _log_success(
        f"Allocated {len(result.used_bullets)} bullets across "
        f"{len(result.resume_data.experience)} jobs ({elapsed_time * 1000:.1f}ms)"
    )
    _log_info(
        f"  Page: {space.used_lines}/{space.total_available_lines} lines, "
        f"{space.remaining_lines} remaining"
    )
    _log_debug(f"  Project: {result.selected_project_id or 'none'}")
    _log_debug(
        f"  Fill added {details.fill_bullets_added}, "
        f"skills reordered: {details.skills_reordered}"
    )
    if space.remaining_lines < 0:
        _log_warning(f"  Page overflows by {-space.remaining_lines} lines")
