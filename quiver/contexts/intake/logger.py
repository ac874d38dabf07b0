"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_analysis_result(provider_name: str, ranked_content, elapsed_time: float) -> None:
    """
    Log a summary of an oracle analysis.

    Args:
        provider_name: Provider identifier
        ranked_content: RankedContent returned by the oracle
        elapsed_time: Time taken by the oracle call
    """
    analysis = ranked_content.analysis
    _log_success(
        f"Analyzed '{analysis.job_title}' at {analysis.company} with {provider_name} "
        f"({elapsed_time:.2f}s)"
    )
    _log_info(
        f"  Match score: {ranked_content.match_score:.0f}, "
        f"{len(ranked_content.ranked_bullets)} ranked bullets, "
        f"{len(analysis.required_skills)} required skills"
    )
