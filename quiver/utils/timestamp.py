"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Current local time with second resolution (e.g., "20251114_123456")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """Current local time as an ISO 8601 string with microseconds."""
    return datetime.now().isoformat()
