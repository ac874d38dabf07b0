"""
Shared utilities for QUIVER.

Common functionality used across contexts:
- Logger setup
- LLM provider access and response parsing
- Text report formatting
- Timestamps
"""

from quiver.utils.timestamp import now, now_exact

__all__ = ["now", "now_exact"]
