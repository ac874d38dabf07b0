"""Custom exceptions for the catalog context."""

from pathlib import Path
from typing import Optional


class InvalidProfileStructureError(ValueError):
    """
    Raised when profile data does not match the expected catalog structure.

    Attributes:
        message: Error description
        source_path: File the profile was loaded from, if any
        field_name: Offending field (e.g., 'resume', 'bulletPool[3].category')
    """

    def __init__(
        self,
        message: str,
        source_path: Optional[Path] = None,
        field_name: Optional[str] = None,
    ):
        self.message = message
        self.source_path = source_path
        self.field_name = field_name

        parts = [message]
        if field_name:
            parts.append(f"Field: {field_name}")
        if source_path:
            parts.append(f"Source: {source_path}")

        super().__init__("\n".join(parts))
