"""Custom exceptions for the generation context."""

from pathlib import Path
from typing import Optional


class ProfileNotFoundError(Exception):
    """
    Raised when a résumé is requested but no profile exists.

    This is a caller error raised before any rendering starts.

    Attributes:
        message: Error description
        source: Where the profile was looked up (e.g., a file path)
    """

    def __init__(self, message: str = "No profile found", source: Optional[Path] = None):
        self.message = message
        self.source = source

        parts = [message]
        if source:
            parts.append(f"Looked in: {source}")

        super().__init__("\n".join(parts))
