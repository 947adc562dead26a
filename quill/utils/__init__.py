"""
Shared utilities for QUILL.

Common functionality used across contexts:
- Text processing
- Markup helpers
- Logging and pipeline events
- PDF inspection
"""

from quill.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["format_timestamp", "now", "now_exact"]
