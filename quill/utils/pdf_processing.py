"""
PDF inspection utilities.

Helper functions:
    page_count: Quick page count without full extraction.
    extract_text_lines: Text lines per page, top to bottom.
    normalize_for_matching: Text normalization for fuzzy matching.
    cluster_by_y_tolerance: Y-coordinate clustering for line detection.
"""

import io
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

PdfSource = Union[str, Path, bytes]


def _open_source(pdf: PdfSource):
    """Return something both PyPDF2 and pdfplumber accept."""
    if isinstance(pdf, bytes):
        return io.BytesIO(pdf)
    return str(pdf)


def page_count(pdf: PdfSource) -> Optional[int]:
    """Get page count from a PDF path or PDF bytes, or None if unreadable."""
    try:
        reader = PdfReader(_open_source(pdf))
        return len(reader.pages)
    except (PdfReadError, OSError, ValueError):
        return None


def normalize_for_matching(text: str) -> str:
    """Keep only lowercase alphanumeric characters for fuzzy text matching."""
    return "".join(c for c in text.lower() if c.isalnum())


def cluster_by_y_tolerance(chars: List, tolerance: float = 3.0) -> List[List]:
    """
    Group characters into lines by Y-coordinate proximity.

    Handles baseline shifts between bold/regular text that would otherwise split lines.
    """
    if not chars:
        return []

    sorted_chars = sorted(chars, key=lambda c: c["top"])

    lines = []
    current_line = [sorted_chars[0]]
    current_y = sorted_chars[0]["top"]

    for char in sorted_chars[1:]:
        if abs(char["top"] - current_y) <= tolerance:
            current_line.append(char)
        else:
            lines.append(current_line)
            current_line = [char]
            current_y = char["top"]

    lines.append(current_line)
    return lines


def extract_text_lines(pdf: PdfSource, y_tolerance: float = 3.0) -> List[List[str]]:
    """
    Extract text lines from every page.

    Characters are clustered into lines by y-coordinate and ordered by x, so
    a two-column heading reads as one line ("Engineer ... 2020 - 2022").

    Args:
        pdf: PDF path or PDF bytes
        y_tolerance: Max Y-distance (points) to group characters as one line

    Returns:
        One list of text lines per page, top-to-bottom order
    """
    pages: List[List[str]] = []

    with pdfplumber.open(_open_source(pdf)) as document:
        for page in document.pages:
            text_lines = []
            for line_chars in cluster_by_y_tolerance(page.chars, tolerance=y_tolerance):
                line_chars.sort(key=lambda c: c["x0"])
                text = "".join(c["text"] for c in line_chars)
                if text.strip():
                    text_lines.append(text)
            pages.append(text_lines)

    return pages
