"""
Plain-text sectionizer.

Groups free-form text (typically language-model output) into sections using
per-line heading heuristics. Used when the input carries no recognized markup.

Heading heuristics (any one is enough):
- Short all-caps line: equals its upper-case form, under 30 characters
- Markdown heading: "# Title" ... "###### Title", or a whole-line **Title**
- Numbered heading: "1. Title", "2) Title", "1.2 Title" with a short Title-Case title
- Label line: "Capitalized Words:" with nothing after the colon
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from quill.contexts.parsing.document_model import (
    IMPLICIT_SECTION_TITLE,
    Document,
    PlainLine,
    Section,
)

MAX_CAPS_HEADING_LENGTH = 30
MAX_NUMBERED_TITLE_LENGTH = 40

# Words allowed in lower case inside a Title-Case numbered heading
TITLE_CASE_CONNECTORS = {"a", "an", "and", "at", "for", "in", "of", "on", "or", "the", "to", "&"}


@dataclass(frozen=True)
class HeadingPatterns:
    """Regex patterns for plain-text heading markers."""

    HASH_HEADING: str = r"^#{1,6}\s+(?P<title>.+?)\s*#*$"

    # **Title**, __Title__, **Title:**, **Title**:
    BOLD_HEADING: str = r"^(?:\*\*(?P<star>[^*]+)\*\*|__(?P<under>[^_]+)__):?$"

    NUMBERED_HEADING: str = r"^\d+(?:\.\d+)*[.)]?\s+(?P<title>.+)$"

    LABEL_HEADING: str = r"^(?P<title>[A-Z][\w&/'-]*(?:\s+(?:[A-Z&][\w&/'-]*|and|of|the|for|&))*)\s*:$"

    # Paired **bold** or __bold__; unpaired markers stay as written
    EMPHASIS: str = r"\*\*(?P<star>.+?)\*\*|__(?P<under>.+?)__"

    CODE_SPAN: str = r"(`[^`]*`)"


def strip_emphasis(text: str) -> str:
    """
    Remove paired bold markers, leaving code spans and unpaired markers intact.

    Example:
        >>> strip_emphasis("**Cut latency** in `__init__` and a ** b")
        'Cut latency in `__init__` and a ** b'
    """
    parts = re.split(HeadingPatterns.CODE_SPAN, text)
    return "".join(
        part if index % 2 else re.sub(HeadingPatterns.EMPHASIS, lambda m: m.group("star") or m.group("under"), part)
        for index, part in enumerate(parts)
    )


def _clean_title(title: str) -> str:
    """Strip emphasis markers and a trailing colon from a heading title."""
    title = strip_emphasis(title).strip()
    return title[:-1].rstrip() if title.endswith(":") else title


def _is_title_case(title: str) -> bool:
    words = title.split()
    if not words or not words[0][0].isupper():
        return False
    return all(
        word[0].isupper() or not word[0].isalpha() or word.lower() in TITLE_CASE_CONNECTORS
        for word in words[1:]
    )


def classify_line(line: str) -> Optional[str]:
    """
    Return the section title if the line is a heading, else None.

    Depends only on the line's own text.

    Examples:
        >>> classify_line("EXPERIENCE")
        'EXPERIENCE'
        >>> classify_line("## Work History")
        'Work History'
        >>> classify_line("2. Technical Skills")
        'Technical Skills'
        >>> classify_line("Professional Experience:")
        'Professional Experience'
        >>> classify_line("Built a billing platform") is None
        True
    """
    stripped = line.strip()
    if not stripped:
        return None
    title = _heading_title(stripped)
    return title or None


def _heading_title(stripped: str) -> Optional[str]:
    match = re.match(HeadingPatterns.HASH_HEADING, stripped)
    if match:
        return _clean_title(match.group("title"))

    match = re.match(HeadingPatterns.BOLD_HEADING, stripped)
    if match:
        return _clean_title(match.group("star") or match.group("under"))

    match = re.match(HeadingPatterns.NUMBERED_HEADING, stripped)
    if match:
        title = _clean_title(match.group("title"))
        if (
            len(title) < MAX_NUMBERED_TITLE_LENGTH
            and not title.endswith((".", "!", "?", ","))
            and _is_title_case(title)
        ):
            return title

    if stripped == stripped.upper() and len(stripped) < MAX_CAPS_HEADING_LENGTH:
        return _clean_title(stripped)

    match = re.match(HeadingPatterns.LABEL_HEADING, stripped)
    if match:
        return _clean_title(match.group("title"))

    return None


def sectionize(text: str) -> Document:
    """
    Group plain text into sections.

    Heading lines open sections; every other non-empty line becomes a
    PlainLine of the current section (markdown emphasis markers removed).
    Content before the first heading opens an implicit SUMMARY section.

    Args:
        text: Plain text, one logical line per line

    Returns:
        Document with no header and sections in text order

    Example:
        >>> doc = sectionize("SUMMARY\\nBuilt X\\nEXPERIENCE\\nDid Y")
        >>> [(s.title, [i.text for i in s.items]) for s in doc.sections]
        [('SUMMARY', ['Built X']), ('EXPERIENCE', ['Did Y'])]
    """
    sections: List[Tuple[str, List[PlainLine]]] = []

    for line in (text or "").splitlines():
        title = classify_line(line)
        if title is not None:
            sections.append((title, []))
            continue

        content = strip_emphasis(line).strip()
        if not content:
            continue

        if not sections:
            sections.append((IMPLICIT_SECTION_TITLE, []))
        sections[-1][1].append(PlainLine(content))

    return Document(sections=tuple(Section(title, tuple(items)) for title, items in sections))
