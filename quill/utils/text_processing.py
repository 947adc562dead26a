"""
Text processing utilities shared by the parsing and rendering contexts.

Markup-specific helpers live in quill.utils.latex_parsing_tools; everything here
works on plain strings.
"""

import re
from typing import Tuple

# Phrases language models add to plain-text résumés when asked for STAR bullets
FORMAT_CHATTER_PATTERNS = (
    r"using the star (?:format|technique|method)[:,]?",
    r"\(?star (?:format|technique|method)\)?[:,]?",
)


def extract_balanced_delimiters(
    text: str,
    start_pos: int,
    open_char: str = "{",
    close_char: str = "}",
    escape_char: str = "\\",
) -> Tuple[str, int]:
    """
    Extract content between balanced delimiters, handling escaped characters.

    Assumes start_pos is just AFTER an opening delimiter. Tracks nesting depth to
    find the matching closing delimiter, skipping escaped characters such as \\{.

    Args:
        text: Text containing delimited content
        start_pos: Position right after the opening delimiter
        open_char: Opening delimiter character (default: '{')
        close_char: Closing delimiter character (default: '}')
        escape_char: Character used for escaping (default: '\\')

    Returns:
        (content, end_pos) where:
        - content: Text between the delimiters (excluding delimiters themselves)
        - end_pos: Position after the closing delimiter

    Raises:
        ValueError: If delimiters are unmatched

    Example:
        >>> text = r"\\resumeItem{Cut {p99} latency}"
        >>> extract_balanced_delimiters(text, 12)
        ('Cut {p99} latency', 30)
    """
    depth = 1
    pos = start_pos

    while pos < len(text) and depth > 0:
        if text[pos] == escape_char:
            pos += 2
            continue
        elif text[pos] == open_char:
            depth += 1
        elif text[pos] == close_char:
            depth -= 1
        pos += 1

    if depth != 0:
        raise ValueError(
            f"Unmatched {open_char}{close_char} delimiters starting at position {start_pos}"
        )

    content = text[start_pos : pos - 1]
    return content, pos


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        pattern = r"\n\s*\n(\s*\n)*"
    else:
        pattern = r"\n\s*\n(\s*\n)+"

    replacement = "\n" * (max_consecutive + 1)
    return re.sub(pattern, replacement, content)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("short", 10)
        'short'
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def strip_format_chatter(text: str) -> str:
    """
    Remove bullet-format chatter that language models leak into plain-text résumés.

    Only the phrases are removed; line structure is preserved so heading
    detection still sees one heading per line.

    Example:
        >>> strip_format_chatter("Using the STAR format: Led migration")
        'Led migration'
    """
    result = text
    for pattern in FORMAT_CHATTER_PATTERNS:
        result = re.sub(pattern, "", result, flags=re.IGNORECASE)
    # Trim the spaces the removal leaves behind, line by line
    return "\n".join(line.strip() for line in result.split("\n"))
