"""
Document model builder.

Turns tokenizer output into a normalized Document: every raw field is converted
to display text exactly once, whitespace is normalized, and sections keep their
source order. build() is total.
"""

import re
from typing import List, Optional, Tuple

from quill.contexts.parsing.document_model import (
    IMPLICIT_SECTION_TITLE,
    Bullet,
    Document,
    Item,
    MacroKind,
    PlainLine,
    ProjectHeading,
    RawDocument,
    RawItem,
    Section,
    Subheading,
)
from quill.contexts.parsing.markup_patterns import ScanPatterns
from quill.utils.latex_parsing_tools import markup_to_text
from quill.utils.text_processing import set_max_consecutive_blank_lines


def build(raw: RawDocument) -> Document:
    """
    Build a Document from a RawDocument.

    Items found before the first section open a leading SUMMARY section, the
    same title the plain-text sectionizer uses for content before any heading.

    Example:
        >>> build(extract(r"\\section{\\textbf{Skills}}")).sections
        (Section(title='Skills', items=()),)
    """
    sections: List[Section] = []

    leading_items = _build_items(raw.leftover)
    if leading_items:
        sections.append(Section(IMPLICIT_SECTION_TITLE, leading_items))

    for raw_section in raw.sections:
        sections.append(Section(to_display_text(raw_section.title), _build_items(raw_section.items)))

    return Document(
        name=to_display_text(raw.name) or None,
        contact=contact_display_text(raw.contact) or None,
        sections=tuple(sections),
    )


def to_display_text(markup: Optional[str]) -> str:
    """Convert one raw field to trimmed display text (links as 'text (url)')."""
    if not markup:
        return ""
    return markup_to_text(set_max_consecutive_blank_lines(markup.strip()))


def contact_display_text(markup: Optional[str]) -> str:
    """
    Convert the raw contact markup to one ' | '-separated line.

    Links keep their label only, and header line breaks become separators.

    Example:
        >>> contact_display_text(r"555-0100 $|$ \\href{mailto:jo@x.dev}{jo@x.dev}")
        '555-0100 | jo@x.dev'
    """
    if not markup:
        return ""
    text = markup_to_text(
        set_max_consecutive_blank_lines(markup.strip()), links="text", line_breaks=" | "
    )
    text = re.sub(ScanPatterns.REPEATED_SEPARATORS, " | ", text)
    return text.strip(" |")


def _build_items(raw_items: Tuple[RawItem, ...]) -> Tuple[Item, ...]:
    items = []
    for raw_item in raw_items:
        item = _build_item(raw_item)
        if item is not None:
            items.append(item)
    return tuple(items)


def _build_item(raw_item: RawItem) -> Optional[Item]:
    """Map one raw item to its Item variant; PLAIN items with no text map to None."""
    texts = [to_display_text(arg) for arg in raw_item.args]

    if raw_item.kind is MacroKind.SUBHEADING:
        title, right_date, subtitle, subtitle_right = texts
        return Subheading(title, right_date, subtitle, subtitle_right)

    if raw_item.kind is MacroKind.PROJECT_HEADING:
        title, right_date = texts
        return ProjectHeading(title, right_date)

    if raw_item.kind is MacroKind.BULLET:
        return Bullet(texts[0])

    text = " ".join(t for t in texts if t)
    return PlainLine(text) if text else None
