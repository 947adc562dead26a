"""
Markup tokenizer.

Scans the body of a résumé markup document for the closed macro vocabulary
(section, subheading, project heading, bullet) and the centered header block,
returning a RawDocument whose arguments are still raw markup. Display-text
conversion happens once, in the document builder.

Single top-to-bottom pass:
1. Strip comments, cut out the document body
2. Take the header from the first center block preceding any section
3. At each control sequence, look the name up in MACRO_PRIORITY and read its
   argument groups with the balanced-delimiter scanner
4. Split the text between macros into plain chunks

Never raises: malformed macros are recovered as plain text.
"""

import re
from typing import List, Optional, Tuple

from quill.contexts.parsing.document_model import MacroKind, RawDocument, RawItem, RawSection
from quill.contexts.parsing.exceptions import MalformedMarkupError
from quill.contexts.parsing.logger import (
    _log_debug,
    _log_warning,
    log_malformed_macro,
    log_tokenizer_summary,
)
from quill.contexts.parsing.markup_patterns import (
    DocumentPatterns,
    MacroSpec,
    ScanPatterns,
    match_macro,
)
from quill.utils.latex_parsing_tools import (
    extract_environment_content,
    markup_to_text,
    read_argument_groups,
    strip_comments,
)
from quill.utils.text_processing import set_max_consecutive_blank_lines

# Header line breaks; same shape as the \\ alternative of PLAIN_CHUNK_BREAK
HEADER_LINE_BREAK = r"\\\\\*?(?:[ \t]*\[[^\]]*\])?"


def document_body(text: str) -> Tuple[str, bool]:
    """
    Cut out the text between \\begin{document} and \\end{document}.

    Returns:
        (body, found) where found is False when \\begin{document} is missing
        and the whole text is returned as the body
    """
    begin = re.search(DocumentPatterns.BEGIN_DOCUMENT, text)
    if not begin:
        return text, False

    end = re.compile(DocumentPatterns.END_DOCUMENT).search(text, begin.end())
    return text[begin.end() : end.start() if end else len(text)], True


def extract(source: str) -> RawDocument:
    """
    Tokenize résumé markup into a RawDocument.

    Args:
        source: Full markup source (a complete document or a bare fragment)

    Returns:
        RawDocument with header, sections in source order, items found before
        the first section, and the number of recognized macros

    Example:
        >>> raw = extract(r"\\section{Experience} \\resumeItem{Led X}")
        >>> raw.sections[0].items[0]
        RawItem(kind=<MacroKind.BULLET: 'bullet'>, args=('Led X',))
    """
    body, found = document_body(strip_comments(source or ""))
    if not found:
        _log_warning("No \\begin{document} found, treating the whole source as the body")

    name, contact, body = _split_header(body)
    macro_count = 1 if (name or contact) else 0

    sections: List[RawSection] = []
    leftover: List[RawItem] = []
    current_title: Optional[str] = None
    current_items = leftover

    control_sequence = re.compile(ScanPatterns.CONTROL_SEQUENCE, re.DOTALL)
    pos = 0
    text_start = 0

    while True:
        match = control_sequence.search(body, pos)
        if not match:
            break

        spec = match_macro(match.group("name")) if match.group("name") else None
        if spec is None:
            pos = match.end()
            continue

        current_items.extend(_plain_items(body[text_start : match.start()]))

        try:
            args, end_pos = _read_macro_arguments(body, match, spec)
        except MalformedMarkupError as error:
            log_malformed_macro(error)
            line_end = body.find("\n", match.end())
            line_end = len(body) if line_end == -1 else line_end
            current_items.extend(_plain_items(body[match.start() : line_end]))
            pos = text_start = line_end
            continue

        macro_count += 1
        if spec.opens_section:
            if current_title is not None:
                sections.append(RawSection(current_title, tuple(current_items)))
            current_title = args[0]
            current_items = []
        else:
            current_items.append(RawItem(spec.kind, tuple(args)))

        pos = text_start = end_pos

    current_items.extend(_plain_items(body[text_start:]))
    if current_title is not None:
        sections.append(RawSection(current_title, tuple(current_items)))

    raw = RawDocument(
        name=name,
        contact=contact,
        sections=tuple(sections),
        leftover=tuple(leftover),
        macro_count=macro_count,
    )
    log_tokenizer_summary(raw)
    return raw


def extract_body_text(source: str) -> str:
    """
    Convert the document body to plain text line by line.

    Used when no macro is recognized: keeping one output line per source line
    lets the plain-text sectionizer see headings on their own lines.
    """
    body, _ = document_body(strip_comments(source or ""))
    lines = [markup_to_text(line) for line in body.split("\n")]
    return set_max_consecutive_blank_lines("\n".join(lines)).strip()


def _read_macro_arguments(body: str, match: re.Match, spec: MacroSpec) -> Tuple[List[str], int]:
    """Read the argument groups of a recognized macro, raising MalformedMarkupError."""
    try:
        return read_argument_groups(body, match.end(), spec.arg_count)
    except ValueError as e:
        raise MalformedMarkupError(
            f"\\{spec.name} expects {spec.arg_count} argument groups: {e}",
            macro=spec.name,
            snippet=body[match.start() : match.start() + 200],
        ) from e


def _plain_items(text: str) -> List[RawItem]:
    """Split free text into PLAIN items, dropping chunks with no display text."""
    items = []
    for chunk in re.split(ScanPatterns.PLAIN_CHUNK_BREAK, text):
        if markup_to_text(chunk):
            items.append(RawItem(MacroKind.PLAIN, (chunk.strip(),)))
    return items


def _split_header(body: str) -> Tuple[Optional[str], Optional[str], str]:
    """
    Find the header block and remove it from the body.

    Only a center block that comes before the first section counts as the
    header; centered content further down stays in its section.

    Returns:
        (name, contact, remaining_body), name and contact as raw markup
    """
    try:
        content, begin_pos, end_pos = extract_environment_content(
            body, DocumentPatterns.HEADER_ENVIRONMENT
        )
    except ValueError:
        return None, None, body

    first_section = re.search(DocumentPatterns.FIRST_SECTION, body)
    if first_section and first_section.start() < begin_pos:
        return None, None, body

    name, contact = _parse_header(content)
    _log_debug(f"Header block found (name: {name is not None}, contact: {contact is not None})")
    return name, contact, body[:begin_pos] + "\n" + body[end_pos:]


def _parse_header(content: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split header content into raw name and contact markup.

    The contact line starts at the first \\small switch. The name is the line
    carrying a size switch or \\textbf, else the first non-empty line. Any
    other lines before the contact switch are kept at the front of the contact.
    """
    contact_switch = re.search(DocumentPatterns.HEADER_CONTACT_SIZE, content)
    if contact_switch:
        name_region = content[: contact_switch.start()]
        contact_region = content[contact_switch.end() :]
    else:
        name_region, contact_region = content, ""

    lines = [line.strip() for line in re.split(HEADER_LINE_BREAK, name_region)]
    lines = [line for line in lines if markup_to_text(line)]

    name = None
    if lines:
        name_index = next(
            (
                i
                for i, line in enumerate(lines)
                if re.search(DocumentPatterns.HEADER_NAME_SIZE, line)
                or re.search(DocumentPatterns.HEADER_NAME_BOLD, line)
            ),
            0,
        )
        name = lines.pop(name_index)

    if markup_to_text(contact_region):
        lines.append(contact_region.strip())

    contact = " \\\\ ".join(lines) if lines else None
    return name, contact
