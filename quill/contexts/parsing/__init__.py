"""
Parsing Context

Responsibilities:
- Tokenizes the résumé markup dialect into raw macros and free text
- Builds the normalized, immutable Document model
- Sectionizes plain text with heading heuristics when no markup is recognized

Owns: Document model, markup vocabulary, heading heuristics
Never: Lays out pages or talks to external services
"""

from quill.contexts.parsing.document_builder import build
from quill.contexts.parsing.document_model import (
    IMPLICIT_SECTION_TITLE,
    Bullet,
    Document,
    PlainLine,
    ProjectHeading,
    Section,
    Subheading,
)
from quill.contexts.parsing.exceptions import MalformedMarkupError
from quill.contexts.parsing.markup_tokenizer import extract
from quill.contexts.parsing.parser import parse_document
from quill.contexts.parsing.plaintext_sectionizer import sectionize

__all__ = [
    "build",
    "extract",
    "sectionize",
    "parse_document",
    "Document",
    "Section",
    "Subheading",
    "ProjectHeading",
    "Bullet",
    "PlainLine",
    "IMPLICIT_SECTION_TITLE",
    "MalformedMarkupError",
]
