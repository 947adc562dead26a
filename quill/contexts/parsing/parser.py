"""
Parsing entry point: source string → Document.

Markup input goes through the tokenizer and builder; when no macro is
recognized the body text is sectionized instead. Plain input is cleaned of
format chatter and sectionized.
"""

from quill.contexts.parsing.document_builder import build
from quill.contexts.parsing.document_model import Document
from quill.contexts.parsing.logger import _log_info, log_document_summary
from quill.contexts.parsing.markup_tokenizer import extract, extract_body_text
from quill.contexts.parsing.plaintext_sectionizer import sectionize
from quill.utils.text_processing import strip_format_chatter


def parse_document(source: str, is_markup: bool = True) -> Document:
    """
    Parse résumé content into a Document.

    Args:
        source: Markup source or plain text
        is_markup: Whether source uses the markup dialect

    Returns:
        Document ready for rendering
    """
    if is_markup:
        raw = extract(source)
        if raw.macro_count > 0:
            document = build(raw)
            log_document_summary(document, "markup")
            return document

        _log_info("No recognized markup, sectionizing the body text")
        text = extract_body_text(source)
    else:
        text = strip_format_chatter(source or "")

    document = sectionize(text)
    log_document_summary(document, "plain")
    return document
