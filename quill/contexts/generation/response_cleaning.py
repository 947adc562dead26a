"""
Cleanup of language-model responses.

Models wrap the requested document in chatter and Markdown code fences. These
helpers pull out the markup document when there is one and otherwise hand back
plain text with format chatter removed.
"""

import re
from typing import Optional

from quill.contexts.generation.logger import _log_debug
from quill.utils.text_processing import strip_format_chatter

DOCUMENT_BLOCK = r"\\documentclass.*?\\end\{document\}"
CODE_FENCE = r"^```[A-Za-z]*[ \t]*$"


def strip_code_fences(response: str) -> str:
    """Remove Markdown code fence lines (``` and ```latex)."""
    return re.sub(CODE_FENCE, "", response, flags=re.MULTILINE)


def extract_markup(response: str) -> Optional[str]:
    """
    Extract the \\documentclass ... \\end{document} block from a model response.

    Returns:
        The markup document, or None when the response holds none

    Example:
        >>> extract_markup("Sure! ```latex\\n\\\\documentclass{article}\\\\begin{document}Hi\\\\end{document}\\n```")
        '\\\\documentclass{article}\\\\begin{document}Hi\\\\end{document}'
        >>> extract_markup("Here is your resume: EXPERIENCE ...") is None
        True
    """
    if not response:
        return None

    match = re.search(DOCUMENT_BLOCK, strip_code_fences(response), flags=re.DOTALL)
    if not match:
        _log_debug("No markup document found in response")
        return None

    return match.group(0)


def clean_plain_response(response: str) -> str:
    """Plain-text response with code fences and format chatter removed."""
    return strip_format_chatter(strip_code_fences(response or "")).strip()
