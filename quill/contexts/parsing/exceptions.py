"""Custom exceptions for the parsing context."""

from typing import Optional

from quill.utils.text_processing import truncate_display


class MalformedMarkupError(Exception):
    """
    Raised when a recognized macro has missing or unbalanced arguments.

    The tokenizer recovers from it locally by keeping the rest of the source
    line as plain text, so it never escapes extract().

    Attributes:
        message: Error description
        macro: Name of the macro being read (e.g., 'resumeSubheading')
        snippet: The markup that failed to parse
    """

    def __init__(
        self,
        message: str,
        macro: Optional[str] = None,
        snippet: Optional[str] = None,
    ):
        self.message = message
        self.macro = macro
        self.snippet = snippet

        parts = [message]
        if macro:
            parts.append(f"Macro: \\{macro}")
        if snippet:
            parts.append(f"Markup: {truncate_display(snippet, 120)}")

        super().__init__("\n".join(parts))
