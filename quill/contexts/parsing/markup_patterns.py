"""
Pattern definitions for the résumé markup dialect.

Pattern classes follow the convention used across QUILL:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Module-level tables consumed by the tokenizer
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from quill.contexts.parsing.document_model import MacroKind


@dataclass(frozen=True)
class DocumentPatterns:
    """Anchors that delimit the document body and its centered header block."""

    BEGIN_DOCUMENT: str = r"\\begin\{document\}"
    END_DOCUMENT: str = r"\\end\{document\}"

    HEADER_ENVIRONMENT: str = "center"

    # Size switch that marks the name line inside the header
    HEADER_NAME_SIZE: str = r"\\(?:Huge|huge|LARGE)(?![A-Za-z])"
    HEADER_NAME_BOLD: str = r"\\textbf(?![A-Za-z])"

    # Font switch that starts the contact line
    HEADER_CONTACT_SIZE: str = r"\\(?:small|footnotesize)(?![A-Za-z])"

    FIRST_SECTION: str = r"\\section\*?\s*\{"


@dataclass(frozen=True)
class ScanPatterns:
    """Patterns used while scanning the body."""

    # Any control sequence. Letters are read greedily so \resumeItemListStart
    # never matches \resumeItem; single-character sequences (\\, \%, ...) are
    # consumed whole so the scan never starts inside them.
    CONTROL_SEQUENCE: str = r"\\(?:(?P<name>[A-Za-z]+)(?P<star>\*?)|.)"

    # Boundaries between plain chunks of free text
    PLAIN_CHUNK_BREAK: str = (
        r"\\\\\*?(?:[ \t]*\[[^\]]*\])?"  # \\ and \\[4pt]
        r"|\\item(?![A-Za-z])(?:[ \t]*\[[^\]]*\])?"  # \item and \item[label]
        r"|\\par(?![A-Za-z])"
        r"|\n[ \t]*\n"  # blank line
    )

    # Contact pieces joined by separators, used to tidy the contact line
    REPEATED_SEPARATORS: str = r"(?:\s*\|\s*)+"


@dataclass(frozen=True)
class MacroSpec:
    """
    One structural macro of the vocabulary.

    Attributes:
        name: Macro name without the backslash
        arg_count: Number of mandatory {...} groups
        kind: Item kind produced, or None for the section-title macro
    """

    name: str
    arg_count: int
    kind: Optional[MacroKind] = None

    @property
    def opens_section(self) -> bool:
        return self.kind is None


# Fixed priority order: four-argument subheading, two-argument project heading,
# one-argument bullet, section title
MACRO_PRIORITY: Tuple[MacroSpec, ...] = (
    MacroSpec("resumeSubheading", 4, MacroKind.SUBHEADING),
    MacroSpec("resumeProjectHeading", 2, MacroKind.PROJECT_HEADING),
    MacroSpec("resumeItem", 1, MacroKind.BULLET),
    MacroSpec("section", 1),
)


def match_macro(name: str) -> Optional[MacroSpec]:
    """
    Return the structural macro with this exact name, trying MACRO_PRIORITY in order.

    Example:
        >>> match_macro("resumeItem").arg_count
        1
        >>> match_macro("resumeItemListStart") is None
        True
    """
    for spec in MACRO_PRIORITY:
        if spec.name == name:
            return spec
    return None
