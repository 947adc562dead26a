"""
Document model for parsed résumés.

Two layers:
- Raw model (RawDocument, RawSection, RawItem): what the markup tokenizer found,
  with arguments still in markup form.
- Document model (Document, Section and the Item variants): normalized display
  text, built once per render request and never mutated.

All classes are frozen dataclasses holding tuples, so two documents built from
the same input compare equal with ==.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Iterator, Optional, Tuple, Union

# Title shared by the builder (text before the first section) and the
# plain-text sectionizer (content before the first heading)
IMPLICIT_SECTION_TITLE = "SUMMARY"


# =============================================================================
# RAW MODEL (tokenizer output)
# =============================================================================


class MacroKind(Enum):
    """Item-producing entries of the markup vocabulary, plus PLAIN for free text."""

    SUBHEADING = "subheading"
    PROJECT_HEADING = "project_heading"
    BULLET = "bullet"
    PLAIN = "plain"


@dataclass(frozen=True)
class RawItem:
    """One recognized macro (or free-text chunk) with its arguments as raw markup."""

    kind: MacroKind
    args: Tuple[str, ...]


@dataclass(frozen=True)
class RawSection:
    title: str
    items: Tuple[RawItem, ...] = ()


@dataclass(frozen=True)
class RawDocument:
    """
    Tokenizer output.

    Attributes:
        name: Raw markup of the header name, None when absent
        contact: Raw markup of the header contact line, None when absent
        sections: Sections in source order
        leftover: Items found in the body before the first section
        macro_count: Number of recognized macros, header block included
    """

    name: Optional[str] = None
    contact: Optional[str] = None
    sections: Tuple[RawSection, ...] = ()
    leftover: Tuple[RawItem, ...] = ()
    macro_count: int = 0


# =============================================================================
# DOCUMENT MODEL (builder and sectionizer output)
# =============================================================================


@dataclass(frozen=True)
class Subheading:
    """Two-column heading: title + right_date, then subtitle + subtitle_right."""

    kind: ClassVar[str] = "subheading"

    title: str
    right_date: str = ""
    subtitle: str = ""
    subtitle_right: str = ""

    def texts(self) -> Tuple[str, ...]:
        return (self.title, self.right_date, self.subtitle, self.subtitle_right)


@dataclass(frozen=True)
class ProjectHeading:
    """Single-line two-column entry."""

    kind: ClassVar[str] = "project_heading"

    title: str
    right_date: str = ""

    def texts(self) -> Tuple[str, ...]:
        return (self.title, self.right_date)


@dataclass(frozen=True)
class Bullet:
    kind: ClassVar[str] = "bullet"

    text: str

    def texts(self) -> Tuple[str, ...]:
        return (self.text,)


@dataclass(frozen=True)
class PlainLine:
    kind: ClassVar[str] = "plain"

    text: str

    def texts(self) -> Tuple[str, ...]:
        return (self.text,)


Item = Union[Subheading, ProjectHeading, Bullet, PlainLine]


@dataclass(frozen=True)
class Section:
    title: str
    items: Tuple[Item, ...] = ()


@dataclass(frozen=True)
class Document:
    """
    Normalized résumé document.

    Attributes:
        name: Candidate name for the centered header (optional)
        contact: Contact line for the header (optional)
        sections: Sections in source order; empty sections are kept
    """

    name: Optional[str] = None
    contact: Optional[str] = None
    sections: Tuple[Section, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.contact and not self.sections

    def items(self) -> Iterator[Item]:
        """Iterate over every item of every section in document order."""
        for section in self.sections:
            yield from section.items

    def leaf_texts(self) -> Iterator[str]:
        """
        Yield every non-empty leaf text of the document body, in order.

        Section titles and header fields are not leaves; item fields are.
        """
        for item in self.items():
            for text in item.texts():
                if text:
                    yield text

    def with_header_defaults(
        self, name: Optional[str] = None, contact: Optional[str] = None
    ) -> "Document":
        """Return a copy whose missing name/contact are filled from the given values."""
        return replace(
            self,
            name=self.name or name or None,
            contact=self.contact or contact or None,
        )
