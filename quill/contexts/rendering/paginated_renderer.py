"""
Paginated renderer: Document → list of Pages of positioned text runs and rules.

Layout is computed here without touching a PDF canvas; pdf_writer serializes
the result. All state lives in a per-call RenderContext, so concurrent renders
share nothing.

Coordinates are PDF points on a top-down y axis. A run's y is its baseline.
Before each line is placed, ensure_room() starts a new page when the line
would cross max_content_y, so nothing is drawn below it and nothing is dropped.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

from quill.contexts.parsing.document_model import (
    Bullet,
    Document,
    Item,
    PlainLine,
    ProjectHeading,
    Section,
    Subheading,
)
from quill.contexts.rendering.geometry import FONT_FACES, PageGeometry, Typography

ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"
ALIGN_CENTER = "center"

# PlainLines shorter than this and fully upper-case are drawn bold
IMPLICIT_SUBHEADER_MAX_LENGTH = 30

# Left text of a two-column line never gets less than this share of the column
MIN_LEFT_COLUMN_SHARE = 0.3


# =============================================================================
# PAGE PRIMITIVES
# =============================================================================


@dataclass(frozen=True)
class FontState:
    """Active font: family, weight ('normal' or 'bold'), size, and italic flag."""

    family: str
    weight: str
    size: float
    italic: bool = False

    @property
    def font_name(self) -> str:
        """Standard PDF font name, e.g. Helvetica-BoldOblique."""
        regular, bold, italic, bold_italic = FONT_FACES[self.family]
        if self.weight == "bold":
            return bold_italic if self.italic else bold
        return italic if self.italic else regular

    def width(self, text: str) -> float:
        return stringWidth(text, self.font_name, self.size)


@dataclass(frozen=True)
class TextRun:
    """Text placed at (x, y). For right/center alignment x is the anchor point."""

    text: str
    x: float
    y: float
    font: FontState
    align: str = ALIGN_LEFT


@dataclass(frozen=True)
class Rule:
    """Horizontal rule from x1 to x2 at y."""

    x1: float
    x2: float
    y: float
    width: float


@dataclass
class Page:
    number: int
    runs: List[TextRun] = field(default_factory=list)
    rules: List[Rule] = field(default_factory=list)

    def lines(self) -> List[List[TextRun]]:
        """Group runs sharing a baseline, top to bottom, each line ordered by x."""
        by_y = defaultdict(list)
        for run in self.runs:
            by_y[round(run.y, 2)].append(run)
        return [sorted(by_y[y], key=lambda run: run.x) for y in sorted(by_y)]

    def text_lines(self) -> List[str]:
        """Text of each line, runs joined with a space."""
        return [" ".join(run.text for run in line) for line in self.lines()]


# =============================================================================
# RENDER CONTEXT
# =============================================================================


@dataclass
class RenderContext:
    """
    Mutable state of one render call: pages, cursor and active font.

    The cursor y is the top of the next line; text baselines sit one font
    size below it.
    """

    geometry: PageGeometry
    typography: Typography
    pages: List[Page] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    font: Optional[FontState] = None

    def __post_init__(self):
        if not self.pages:
            self.new_page()
        if self.font is None:
            self.set_font(size=self.typography.body_size)

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.geometry.top_margin

    def new_page(self) -> Page:
        self.pages.append(Page(number=len(self.pages) + 1))
        self.x = self.geometry.margin
        self.y = self.geometry.top_margin
        return self.page

    def ensure_room(self, extra: float) -> None:
        """Start a new page unless `extra` more points fit above max_content_y."""
        if self.y + extra > self.geometry.max_content_y and not self.at_page_top:
            self.new_page()

    def set_font(self, weight: str = "normal", size: Optional[float] = None, italic: bool = False) -> FontState:
        self.font = FontState(
            family=self.typography.font_family,
            weight=weight,
            size=size if size is not None else self.typography.body_size,
            italic=italic,
        )
        return self.font

    def line_height(self) -> float:
        return self.typography.line_height(self.font.size)

    def draw_text(self, text: str, x: float, align: str = ALIGN_LEFT) -> TextRun:
        run = TextRun(text=text, x=x, y=self.y + self.font.size, font=self.font, align=align)
        self.page.runs.append(run)
        return run

    def draw_rule(self, y: float) -> Rule:
        rule = Rule(
            x1=self.geometry.margin,
            x2=self.geometry.right_edge,
            y=y,
            width=self.typography.rule_width,
        )
        self.page.rules.append(rule)
        return rule

    def advance(self, dy: float) -> None:
        self.y += dy


# =============================================================================
# TEXT MEASUREMENT
# =============================================================================


def _split_long_word(word: str, font: FontState, max_width: float) -> List[str]:
    """Hard-split a word wider than max_width; every piece keeps at least one character."""
    if font.width(word) <= max_width:
        return [word]

    pieces = []
    current = ""
    for char in word:
        if current and font.width(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, font: FontState, max_width: float) -> List[str]:
    """
    Greedy word wrap measured with the font's real glyph widths.

    Args:
        text: Text to wrap (whitespace runs count as one space)
        font: Font the text will be drawn in
        max_width: Available width in points

    Returns:
        Wrapped lines; empty list for empty text
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        for piece in _split_long_word(word, font, max_width):
            candidate = f"{current} {piece}" if current else piece
            if current and font.width(candidate) > max_width:
                lines.append(current)
                current = piece
            else:
                current = candidate

    if current:
        lines.append(current)
    return lines


# =============================================================================
# ELEMENT LAYOUT
# =============================================================================


def _draw_wrapped(ctx: RenderContext, text: str, x: float, width: float, align: str = ALIGN_LEFT) -> int:
    """Draw text wrapped to width with the active font; returns the number of lines."""
    lines = wrap_text(text, ctx.font, width)
    for line in lines:
        ctx.ensure_room(ctx.line_height())
        ctx.draw_text(line, x, align)
        ctx.advance(ctx.line_height())
    return len(lines)


def _draw_two_column(
    ctx: RenderContext,
    left: str,
    right: str,
    left_font: FontState,
    right_font: FontState,
) -> None:
    """
    Draw left text at the margin and right text right-aligned beside it.

    The right column takes the width its text needs, capped so the left
    column keeps at least MIN_LEFT_COLUMN_SHARE of the line. Both columns
    wrap inside their own widths; row i carries line i of each, so the two
    never overlap. Nothing is drawn when both are empty.
    """
    if not left and not right:
        return

    geometry = ctx.geometry
    column_width = geometry.column_width
    gap = ctx.typography.two_column_gap if right else 0.0
    right_natural = right_font.width(right) if right else 0.0
    left_width = max(column_width - right_natural - gap, column_width * MIN_LEFT_COLUMN_SHARE)
    right_width = column_width - left_width - gap

    left_lines = wrap_text(left, left_font, left_width)
    right_lines = wrap_text(right, right_font, right_width) if right else []
    line_height = ctx.typography.line_height(max(left_font.size, right_font.size))

    for index in range(max(len(left_lines), len(right_lines))):
        ctx.ensure_room(line_height)
        if index < len(left_lines):
            ctx.font = left_font
            ctx.draw_text(left_lines[index], geometry.margin)
        if index < len(right_lines):
            ctx.font = right_font
            ctx.draw_text(right_lines[index], geometry.right_edge, ALIGN_RIGHT)
        ctx.advance(line_height)


def _render_header(ctx: RenderContext, document: Document) -> None:
    if not document.name and not document.contact:
        return

    typography = ctx.typography
    center_x = ctx.geometry.center_x
    width = ctx.geometry.column_width

    if document.name:
        ctx.set_font(weight="bold", size=typography.name_size)
        _draw_wrapped(ctx, document.name, center_x, width, ALIGN_CENTER)

    if document.contact:
        ctx.set_font(size=typography.contact_size)
        _draw_wrapped(ctx, document.contact, center_x, width, ALIGN_CENTER)

    ctx.advance(typography.header_gap)


def _render_section_title(ctx: RenderContext, title: str) -> None:
    """Bold title with a rule beneath, kept on the same page as the next body line."""
    typography = ctx.typography
    ctx.set_font(weight="bold", size=typography.section_size)
    title_height = ctx.line_height()
    body_height = typography.line_height(typography.body_size)

    ctx.ensure_room(title_height + typography.rule_offset + typography.title_gap + body_height)

    if title:
        ctx.draw_text(title, ctx.geometry.margin)
    rule_y = ctx.y + ctx.font.size + typography.rule_offset
    ctx.draw_rule(rule_y)
    ctx.y = max(ctx.y + title_height, rule_y) + typography.title_gap


def _render_subheading(ctx: RenderContext, item: Subheading) -> None:
    size = ctx.typography.body_size
    _draw_two_column(
        ctx,
        item.title,
        item.right_date,
        ctx.set_font(weight="bold", size=size),
        ctx.set_font(size=size),
    )
    italic = ctx.set_font(size=size, italic=True)
    _draw_two_column(ctx, item.subtitle, item.subtitle_right, italic, italic)


def _render_project_heading(ctx: RenderContext, item: ProjectHeading) -> None:
    regular = ctx.set_font(size=ctx.typography.body_size)
    _draw_two_column(ctx, item.title, item.right_date, regular, regular)


def _render_bullet(ctx: RenderContext, item: Bullet) -> None:
    typography = ctx.typography
    margin = ctx.geometry.margin
    ctx.set_font(size=typography.body_size)

    lines = wrap_text(item.text, ctx.font, ctx.geometry.column_width - typography.bullet_indent) or [""]
    for index, line in enumerate(lines):
        ctx.ensure_room(ctx.line_height())
        if index == 0:
            ctx.draw_text(typography.bullet_marker, margin)
        if line:
            ctx.draw_text(line, margin + typography.bullet_indent)
        ctx.advance(ctx.line_height())


def _render_plain_line(ctx: RenderContext, item: PlainLine) -> None:
    text = item.text
    is_implicit_subheader = text.isupper() and len(text) < IMPLICIT_SUBHEADER_MAX_LENGTH
    ctx.set_font(weight="bold" if is_implicit_subheader else "normal", size=ctx.typography.body_size)
    _draw_wrapped(ctx, text, ctx.geometry.margin, ctx.geometry.column_width)


def _render_item(ctx: RenderContext, item: Item) -> None:
    if isinstance(item, Subheading):
        _render_subheading(ctx, item)
    elif isinstance(item, ProjectHeading):
        _render_project_heading(ctx, item)
    elif isinstance(item, Bullet):
        _render_bullet(ctx, item)
    elif isinstance(item, PlainLine):
        _render_plain_line(ctx, item)
    else:
        raise TypeError(f"Unknown item type: {type(item).__name__}")


def _render_section(ctx: RenderContext, section: Section, first: bool) -> None:
    if not first and not ctx.at_page_top:
        ctx.advance(ctx.typography.section_gap)

    _render_section_title(ctx, section.title)

    if not section.items:
        ctx.set_font(size=ctx.typography.body_size, italic=True)
        _draw_wrapped(ctx, ctx.typography.empty_section_text, ctx.geometry.margin, ctx.geometry.column_width)
        return

    for item in section.items:
        _render_item(ctx, item)


def render(
    document: Document,
    geometry: PageGeometry,
    typography: Optional[Typography] = None,
) -> List[Page]:
    """
    Lay out a Document onto pages.

    Args:
        document: Document to render
        geometry: Page dimensions and content limits
        typography: Fonts and spacing (default: Typography())

    Returns:
        Pages in order; always at least one (an empty document gives one blank page)

    Example:
        >>> pages = render(Document(sections=()), geometry)
        >>> len(pages)
        1
    """
    ctx = RenderContext(geometry=geometry, typography=typography or Typography())

    _render_header(ctx, document)
    for index, section in enumerate(document.sections):
        _render_section(ctx, section, first=index == 0)

    return ctx.pages
