"""
Unit tests for the paginated renderer.

Covers Scenario A layout, word wrapping, page breaks, empty-state handling
and the no-content-loss property.
"""

import pytest

from quill.contexts.parsing import parse_document
from quill.contexts.parsing.document_model import (
    Bullet,
    Document,
    PlainLine,
    ProjectHeading,
    Section,
    Subheading,
)
from quill.contexts.rendering.paginated_renderer import (
    ALIGN_CENTER,
    ALIGN_RIGHT,
    FontState,
    render,
    wrap_text,
)

LONG_TEXT = (
    "Designed and operated a multi-region event ingestion platform handling two billion "
    "events per day, cutting storage costs by forty percent while keeping p99 latency under "
    "fifty milliseconds across every tenant"
)


def all_runs(pages):
    return [run for page in pages for run in page.runs]


def long_document(section_count=30, bullets_per_section=4):
    return Document(
        name="Jo Park",
        contact="jo@x.dev | 555-0100",
        sections=tuple(
            Section(
                f"Section {s}",
                tuple(Bullet(f"Bullet {s}.{b} {LONG_TEXT}") for b in range(bullets_per_section)),
            )
            for s in range(section_count)
        ),
    )


@pytest.mark.unit
class TestWrapText:
    @pytest.fixture
    def font(self):
        return FontState("Helvetica", "normal", 11)

    def test_lines_fit_and_keep_every_word(self, font):
        lines = wrap_text(LONG_TEXT, font, 200)

        assert len(lines) > 1
        assert all(font.width(line) <= 200 for line in lines)
        assert " ".join(lines).split() == LONG_TEXT.split()

    def test_short_text_single_line(self, font):
        assert wrap_text("Led X", font, 200) == ["Led X"]

    def test_long_word_hard_split(self, font):
        word = "x" * 400
        lines = wrap_text(word, font, 100)

        assert len(lines) > 1
        assert "".join(lines) == word
        assert all(font.width(line) <= 100 for line in lines)

    def test_empty(self, font):
        assert wrap_text("", font, 200) == []
        assert wrap_text("   ", font, 200) == []

    def test_font_names(self):
        assert FontState("Helvetica", "bold", 11, italic=True).font_name == "Helvetica-BoldOblique"
        assert FontState("Times", "normal", 11).font_name == "Times-Roman"


@pytest.mark.unit
class TestScenarioA:
    """Subheading and bullets laid out in source order."""

    @pytest.fixture
    def page(self, scenario_a_markup, a4_layout):
        geometry, typography = a4_layout
        pages = render(parse_document(scenario_a_markup), geometry, typography)
        assert len(pages) == 1
        return pages[0]

    def test_line_order(self, page):
        assert page.text_lines() == [
            "Experience",
            "Engineer 2020–2022",
            "Acme Remote",
            "• Led X",
            "• Shipped Y",
        ]

    def test_subheading_columns(self, page, a4_layout):
        geometry, _ = a4_layout
        title_line, subtitle_line = page.lines()[1:3]

        title, date = title_line
        assert (title.x, title.font.weight) == (geometry.margin, "bold")
        assert (date.x, date.align) == (geometry.right_edge, ALIGN_RIGHT)
        assert all(run.font.italic for run in subtitle_line)
        assert subtitle_line[1].align == ALIGN_RIGHT

    def test_bullet_indent(self, page, a4_layout):
        geometry, typography = a4_layout
        marker, text = page.lines()[3]

        assert marker.x == geometry.margin
        assert text.x == pytest.approx(geometry.margin + typography.bullet_indent)

    def test_section_rule_under_title(self, page, a4_layout):
        geometry, _ = a4_layout
        title_run = page.lines()[0][0]

        assert len(page.rules) == 1
        rule = page.rules[0]
        assert rule.y > title_run.y
        assert (rule.x1, rule.x2) == (geometry.margin, geometry.right_edge)


@pytest.mark.unit
class TestElements:
    def test_empty_document_one_blank_page(self, a4_layout):
        pages = render(Document(sections=()), *a4_layout)

        assert len(pages) == 1
        assert pages[0].runs == []

    def test_header_only(self, a4_layout):
        geometry, typography = a4_layout
        pages = render(Document(name="Jo Park", contact="jo@x.dev"), geometry, typography)

        assert len(pages) == 1
        name, contact = pages[0].runs
        assert (name.text, name.align, name.x) == ("Jo Park", ALIGN_CENTER, geometry.center_x)
        assert name.font.size == typography.name_size
        assert contact.font.size == typography.contact_size

    def test_empty_section_placeholder(self, a4_layout):
        pages = render(Document(sections=(Section("Awards"),)), *a4_layout)

        placeholder = pages[0].runs[-1]
        assert placeholder.text == "No information provided"
        assert placeholder.font.italic

    def test_implicit_subheader_bold(self, a4_layout):
        document = Document(sections=(Section("Skills", (PlainLine("LANGUAGES"), PlainLine("Python, Go"))),))
        runs = render(document, *a4_layout)[0].runs

        assert [run.font.weight for run in runs[1:]] == ["bold", "normal"]

    def test_project_heading_single_line(self, a4_layout):
        document = Document(sections=(Section("Projects", (ProjectHeading("Quill | Python", "2023"),)),))
        lines = render(document, *a4_layout)[0].text_lines()

        assert lines[1] == "Quill | Python 2023"

    def test_long_subheading_title_wraps_beside_date(self, a4_layout):
        geometry, typography = a4_layout
        item = Subheading(LONG_TEXT, "2020 – 2022", "Acme", "Remote")
        page = render(Document(sections=(Section("Experience", (item,)),)), geometry, typography)[0]

        dates = [run for run in page.runs if run.text == "2020 – 2022"]
        assert len(dates) == 1

        date = dates[0]
        (title,) = [run for run in page.runs if run.y == date.y and run is not date]
        assert title.font.width(title.text) < geometry.column_width - date.font.width(date.text)
        assert sum(run.font.weight == "bold" for run in page.runs) > 2

    def test_wrapped_bullet_marker_once(self, a4_layout):
        document = Document(sections=(Section("Experience", (Bullet(LONG_TEXT),)),))
        runs = render(document, *a4_layout)[0].runs

        assert [run.text for run in runs].count("•") == 1
        assert len(runs) > 3

    def test_unknown_item_type_rejected(self, a4_layout):
        document = Document(sections=(Section("Odd", ("not an item",)),))
        with pytest.raises(TypeError):
            render(document, *a4_layout)


@pytest.mark.unit
class TestPagination:
    def test_long_document_spans_pages(self, a4_layout):
        geometry, typography = a4_layout
        pages = render(long_document(), geometry, typography)

        assert len(pages) > 1
        assert [page.number for page in pages] == list(range(1, len(pages) + 1))

    def test_nothing_below_content_limit(self, a4_layout):
        geometry, typography = a4_layout
        for page in render(long_document(), geometry, typography):
            assert max(run.y for run in page.runs) <= geometry.max_content_y
            assert all(rule.y <= geometry.max_content_y for rule in page.rules)
            assert all(run.y >= geometry.top_margin for run in page.runs)

    def test_every_bullet_drawn_once(self, a4_layout):
        document = long_document()
        texts = [run.text for run in all_runs(render(document, *a4_layout))]

        for item in document.items():
            bullet_id = item.text.split()[1]
            assert sum(text.startswith(f"Bullet {bullet_id} ") for text in texts) == 1

    def test_section_title_never_last_on_page(self, a4_layout):
        document = long_document()
        titles = {section.title for section in document.sections}

        for page in render(document, *a4_layout):
            assert page.text_lines()[-1] not in titles

    def test_renders_are_independent(self, a4_layout):
        document = long_document(section_count=5)
        assert render(document, *a4_layout) == render(document, *a4_layout)


@pytest.mark.unit
def test_no_content_loss(sample_resume, a4_layout):
    """Every leaf text gets at least one run and every leaf word is drawn."""
    document = parse_document(sample_resume)
    runs = all_runs(render(document, *a4_layout))

    chrome = {"•", document.name, document.contact} | {section.title for section in document.sections}
    body_runs = [run for run in runs if run.text not in chrome]
    leaves = list(document.leaf_texts())
    assert len(body_runs) >= len(leaves)

    drawn_words = " ".join(run.text for run in runs).split()
    for leaf in leaves:
        for word in leaf.split():
            assert word in drawn_words


def run_extent(run):
    width = run.font.width(run.text)
    if run.align == ALIGN_RIGHT:
        return run.x - width, run.x
    if run.align == ALIGN_CENTER:
        return run.x - width / 2, run.x + width / 2
    return run.x, run.x + width


LONG_LOCATION = (
    "Remote, collaborating with distributed teams across Berlin, Toronto and Singapore "
    "on the payments platform and its settlement reconciliation services"
)


@pytest.mark.unit
class TestTwoColumnLines:
    @pytest.mark.parametrize("location", [LONG_LOCATION, LONG_LOCATION[:100]])
    def test_long_right_text_stays_on_page_without_overlap(self, location, a4_layout):
        geometry, typography = a4_layout
        document = Document(sections=(Section("Experience", (Subheading("Engineer", "2020", "Acme", location),)),))

        (page,) = render(document, geometry, typography)

        for line in page.lines():
            extents = sorted(run_extent(run) for run in line)
            for left_edge, right_edge in extents:
                assert left_edge >= geometry.margin - 0.01
                assert right_edge <= geometry.right_edge + 0.01
            for (_, first_end), (second_start, _) in zip(extents, extents[1:]):
                assert first_end <= second_start

    def test_long_right_text_wraps_and_keeps_every_word(self, a4_layout):
        document = Document(
            sections=(Section("Experience", (Subheading("Engineer", "2020", "Acme", LONG_LOCATION),)),)
        )

        (page,) = render(document, *a4_layout)

        right_runs = [run for run in page.runs if run.align == ALIGN_RIGHT and run.text != "2020"]
        assert len(right_runs) > 1
        assert " ".join(run.text for run in right_runs).split() == LONG_LOCATION.split()
        assert page.text_lines()[2].startswith("Acme ")

    def test_short_right_text_single_row(self, a4_layout):
        document = Document(sections=(Section("Projects", (ProjectHeading("Quill | Python", "2023"),)),))

        (page,) = render(document, *a4_layout)

        assert page.text_lines()[1:] == ["Quill | Python 2023"]
