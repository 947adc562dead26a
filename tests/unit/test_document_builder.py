"""
Unit tests for the document model builder.
"""

import pytest

from quill.contexts.parsing.document_builder import build, contact_display_text, to_display_text
from quill.contexts.parsing.document_model import (
    Bullet,
    Document,
    PlainLine,
    ProjectHeading,
    Section,
    Subheading,
)
from quill.contexts.parsing.markup_tokenizer import extract


@pytest.mark.unit
class TestBuildSample:
    """Building the complete sample résumé."""

    @pytest.fixture
    def document(self, sample_resume):
        return build(extract(sample_resume))

    def test_header(self, document):
        assert document.name == "Jo Park"
        assert document.contact == "555-0100 | jo@x.dev | github.com/jopark"

    def test_education(self, document):
        assert document.sections[0] == Section(
            "Education",
            (
                Subheading(
                    "Northeastern University",
                    "Boston, MA",
                    "Bachelor of Science in Computer Science",
                    "Sep 2014 \u2013 May 2018",
                ),
            ),
        )

    def test_experience(self, document):
        assert document.sections[1].items == (
            Subheading("Backend Engineer", "Jun 2020 \u2013 Present", "Acme Corp", "Remote"),
            Bullet("Cut p99 latency by 40% with Redis caching"),
            Bullet("Led migration of 12 services to Kubernetes"),
        )

    def test_projects(self, document):
        assert document.sections[2].items == (
            ProjectHeading("Quill | Python, ReportLab", "2023"),
            Bullet("Renders markup to paginated PDF"),
        )

    def test_free_text_section(self, document):
        assert document.sections[3] == Section(
            "Technical Skills",
            (PlainLine("Languages: Python, Go, SQL"), PlainLine("Tools: Docker, Git")),
        )

    def test_deterministic(self, sample_resume):
        assert build(extract(sample_resume)) == build(extract(sample_resume))


@pytest.mark.unit
class TestBuildStructure:
    def test_leftover_opens_summary_section(self):
        document = build(extract(r"Builds reliable systems \section{Skills} \resumeItem{Python}"))

        assert document.sections == (
            Section("SUMMARY", (PlainLine("Builds reliable systems"),)),
            Section("Skills", (Bullet("Python"),)),
        )

    def test_empty_section_kept(self):
        document = build(extract(r"\section{Awards}\section{Skills}\resumeItem{Go}"))

        assert document.sections[0] == Section("Awards", ())
        assert [section.title for section in document.sections] == ["Awards", "Skills"]

    def test_empty_bullet_kept(self):
        document = build(extract(r"\section{Skills}\resumeItem{}"))
        assert document.sections[0].items == (Bullet(""),)

    def test_section_title_converted(self):
        document = build(extract(r"\section{\textbf{Work} \& Research}"))
        assert document.sections[0].title == "Work & Research"

    def test_malformed_macro_becomes_plain_line(self):
        document = build(extract("\\section{Experience}\n\\resumeSubheading{Engineer}{2020}"))
        assert document.sections[0].items == (PlainLine("Engineer 2020"),)

    def test_no_header(self):
        document = build(extract(r"\section{Skills}"))

        assert document.name is None
        assert document.contact is None


@pytest.mark.unit
class TestDisplayText:
    def test_to_display_text_empty(self):
        assert to_display_text(None) == ""
        assert to_display_text("   ") == ""

    def test_contact_line_breaks_become_separators(self):
        assert contact_display_text(r"jo@x.dev \\ 555-0100") == "jo@x.dev | 555-0100"

    def test_contact_repeated_separators_collapsed(self):
        markup = r"\href{mailto:jo@x.dev}{jo@x.dev} $|$ $|$ 555-0100 $|$"
        assert contact_display_text(markup) == "jo@x.dev | 555-0100"


@pytest.mark.unit
class TestDocumentModel:
    def test_leaf_texts_skip_empty_fields(self):
        document = Document(
            sections=(
                Section("Experience", (Subheading("Engineer", "2020", "Acme", ""), Bullet(""))),
                Section("Skills", (PlainLine("Python"),)),
            )
        )
        assert list(document.leaf_texts()) == ["Engineer", "2020", "Acme", "Python"]

    def test_header_defaults_fill_missing_fields_only(self):
        document = Document(name="Jo Park").with_header_defaults("Someone Else", "jo@x.dev")

        assert document.name == "Jo Park"
        assert document.contact == "jo@x.dev"

    def test_is_empty(self):
        assert Document().is_empty
        assert not Document(sections=(Section("Skills"),)).is_empty
