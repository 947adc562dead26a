"""
Unit tests for the generation context: profiles, template and prompted
generation, response cleanup and the résumé service.
"""

import json

import pytest

from quill.contexts.generation import (
    GeneratedResume,
    JsonProfileStore,
    ProfileData,
    ProfileNotFoundError,
    ProfileStore,
    PromptedGenerationService,
    ResumeService,
    TemplateGenerationService,
    download_raw_source,
)
from quill.contexts.generation.profile import ExperienceEntry
from quill.contexts.generation.response_cleaning import clean_plain_response, extract_markup, strip_code_fences
from quill.contexts.generation.resume_service import default_filename
from quill.contexts.parsing import Bullet, Subheading, parse_document
from quill.contexts.rendering.pipeline import RenderPipeline, RenderStage
from quill.utils.pdf_processing import extract_text_lines, normalize_for_matching

PROFILE_DICT = {
    "fullName": "Jo Park",
    "email": "jo@x.dev",
    "phone": "555-0100",
    "experience": [
        {
            "company": "R&D Labs",
            "position": "Backend Engineer",
            "startDate": "Jan 2020",
            "endDate": "Present",
            "location": "Remote",
            "description": "- Cut latency by 40%\n- Led migration to Kubernetes\n",
        }
    ],
    "education": [
        {"institution": "Northeastern University", "degree": "B.S. Computer Science", "graduationDate": "May 2018"}
    ],
    "skills": "Python, Go, SQL",
}

MINIMAL_MARKUP = r"\documentclass{article}\begin{document}\section{Skills}\resumeItem{Go}\end{document}"


class StaticProfileStore(ProfileStore):
    def __init__(self, profile):
        self.profile = profile

    def get_profile(self):
        return self.profile


@pytest.fixture
def profile():
    return ProfileData.from_dict(PROFILE_DICT)


@pytest.fixture
def plain_profile():
    return ProfileData(
        name="Jo Park",
        email="jo@x.dev",
        raw_resume_text="SUMMARY\nUsing the STAR format: Built a billing platform\n",
    )


@pytest.fixture
def local_pipeline(a4_layout):
    return RenderPipeline(None, *a4_layout)


@pytest.mark.unit
class TestProfile:
    def test_from_dict_accepts_camel_case(self, profile):
        assert profile.name == "Jo Park"
        assert profile.education[0].graduation_date == "May 2018"
        assert profile.experience[0].start_date == "Jan 2020"

    def test_comma_separated_skills(self, profile):
        assert profile.skills == ["Python", "Go", "SQL"]

    def test_contact_line(self, profile):
        assert profile.contact_line() == "jo@x.dev | 555-0100"
        assert ProfileData(name="Jo Park").contact_line() == ""

    def test_structured_entries(self, profile, plain_profile):
        assert profile.has_structured_entries
        assert not plain_profile.has_structured_entries

    def test_experience_helpers(self):
        entry = ExperienceEntry(company="Acme", start_date="2020", description="• Led X\n\n* Shipped Y")

        assert entry.date_range == "2020"
        assert entry.achievements() == ["Led X", "Shipped Y"]
        assert ExperienceEntry(company="Acme", start_date="2020", end_date="2022").date_range == "2020 -- 2022"


@pytest.mark.unit
class TestJsonProfileStore:
    def test_reads_profile(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps(PROFILE_DICT))

        assert JsonProfileStore(path).get_profile().email == "jo@x.dev"

    def test_missing_file(self, tmp_path):
        assert JsonProfileStore(tmp_path / "missing.json").get_profile() is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text("{not json")

        assert JsonProfileStore(path).get_profile() is None

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text("[1, 2]")

        assert JsonProfileStore(path).get_profile() is None


@pytest.mark.unit
class TestTemplateGeneration:
    """Template output must read back into the expected document."""

    def test_markup_round_trip(self, profile):
        generated = TemplateGenerationService().generate("", profile)
        assert generated.is_markup

        document = parse_document(generated.text)

        assert document.name == "Jo Park"
        assert document.contact == "jo@x.dev | 555-0100"
        assert [section.title for section in document.sections] == ["Experience", "Education", "Skills"]
        assert document.sections[0].items == (
            Subheading("Backend Engineer", "Jan 2020 \u2013 Present", "R&D Labs", "Remote"),
            Bullet("Cut latency by 40%"),
            Bullet("Led migration to Kubernetes"),
        )
        assert document.sections[1].items == (
            Subheading("Northeastern University", "May 2018", "B.S. Computer Science", ""),
        )
        assert document.sections[2].items == (Bullet("Python, Go, SQL"),)

    def test_user_data_escaped(self, profile):
        text = TemplateGenerationService().generate("", profile).text

        assert r"R\&D Labs" in text
        assert r"40\%" in text

    def test_preamble_included(self, profile):
        text = TemplateGenerationService().generate("", profile).text

        assert text.lstrip().startswith(r"\documentclass")
        assert r"\newcommand{\resumeSubheading}[4]" in text

    def test_sections_without_entries_left_out(self):
        generated = TemplateGenerationService().generate("", ProfileData(name="Jo Park", skills=["Go"]))

        assert [section.title for section in parse_document(generated.text).sections] == ["Skills"]

    def test_raw_text_fallback(self, plain_profile):
        generated = TemplateGenerationService().generate("", plain_profile)

        assert not generated.is_markup
        assert generated.text == "SUMMARY\nBuilt a billing platform"


@pytest.mark.unit
class TestPromptedGeneration:
    def test_prompt_contents(self, profile):
        prompts = []

        def complete(prompt):
            prompts.append(prompt)
            return MINIMAL_MARKUP

        PromptedGenerationService(complete).generate("Backend role at Acme & Co", profile)

        (prompt,) = prompts
        assert "Backend role at Acme \\& Co" in prompt
        assert "Name: Jo Park" in prompt
        assert r"\newcommand{\resumeItem}[1]" in prompt

    def test_markup_extracted_from_chatter(self, profile):
        response = f"Sure! Here is your resume:\n```latex\n{MINIMAL_MARKUP}\n```\nGood luck!"
        generated = PromptedGenerationService(lambda prompt: response).generate("", profile)

        assert generated.is_markup
        assert generated.text == MINIMAL_MARKUP

    def test_plain_response(self, profile):
        response = "EXPERIENCE\nUsing the STAR method: Led migration"
        generated = PromptedGenerationService(lambda prompt: response).generate("", profile)

        assert not generated.is_markup
        assert generated.text == "EXPERIENCE\nLed migration"

    def test_empty_response(self, profile):
        generated = PromptedGenerationService(lambda prompt: None).generate("", profile)
        assert generated == GeneratedResume("", is_markup=False)


@pytest.mark.unit
class TestResponseCleaning:
    def test_extract_markup_none_without_document(self):
        assert extract_markup("Here is your resume: EXPERIENCE ...") is None
        assert extract_markup("") is None

    def test_extract_markup_spans_lines(self):
        response = "\\documentclass{article}\n\\begin{document}\nHi\n\\end{document}\ntrailing"
        assert extract_markup(response) == response[: -len("\ntrailing")]

    def test_strip_code_fences(self):
        assert strip_code_fences("```latex\nbody\n```") == "\nbody\n"

    def test_clean_plain_response(self):
        assert clean_plain_response("```\nSKILLS (STAR format)\nGo\n```") == "SKILLS\nGo"


@pytest.mark.unit
class TestResumeService:
    def test_missing_profile(self, local_pipeline):
        service = ResumeService(StaticProfileStore(None), pipeline=local_pipeline)

        with pytest.raises(ProfileNotFoundError, match="No profile found"):
            service.build_resume("Backend role")

    def test_build_markup_resume(self, profile, local_pipeline):
        built = ResumeService(StaticProfileStore(profile), pipeline=local_pipeline).build_resume()

        assert built.generated.is_markup
        assert built.render.stage is RenderStage.LOCAL
        assert built.pdf.startswith(b"%PDF")

    def test_plain_resume_gets_profile_header(self, plain_profile, local_pipeline):
        built = ResumeService(StaticProfileStore(plain_profile), pipeline=local_pipeline).build_resume()

        first_lines = [normalize_for_matching(line) for line in extract_text_lines(built.pdf)[0][:3]]
        assert first_lines == ["jopark", "joxdev", "summary"]

    def test_download_named_after_profile(self, profile, local_pipeline):
        service = ResumeService(StaticProfileStore(profile), pipeline=local_pipeline)
        built = service.build_resume()

        download = service.download_raw_source(built)

        assert download.content == built.generated.text
        assert download.filename == "jo_park_resume.tex"
        assert download.media_type == "application/x-latex"

    def test_download_with_explicit_filename(self, plain_profile, local_pipeline):
        service = ResumeService(StaticProfileStore(plain_profile), pipeline=local_pipeline)

        download = service.download_raw_source(service.build_resume(), filename="mine.txt")

        assert (download.filename, download.media_type) == ("mine.txt", "text/plain")


@pytest.mark.unit
class TestRawSourceDownload:
    def test_content_unchanged(self):
        source = "\\section{Skills}\n\\resumeItem{never closed  \n\n"
        download = download_raw_source(source)

        assert download.content == source
        assert download.filename == "resume.tex"

    def test_plain_defaults(self):
        download = download_raw_source("SKILLS", is_markup=False)
        assert (download.filename, download.media_type) == ("resume.txt", "text/plain")

    @pytest.mark.parametrize(
        "name, is_markup, filename",
        [
            ("Jo Park", True, "jo_park_resume.tex"),
            ("  José  O'Neil ", False, "jos_o_neil_resume.txt"),
            ("", True, "resume.tex"),
            (None, False, "resume.txt"),
        ],
    )
    def test_default_filename(self, name, is_markup, filename):
        assert default_filename(name, is_markup) == filename
