"""
Résumé generation services.

GenerationService is the collaborator interface: given a job description and
a profile, return résumé source tagged as markup or plain text.

Implementations:
- TemplateGenerationService: deterministic, offline; renders the profile
  through a Jinja2 markup template
- PromptedGenerationService: builds a prompt from the same template family and
  hands it to any text-completion callable, then cleans the response
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from quill.contexts.generation.logger import _log_debug, _log_info, _log_warning, log_generation_result
from quill.contexts.generation.profile import ProfileData
from quill.contexts.generation.response_cleaning import clean_plain_response, extract_markup
from quill.utils.latex_parsing_tools import escape_markup
from quill.utils.text_processing import strip_format_chatter

TEMPLATES_PATH = Path(__file__).parent / "templates"
RESUME_TEMPLATE = "resume.tex.jinja"
PROMPT_TEMPLATE = "prompt.txt.jinja"


@dataclass(frozen=True)
class GeneratedResume:
    """Résumé source returned by a generation service."""

    text: str
    is_markup: bool


class GenerationService(ABC):
    """Produces résumé source for a job description."""

    @abstractmethod
    def generate(self, job_description: str, profile: ProfileData) -> GeneratedResume:
        """Return markup or plain-text résumé source."""


def create_template_environment(templates_path: Path = TEMPLATES_PATH) -> Environment:
    """
    Jinja2 environment for markup templates.

    Uses custom delimiters so markup braces and % comments pass through:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    The `tex` filter escapes markup specials in user data.
    """
    env = Environment(
        loader=FileSystemLoader(str(templates_path)),
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        # Preserve whitespace (important for markup)
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["tex"] = lambda value: escape_markup(str(value)) if value else ""
    return env


class TemplateGenerationService(GenerationService):
    """
    Deterministic markup generation from structured profile data.

    The job description is not used: output depends only on the profile. A
    profile with no structured entries falls back to its uploaded résumé text,
    returned as plain text.

    Args:
        templates_path: Directory holding resume.tex.jinja and its includes
    """

    def __init__(self, templates_path: Path = TEMPLATES_PATH):
        self.env = create_template_environment(templates_path)
        self._template: Optional[Template] = None

    @property
    def template(self) -> Template:
        if self._template is None:
            self._template = self.env.get_template(RESUME_TEMPLATE)
        return self._template

    def generate(self, job_description: str, profile: ProfileData) -> GeneratedResume:
        if not profile.has_structured_entries and profile.raw_resume_text.strip():
            _log_info("Profile has no structured entries, using the uploaded résumé text")
            generated = GeneratedResume(strip_format_chatter(profile.raw_resume_text).strip(), is_markup=False)
        else:
            _log_debug(f"Rendering {RESUME_TEMPLATE} for {profile.name or '(unnamed profile)'}")
            generated = GeneratedResume(self.template.render(profile=profile), is_markup=True)

        log_generation_result(generated, type(self).__name__)
        return generated


class PromptedGenerationService(GenerationService):
    """
    Generation through a text-completion callable (e.g. a language-model client).

    The response is searched for a complete markup document; when there is
    none, the response is treated as plain text.

    Args:
        complete: Callable taking a prompt and returning the model's response
        templates_path: Directory holding prompt.txt.jinja and its includes

    Example:
        >>> service = PromptedGenerationService(lambda prompt: client.complete(prompt))
        >>> generated = service.generate(job_description, profile)
    """

    def __init__(self, complete: Callable[[str], str], templates_path: Path = TEMPLATES_PATH):
        self.complete = complete
        self.env = create_template_environment(templates_path)

    def build_prompt(self, job_description: str, profile: ProfileData) -> str:
        template = self.env.get_template(PROMPT_TEMPLATE)
        return template.render(profile=profile, job_description=job_description)

    def generate(self, job_description: str, profile: ProfileData) -> GeneratedResume:
        prompt = self.build_prompt(job_description, profile)
        _log_debug(f"Prompt: {len(prompt)} chars")

        response = self.complete(prompt) or ""
        markup = extract_markup(response)
        if markup is not None:
            generated = GeneratedResume(markup, is_markup=True)
        else:
            _log_warning("Response holds no markup document, keeping it as plain text")
            generated = GeneratedResume(clean_plain_response(response), is_markup=False)

        log_generation_result(generated, type(self).__name__)
        return generated
