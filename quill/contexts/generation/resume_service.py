"""
Résumé service: the entry point that ties profile, generation and rendering.

build_resume() generates source for a job description and renders it through
the fallback pipeline; download_raw_source() hands back any source unchanged
with a filename and media type, so the original is always retrievable even
when the PDF is a fallback page.
"""

import re
from dataclasses import dataclass
from typing import Optional

from quill.contexts.generation.exceptions import ProfileNotFoundError
from quill.contexts.generation.generation_service import (
    GeneratedResume,
    GenerationService,
    TemplateGenerationService,
)
from quill.contexts.generation.logger import _log_info
from quill.contexts.generation.profile import ProfileStore
from quill.contexts.rendering.pipeline import RenderPipeline, RenderResult

MARKUP_MEDIA_TYPE = "application/x-latex"
PLAIN_MEDIA_TYPE = "text/plain"


@dataclass(frozen=True)
class SourceDownload:
    """Original source for download; content is never transformed."""

    content: str
    filename: str
    media_type: str


@dataclass
class BuiltResume:
    """
    Generated source plus its rendering.

    Attributes:
        generated: Source returned by the generation service
        render: Pipeline result holding the PDF bytes and the stage used
        profile_name: Name of the profile the source was generated from
    """

    generated: GeneratedResume
    render: RenderResult
    profile_name: str = ""

    @property
    def pdf(self) -> bytes:
        return self.render.blob


def default_filename(base_name: Optional[str], is_markup: bool) -> str:
    """
    Suggested download filename from a display name.

    Example:
        >>> default_filename("Jo Park", is_markup=True)
        'jo_park_resume.tex'
        >>> default_filename(None, is_markup=False)
        'resume.txt'
    """
    extension = "tex" if is_markup else "txt"
    slug = re.sub(r"[^a-z0-9]+", "_", (base_name or "").lower()).strip("_")
    return f"{slug}_resume.{extension}" if slug else f"resume.{extension}"


def download_raw_source(source: str, filename: Optional[str] = None, is_markup: bool = True) -> SourceDownload:
    """
    Wrap source for download without modifying it.

    Args:
        source: Markup or plain-text source, returned verbatim
        filename: Suggested filename (default: resume.tex or resume.txt)
        is_markup: Selects the media type and default extension
    """
    return SourceDownload(
        content=source,
        filename=filename or default_filename(None, is_markup),
        media_type=MARKUP_MEDIA_TYPE if is_markup else PLAIN_MEDIA_TYPE,
    )


class ResumeService:
    """
    Generate → render façade.

    Args:
        profile_store: Where the candidate profile comes from
        generation_service: Source generator (default: TemplateGenerationService)
        pipeline: Render pipeline (default: RenderPipeline.from_env())
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        generation_service: Optional[GenerationService] = None,
        pipeline: Optional[RenderPipeline] = None,
    ):
        self.profile_store = profile_store
        self.generation_service = generation_service or TemplateGenerationService()
        self.pipeline = pipeline or RenderPipeline.from_env()

    def build_resume(self, job_description: str = "") -> BuiltResume:
        """
        Generate source for the job description and render it to PDF.

        The profile's name and contact line fill the header when the generated
        source has none (always the case for plain-text output).

        Raises:
            ProfileNotFoundError: If the store has no profile
        """
        profile = self.profile_store.get_profile()
        if profile is None:
            raise ProfileNotFoundError(
                "No profile found. Create a profile before generating a resume.",
                source=getattr(self.profile_store, "path", None),
            )

        _log_info(f"Building resume for {profile.name or '(unnamed profile)'}")
        generated = self.generation_service.generate(job_description, profile)
        render = self.pipeline.render(
            generated.text,
            is_markup=generated.is_markup,
            default_name=profile.name or None,
            default_contact=profile.contact_line() or None,
        )
        return BuiltResume(generated=generated, render=render, profile_name=profile.name)

    def download_raw_source(self, built: BuiltResume, filename: Optional[str] = None) -> SourceDownload:
        """Raw source of a built résumé, named after the profile when no filename is given."""
        return download_raw_source(
            built.generated.text,
            filename=filename or default_filename(built.profile_name, built.generated.is_markup),
            is_markup=built.generated.is_markup,
        )
