"""
Generation Context

Responsibilities:
- Holds candidate profile data and the profile store interface
- Generates résumé source from a profile (Jinja2 markup template, or a prompted model)
- Cleans model responses (markup extraction, format chatter)
- Exposes the generate → render façade and the raw-source download

Owns: Profile model, markup templates, response cleanup
Never: Lays out pages (delegates to the rendering context)
"""

from quill.contexts.generation.exceptions import ProfileNotFoundError
from quill.contexts.generation.generation_service import (
    GeneratedResume,
    GenerationService,
    PromptedGenerationService,
    TemplateGenerationService,
)
from quill.contexts.generation.profile import (
    EducationEntry,
    ExperienceEntry,
    JsonProfileStore,
    ProfileData,
    ProfileStore,
)
from quill.contexts.generation.response_cleaning import extract_markup
from quill.contexts.generation.resume_service import (
    BuiltResume,
    ResumeService,
    SourceDownload,
    download_raw_source,
)

__all__ = [
    "ProfileData",
    "EducationEntry",
    "ExperienceEntry",
    "ProfileStore",
    "JsonProfileStore",
    "GeneratedResume",
    "GenerationService",
    "TemplateGenerationService",
    "PromptedGenerationService",
    "extract_markup",
    "ResumeService",
    "BuiltResume",
    "SourceDownload",
    "download_raw_source",
    "ProfileNotFoundError",
]
