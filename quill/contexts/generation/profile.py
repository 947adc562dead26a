"""
Candidate profile data and the profile store interface.

ProfileData is what generation works from: identity, contact details, the
résumé text the candidate uploaded, and structured education/experience
entries. Stores are external collaborators; JsonProfileStore reads one JSON
file and is enough for the CLI and tests.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from quill.contexts.generation.logger import _log_debug, _log_warning


def _pick(data: Dict[str, Any], *keys: str, default: Any = "") -> Any:
    """First present, non-None value among keys (snake_case and camelCase spellings)."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class EducationEntry:
    institution: str
    degree: str = ""
    graduation_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EducationEntry":
        return cls(
            institution=str(_pick(data, "institution", "school")),
            degree=str(_pick(data, "degree")),
            graduation_date=str(_pick(data, "graduation_date", "graduationDate")),
        )


@dataclass(frozen=True)
class ExperienceEntry:
    company: str
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    location: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperienceEntry":
        return cls(
            company=str(_pick(data, "company")),
            position=str(_pick(data, "position", "title", "role")),
            start_date=str(_pick(data, "start_date", "startDate")),
            end_date=str(_pick(data, "end_date", "endDate")),
            location=str(_pick(data, "location")),
            description=str(_pick(data, "description")),
        )

    @property
    def date_range(self) -> str:
        """'start -- end' in markup dash form, or whichever side is known."""
        if self.start_date and self.end_date:
            return f"{self.start_date} -- {self.end_date}"
        return self.start_date or self.end_date

    def achievements(self) -> List[str]:
        """Description split into one achievement per line, list markers removed."""
        lines = [line.strip().lstrip("-•*").strip() for line in self.description.splitlines()]
        return [line for line in lines if line]


@dataclass(frozen=True)
class ProfileData:
    """
    Candidate profile.

    Attributes:
        name: Full name for the header
        email: Contact email
        phone: Contact phone
        raw_resume_text: Résumé text as uploaded (used when no structured entries exist)
        education: Structured education entries
        experience: Structured work entries
        skills: Skill names
    """

    name: str = ""
    email: str = ""
    phone: str = ""
    raw_resume_text: str = ""
    education: List[EducationEntry] = field(default_factory=list)
    experience: List[ExperienceEntry] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileData":
        """
        Build from a dict, accepting snake_case or camelCase keys.

        Example:
            >>> ProfileData.from_dict({"fullName": "Jo Park", "email": "jo@x.dev"}).name
            'Jo Park'
        """
        skills = _pick(data, "skills", default=[])
        if isinstance(skills, str):
            skills = [skill.strip() for skill in skills.split(",")]

        return cls(
            name=str(_pick(data, "name", "full_name", "fullName")),
            email=str(_pick(data, "email")),
            phone=str(_pick(data, "phone")),
            raw_resume_text=str(_pick(data, "raw_resume_text", "rawResumeText", "resume_text")),
            education=[EducationEntry.from_dict(entry) for entry in _pick(data, "education", default=[])],
            experience=[ExperienceEntry.from_dict(entry) for entry in _pick(data, "experience", default=[])],
            skills=[str(skill) for skill in skills if str(skill).strip()],
        )

    @property
    def has_structured_entries(self) -> bool:
        return bool(self.education or self.experience or self.skills)

    def contact_items(self) -> List[str]:
        return [item for item in (self.email, self.phone) if item]

    def contact_line(self) -> str:
        """
        Contact details joined as shown in the header.

        Example:
            >>> ProfileData(email="jo@x.dev", phone="555-0100").contact_line()
            'jo@x.dev | 555-0100'
        """
        return " | ".join(self.contact_items())


class ProfileStore(ABC):
    """Source of the current candidate's profile."""

    @abstractmethod
    def get_profile(self) -> Optional[ProfileData]:
        """Return the profile, or None when none exists."""


class JsonProfileStore(ProfileStore):
    """Profile read from a JSON file; a missing or unreadable file means no profile."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_profile(self) -> Optional[ProfileData]:
        if not self.path.exists():
            _log_debug(f"No profile file at {self.path}")
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            _log_warning(f"Profile file {self.path} is not valid JSON: {e}")
            return None

        if not isinstance(data, dict):
            _log_warning(f"Profile file {self.path} does not hold a JSON object")
            return None

        return ProfileData.from_dict(data)
