"""Profile aggregate: the developer profile owned by a single user."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from domain.entities.user import UserSummary

SOCIAL_NETWORKS = ("youtube", "twitter", "instagram", "linkedin", "facebook")


def parse_skills(raw: str) -> list[str]:
    """Split a comma-delimited skills string, trimming each element.

    Empty elements are kept: ``"a,,b"`` yields ``["a", "", "b"]``.
    """
    return [skill.strip() for skill in raw.split(",")]


@dataclass
class ExperienceEntry:
    """A job held by the profile owner."""

    title: str
    company: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class EducationEntry:
    """A school attended by the profile owner."""

    school: str
    degree: str
    fieldofstudy: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class Profile:
    """Domain entity for a user's profile document.

    ``version`` is maintained by the storage layer and is used to reject
    writes based on a stale read.
    """

    user_id: UUID
    status: str
    skills: list[str] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    githubusername: str | None = None
    social: dict[str, str] = field(default_factory=dict)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: list[EducationEntry] = field(default_factory=list)
    date: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    def add_experience(self, entry: ExperienceEntry) -> None:
        """Insert an experience entry at the front (most recent first)."""
        self.experience.insert(0, entry)

    def remove_experience(self, entry_id: UUID) -> bool:
        """Drop the experience entry with ``entry_id``; False if none matched."""
        remaining = [entry for entry in self.experience if entry.id != entry_id]
        removed = len(remaining) != len(self.experience)
        self.experience = remaining
        return removed

    def add_education(self, entry: EducationEntry) -> None:
        """Insert an education entry at the front (most recent first)."""
        self.education.insert(0, entry)

    def remove_education(self, entry_id: UUID) -> bool:
        """Drop the education entry with ``entry_id``; False if none matched."""
        remaining = [entry for entry in self.education if entry.id != entry_id]
        removed = len(remaining) != len(self.education)
        self.education = remaining
        return removed


@dataclass(frozen=True, slots=True)
class ProfileWithUser:
    """Read-only value object: a Profile joined with its owner's public data."""

    profile: Profile
    user: UserSummary
