"""User domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class User:
    """Domain entity for an account in the identity store."""

    name: str
    email: str
    password_hash: str
    id: UUID = field(default_factory=uuid4)
    avatar: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Emails are unique case-insensitively."""
        self.email = self.email.strip().lower()

    def summary(self) -> "UserSummary":
        """Public view of the user used when joining onto other aggregates."""
        return UserSummary(id=self.id, name=self.name, avatar=self.avatar)


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Read-only value object: the public identity attributes of a user."""

    id: UUID
    name: str
    avatar: str | None = None
