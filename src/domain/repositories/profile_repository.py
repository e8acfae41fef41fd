"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile, ProfileWithUser


class IProfileRepository(Protocol):
    """Repository interface for Profile aggregates."""

    async def get_by_user(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        ...

    async def get_with_user(self, user_id: UUID) -> ProfileWithUser | None:
        """Get a user's profile joined with the owner's name and avatar."""
        ...

    async def get_all_with_users(self) -> list[ProfileWithUser]:
        """Get every profile joined with its owner's name and avatar."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Persist the whole profile document.

        Raises ConcurrentModificationError when the stored version no longer
        matches ``profile.version``.
        """
        ...

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete a user's profile and return success status."""
        ...
