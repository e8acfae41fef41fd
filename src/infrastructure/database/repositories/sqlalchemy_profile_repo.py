"""SQLAlchemy implementation of Profile repository."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import ConcurrentModificationError
from domain.entities.profile import (
    EducationEntry,
    ExperienceEntry,
    Profile,
    ProfileWithUser,
)
from domain.entities.user import UserSummary
from infrastructure.database.errors import is_unique_violation
from infrastructure.database.models import ProfileModel, UserModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_with_user(self, user_id: UUID) -> ProfileWithUser | None:
        """Get a user's profile joined with the owner's name and avatar."""
        stmt = (
            select(ProfileModel, UserModel)
            .join(UserModel, ProfileModel.user_id == UserModel.id)
            .where(ProfileModel.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        profile_model, user_model = row
        return self._to_view(profile_model, user_model)

    async def get_all_with_users(self) -> list[ProfileWithUser]:
        """Get every profile joined with its owner's name and avatar."""
        stmt = (
            select(ProfileModel, UserModel)
            .join(UserModel, ProfileModel.user_id == UserModel.id)
            .order_by(ProfileModel.date)
        )
        result = await self._session.execute(stmt)
        return [self._to_view(profile_model, user_model) for profile_model, user_model in result]

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = ProfileModel(id=profile.id, user_id=profile.user_id, date=profile.date)
        self._apply(model, profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if not is_unique_violation(e, "user_id"):
                raise
            # Another request created this user's profile first
            raise ConcurrentModificationError("profile", str(profile.user_id)) from e
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Persist the whole profile document, guarded by its version."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")
        if model.version != profile.version:
            raise ConcurrentModificationError("profile", str(profile.id))

        self._apply(model, profile)

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise ConcurrentModificationError("profile", str(profile.id)) from e
        return self._to_entity(model)

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete a user's profile."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _apply(self, model: ProfileModel, entity: Profile) -> None:
        """Copy the mutable document fields of the entity onto the model."""
        model.company = entity.company
        model.website = entity.website
        model.location = entity.location
        model.status = entity.status
        model.bio = entity.bio
        model.githubusername = entity.githubusername
        # JSON columns are replaced wholesale so the change is always detected
        model.skills = list(entity.skills)
        model.social = dict(entity.social)
        model.experience = [_experience_to_dict(e) for e in entity.experience]
        model.education = [_education_to_dict(e) for e in entity.education]

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            status=model.status,
            skills=list(model.skills or []),
            company=model.company,
            website=model.website,
            location=model.location,
            bio=model.bio,
            githubusername=model.githubusername,
            social=dict(model.social or {}),
            experience=[_experience_from_dict(d) for d in model.experience or []],
            education=[_education_from_dict(d) for d in model.education or []],
            date=model.date,
            version=model.version,
        )

    def _to_view(self, profile_model: ProfileModel, user_model: UserModel) -> ProfileWithUser:
        return ProfileWithUser(
            profile=self._to_entity(profile_model),
            user=UserSummary(
                id=user_model.id,
                name=user_model.name,
                avatar=user_model.avatar,
            ),
        )


def _optional_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _experience_to_dict(entry: ExperienceEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "title": entry.title,
        "company": entry.company,
        "location": entry.location,
        "from": entry.from_date.isoformat(),
        "to": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def _experience_from_dict(data: dict[str, Any]) -> ExperienceEntry:
    return ExperienceEntry(
        id=UUID(data["id"]),
        title=data["title"],
        company=data["company"],
        location=data.get("location"),
        from_date=date.fromisoformat(data["from"]),
        to_date=_optional_date(data.get("to")),
        current=bool(data.get("current", False)),
        description=data.get("description"),
    )


def _education_to_dict(entry: EducationEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "school": entry.school,
        "degree": entry.degree,
        "fieldofstudy": entry.fieldofstudy,
        "from": entry.from_date.isoformat(),
        "to": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def _education_from_dict(data: dict[str, Any]) -> EducationEntry:
    return EducationEntry(
        id=UUID(data["id"]),
        school=data["school"],
        degree=data["degree"],
        fieldofstudy=data["fieldofstudy"],
        from_date=date.fromisoformat(data["from"]),
        to_date=_optional_date(data.get("to")),
        current=bool(data.get("current", False)),
        description=data.get("description"),
    )
