"""Profile service layer with business logic."""

from datetime import date
from typing import Any, Callable, List, Mapping, Optional
from uuid import UUID

import structlog

from core.exceptions import (
    GithubProfileNotFoundError,
    ProfileNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from core.identifiers import parse_uuid
from domain.entities.profile import (
    SOCIAL_NETWORKS,
    EducationEntry,
    ExperienceEntry,
    Profile,
    ProfileWithUser,
    parse_skills,
)
from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork
from domain.urls import normalize_url
from infrastructure.github.client import GithubClient

logger = structlog.get_logger()

NO_PROFILE_MESSAGE = "There is no profile for this user"


def _require(value: Optional[str], field: str, message: str) -> None:
    if not value or not value.strip():
        raise ValidationError(message, field=field)


class ProfileService:
    """Service layer for the profile aggregate."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        github_client: Optional[GithubClient] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._github = github_client or GithubClient()

    async def get_own(self, user_id: UUID) -> ProfileWithUser:
        """Get the authenticated user's profile with their name and avatar."""
        async with self._uow_factory() as uow:
            view = await uow.profiles.get_with_user(user_id)
            if not view:
                raise ProfileNotFoundError(NO_PROFILE_MESSAGE, user_id=str(user_id))
            return view

    async def get_all(self) -> List[ProfileWithUser]:
        """Get every profile. Unpaginated."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_all_with_users()  # type: ignore[no-any-return]

    async def get_by_user_id(self, raw_user_id: str) -> ProfileWithUser:
        """Get a profile by owner id; a malformed id is reported as not found."""
        user_id = parse_uuid(raw_user_id)
        if user_id is None:
            raise ProfileNotFoundError(user_id=raw_user_id)

        async with self._uow_factory() as uow:
            view = await uow.profiles.get_with_user(user_id)
            if not view:
                raise ProfileNotFoundError(user_id=raw_user_id)
            return view

    async def create_or_update(
        self,
        user_id: UUID,
        status: str,
        skills: str,
        company: Optional[str] = None,
        website: Optional[str] = None,
        location: Optional[str] = None,
        bio: Optional[str] = None,
        githubusername: Optional[str] = None,
        social: Optional[Mapping[str, Optional[str]]] = None,
    ) -> Profile:
        """Create the user's profile, or update it in place.

        Optional fields only overwrite stored values when supplied. The
        social links are always rebuilt from this call's input alone.
        """
        _require(status, "status", "Status is required")
        _require(skills, "skills", "Skills is required")

        optional: dict[str, Any] = {
            "company": company,
            "website": (
                normalize_url(website, field="website")
                if website and website.strip()
                else None
            ),
            "location": location,
            "bio": bio,
            "githubusername": githubusername,
        }
        social_links = {
            network: normalize_url(url, field=network)
            for network, url in (social or {}).items()
            if network in SOCIAL_NETWORKS and url and url.strip()
        }

        async with self._uow_factory() as uow:
            await self._require_user(uow, user_id)
            profile = await uow.profiles.get_by_user(user_id)
            created = profile is None
            if profile is None:
                profile = Profile(user_id=user_id, status=status)

            profile.status = status
            profile.skills = parse_skills(skills)
            for attr, value in optional.items():
                if value:
                    setattr(profile, attr, value)
            profile.social = social_links

            if created:
                saved = await uow.profiles.create(profile)
            else:
                saved = await uow.profiles.update(profile)
            await uow.commit()

        logger.info(
            "profile_created" if created else "profile_updated",
            user_id=str(user_id),
            profile_id=str(saved.id),
        )
        return saved

    async def delete_account(self, user_id: UUID) -> None:
        """Remove the user's posts, profile and account in one transaction."""
        async with self._uow_factory() as uow:
            posts_removed = await uow.posts.delete_all_for_user(user_id)
            await uow.profiles.delete_by_user(user_id)
            await uow.users.delete(user_id)
            await uow.commit()

        logger.info(
            "account_deleted",
            user_id=str(user_id),
            posts_removed=posts_removed,
        )

    async def add_experience(
        self,
        user_id: UUID,
        title: str,
        company: str,
        from_date: date,
        location: Optional[str] = None,
        to_date: Optional[date] = None,
        current: bool = False,
        description: Optional[str] = None,
    ) -> Profile:
        """Prepend an experience entry to the user's profile."""
        _require(title, "title", "Title is required")
        _require(company, "company", "Company is required")

        entry = ExperienceEntry(
            title=title,
            company=company,
            from_date=from_date,
            location=location,
            to_date=to_date,
            current=current,
            description=description,
        )
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            profile.add_experience(entry)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def remove_experience(self, user_id: UUID, raw_entry_id: str) -> Profile:
        """Remove an experience entry by id. Unknown ids leave the profile as is."""
        entry_id = parse_uuid(raw_entry_id)
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            if entry_id is None or not profile.remove_experience(entry_id):
                return profile
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def add_education(
        self,
        user_id: UUID,
        school: str,
        degree: str,
        fieldofstudy: str,
        from_date: date,
        to_date: Optional[date] = None,
        current: bool = False,
        description: Optional[str] = None,
    ) -> Profile:
        """Prepend an education entry to the user's profile."""
        _require(school, "school", "School is required")
        _require(degree, "degree", "Degree is required")
        _require(fieldofstudy, "fieldofstudy", "Field of study is required")

        entry = EducationEntry(
            school=school,
            degree=degree,
            fieldofstudy=fieldofstudy,
            from_date=from_date,
            to_date=to_date,
            current=current,
            description=description,
        )
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            profile.add_education(entry)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def remove_education(self, user_id: UUID, raw_entry_id: str) -> Profile:
        """Remove an education entry by id. Unknown ids leave the profile as is."""
        entry_id = parse_uuid(raw_entry_id)
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            if entry_id is None or not profile.remove_education(entry_id):
                return profile
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def get_github_repos(self, username: str) -> list[dict[str, Any]]:
        """Relay the user's five oldest public GitHub repositories.

        An empty listing and a failed lookup are both reported as not found.
        """
        repos = await self._github.list_repos(username)
        if not repos:
            raise GithubProfileNotFoundError(username)
        return repos

    async def _require_user(self, uow: IUnitOfWork, user_id: UUID) -> User:
        user = await uow.users.get(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def _require_profile(self, uow: IUnitOfWork, user_id: UUID) -> Profile:
        profile = await uow.profiles.get_by_user(user_id)
        if not profile:
            raise ProfileNotFoundError(NO_PROFILE_MESSAGE, user_id=str(user_id))
        return profile
