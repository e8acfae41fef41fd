"""Profile API routes."""

from typing import Any

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse, MessageResponse
from api.v1.schemas.profile import (
    EducationCreate,
    EducationResponse,
    ExperienceCreate,
    ExperienceResponse,
    ProfileOwner,
    ProfileResponse,
    ProfileUpsert,
    ProfileWithUserResponse,
    SocialLinks,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import SOCIAL_NETWORKS, Profile, ProfileWithUser
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


def _profile_fields(profile: Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "status": profile.status,
        "skills": profile.skills,
        "company": profile.company,
        "website": profile.website,
        "location": profile.location,
        "bio": profile.bio,
        "githubusername": profile.githubusername,
        "social": SocialLinks(**profile.social),
        "experience": [
            ExperienceResponse(
                id=e.id,
                title=e.title,
                company=e.company,
                location=e.location,
                from_date=e.from_date,
                to_date=e.to_date,
                current=e.current,
                description=e.description,
            )
            for e in profile.experience
        ],
        "education": [
            EducationResponse(
                id=e.id,
                school=e.school,
                degree=e.degree,
                fieldofstudy=e.fieldofstudy,
                from_date=e.from_date,
                to_date=e.to_date,
                current=e.current,
                description=e.description,
            )
            for e in profile.education
        ],
        "date": profile.date,
    }


def _build_profile_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(user=profile.user_id, **_profile_fields(profile))


def _build_profile_with_user_response(view: ProfileWithUser) -> ProfileWithUserResponse:
    return ProfileWithUserResponse(
        user=ProfileOwner(id=view.user.id, name=view.user.name, avatar=view.user.avatar),
        **_profile_fields(view.profile),
    )


@router.get(
    "/me",
    response_model=ProfileWithUserResponse,
    summary="Get own profile",
    responses={
        404: {"model": ErrorResponse, "description": "There is no profile for this user"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_own_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileWithUserResponse:
    """Get the authenticated user's profile with their name and avatar."""
    view = await service.get_own(user.id)
    return _build_profile_with_user_response(view)


@router.post(
    "",
    response_model=ProfileResponse,
    summary="Create or update own profile",
    responses={
        400: {"model": ErrorResponse, "description": "Status, skills or a URL is invalid"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_profile(
    request: Request,
    body: ProfileUpsert,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """
    Create the profile on first call, update it afterwards.

    Optional fields are only changed when supplied. Social links are
    rebuilt from this request alone, so omitted networks are cleared.
    """
    profile = await service.create_or_update(
        user_id=user.id,
        status=body.status,
        skills=body.skills,
        company=body.company,
        website=body.website,
        location=body.location,
        bio=body.bio,
        githubusername=body.githubusername,
        social={network: getattr(body, network) for network in SOCIAL_NETWORKS},
    )
    return _build_profile_response(profile)


@router.get(
    "",
    response_model=list[ProfileWithUserResponse],
    summary="List all profiles",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> list[ProfileWithUserResponse]:
    """Get every profile. Public."""
    views = await service.get_all()
    return [_build_profile_with_user_response(view) for view in views]


@router.get(
    "/user/{user_id}",
    response_model=ProfileWithUserResponse,
    summary="Get profile by user ID",
    responses={
        404: {"model": ErrorResponse, "description": "Profile not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile_by_user(
    request: Request,
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileWithUserResponse:
    """Get a user's profile. Public. Malformed IDs are reported as not found."""
    view = await service.get_by_user_id(user_id)
    return _build_profile_with_user_response(view)


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete account",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_account(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Delete the user's posts, profile and account. Irreversible."""
    await service.delete_account(user.id)
    return MessageResponse(msg="User deleted")


@router.put(
    "/experience",
    response_model=ProfileResponse,
    summary="Add profile experience",
    responses={
        404: {"model": ErrorResponse, "description": "There is no profile for this user"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_experience(
    request: Request,
    body: ExperienceCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Prepend an experience entry (most recent first)."""
    profile = await service.add_experience(
        user_id=user.id,
        title=body.title,
        company=body.company,
        from_date=body.from_date,
        location=body.location,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    return _build_profile_response(profile)


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileResponse,
    summary="Delete profile experience",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_experience(
    request: Request,
    exp_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Remove an experience entry. Unknown IDs leave the profile unchanged."""
    profile = await service.remove_experience(user.id, exp_id)
    return _build_profile_response(profile)


@router.put(
    "/education",
    response_model=ProfileResponse,
    summary="Add profile education",
    responses={
        404: {"model": ErrorResponse, "description": "There is no profile for this user"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_education(
    request: Request,
    body: EducationCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Prepend an education entry (most recent first)."""
    profile = await service.add_education(
        user_id=user.id,
        school=body.school,
        degree=body.degree,
        fieldofstudy=body.fieldofstudy,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    return _build_profile_response(profile)


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileResponse,
    summary="Delete profile education",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_education(
    request: Request,
    edu_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Remove an education entry. Unknown IDs leave the profile unchanged."""
    profile = await service.remove_education(user.id, edu_id)
    return _build_profile_response(profile)


@router.get(
    "/github/{username}",
    summary="Get a user's GitHub repositories",
    responses={
        404: {"model": ErrorResponse, "description": "No Github profile found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_github_repos(
    request: Request,
    username: str,
    service: ProfileService = Depends(get_profile_service),
) -> list[dict[str, Any]]:
    """Relay the user's five oldest public repositories from GitHub. Public."""
    return await service.get_github_repos(username)
