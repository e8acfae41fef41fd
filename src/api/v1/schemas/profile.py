"""Pydantic schemas for Profile API."""

from datetime import date as Date
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpsert(BaseModel):
    """Schema for creating or updating a profile.

    ``skills`` is a comma-separated string, e.g. ``"python, sql, docker"``.
    """

    status: str = Field(..., min_length=1, max_length=255)
    skills: str = Field(..., min_length=1)
    company: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    bio: str | None = None
    githubusername: str | None = Field(None, max_length=100)
    youtube: str | None = Field(None, max_length=500)
    twitter: str | None = Field(None, max_length=500)
    instagram: str | None = Field(None, max_length=500)
    linkedin: str | None = Field(None, max_length=500)
    facebook: str | None = Field(None, max_length=500)


class ExperienceCreate(BaseModel):
    """Schema for adding an experience entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    from_date: Date = Field(..., alias="from")
    to_date: Date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class EducationCreate(BaseModel):
    """Schema for adding an education entry."""

    model_config = ConfigDict(populate_by_name=True)

    school: str = Field(..., min_length=1, max_length=255)
    degree: str = Field(..., min_length=1, max_length=255)
    fieldofstudy: str = Field(..., min_length=1, max_length=255)
    from_date: Date = Field(..., alias="from")
    to_date: Date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class ExperienceResponse(BaseModel):
    """Schema for an experience entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    company: str
    location: str | None = None
    from_date: Date = Field(..., alias="from")
    to_date: Date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class EducationResponse(BaseModel):
    """Schema for an education entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    school: str
    degree: str
    fieldofstudy: str
    from_date: Date = Field(..., alias="from")
    to_date: Date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class SocialLinks(BaseModel):
    """Normalized social network URLs."""

    youtube: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None
    facebook: str | None = None


class ProfileOwner(BaseModel):
    """Public identity of a profile owner."""

    id: UUID
    name: str
    avatar: str | None = None


class ProfileBaseResponse(BaseModel):
    """Fields shared by every profile representation."""

    id: UUID
    status: str
    skills: list[str]
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    githubusername: str | None = None
    social: SocialLinks
    experience: list[ExperienceResponse]
    education: list[EducationResponse]
    date: datetime


class ProfileResponse(ProfileBaseResponse):
    """Profile as stored; ``user`` is the owner's id."""

    user: UUID


class ProfileWithUserResponse(ProfileBaseResponse):
    """Profile joined with the owner's name and avatar."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "user": {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "name": "Jane Doe",
                    "avatar": "https://www.gravatar.com/avatar/abc?s=200&r=pg&d=mm",
                },
                "status": "Developer",
                "skills": ["python", "go"],
                "social": {"twitter": "https://twitter.com/jane"},
                "experience": [],
                "education": [],
                "date": "2026-01-28T10:00:00",
            }
        },
    )

    user: ProfileOwner
