"""Integration tests for the SQLAlchemy repositories and Unit of Work."""

from collections.abc import Awaitable, Callable
from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.exceptions import ConcurrentModificationError, UserAlreadyExistsError
from domain.entities.post import Comment, Post
from domain.entities.profile import ExperienceEntry, Profile
from domain.entities.user import User
from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import TokenUser
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UserFactory = Callable[..., Awaitable[tuple[TokenUser, dict[str, str]]]]


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    return lambda: SQLAlchemyUnitOfWork(session_factory)


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_duplicate_email_insert_is_already_exists(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        await create_user(email="jane@example.com")

        # Lost the race: the existence check passed before the other insert
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            async with uow_factory() as uow:
                await uow.users.create(
                    User(name="Jane Two", email="jane@example.com", password_hash="x")
                )

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "User already exists"

        async with uow_factory() as uow:
            stored = await uow.users.get_by_email("jane@example.com")
        assert stored is not None
        assert stored.name == "Test User"


class TestProfileRepository:
    @pytest.mark.asyncio
    async def test_round_trips_embedded_entries(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        user, _ = await create_user()
        profile = Profile(
            user_id=user.id,
            status="Developer",
            skills=["python", ""],
            social={"twitter": "https://twitter.com/jane"},
            experience=[
                ExperienceEntry(
                    title="E1", company="Acme", from_date=date(2018, 1, 1), current=True
                )
            ],
        )

        async with uow_factory() as uow:
            await uow.profiles.create(profile)
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.profiles.get_by_user(user.id)

        assert stored is not None
        assert stored.skills == ["python", ""]
        assert stored.social == {"twitter": "https://twitter.com/jane"}
        assert stored.experience[0].id == profile.experience[0].id
        assert stored.experience[0].from_date == date(2018, 1, 1)
        assert stored.experience[0].current is True

    @pytest.mark.asyncio
    async def test_second_profile_for_user_conflicts(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        user, _ = await create_user()
        async with uow_factory() as uow:
            await uow.profiles.create(Profile(user_id=user.id, status="Dev"))
            await uow.commit()

        with pytest.raises(ConcurrentModificationError):
            async with uow_factory() as uow:
                await uow.profiles.create(Profile(user_id=user.id, status="Dev"))

    @pytest.mark.asyncio
    async def test_missing_owner_is_not_reported_as_conflict(
        self, engine: AsyncEngine, uow_factory: Callable[[], SQLAlchemyUnitOfWork]
    ):
        async with engine.connect() as conn:
            await conn.exec_driver_sql("PRAGMA foreign_keys=ON")

        with pytest.raises(IntegrityError):
            async with uow_factory() as uow:
                await uow.profiles.create(Profile(user_id=uuid4(), status="Dev"))

    @pytest.mark.asyncio
    async def test_stale_write_is_rejected(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        user, _ = await create_user()
        async with uow_factory() as uow:
            await uow.profiles.create(Profile(user_id=user.id, status="Dev"))
            await uow.commit()

        # Two requests read the same version
        async with uow_factory() as uow:
            first_read = await uow.profiles.get_by_user(user.id)
        async with uow_factory() as uow:
            second_read = await uow.profiles.get_by_user(user.id)
        assert first_read is not None and second_read is not None

        first_read.add_experience(
            ExperienceEntry(title="E1", company="Acme", from_date=date(2018, 1, 1))
        )
        async with uow_factory() as uow:
            saved = await uow.profiles.update(first_read)
            await uow.commit()
        assert saved.version == first_read.version + 1

        second_read.add_experience(
            ExperienceEntry(title="E2", company="Globex", from_date=date(2020, 1, 1))
        )
        with pytest.raises(ConcurrentModificationError) as exc_info:
            async with uow_factory() as uow:
                await uow.profiles.update(second_read)

        assert exc_info.value.status_code == 409

        async with uow_factory() as uow:
            stored = await uow.profiles.get_by_user(user.id)
        assert stored is not None
        assert [e.title for e in stored.experience] == ["E1"]


class TestPostRepository:
    @pytest.mark.asyncio
    async def test_stale_like_is_rejected(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        author, _ = await create_user()
        post = Post(user_id=author.id, text="hello", name="Jane Doe")
        async with uow_factory() as uow:
            await uow.posts.create(post)
            await uow.commit()

        async with uow_factory() as uow:
            first_read = await uow.posts.get(post.id)
        async with uow_factory() as uow:
            second_read = await uow.posts.get(post.id)
        assert first_read is not None and second_read is not None

        first_read.like(uuid4())
        async with uow_factory() as uow:
            await uow.posts.update(first_read)
            await uow.commit()

        second_read.like(uuid4())
        with pytest.raises(ConcurrentModificationError):
            async with uow_factory() as uow:
                await uow.posts.update(second_read)

        async with uow_factory() as uow:
            stored = await uow.posts.get(post.id)
        assert stored is not None
        assert len(stored.likes) == 1

    @pytest.mark.asyncio
    async def test_comments_round_trip(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        author, _ = await create_user()
        comment = Comment(user_id=author.id, text="first", name="Jane Doe", avatar="a.png")
        post = Post(user_id=author.id, text="hello", name="Jane Doe", comments=[comment])

        async with uow_factory() as uow:
            await uow.posts.create(post)
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.posts.get(post.id)

        assert stored is not None
        assert stored.comments == [comment]


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_removes_everything_the_user_owns(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork], create_user: UserFactory
    ):
        user, _ = await create_user()
        other, _ = await create_user(name="Bob Ray")
        async with uow_factory() as uow:
            await uow.profiles.create(Profile(user_id=user.id, status="Dev"))
            await uow.posts.create(Post(user_id=user.id, text="mine", name="Jane"))
            await uow.posts.create(Post(user_id=user.id, text="also mine", name="Jane"))
            await uow.posts.create(Post(user_id=other.id, text="theirs", name="Bob"))
            await uow.commit()

        await ProfileService(uow_factory, github_client=None).delete_account(user.id)

        async with uow_factory() as uow:
            assert await uow.users.get(user.id) is None
            assert await uow.profiles.get_by_user(user.id) is None
            assert [p.text for p in await uow.posts.get_all()] == ["theirs"]
            assert await uow.users.get(other.id) is not None
