"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.auth_service import gravatar_url
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password import hash_password
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, UserModel
from infrastructure.github.client import GithubClient


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_PASSWORD = "secret123"

# Canned GitHub API responses, keyed by username
GITHUB_REPOS: dict[str, list[dict[str, Any]]] = {
    "octocat": [
        {"id": 1, "name": "hello-world", "html_url": "https://github.com/octocat/hello-world"},
        {"id": 2, "name": "spoon-knife", "html_url": "https://github.com/octocat/spoon-knife"},
    ],
    "empty-account": [],
}

AuthHeaders = dict[str, str]
UserFactory = Callable[..., Awaitable[tuple[TokenUser, AuthHeaders]]]


def _github_handler(request: httpx.Request) -> httpx.Response:
    # Path is /users/{username}/repos
    username = request.url.path.split("/")[2]
    if username in GITHUB_REPOS:
        return httpx.Response(200, json=GITHUB_REPOS[username])
    return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def github_client() -> GithubClient:
    """GitHub client answering from GITHUB_REPOS instead of the network."""
    return GithubClient(
        base_url="https://api.github.test",
        token="",
        timeout=1.0,
        transport=httpx.MockTransport(_github_handler),
    )


@pytest.fixture
def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> UserFactory:
    """
    Factory inserting an account and returning it with bearer headers.

    Accounts are written straight to the database so tests that need
    several users stay fast; registration itself is covered by the auth API tests.
    """

    async def _create(
        name: str = "Test User",
        email: str | None = None,
    ) -> tuple[TokenUser, AuthHeaders]:
        email = email or f"user-{uuid4().hex[:10]}@example.com"
        model = UserModel(
            id=uuid4(),
            name=name,
            email=email,
            password_hash=hash_password(TEST_PASSWORD, rounds=4),
            avatar=gravatar_url(email),
        )
        async with session_factory() as session:
            session.add(model)
            await session.commit()

        token_user = TokenUser(id=model.id, email=email, name=name)
        token = auth_provider.create_token(token_user)
        return token_user, {"Authorization": f"Bearer {token}"}

    return _create


@pytest.fixture
async def app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    github_client: GithubClient,
) -> AsyncGenerator[FastAPI, None]:
    """
    Create the application wired to the test database.

    - Services use a Unit of Work bound to the in-memory SQLite engine
    - Tokens are signed and checked with the test auth provider
    - GitHub lookups are answered by a mock transport
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_auth_service, get_post_service, get_profile_service
    from domain.services.auth_service import AuthService
    from domain.services.post_service import PostService
    from domain.services.profile_service import ProfileService
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    # Create a UoW factory that uses test session
    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    def override_get_auth_service() -> AuthService:
        return AuthService(test_uow_factory, auth_provider=auth_provider)

    def override_get_profile_service() -> ProfileService:
        return ProfileService(test_uow_factory, github_client=github_client)

    def override_get_post_service() -> PostService:
        return PostService(test_uow_factory)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_auth_service] = override_get_auth_service
    app.dependency_overrides[get_profile_service] = override_get_profile_service
    app.dependency_overrides[get_post_service] = override_get_post_service
    app.dependency_overrides[get_async_session] = override_get_async_session

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def test_user(create_user: UserFactory) -> tuple[TokenUser, AuthHeaders]:
    """The account behind ``authenticated_client``."""
    return await create_user(name="Jane Doe", email="jane@example.com")


@pytest.fixture
async def authenticated_client(
    app: FastAPI,
    test_user: tuple[TokenUser, AuthHeaders],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client that sends the test user's bearer token."""
    _, headers = test_user
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers
    ) as c:
        yield c
