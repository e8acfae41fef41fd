"""Identity store and credential verification."""

import hashlib
from typing import Callable
from urllib.parse import urlencode
from uuid import UUID

import structlog

from core.exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.password import hash_password, verify_password
from infrastructure.auth.provider import IAuthProvider, TokenUser

logger = structlog.get_logger()

GRAVATAR_URL = "https://www.gravatar.com/avatar/"


def gravatar_url(email: str) -> str:
    """Gravatar image for an email: 200px, PG rated, mystery-man fallback."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"{GRAVATAR_URL}{digest}?{urlencode({'s': '200', 'r': 'pg', 'd': 'mm'})}"


class AuthService:
    """Service layer for registration, login and current-user lookup."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        auth_provider: IAuthProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._auth_provider = auth_provider

    async def register(self, name: str, email: str, password: str) -> str:
        """Create an account and return a token for it."""
        async with self._uow_factory() as uow:
            existing = await uow.users.get_by_email(email)
            if existing:
                raise UserAlreadyExistsError(email)

            user = User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                avatar=gravatar_url(email),
            )
            created = await uow.users.create(user)
            await uow.commit()

        logger.info("user_registered", user_id=str(created.id))
        return self._issue_token(created)

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and return a signed token.

        The same error is raised for an unknown email and a wrong password.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed")
            raise InvalidCredentialsError()

        return self._issue_token(user)

    async def get_current_user(self, user_id: UUID) -> User:
        """Get the account behind an authenticated request."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(str(user_id))
            return user

    def _issue_token(self, user: User) -> str:
        return self._auth_provider.create_token(
            TokenUser(id=user.id, email=user.email, name=user.name)
        )
