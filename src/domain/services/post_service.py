"""Post service layer with business logic."""

from typing import Callable, List
from uuid import UUID

import structlog

from core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    PostAlreadyLikedError,
    PostNotFoundError,
    PostNotLikedError,
    UserNotFoundError,
    ValidationError,
)
from core.identifiers import parse_uuid
from domain.entities.post import Comment, Like, Post
from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


def _require_text(text: str) -> None:
    if not text or not text.strip():
        raise ValidationError("Text is required", field="text")


class PostService:
    """Service layer for the post aggregate: feed, likes and comments."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create(self, user_id: UUID, text: str) -> Post:
        """Create a post, snapshotting the author's current name and avatar."""
        _require_text(text)

        async with self._uow_factory() as uow:
            author = await self._require_user(uow, user_id)
            post = Post(
                user_id=user_id,
                text=text,
                name=author.name,
                avatar=author.avatar,
            )
            created = await uow.posts.create(post)
            await uow.commit()

        logger.info("post_created", post_id=str(created.id), user_id=str(user_id))
        return created

    async def get_all(self) -> List[Post]:
        """Get all posts, newest first. Unpaginated."""
        async with self._uow_factory() as uow:
            return await uow.posts.get_all()  # type: ignore[no-any-return]

    async def get_by_id(self, raw_post_id: str) -> Post:
        """Get a post; a malformed id is reported as not found."""
        async with self._uow_factory() as uow:
            return await self._require_post(uow, raw_post_id)

    async def delete(self, raw_post_id: str, user_id: UUID) -> None:
        """Delete a post. Only its author may do so."""
        async with self._uow_factory() as uow:
            post = await self._require_post(uow, raw_post_id)
            if post.user_id != user_id:
                raise AuthorizationError()

            await uow.posts.delete(post.id)
            await uow.commit()

        logger.info("post_deleted", post_id=str(post.id), user_id=str(user_id))

    async def like(self, raw_post_id: str, user_id: UUID) -> List[Like]:
        """Add the user's like; fails if they already like the post."""
        async with self._uow_factory() as uow:
            post = await self._require_post(uow, raw_post_id)
            if post.is_liked_by(user_id):
                raise PostAlreadyLikedError(raw_post_id)

            post.like(user_id)
            saved = await uow.posts.update(post)
            await uow.commit()
            return saved.likes

    async def unlike(self, raw_post_id: str, user_id: UUID) -> List[Like]:
        """Remove the user's like; fails if they have not liked the post."""
        async with self._uow_factory() as uow:
            post = await self._require_post(uow, raw_post_id)
            if not post.is_liked_by(user_id):
                raise PostNotLikedError(raw_post_id)

            post.unlike(user_id)
            saved = await uow.posts.update(post)
            await uow.commit()
            return saved.likes

    async def add_comment(self, raw_post_id: str, user_id: UUID, text: str) -> List[Comment]:
        """Prepend a comment, snapshotting the commenter's name and avatar."""
        _require_text(text)

        async with self._uow_factory() as uow:
            author = await self._require_user(uow, user_id)
            post = await self._require_post(uow, raw_post_id)

            post.add_comment(
                Comment(
                    user_id=user_id,
                    text=text,
                    name=author.name,
                    avatar=author.avatar,
                )
            )
            saved = await uow.posts.update(post)
            await uow.commit()
            return saved.comments

    async def delete_comment(
        self, raw_post_id: str, raw_comment_id: str, user_id: UUID
    ) -> List[Comment]:
        """Delete a comment. Only the comment's author may do so."""
        async with self._uow_factory() as uow:
            post = await self._require_post(uow, raw_post_id)

            comment_id = parse_uuid(raw_comment_id)
            comment = post.get_comment(comment_id) if comment_id else None
            if comment is None:
                raise CommentNotFoundError(raw_comment_id)
            if comment.user_id != user_id:
                raise AuthorizationError()

            post.remove_comment(comment.id)
            saved = await uow.posts.update(post)
            await uow.commit()
            return saved.comments

    async def _require_post(self, uow: IUnitOfWork, raw_post_id: str) -> Post:
        post_id = parse_uuid(raw_post_id)
        post = await uow.posts.get(post_id) if post_id else None
        if not post:
            raise PostNotFoundError(str(raw_post_id))
        return post

    async def _require_user(self, uow: IUnitOfWork, user_id: UUID) -> User:
        user = await uow.users.get(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user
