"""Unit tests for PostService."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    PostAlreadyLikedError,
    PostNotFoundError,
    PostNotLikedError,
    UserNotFoundError,
    ValidationError,
)
from domain.entities.post import Comment, Like, Post
from domain.entities.user import User
from domain.services.post_service import PostService
from tests.unit.conftest import FakeUnitOfWork, echo


@pytest.fixture
def service(uow: FakeUnitOfWork) -> PostService:
    return PostService(lambda: uow)


def _author(user_id: UUID, name: str = "Jane Doe") -> User:
    return User(
        id=user_id,
        name=name,
        email=f"{name.split()[0].lower()}@example.com",
        password_hash="x",
        avatar=f"https://avatars.test/{name.split()[0].lower()}",
    )


def _post(author_id: UUID, **kwargs) -> Post:
    return Post(user_id=author_id, text="hello", name="Jane Doe", **kwargs)


# --- create ---


class TestCreate:
    @pytest.mark.asyncio
    async def test_snapshots_author_name_and_avatar(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.users.get.return_value = _author(user_id)
        uow.posts.create.side_effect = echo

        result = await service.create(user_id, "hello world")

        assert result.user_id == user_id
        assert result.text == "hello world"
        assert result.name == "Jane Doe"
        assert result.avatar == "https://avatars.test/jane"
        assert result.likes == []
        assert result.comments == []
        assert uow.committed

    @pytest.mark.asyncio
    async def test_requires_text(self, service: PostService, uow: FakeUnitOfWork, user_id: UUID):
        with pytest.raises(ValidationError) as exc_info:
            await service.create(user_id, "   ")

        assert exc_info.value.message == "Text is required"
        uow.posts.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_raises_when_author_missing(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.users.get.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.create(user_id, "hello")


# --- get / delete ---


class TestGetById:
    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, service: PostService, uow: FakeUnitOfWork):
        with pytest.raises(PostNotFoundError) as exc_info:
            await service.get_by_id("12345")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Post not found"
        uow.posts.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_post(self, service: PostService, uow: FakeUnitOfWork, user_id: UUID):
        post = _post(user_id)
        uow.posts.get.return_value = post

        result = await service.get_by_id(str(post.id))

        assert result is post
        uow.posts.get.assert_awaited_once_with(post.id)


class TestDelete:
    @pytest.mark.asyncio
    async def test_owner_can_delete(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID
    ):
        post = _post(user_id)
        uow.posts.get.return_value = post

        await service.delete(str(post.id), user_id)

        uow.posts.delete.assert_awaited_once_with(post.id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_non_owner_is_rejected(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        post = _post(user_id)
        uow.posts.get.return_value = post

        with pytest.raises(AuthorizationError) as exc_info:
            await service.delete(str(post.id), other_user_id)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "User not authorized"
        uow.posts.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_post_is_not_found(self, service: PostService, uow: FakeUnitOfWork):
        uow.posts.get.return_value = None

        with pytest.raises(PostNotFoundError):
            await service.delete(str(uuid4()), uuid4())


# --- likes ---


class TestLikes:
    @pytest.mark.asyncio
    async def test_like_prepends(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        post = _post(user_id, likes=[Like(user_id=user_id)])
        uow.posts.get.return_value = post
        uow.posts.update.side_effect = echo

        likes = await service.like(str(post.id), other_user_id)

        assert [like.user_id for like in likes] == [other_user_id, user_id]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_like_twice_conflicts(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID
    ):
        post = _post(user_id, likes=[Like(user_id=user_id)])
        uow.posts.get.return_value = post

        with pytest.raises(PostAlreadyLikedError) as exc_info:
            await service.like(str(post.id), user_id)

        assert exc_info.value.message == "Post already liked"
        uow.posts.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_unlike_removes_like(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        post = _post(user_id, likes=[Like(user_id=other_user_id), Like(user_id=user_id)])
        uow.posts.get.return_value = post
        uow.posts.update.side_effect = echo

        likes = await service.unlike(str(post.id), other_user_id)

        assert likes == [Like(user_id=user_id)]

    @pytest.mark.asyncio
    async def test_unlike_without_like_conflicts(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.posts.get.return_value = _post(user_id)

        with pytest.raises(PostNotLikedError) as exc_info:
            await service.unlike(str(uuid4()), user_id)

        assert exc_info.value.message == "Post has not yet been liked"


# --- comments ---


class TestComments:
    @pytest.mark.asyncio
    async def test_add_comment_prepends_with_commenter_snapshot(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        earlier = Comment(user_id=user_id, text="first", name="Jane Doe")
        post = _post(user_id, comments=[earlier])
        uow.posts.get.return_value = post
        uow.users.get.return_value = _author(other_user_id, name="Bob Smith")
        uow.posts.update.side_effect = echo

        comments = await service.add_comment(str(post.id), other_user_id, "second")

        assert [c.text for c in comments] == ["second", "first"]
        assert comments[0].name == "Bob Smith"
        assert comments[0].avatar == "https://avatars.test/bob"
        assert comments[0].user_id == other_user_id

    @pytest.mark.asyncio
    async def test_add_comment_requires_text(self, service: PostService, user_id: UUID):
        with pytest.raises(ValidationError):
            await service.add_comment(str(uuid4()), user_id, "")

    @pytest.mark.asyncio
    async def test_author_deletes_comment(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        comment = Comment(user_id=other_user_id, text="nice", name="Bob Smith")
        post = _post(user_id, comments=[comment])
        uow.posts.get.return_value = post
        uow.posts.update.side_effect = echo

        comments = await service.delete_comment(str(post.id), str(comment.id), other_user_id)

        assert comments == []
        assert uow.committed

    @pytest.mark.asyncio
    async def test_post_owner_cannot_delete_others_comment(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, other_user_id: UUID
    ):
        comment = Comment(user_id=other_user_id, text="nice", name="Bob Smith")
        post = _post(user_id, comments=[comment])
        uow.posts.get.return_value = post

        with pytest.raises(AuthorizationError):
            await service.delete_comment(str(post.id), str(comment.id), user_id)

        uow.posts.update.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_comment_id", ["bogus", str(uuid4())])
    async def test_unknown_comment_is_not_found(
        self, service: PostService, uow: FakeUnitOfWork, user_id: UUID, raw_comment_id: str
    ):
        post = _post(user_id)
        uow.posts.get.return_value = post

        with pytest.raises(CommentNotFoundError) as exc_info:
            await service.delete_comment(str(post.id), raw_comment_id, user_id)

        assert exc_info.value.message == "Comment does not exist"
