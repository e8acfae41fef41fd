"""Post aggregate: a feed entry with its likes and comments."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class Like:
    """A single user's like on a post."""

    user_id: UUID


@dataclass
class Comment:
    """A comment owned by a post.

    ``name`` and ``avatar`` are copied from the commenter when the comment
    is written and are never refreshed afterwards.
    """

    user_id: UUID
    text: str
    name: str
    id: UUID = field(default_factory=uuid4)
    avatar: str | None = None
    date: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Post:
    """Domain entity for a Post.

    ``name`` and ``avatar`` are a snapshot of the author at creation time.
    """

    user_id: UUID
    text: str
    name: str
    id: UUID = field(default_factory=uuid4)
    avatar: str | None = None
    likes: list[Like] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    date: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    def is_liked_by(self, user_id: UUID) -> bool:
        return any(like.user_id == user_id for like in self.likes)

    def like(self, user_id: UUID) -> None:
        """Prepend a like. Callers must check ``is_liked_by`` first."""
        self.likes.insert(0, Like(user_id=user_id))

    def unlike(self, user_id: UUID) -> None:
        self.likes = [like for like in self.likes if like.user_id != user_id]

    def add_comment(self, comment: Comment) -> None:
        """Insert a comment at the front (newest first)."""
        self.comments.insert(0, comment)

    def get_comment(self, comment_id: UUID) -> Comment | None:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def remove_comment(self, comment_id: UUID) -> None:
        self.comments = [c for c in self.comments if c.id != comment_id]
