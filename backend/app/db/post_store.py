"""
Persistence client for posts.

``PostStore`` is the contract the post facade talks to. Which related rows a
query brings back is described by explicit ``PostInclude`` values rather than
hidden loader configuration, so callers state exactly which author, comment
and like fields they depend on.
"""
import abc
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.db.models import Comment, Post, User
from app.schemas.post import (
    AuthorSummary,
    CommentSummary,
    CommentUser,
    LikeSummary,
    PostRecord,
    PostSummary,
)

logger = logging.getLogger(__name__)


class RecordNotFoundError(LookupError):
    """Raised when a write targets a post that no longer exists."""


@dataclass(frozen=True)
class CommentInclude:
    fields: Tuple[str, ...] = ("id", "content", "created_at")
    # Fields of the commenting user, e.g. ("username",)
    user_fields: Tuple[str, ...] = ()
    # Fields of the parent post summary
    post_fields: Tuple[str, ...] = ()
    # Newest first; applied to the loaded collection in to_record
    order_desc: bool = False


@dataclass(frozen=True)
class PostInclude:
    """Related data to load with each post. Empty means not included."""
    author_fields: Tuple[str, ...] = ()
    comments: Optional[CommentInclude] = None
    like_fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PostFilter:
    """Filter for ``find_many``. Both creation bounds are inclusive."""
    user_id: Optional[UUID] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


def _pick(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    return {name: getattr(obj, name) for name in fields}


def to_record(post: Post, include: Optional[PostInclude] = None) -> PostRecord:
    """
    Project an ORM post onto a ``PostRecord`` carrying only the included
    relations and fields.
    """
    record = PostRecord(
        id=post.id,
        title=post.title,
        content=post.content,
        user_id=post.user_id,
        created_at=post.created_at,
    )
    if include is None:
        return record

    if include.author_fields:
        record.author = AuthorSummary(**_pick(post.author, include.author_fields))

    if include.comments is not None:
        wanted = include.comments
        comments = list(post.comments)
        if wanted.order_desc:
            comments.sort(key=lambda c: c.created_at, reverse=True)
        summaries = []
        for comment in comments:
            summary = CommentSummary(**_pick(comment, wanted.fields))
            if wanted.user_fields:
                summary.user = CommentUser(**_pick(comment.user, wanted.user_fields))
            if wanted.post_fields:
                # The parent of every embedded comment is the post itself
                summary.post = PostSummary(**_pick(post, wanted.post_fields))
            summaries.append(summary)
        record.comments = summaries

    if include.like_fields:
        record.likes = [LikeSummary(**_pick(like, include.like_fields)) for like in post.likes]

    return record


class PostStore(abc.ABC):
    """Storage operations the post facade relies on."""

    @abc.abstractmethod
    async def create(self, title: str, content: str, author_id: UUID) -> PostRecord:
        """Insert a post connected to an existing author."""

    @abc.abstractmethod
    async def find_many(
        self,
        where: Optional[PostFilter] = None,
        order_desc: bool = True,
        skip: int = 0,
        take: Optional[int] = None,
        include: Optional[PostInclude] = None,
    ) -> List[PostRecord]:
        """Return a window of posts ordered by creation time."""

    @abc.abstractmethod
    async def find_unique(self, post_id: UUID, include: Optional[PostInclude] = None) -> Optional[PostRecord]:
        """Return the post with ``post_id`` or None."""

    @abc.abstractmethod
    async def delete(self, post_id: UUID) -> None:
        """Remove a post. Raises RecordNotFoundError if it does not exist."""


def _loader_options(include: Optional[PostInclude]) -> list:
    if include is None:
        return []

    options = []
    if include.author_fields:
        options.append(
            joinedload(Post.author).load_only(*(getattr(User, name) for name in include.author_fields))
        )
    if include.comments is not None:
        comments_loader = selectinload(Post.comments)
        if include.comments.user_fields:
            comments_loader = comments_loader.selectinload(Comment.user)
        options.append(comments_loader)
    if include.like_fields:
        options.append(selectinload(Post.likes))
    return options


class SqlAlchemyPostStore(PostStore):
    """
    ``PostStore`` backed by an async SQLAlchemy session.

    Writes are flushed inside a savepoint so a failed insert or delete does
    not poison the surrounding request transaction; committing is left to the
    session owner.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, title: str, content: str, author_id: UUID) -> PostRecord:
        db_post = Post(title=title, content=content, user_id=author_id)
        async with self.session.begin_nested():
            self.session.add(db_post)
            # The foreign key on posts.user_id rejects unknown authors here
            await self.session.flush()
        # Refresh to get the server generated created_at
        await self.session.refresh(db_post)
        return to_record(db_post)

    async def find_many(
        self,
        where: Optional[PostFilter] = None,
        order_desc: bool = True,
        skip: int = 0,
        take: Optional[int] = None,
        include: Optional[PostInclude] = None,
    ) -> List[PostRecord]:
        stmt = select(Post).options(*_loader_options(include))

        if where is not None:
            if where.user_id is not None:
                stmt = stmt.where(Post.user_id == where.user_id)
            if where.created_from is not None:
                stmt = stmt.where(Post.created_at >= where.created_from)
            if where.created_to is not None:
                stmt = stmt.where(Post.created_at <= where.created_to)

        if order_desc:
            stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        else:
            stmt = stmt.order_by(Post.created_at.asc(), Post.id.asc())

        stmt = stmt.offset(skip)
        if take is not None:
            stmt = stmt.limit(take)

        result = await self.session.execute(stmt)
        return [to_record(post, include) for post in result.scalars().all()]

    async def find_unique(self, post_id: UUID, include: Optional[PostInclude] = None) -> Optional[PostRecord]:
        stmt = select(Post).where(Post.id == post_id).options(*_loader_options(include))
        result = await self.session.execute(stmt)
        db_post = result.scalar_one_or_none()
        if db_post is None:
            return None
        return to_record(db_post, include)

    async def delete(self, post_id: UUID) -> None:
        async with self.session.begin_nested():
            result = await self.session.execute(delete(Post).where(Post.id == post_id))
        if result.rowcount == 0:
            raise RecordNotFoundError(f"Post {post_id} does not exist")
        logger.debug(f"Deleted post {post_id}")
