"""Shared fixtures: an in-memory post store built on transient ORM objects."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.db.models import Comment, Like, Post, User
from app.db.post_store import PostFilter, PostInclude, PostStore, RecordNotFoundError, to_record

FIXED_NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


class InMemoryPostStore(PostStore):
    """PostStore over plain dictionaries, recording every call it receives."""

    def __init__(self):
        self.users = {}
        self.posts = {}
        self.calls = []
        # Exception raised by every storage call when set
        self.error: Optional[Exception] = None
        # Exception raised by delete() only
        self.delete_error: Optional[Exception] = None

    def _record_call(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error

    # Seeding helpers

    def add_user(self, username: str, name: Optional[str] = None) -> User:
        user = User(id=uuid4(), username=username, name=name, created_at=FIXED_NOW)
        self.users[user.id] = user
        return user

    def add_post(self, author: User, title: str = "title", created_at: datetime = FIXED_NOW, content: str = "content") -> Post:
        post = Post(id=uuid4(), title=title, content=content, user_id=author.id, author=author, created_at=created_at)
        self.posts[post.id] = post
        return post

    def add_comment(self, post: Post, user: User, content: str, created_at: datetime) -> Comment:
        return Comment(
            id=uuid4(), content=content, user_id=user.id, user=user,
            post_id=post.id, post=post, created_at=created_at,
        )

    def add_like(self, post: Post, user: User, created_at: datetime = FIXED_NOW) -> Like:
        return Like(id=uuid4(), user_id=user.id, user=user, post_id=post.id, post=post, created_at=created_at)

    # PostStore

    async def create(self, title: str, content: str, author_id: UUID):
        self._record_call("create", title=title, content=content, author_id=author_id)
        author = self.users.get(author_id)
        if author is None:
            raise IntegrityError("INSERT INTO posts", {}, Exception("foreign key violation on posts.user_id"))
        post = self.add_post(author, title=title, content=content, created_at=datetime.now(timezone.utc))
        return to_record(post)

    async def find_many(
        self,
        where: Optional[PostFilter] = None,
        order_desc: bool = True,
        skip: int = 0,
        take: Optional[int] = None,
        include: Optional[PostInclude] = None,
    ):
        self._record_call("find_many", where=where, order_desc=order_desc, skip=skip, take=take, include=include)
        posts: List[Post] = list(self.posts.values())
        if where is not None:
            if where.user_id is not None:
                posts = [p for p in posts if p.user_id == where.user_id]
            if where.created_from is not None:
                posts = [p for p in posts if p.created_at >= where.created_from]
            if where.created_to is not None:
                posts = [p for p in posts if p.created_at <= where.created_to]
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=order_desc)
        end = None if take is None else skip + take
        return [to_record(p, include) for p in posts[skip:end]]

    async def find_unique(self, post_id: UUID, include: Optional[PostInclude] = None):
        self._record_call("find_unique", post_id=post_id, include=include)
        post = self.posts.get(post_id)
        return None if post is None else to_record(post, include)

    async def delete(self, post_id: UUID) -> None:
        self._record_call("delete", post_id=post_id)
        if self.delete_error is not None:
            raise self.delete_error
        if self.posts.pop(post_id, None) is None:
            raise RecordNotFoundError(f"Post {post_id} does not exist")


@pytest.fixture
def store():
    return InMemoryPostStore()


@pytest.fixture
def alice(store):
    return store.add_user("alice", name="Alice Liddell")


@pytest.fixture
def bob(store):
    return store.add_user("bob")


@pytest.fixture
def many_posts(store, alice):
    """25 posts by alice, one minute apart, newest at FIXED_NOW."""
    return [
        store.add_post(alice, title=f"post {i}", created_at=FIXED_NOW - timedelta(minutes=i))
        for i in range(25)
    ]
