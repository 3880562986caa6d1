"""Tests for the post facade in app.crud.post."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.crud import post as post_crud
from app.crud.exceptions import PostNotFoundError, PostQueryError
from app.db.post_store import PostFilter, RecordNotFoundError
from app.schemas.post import (
    DeletePostStatus,
    GetPostsError,
    GetPostsResult,
    PostCreateResult,
    PostStatus,
)

from conftest import FIXED_NOW


def _dump(record):
    return record.model_dump(by_alias=True, exclude_unset=True)


class TestCreatePost:

    @pytest.mark.asyncio
    async def test_create_post_connects_author(self, store, alice):
        result = await post_crud.create_post(store, "Hello", "First post", alice.id)

        assert isinstance(result, PostCreateResult)
        assert result.post.user_id == alice.id
        assert result.post.title == "Hello"
        assert result.post.content == "First post"
        assert result.post.id in store.posts

    @pytest.mark.asyncio
    async def test_missing_author_returns_user_not_found_without_storage(self, store):
        result = await post_crud.create_post(store, "Hello", "First post", None)

        assert result == PostStatus.USER_NOT_FOUND
        assert store.calls == []
        assert store.posts == {}

    @pytest.mark.asyncio
    async def test_unknown_author_returns_creation_failed(self, store, caplog):
        with caplog.at_level(logging.ERROR):
            result = await post_crud.create_post(store, "Hello", "First post", uuid4())

        assert result == PostStatus.POST_CREATION_FAILED
        assert store.posts == {}
        assert "create_post failed" in caplog.text

    @pytest.mark.asyncio
    async def test_storage_error_is_not_raised(self, store, alice):
        store.error = RuntimeError("connection reset")

        result = await post_crud.create_post(store, "Hello", "First post", alice.id)

        assert result == PostStatus.POST_CREATION_FAILED


class TestGetAllPosts:

    @pytest.mark.asyncio
    async def test_pages_are_newest_first_and_disjoint(self, store, many_posts):
        first = await post_crud.get_all_posts(store, page=1, limit=10)
        second = await post_crud.get_all_posts(store, page=2, limit=10)
        third = await post_crud.get_all_posts(store, page=3, limit=10)

        assert isinstance(first, GetPostsResult)
        assert [p.id for p in first.posts] == [p.id for p in many_posts[:10]]
        assert [p.id for p in second.posts] == [p.id for p in many_posts[10:20]]
        assert len(third.posts) == 5
        assert not {p.id for p in first.posts} & {p.id for p in second.posts}

        created = [p.created_at for p in first.posts + second.posts]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio
    async def test_uses_pagination_helper(self, store, many_posts):
        await post_crud.get_all_posts(store, page=0, limit=500)

        _, kwargs = store.calls[-1]
        assert kwargs["skip"] == 0
        assert kwargs["take"] == 100
        assert kwargs["order_desc"] is True
        assert kwargs["include"] == post_crud.FEED_INCLUDE

    @pytest.mark.asyncio
    async def test_embeds_author_comments_and_likes(self, store, alice, bob):
        post = store.add_post(alice, title="with relations")
        store.add_comment(post, bob, "nice", FIXED_NOW)
        store.add_like(post, bob)

        result = await post_crud.get_all_posts(store, page=1, limit=10)

        data = _dump(result.posts[0])
        assert data["author"] == {"id": alice.id, "username": "alice", "name": "Alice Liddell"}
        assert [set(c) for c in data["comments"]] == [{"id", "content", "createdAt"}]
        assert data["comments"][0]["content"] == "nice"
        assert [set(like) for like in data["likes"]] == [{"id", "userId", "createdAt"}]
        assert data["likes"][0]["userId"] == bob.id

    @pytest.mark.asyncio
    async def test_storage_error_raises_unknown(self, store, caplog):
        store.error = RuntimeError("database is down")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(PostQueryError) as exc_info:
                await post_crud.get_all_posts(store, page=2, limit=5)

        assert exc_info.value.code == GetPostsError.UNKNOWN
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "page=2" in caplog.text


class TestGetPostsByUser:

    @pytest.mark.asyncio
    async def test_filters_by_user_with_minimal_author(self, store, alice, bob):
        store.add_post(alice, title="alice's", created_at=FIXED_NOW)
        bobs = store.add_post(bob, title="bob's", created_at=FIXED_NOW - timedelta(hours=1))

        result = await post_crud.get_posts_by_user(store, bob.id, page=1, limit=10)

        assert [p.id for p in result.posts] == [bobs.id]
        data = _dump(result.posts[0])
        assert data["author"] == {"id": bob.id, "username": "bob"}
        assert "comments" not in data
        assert "likes" not in data

        _, kwargs = store.calls[-1]
        assert kwargs["where"] == PostFilter(user_id=bob.id)

    @pytest.mark.asyncio
    async def test_storage_error_raises_unknown(self, store, alice):
        store.error = RuntimeError("timeout")

        with pytest.raises(PostQueryError) as exc_info:
            await post_crud.get_posts_by_user(store, alice.id, page=1, limit=10)

        assert exc_info.value.code == GetPostsError.UNKNOWN
        assert exc_info.value.operation == "get_posts_by_user"


class TestDeletePost:

    @pytest.mark.asyncio
    async def test_missing_post(self, store, alice):
        result = await post_crud.delete_post(store, uuid4(), alice.id)

        assert result == DeletePostStatus.POST_NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_user_is_unauthorized_and_post_remains(self, store, alice, bob):
        post = store.add_post(alice)

        result = await post_crud.delete_post(store, post.id, bob.id)

        assert result == DeletePostStatus.UNAUTHORIZED
        assert post.id in store.posts
        assert all(name != "delete" for name, _ in store.calls)

    @pytest.mark.asyncio
    async def test_owner_deletes_post(self, store, alice):
        post = store.add_post(alice)

        result = await post_crud.delete_post(store, post.id, alice.id)

        assert result == DeletePostStatus.DELETE_SUCCESS
        with pytest.raises(PostNotFoundError):
            await post_crud.get_post_by_id(store, post.id)

    @pytest.mark.asyncio
    async def test_lookup_failure_maps_to_delete_failed(self, store, alice):
        post = store.add_post(alice)
        store.error = RuntimeError("connection lost")

        result = await post_crud.delete_post(store, post.id, alice.id)

        assert result == DeletePostStatus.DELETE_FAILED

    @pytest.mark.asyncio
    async def test_post_removed_between_lookup_and_delete(self, store, alice):
        post = store.add_post(alice)
        store.delete_error = RecordNotFoundError("gone")

        result = await post_crud.delete_post(store, post.id, alice.id)

        assert result == DeletePostStatus.DELETE_FAILED


class TestDailyFeeds:

    @pytest.fixture
    def day_posts(self, store, alice):
        today_start = datetime(2026, 10, 19, tzinfo=timezone.utc)
        today_end = datetime(2026, 10, 19, 23, 59, 59, 999999, tzinfo=timezone.utc)
        return {
            "today_start": store.add_post(alice, title="today start", created_at=today_start),
            "today_mid": store.add_post(alice, title="today mid", created_at=today_start + timedelta(hours=12)),
            "today_end": store.add_post(alice, title="today end", created_at=today_end),
            "yesterday_end": store.add_post(alice, title="yesterday end", created_at=today_start - timedelta(microseconds=1)),
            "yesterday_start": store.add_post(alice, title="yesterday start", created_at=today_start - timedelta(days=1)),
            "two_days_ago": store.add_post(alice, title="old", created_at=today_start - timedelta(days=1, microseconds=1)),
            "tomorrow": store.add_post(alice, title="tomorrow", created_at=today_end + timedelta(microseconds=1)),
        }

    @pytest.mark.asyncio
    async def test_today_includes_both_boundaries(self, store, day_posts):
        posts = await post_crud.get_top_posts_today(store, page=1, limit=10, now=FIXED_NOW)

        assert [p.title for p in posts] == ["today end", "today mid", "today start"]

    @pytest.mark.asyncio
    async def test_today_embeds_author_name_and_username(self, store, alice, day_posts):
        posts = await post_crud.get_top_posts_today(store, page=1, limit=1, now=FIXED_NOW)

        data = _dump(posts[0])
        assert data["author"] == {"id": alice.id, "name": "Alice Liddell", "username": "alice"}
        assert "comments" not in data

    @pytest.mark.asyncio
    async def test_today_inline_pagination(self, store, day_posts):
        posts = await post_crud.get_top_posts_today(store, page=2, limit=2, now=FIXED_NOW)

        assert [p.title for p in posts] == ["today start"]
        _, kwargs = store.calls[-1]
        assert kwargs["skip"] == 2
        assert kwargs["take"] == 2
        assert kwargs["include"] == post_crud.DAILY_INCLUDE

    @pytest.mark.asyncio
    async def test_yesterday_includes_both_boundaries(self, store, day_posts):
        posts = await post_crud.get_posts_from_yesterday(store, page=1, limit=10, now=FIXED_NOW)

        assert [p.title for p in posts] == ["yesterday end", "yesterday start"]

    @pytest.mark.asyncio
    async def test_storage_error_is_translated(self, store):
        store.error = RuntimeError("statement timeout")

        with pytest.raises(PostQueryError) as exc_info:
            await post_crud.get_posts_from_yesterday(store, page=1, limit=10, now=FIXED_NOW)

        assert exc_info.value.operation == "get_posts_from_yesterday"


class TestGetPostById:

    @pytest.mark.asyncio
    async def test_missing_post_raises_not_found(self, store):
        missing = uuid4()

        with pytest.raises(PostNotFoundError) as exc_info:
            await post_crud.get_post_by_id(store, missing)

        assert exc_info.value.post_id == missing

    @pytest.mark.asyncio
    async def test_returns_comments_newest_first(self, store, alice, bob):
        post = store.add_post(alice, title="Detail", content="Body")
        store.add_comment(post, bob, "first", FIXED_NOW - timedelta(minutes=2))
        store.add_comment(post, alice, "third", FIXED_NOW)
        store.add_comment(post, bob, "second", FIXED_NOW - timedelta(minutes=1))

        result = await post_crud.get_post_by_id(store, post.id)

        data = _dump(result)
        assert data["author"] == {"id": alice.id, "username": "alice"}
        assert [c["content"] for c in data["comments"]] == ["third", "second", "first"]
        assert [c["user"] for c in data["comments"]] == [
            {"username": "alice"}, {"username": "bob"}, {"username": "bob"},
        ]
        assert data["comments"][0]["post"] == {
            "id": post.id, "content": "Body", "title": "Detail", "createdAt": FIXED_NOW,
        }
        assert "likes" not in data

    @pytest.mark.asyncio
    async def test_storage_error_is_translated(self, store):
        store.error = RuntimeError("boom")

        with pytest.raises(PostQueryError):
            await post_crud.get_post_by_id(store, uuid4())
