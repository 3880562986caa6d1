"""
CRUD operations for posts.

Write operations report their outcome as a status value and never raise.
Read operations return posts and raise ``PostServiceError`` subclasses;
every storage failure is logged before it is translated.
"""
import logging
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from app.core.dates import today_bounds, yesterday_bounds
from app.core.pagination import get_pagination
from app.crud.exceptions import PostNotFoundError, PostQueryError
from app.db.post_store import CommentInclude, PostFilter, PostInclude, PostStore
from app.schemas.post import (
    DeletePostStatus,
    GetPostsError,
    GetPostsResult,
    PostCreateResult,
    PostRecord,
    PostStatus,
)

logger = logging.getLogger(__name__)

# Related data loaded by each query
FEED_INCLUDE = PostInclude(
    author_fields=("id", "username", "name"),
    comments=CommentInclude(fields=("id", "content", "created_at")),
    like_fields=("id", "user_id", "created_at"),
)
OWNER_INCLUDE = PostInclude(author_fields=("id", "username"))
DAILY_INCLUDE = PostInclude(author_fields=("id", "name", "username"))
DETAIL_INCLUDE = PostInclude(
    author_fields=("id", "username"),
    comments=CommentInclude(
        fields=("id", "content", "created_at"),
        user_fields=("username",),
        post_fields=("id", "content", "title", "created_at"),
        order_desc=True,
    ),
)


async def create_post(
    store: PostStore,
    title: str,
    content: str,
    author_id: Optional[UUID] = None,
) -> Union[PostCreateResult, PostStatus]:
    """
    Create a post owned by ``author_id``.

    Args:
        store: Post store
        title: Post title
        content: Post body
        author_id: Id of the authoring user, None when the caller is anonymous

    Returns:
        PostCreateResult with the created post, PostStatus.USER_NOT_FOUND when
        no author was given (storage is not touched), or
        PostStatus.POST_CREATION_FAILED when the insert failed.
    """
    if not author_id:
        return PostStatus.USER_NOT_FOUND

    try:
        post = await store.create(title=title, content=content, author_id=author_id)
    except Exception as e:
        logger.error(f"[POSTS] create_post failed for author {author_id}: {e}")
        return PostStatus.POST_CREATION_FAILED

    logger.info(f"[POSTS] Created post {post.id} for author {author_id}")
    return PostCreateResult(post=post)


async def get_all_posts(store: PostStore, page: int, limit: int) -> GetPostsResult:
    """
    Get a page of all posts, newest first, with author, comments and likes.

    Raises:
        PostQueryError: If the storage call fails
    """
    skip, take = get_pagination(page, limit)
    try:
        posts = await store.find_many(order_desc=True, skip=skip, take=take, include=FEED_INCLUDE)
    except Exception as e:
        logger.error(f"[POSTS] get_all_posts failed (page={page}, limit={limit}): {e}")
        raise PostQueryError(GetPostsError.UNKNOWN, "get_all_posts") from e

    return GetPostsResult(posts=posts)


async def get_posts_by_user(store: PostStore, user_id: UUID, page: int, limit: int) -> GetPostsResult:
    """
    Get a page of one user's posts, newest first.

    Raises:
        PostQueryError: If the storage call fails
    """
    skip, take = get_pagination(page, limit)
    try:
        posts = await store.find_many(
            where=PostFilter(user_id=user_id),
            order_desc=True,
            skip=skip,
            take=take,
            include=OWNER_INCLUDE,
        )
    except Exception as e:
        logger.error(f"[POSTS] get_posts_by_user failed (user={user_id}, page={page}, limit={limit}): {e}")
        raise PostQueryError(GetPostsError.UNKNOWN, "get_posts_by_user") from e

    return GetPostsResult(posts=posts)


async def delete_post(store: PostStore, post_id: UUID, user_id: UUID) -> DeletePostStatus:
    """
    Delete a post after checking that ``user_id`` owns it.

    The lookup and the delete are separate round trips; a post removed by
    someone else in between is reported as DELETE_FAILED.
    """
    try:
        post = await store.find_unique(post_id)

        if post is None:
            return DeletePostStatus.POST_NOT_FOUND

        if post.user_id != user_id:
            logger.warning(f"[POSTS] User {user_id} tried to delete post {post_id} owned by {post.user_id}")
            return DeletePostStatus.UNAUTHORIZED

        await store.delete(post_id)
    except Exception as e:
        logger.error(f"[POSTS] delete_post failed (post={post_id}, user={user_id}): {e}")
        return DeletePostStatus.DELETE_FAILED

    logger.info(f"[POSTS] Deleted post {post_id} for user {user_id}")
    return DeletePostStatus.DELETE_SUCCESS


async def _get_posts_between(
    store: PostStore,
    operation: str,
    start: datetime,
    end: datetime,
    page: int,
    limit: int,
) -> List[PostRecord]:
    skip = (page - 1) * limit
    try:
        return await store.find_many(
            where=PostFilter(created_from=start, created_to=end),
            order_desc=True,
            skip=skip,
            take=limit,
            include=DAILY_INCLUDE,
        )
    except Exception as e:
        logger.error(f"[POSTS] {operation} failed (from={start.isoformat()}, to={end.isoformat()}, page={page}, limit={limit}): {e}")
        raise PostQueryError(GetPostsError.UNKNOWN, operation) from e


async def get_top_posts_today(
    store: PostStore,
    page: int,
    limit: int,
    now: Optional[datetime] = None,
) -> List[PostRecord]:
    """
    Get posts created today in the configured time zone, newest first.

    Args:
        store: Post store
        page: 1-based page number
        limit: Page size
        now: Reference instant, defaults to the current time

    Raises:
        PostQueryError: If the storage call fails
    """
    start, end = today_bounds(now)
    return await _get_posts_between(store, "get_top_posts_today", start, end, page, limit)


async def get_posts_from_yesterday(
    store: PostStore,
    page: int,
    limit: int,
    now: Optional[datetime] = None,
) -> List[PostRecord]:
    """Same as get_top_posts_today for the previous calendar day."""
    start, end = yesterday_bounds(now)
    return await _get_posts_between(store, "get_posts_from_yesterday", start, end, page, limit)


async def get_post_by_id(store: PostStore, post_id: UUID) -> PostRecord:
    """
    Get a post with its author and comments, newest comment first.

    Raises:
        PostNotFoundError: If no post has this id
        PostQueryError: If the storage call fails
    """
    try:
        post = await store.find_unique(post_id, include=DETAIL_INCLUDE)
    except Exception as e:
        logger.error(f"[POSTS] get_post_by_id failed (post={post_id}): {e}")
        raise PostQueryError(GetPostsError.UNKNOWN, "get_post_by_id") from e

    if post is None:
        raise PostNotFoundError(post_id)

    return post
