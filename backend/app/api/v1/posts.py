"""
API endpoints for post-related operations.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional
from uuid import UUID
import logging

from app.api.dependencies import get_post_store
from app.auth.dependencies import get_current_user_id, get_optional_user_id
from app.core.config import settings
from app.crud import post as post_crud
from app.crud.exceptions import PostNotFoundError, PostQueryError
from app.db.post_store import PostStore
from app.schemas.post import (
    DeletePostResponse,
    DeletePostStatus,
    GetPostsResult,
    PostCreate,
    PostRecord,
    PostStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
)

_DELETE_STATUS_CODES = {
    DeletePostStatus.POST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    DeletePostStatus.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    DeletePostStatus.DELETE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _page_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
):
    return page, limit


def _query_failed(e: PostQueryError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=e.code.value,
    )


@router.post(
    "",
    response_model=PostRecord,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    post_in: PostCreate,
    author_id: Optional[UUID] = Depends(get_optional_user_id),
    store: PostStore = Depends(get_post_store),
):
    """
    Create a post owned by the authenticated user.

    Raises:
        HTTPException 401: If the caller is not authenticated
        HTTPException 400: If the post could not be stored
    """
    result = await post_crud.create_post(store, post_in.title, post_in.content, author_id)

    if result == PostStatus.USER_NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=PostStatus.USER_NOT_FOUND.value,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if result == PostStatus.POST_CREATION_FAILED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=PostStatus.POST_CREATION_FAILED.value,
        )

    return result.post


@router.get("", response_model=GetPostsResult, response_model_exclude_unset=True)
async def list_posts(
    paging: tuple = Depends(_page_params),
    store: PostStore = Depends(get_post_store),
):
    """List all posts, newest first, with author, comments and likes."""
    page, limit = paging
    try:
        return await post_crud.get_all_posts(store, page, limit)
    except PostQueryError as e:
        raise _query_failed(e)


@router.get("/today", response_model=List[PostRecord], response_model_exclude_unset=True)
async def list_posts_today(
    paging: tuple = Depends(_page_params),
    store: PostStore = Depends(get_post_store),
):
    page, limit = paging
    try:
        return await post_crud.get_top_posts_today(store, page, limit)
    except PostQueryError as e:
        raise _query_failed(e)


@router.get("/yesterday", response_model=List[PostRecord], response_model_exclude_unset=True)
async def list_posts_yesterday(
    paging: tuple = Depends(_page_params),
    store: PostStore = Depends(get_post_store),
):
    page, limit = paging
    try:
        return await post_crud.get_posts_from_yesterday(store, page, limit)
    except PostQueryError as e:
        raise _query_failed(e)


@router.get("/user/{user_id}", response_model=GetPostsResult, response_model_exclude_unset=True)
async def list_user_posts(
    user_id: UUID,
    paging: tuple = Depends(_page_params),
    store: PostStore = Depends(get_post_store),
):
    """List one user's posts, newest first."""
    page, limit = paging
    try:
        return await post_crud.get_posts_by_user(store, user_id, page, limit)
    except PostQueryError as e:
        raise _query_failed(e)


@router.get("/{post_id}", response_model=PostRecord, response_model_exclude_unset=True)
async def get_post(
    post_id: UUID,
    store: PostStore = Depends(get_post_store),
):
    """
    Get a single post with its author and comments.

    Raises:
        HTTPException 404: If the post does not exist
    """
    try:
        return await post_crud.get_post_by_id(store, post_id)
    except PostNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    except PostQueryError as e:
        raise _query_failed(e)


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    post_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    store: PostStore = Depends(get_post_store),
):
    """
    Delete a post owned by the authenticated user.

    Raises:
        HTTPException 404: If the post does not exist
        HTTPException 403: If the post belongs to another user
        HTTPException 500: If the delete failed
    """
    outcome = await post_crud.delete_post(store, post_id, user_id)

    if outcome != DeletePostStatus.DELETE_SUCCESS:
        raise HTTPException(status_code=_DELETE_STATUS_CODES[outcome], detail=outcome.value)

    return DeletePostResponse(status=outcome, post_id=post_id)
