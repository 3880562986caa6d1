"""
Pydantic schemas for posts.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PostStatus(str, Enum):
    """Outcomes of creating a post that are not a created post."""
    USER_NOT_FOUND = "USER_NOT_FOUND"
    POST_CREATION_FAILED = "POST_CREATION_FAILED"


class DeletePostStatus(str, Enum):
    """Outcomes of deleting a post."""
    POST_NOT_FOUND = "POST_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    DELETE_SUCCESS = "DELETE_SUCCESS"
    DELETE_FAILED = "DELETE_FAILED"


class GetPostsError(str, Enum):
    UNKNOWN = "UNKNOWN"


class CamelModel(BaseModel):
    """Base for response projections serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AuthorSummary(CamelModel):
    id: Optional[UUID] = None
    username: Optional[str] = None
    name: Optional[str] = None


class CommentUser(CamelModel):
    username: Optional[str] = None


class PostSummary(CamelModel):
    id: Optional[UUID] = None
    title: Optional[str] = None
    content: Optional[str] = None
    created_at: Optional[datetime] = None


class CommentSummary(CamelModel):
    id: Optional[UUID] = None
    content: Optional[str] = None
    created_at: Optional[datetime] = None
    user: Optional[CommentUser] = None
    post: Optional[PostSummary] = None


class LikeSummary(CamelModel):
    id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    created_at: Optional[datetime] = None


class PostRecord(CamelModel):
    """
    A post as returned by the store.

    Scalar columns are always present; ``author``, ``comments`` and ``likes``
    are only set when the query asked for them, so serializing with
    ``exclude_unset`` yields exactly the requested shape.
    """
    id: UUID
    title: str
    content: str
    user_id: UUID
    created_at: Optional[datetime] = None
    author: Optional[AuthorSummary] = None
    comments: Optional[List[CommentSummary]] = None
    likes: Optional[List[LikeSummary]] = None


class PostCreate(BaseModel):
    """Schema for creating a new post."""
    title: str = Field(..., min_length=1, max_length=255, description="Post title")
    content: str = Field(..., min_length=1, description="Post body")


class PostCreateResult(BaseModel):
    post: PostRecord


class GetPostsResult(CamelModel):
    posts: List[PostRecord] = Field(default_factory=list)


class DeletePostResponse(CamelModel):
    status: DeletePostStatus
    post_id: UUID
