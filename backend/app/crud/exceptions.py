"""
Errors raised by the post read operations.
"""
from typing import Optional
from uuid import UUID

from app.schemas.post import GetPostsError


class PostServiceError(Exception):
    """Base class for post facade errors."""


class PostNotFoundError(PostServiceError):
    def __init__(self, post_id: UUID):
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class PostQueryError(PostServiceError):
    """A storage call behind a read operation failed."""

    def __init__(self, code: GetPostsError = GetPostsError.UNKNOWN, operation: Optional[str] = None):
        self.code = code
        self.operation = operation
        message = code.value if operation is None else f"{operation}: {code.value}"
        super().__init__(message)
