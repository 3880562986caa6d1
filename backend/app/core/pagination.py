"""
Offset/limit pagination helper.
"""
from typing import NamedTuple, Optional

from app.core.config import settings


class Pagination(NamedTuple):
    """Window over an ordered result set."""
    skip: int
    take: int


def get_pagination(page: int, limit: int, max_limit: Optional[int] = None) -> Pagination:
    """
    Convert a 1-based page number and page size into an offset/limit pair.

    Pages below 1 are treated as the first page and the page size is clamped
    to ``[1, max_limit]`` (``MAX_PAGE_SIZE`` when not given).

    Args:
        page: 1-based page number
        limit: Requested page size
        max_limit: Upper bound for the page size

    Returns:
        Pagination: skip and take values for the query
    """
    if max_limit is None:
        max_limit = settings.MAX_PAGE_SIZE

    take = max(1, min(limit, max_limit))
    page = max(1, page)
    return Pagination(skip=(page - 1) * take, take=take)
