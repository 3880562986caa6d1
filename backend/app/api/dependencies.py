"""
Shared dependencies for API endpoints.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.post_store import PostStore, SqlAlchemyPostStore
from app.db.session import get_db


async def get_post_store(db: AsyncSession = Depends(get_db)) -> PostStore:
    """
    Dependency that binds the request's database session to a post store.
    Tests override it with an in-memory store.
    """
    return SqlAlchemyPostStore(db)
