"""
CRUD operations for the application.
"""
from app.crud import post

__all__ = ["post"]
