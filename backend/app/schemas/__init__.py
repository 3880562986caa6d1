"""
Pydantic schemas for the application.
"""
from app.schemas import post

__all__ = ["post"]
