"""
User model. Users author posts, comments and likes.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from ..base import Base, UUIDMixin, TimestampMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    Post author. Only the id, username and display name are ever embedded
    in post results.
    """
    __tablename__ = "users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255))
    email = Column(String(255), unique=True, index=True)

    # Relationships
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
