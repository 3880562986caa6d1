from sqlalchemy import Column, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from ..base import Base, UUIDMixin, TimestampMixin


class Comment(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "comments"

    content = Column(Text, nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")
