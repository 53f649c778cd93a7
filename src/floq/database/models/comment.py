"""
Comment SQLAlchemy Model.

Comments annotate a task; they are deleted and restored together with it.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from floq.database.models.base import Base, get_current_timestamp


class Comment(Base):
    """Comment model attached to a task."""

    __tablename__ = "comments"

    id: str = Column(String(36), primary_key=True)
    task_id: str = Column(String(36), ForeignKey("tasks.id"), nullable=False, index=True)
    content: str = Column(Text, nullable=False)
    created_at: datetime = Column(DateTime, nullable=False, default=get_current_timestamp)

    task = relationship("Task", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id!r}, task_id={self.task_id!r})>"
