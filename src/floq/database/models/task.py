"""
Task SQLAlchemy Model.

Represents a task or, when ``is_project`` is set, a project grouping tasks.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from floq.database.models.base import (
    PROJECT_PARENT_CONSTRAINT,
    TASK_STATUS_CONSTRAINT,
    WAITING_FOR_CONSTRAINT,
    Base,
    get_current_timestamp,
)


class Task(Base):
    """
    Task model representing a GTD item.

    ``parent_id`` is a plain indexed column rather than a foreign key; the
    lifecycle checks keep it pointing at a project.
    """

    __tablename__ = "tasks"

    id: str = Column(String(36), primary_key=True)
    title: str = Column(String(255), nullable=False, index=True)
    description: Optional[str] = Column(Text, nullable=True)
    status: str = Column(String(20), nullable=False, default="inbox", index=True)
    is_project: bool = Column(Boolean, nullable=False, default=False, index=True)
    parent_id: Optional[str] = Column(String(36), nullable=True, index=True)
    waiting_for: Optional[str] = Column(Text, nullable=True)
    context: Optional[str] = Column(String(100), nullable=True, index=True)
    due_date: Optional[datetime] = Column(DateTime, nullable=True)
    created_at: datetime = Column(DateTime, nullable=False, default=get_current_timestamp)
    updated_at: datetime = Column(DateTime, nullable=False, default=get_current_timestamp)

    __table_args__ = (
        TASK_STATUS_CONSTRAINT,
        WAITING_FOR_CONSTRAINT,
        PROJECT_PARENT_CONSTRAINT,
    )

    comments = relationship("Comment", back_populates="task", passive_deletes="all")

    def __repr__(self) -> str:
        return f"<Task(id={self.id!r}, title={self.title!r}, status={self.status!r})>"
