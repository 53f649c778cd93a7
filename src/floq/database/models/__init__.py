"""Database models."""

from floq.database.models.base import Base, generate_id, get_current_timestamp
from floq.database.models.comment import Comment
from floq.database.models.task import Task

__all__ = [
    "Base",
    "generate_id",
    "get_current_timestamp",
    "Task",
    "Comment",
]
