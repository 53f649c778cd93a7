"""Database repositories."""

from floq.database.repositories.comment_repository import CommentRepository
from floq.database.repositories.task_repository import TaskRepository

__all__ = [
    "CommentRepository",
    "TaskRepository",
]
