"""Database layer - SQLAlchemy ORM models, repositories and the row store."""

from floq.database.models.base import Base
from floq.database.orm_manager import ORMManager
from floq.database.store import TaskStore

__all__ = [
    "ORMManager",
    "Base",
    "TaskStore",
]
