"""Service layer - Business logic orchestration."""

from floq.services.app_context import AppContext
from floq.services.task_service import TaskService

__all__ = [
    "AppContext",
    "TaskService",
]
