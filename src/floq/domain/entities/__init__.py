"""Domain entities - Data Transfer Objects."""

from floq.domain.entities.comment import CommentDTO
from floq.domain.entities.result_types import (
    DomainError,
    DomainErrorType,
    DomainResult,
    DomainSuccess,
)
from floq.domain.entities.task import TaskDTO

__all__ = [
    "DomainError",
    "DomainErrorType",
    "DomainResult",
    "DomainSuccess",
    "CommentDTO",
    "TaskDTO",
]
