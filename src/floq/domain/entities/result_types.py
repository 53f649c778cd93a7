"""
Domain Result Types - Outcomes of read-side queries.

Repositories return a DomainResult instead of raising. ``unwrap()`` turns a
failure into the exception the service layer lets through: NotFoundError
for a missing row, StoreError for a query that could not run.

Usage:
    task = task_repo.get(task_id).unwrap()
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from floq.domain.exceptions import NotFoundError, StoreError


class DomainErrorType(Enum):
    """Why a query failed."""

    NOT_FOUND = "not_found"
    OPERATION_FAILED = "operation_failed"


T = TypeVar("T")


@dataclass(frozen=True)
class DomainResult(Generic[T]):
    """
    Result of a repository query.

    ``error_details`` holds ``resource``/``id`` for NOT_FOUND and
    ``operation``/``table``/``reason`` for OPERATION_FAILED.
    """

    success: bool
    data: Optional[T] = None
    error_type: Optional[DomainErrorType] = None
    error_message: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.success

    @property
    def is_failure(self) -> bool:
        return not self.success

    def unwrap(self) -> T:
        """
        Return ``data``, or raise the exception matching the failure.

        Raises:
            NotFoundError: The queried row does not exist.
            StoreError: The query itself failed.
        """
        if self.success:
            return self.data  # type: ignore[return-value]

        details = self.error_details
        if self.error_type == DomainErrorType.NOT_FOUND:
            raise NotFoundError(details.get("resource", "Item"), details.get("id", ""))
        raise StoreError(
            details.get("operation", "query"),
            details.get("table", "unknown"),
            details.get("reason") or self.error_message or "Unknown error",
        )


class DomainSuccess:
    """Factory for successful results: ``DomainSuccess.create(data=task)``."""

    @staticmethod
    def create(data: Optional[T] = None) -> DomainResult[T]:
        return DomainResult(success=True, data=data)


class DomainError:
    """
    Factory for failed results.

    Usage:
        return DomainError.not_found("Task", task_id)
        return DomainError.operation_failed("list_tasks", "tasks", str(e))
    """

    @staticmethod
    def not_found(resource: str, resource_id: str) -> DomainResult[Any]:
        """A lookup by id matched no row."""
        return DomainResult(
            success=False,
            error_type=DomainErrorType.NOT_FOUND,
            error_message=f"{resource} '{resource_id}' not found",
            error_details={"resource": resource, "id": resource_id},
        )

    @staticmethod
    def operation_failed(operation: str, table: str, reason: str) -> DomainResult[Any]:
        """A query on ``table`` raised before producing a result."""
        return DomainResult(
            success=False,
            error_type=DomainErrorType.OPERATION_FAILED,
            error_message=f"Failed to {operation} on {table}: {reason}",
            error_details={"operation": operation, "table": table, "reason": reason},
        )
