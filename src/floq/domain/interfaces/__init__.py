"""Domain interfaces - Protocol-based store contracts."""

from floq.domain.interfaces.task_store import (
    DeleteRows,
    ITaskStore,
    InsertRow,
    StoreOperation,
    UpdateRows,
)

__all__ = [
    "ITaskStore",
    "StoreOperation",
    "InsertRow",
    "UpdateRows",
    "DeleteRows",
]
