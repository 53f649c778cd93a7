"""Task Store Interface.

The history commands only ever talk to the store through this contract.
Predicates are column -> value equality mappings; every coroutine resolves
once the write is committed, so a later ``undo()`` can always reverse it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol, Sequence, Union

TASKS_TABLE = "tasks"
COMMENTS_TABLE = "comments"


@dataclass(frozen=True)
class InsertRow:
    """Insert one row into ``table``."""

    table: str
    row: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateRows:
    """Apply ``patch`` to every row of ``table`` matching ``where``."""

    table: str
    where: Mapping[str, Any]
    patch: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteRows:
    """Delete every row of ``table`` matching ``where``."""

    table: str
    where: Mapping[str, Any]


StoreOperation = Union[InsertRow, UpdateRows, DeleteRows]


class ITaskStore(Protocol):
    """Protocol for the asynchronous row store."""

    async def insert(self, table: str, row: Mapping[str, Any]) -> None:
        """Insert a row."""
        ...

    async def update(
        self, table: str, where: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> int:
        """Update matching rows, returning how many changed."""
        ...

    async def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Delete matching rows, returning how many were removed."""
        ...

    async def select(
        self, table: str, where: Mapping[str, Any] | None = None
    ) -> List[Dict[str, Any]]:
        """Select matching rows as column dictionaries."""
        ...

    async def apply(self, operations: Sequence[StoreOperation]) -> None:
        """Run several operations in one transaction."""
        ...
