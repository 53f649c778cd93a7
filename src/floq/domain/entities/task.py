"""
Task Domain Entity (DTO).

Data Transfer Object for Task entity, providing a clean interface between
the history commands, the service layer and the database layer.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


@dataclass(frozen=True)
class TaskDTO:
    """
    Task Data Transfer Object.

    Immutable so a snapshot captured by a command cannot drift after the
    command is built.

    Attributes:
        id: Unique task identifier (UUID), assigned by the caller
        title: Task title (required)
        description: Free-form notes
        status: GTD status ('inbox', 'next', 'waiting', 'someday', 'done')
        is_project: Whether this task groups child tasks
        parent_id: Project this task belongs to
        waiting_for: Who or what the task is waiting on (only when status is 'waiting')
        context: Free-form context tag (e.g. '@home')
        due_date: Optional due date
        created_at: Task creation timestamp
        updated_at: Last modification timestamp
    """

    id: str
    title: str
    description: Optional[str] = None
    status: str = "inbox"
    is_project: bool = False
    parent_id: Optional[str] = None
    waiting_for: Optional[str] = None
    context: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for a store insert, datetimes left untouched."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to a JSON-friendly dictionary."""
        data = self.to_row()
        for key in ("due_date", "created_at", "updated_at"):
            value = data[key]
            data[key] = value.isoformat() if value else None
        return data

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TaskDTO":
        """Create DTO from a store row or a ``to_dict()`` mapping."""
        return cls(
            id=row["id"],
            title=row["title"],
            description=row.get("description"),
            status=row.get("status", "inbox"),
            is_project=bool(row.get("is_project", False)),
            parent_id=row.get("parent_id"),
            waiting_for=row.get("waiting_for"),
            context=row.get("context"),
            due_date=_parse_datetime(row.get("due_date")),
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )

    @property
    def short_id(self) -> str:
        """First eight characters of the id, as shown in listings."""
        return self.id[:8]
