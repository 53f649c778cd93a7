"""Comment Domain Entity (DTO)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CommentDTO:
    """
    Comment Data Transfer Object.

    Attributes:
        id: Unique comment identifier (UUID), assigned by the caller
        task_id: Task the comment is attached to
        content: Comment text
        created_at: Creation timestamp, preserved across delete/undo
    """

    id: str
    task_id: str
    content: str
    created_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for a store insert."""
        return {
            "id": self.id,
            "task_id": self.task_id,
            "content": self.content,
            "created_at": self.created_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to a JSON-friendly dictionary."""
        data = self.to_row()
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CommentDTO":
        """Create DTO from a store row or a ``to_dict()`` mapping."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=row["id"],
            task_id=row["task_id"],
            content=row["content"],
            created_at=created_at,
        )
