"""
Undoable Commands - One forward mutation and its exact inverse each.

Every command is a frozen dataclass. All the state its ``undo()`` needs is
captured when the command is built, never re-read at undo time, so undo is
a single round trip and cannot be computed from a half-applied state.

Known limitation: the captured snapshot is written back as-is. If another
writer (a second floq process, an external sync job) changes the same row
between ``execute()`` and ``undo()``, that change is silently overwritten.
Whether undo should compare ``updated_at`` before applying its inverse is an
open question; nothing here checks it.

Each command must be executed once per trip through the history: a second
``execute()`` on a create command fails on the primary key.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol, Tuple, runtime_checkable

from floq.domain.entities.comment import CommentDTO
from floq.domain.entities.task import TaskDTO
from floq.domain.exceptions import ValidationError
from floq.domain.interfaces.task_store import (
    COMMENTS_TABLE,
    TASKS_TABLE,
    DeleteRows,
    InsertRow,
    ITaskStore,
)
from floq.domain.lifecycle import (
    PROJECT_STATUS,
    check_status_pair,
    normalize_status,
    normalize_text,
    require_text,
)


@runtime_checkable
class UndoableCommand(Protocol):
    """Interface shared by the eight command variants."""

    @property
    def description(self) -> str:
        """Label shown in "Undone: ..." / "Redone: ..." messages."""
        ...

    async def execute(self) -> None:
        """Perform the forward mutation."""
        ...

    async def undo(self) -> None:
        """Reverse what ``execute()`` did."""
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(value: str, field_name: str) -> None:
    if not value or not str(value).strip():
        raise ValidationError(
            f"{field_name} must be assigned before building a command", field=field_name
        )


@dataclass(frozen=True, kw_only=True)
class CreateTaskCommand:
    """Insert a new task; undo deletes it by id."""

    store: ITaskStore = field(repr=False, compare=False)
    task: TaskDTO
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task.id, "id")
        require_text(self.task.title, "title", "Task title")
        check_status_pair(normalize_status(self.task.status), self.task.waiting_for)
        if self.task.is_project and self.task.parent_id is not None:
            raise ValidationError("A project cannot belong to another project", field="parent_id")
        if self.task.created_at is None or self.task.updated_at is None:
            raise ValidationError(
                "Timestamps must be assigned before building a command", field="created_at"
            )

    async def execute(self) -> None:
        await self.store.insert(TASKS_TABLE, self.task.to_row())

    async def undo(self) -> None:
        await self.store.delete(TASKS_TABLE, {"id": self.task.id})


@dataclass(frozen=True, kw_only=True)
class DeleteTaskCommand:
    """Delete a task together with its comments.

    ``task`` and ``comments`` are the rows as they were read before the
    command was built; undo re-inserts them verbatim, original ids and
    timestamps included. Both directions run in a single transaction.
    """

    store: ITaskStore = field(repr=False, compare=False)
    task: TaskDTO
    comments: Tuple[CommentDTO, ...] = ()
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task.id, "id")
        object.__setattr__(self, "comments", tuple(self.comments))
        strays = [c.id for c in self.comments if c.task_id != self.task.id]
        if strays:
            raise ValidationError(
                f"Comments {strays} do not belong to task '{self.task.id}'", field="comments"
            )

    async def execute(self) -> None:
        await self.store.apply(
            [
                DeleteRows(COMMENTS_TABLE, {"task_id": self.task.id}),
                DeleteRows(TASKS_TABLE, {"id": self.task.id}),
            ]
        )

    async def undo(self) -> None:
        await self.store.apply(
            [InsertRow(TASKS_TABLE, self.task.to_row())]
            + [InsertRow(COMMENTS_TABLE, c.to_row()) for c in self.comments]
        )


@dataclass(frozen=True, kw_only=True)
class MoveTaskCommand:
    """Change a task's status (and who it is waiting for)."""

    store: ITaskStore = field(repr=False, compare=False)
    task_id: str
    from_status: str
    to_status: str
    from_waiting_for: Optional[str] = None
    to_waiting_for: Optional[str] = None
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task_id, "task_id")
        object.__setattr__(self, "from_status", normalize_status(self.from_status))
        object.__setattr__(self, "to_status", normalize_status(self.to_status))
        object.__setattr__(self, "from_waiting_for", normalize_text(self.from_waiting_for))
        object.__setattr__(self, "to_waiting_for", normalize_text(self.to_waiting_for))
        check_status_pair(self.from_status, self.from_waiting_for)
        check_status_pair(self.to_status, self.to_waiting_for)

    async def execute(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {"status": self.to_status, "waiting_for": self.to_waiting_for, "updated_at": _now()},
        )

    async def undo(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {
                "status": self.from_status,
                "waiting_for": self.from_waiting_for,
                "updated_at": _now(),
            },
        )


@dataclass(frozen=True, kw_only=True)
class LinkTaskCommand:
    """Attach a task to a project, or detach it when ``to_parent_id`` is None."""

    store: ITaskStore = field(repr=False, compare=False)
    task_id: str
    from_parent_id: Optional[str] = None
    to_parent_id: Optional[str] = None
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task_id, "task_id")
        if self.to_parent_id is not None and self.to_parent_id == self.task_id:
            raise ValidationError("A task cannot be linked to itself", field="parent_id")

    async def execute(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {"parent_id": self.to_parent_id, "updated_at": _now()},
        )

    async def undo(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {"parent_id": self.from_parent_id, "updated_at": _now()},
        )


@dataclass(frozen=True, kw_only=True)
class ConvertToProjectCommand:
    """Turn a leaf task into a project in the ``next`` status."""

    store: ITaskStore = field(repr=False, compare=False)
    task_id: str
    original_status: str
    original_waiting_for: Optional[str] = None
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task_id, "task_id")
        object.__setattr__(self, "original_status", normalize_status(self.original_status))
        check_status_pair(self.original_status, self.original_waiting_for)

    async def execute(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {
                "is_project": True,
                "status": PROJECT_STATUS,
                "waiting_for": None,
                "updated_at": _now(),
            },
        )

    async def undo(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {
                "is_project": False,
                "status": self.original_status,
                "waiting_for": self.original_waiting_for,
                "updated_at": _now(),
            },
        )


@dataclass(frozen=True, kw_only=True)
class SetContextCommand:
    """Set, change or clear a task's context tag."""

    store: ITaskStore = field(repr=False, compare=False)
    task_id: str
    from_context: Optional[str] = None
    to_context: Optional[str] = None
    description: str

    def __post_init__(self) -> None:
        _require_id(self.task_id, "task_id")
        object.__setattr__(self, "to_context", normalize_text(self.to_context))

    async def execute(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {"context": self.to_context, "updated_at": _now()},
        )

    async def undo(self) -> None:
        await self.store.update(
            TASKS_TABLE,
            {"id": self.task_id},
            {"context": self.from_context, "updated_at": _now()},
        )


@dataclass(frozen=True, kw_only=True)
class CreateCommentCommand:
    """Insert a comment; undo deletes it by id."""

    store: ITaskStore = field(repr=False, compare=False)
    comment: CommentDTO
    description: str

    def __post_init__(self) -> None:
        _require_id(self.comment.id, "id")
        _require_id(self.comment.task_id, "task_id")
        require_text(self.comment.content, "content", "Comment")
        if self.comment.created_at is None:
            raise ValidationError(
                "Timestamps must be assigned before building a command", field="created_at"
            )

    async def execute(self) -> None:
        await self.store.insert(COMMENTS_TABLE, self.comment.to_row())

    async def undo(self) -> None:
        await self.store.delete(COMMENTS_TABLE, {"id": self.comment.id})


@dataclass(frozen=True, kw_only=True)
class DeleteCommentCommand:
    """Delete a comment; undo re-inserts it with its original id and timestamp."""

    store: ITaskStore = field(repr=False, compare=False)
    comment: CommentDTO
    description: str

    def __post_init__(self) -> None:
        _require_id(self.comment.id, "id")

    async def execute(self) -> None:
        await self.store.delete(COMMENTS_TABLE, {"id": self.comment.id})

    async def undo(self) -> None:
        await self.store.insert(COMMENTS_TABLE, self.comment.to_row())


COMMAND_TYPES = (
    CreateTaskCommand,
    DeleteTaskCommand,
    MoveTaskCommand,
    LinkTaskCommand,
    ConvertToProjectCommand,
    SetContextCommand,
    CreateCommentCommand,
    DeleteCommentCommand,
)
