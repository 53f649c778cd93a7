"""
Task Lifecycle - Legal status and hierarchy transitions.

Statuses form a small GTD state machine crossed with an orthogonal
``is_project`` flag:

    inbox ──┐
    next  ──┼──> inbox | next | someday      (waiting_for cleared)
    waiting ┼──> waiting                     (requires waiting_for)
    someday ┤
    done  ──┘    non-project, non-done ──> done

    leaf ──ConvertToProject──> project (status forced to next)
    leaf ──Link──> attached to a project, or detached

Every check here runs before a command object exists. Commands themselves
never validate inside ``execute()``/``undo()``.
"""

from enum import Enum
from typing import Optional, Tuple

from floq.domain.entities.task import TaskDTO
from floq.domain.exceptions import ValidationError


class TaskStatus(str, Enum):
    """GTD task status."""

    INBOX = "inbox"
    NEXT = "next"
    WAITING = "waiting"
    SOMEDAY = "someday"
    DONE = "done"


ALL_STATUSES: Tuple[str, ...] = tuple(s.value for s in TaskStatus)

# Statuses a task may be moved to without extra data
MOVE_TARGETS: Tuple[str, ...] = (
    TaskStatus.INBOX.value,
    TaskStatus.NEXT.value,
    TaskStatus.SOMEDAY.value,
)

# Status a converted project is forced into
PROJECT_STATUS = TaskStatus.NEXT.value


def normalize_status(status: str) -> str:
    """Return ``status`` as a plain string, rejecting unknown values."""
    value = status.value if isinstance(status, TaskStatus) else str(status).strip().lower()
    if value not in ALL_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Valid statuses: {', '.join(ALL_STATUSES)}",
            field="status",
        )
    return value


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace, mapping empty strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_text(value: Optional[str], field: str, label: str) -> str:
    """Return stripped ``value`` or raise when it is empty."""
    text = normalize_text(value)
    if text is None:
        raise ValidationError(f"{label} cannot be empty or whitespace", field=field)
    return text


def check_status_pair(status: str, waiting_for: Optional[str]) -> None:
    """Enforce that ``waiting_for`` is set iff ``status`` is waiting."""
    if status == TaskStatus.WAITING.value and not waiting_for:
        raise ValidationError(
            "Moving a task to waiting requires someone to wait for", field="waiting_for"
        )
    if status != TaskStatus.WAITING.value and waiting_for is not None:
        raise ValidationError(
            f"waiting_for must be empty for status '{status}'", field="waiting_for"
        )


def check_move(task: TaskDTO, to_status: str, waiting_for: Optional[str]) -> Optional[str]:
    """Validate a status move and return the resulting ``waiting_for``.

    Args:
        task: Current snapshot of the task.
        to_status: Target status.
        waiting_for: Who/what the task waits for; only used for ``waiting``.

    Returns:
        The normalized ``waiting_for`` value to store (None unless waiting).

    Raises:
        ValidationError: If the transition is not legal.
    """
    to_status = normalize_status(to_status)
    if to_status == TaskStatus.DONE.value:
        check_complete(task)
        return None
    if to_status == TaskStatus.WAITING.value:
        return require_text(waiting_for, "waiting_for", "Waiting for")
    return None


def check_complete(task: TaskDTO) -> None:
    """Validate that ``task`` can be marked done."""
    if task.is_project:
        raise ValidationError(f"'{task.title}' is a project, not a task", field="status")
    if task.status == TaskStatus.DONE.value:
        raise ValidationError(f"'{task.title}' is already done", field="status")


def check_convert(task: TaskDTO) -> None:
    """Validate converting a leaf task into a project."""
    if task.is_project:
        raise ValidationError(f"'{task.title}' is already a project", field="is_project")
    if task.parent_id is not None:
        raise ValidationError(
            f"'{task.title}' belongs to a project; projects cannot be nested",
            field="parent_id",
        )


def check_link(task: TaskDTO, project: Optional[TaskDTO]) -> None:
    """Validate attaching ``task`` to ``project`` (or detaching when None)."""
    if task.is_project:
        raise ValidationError(
            f"'{task.title}' is a project; projects cannot be nested", field="parent_id"
        )
    if project is None:
        return
    if project.id == task.id:
        raise ValidationError("A task cannot be linked to itself", field="parent_id")
    if not project.is_project:
        raise ValidationError(f"'{project.title}' is not a project", field="parent_id")


def check_new_task(task: TaskDTO, parent: Optional[TaskDTO]) -> None:
    """Validate a task row about to be inserted."""
    require_text(task.title, "title", "Task title")
    normalize_status(task.status)
    check_status_pair(task.status, task.waiting_for)
    if task.is_project and task.parent_id is not None:
        raise ValidationError("A project cannot belong to another project", field="parent_id")
    if task.parent_id is not None and (parent is None or not parent.is_project):
        raise ValidationError(f"Parent '{task.parent_id}' is not a project", field="parent_id")


def check_delete(task: TaskDTO, child_count: int) -> None:
    """Validate deleting ``task``; projects must be emptied first."""
    if task.is_project and child_count > 0:
        raise ValidationError(
            f"Project '{task.title}' still has {child_count} task(s); "
            "unlink or delete them first",
            field="id",
        )
