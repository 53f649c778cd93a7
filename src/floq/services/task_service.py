"""
Task Service - Builds commands from user intent and runs them through history.

Every mutation follows the same path: read the rows it affects, validate the
transition, build a command carrying the snapshot its undo needs, and hand
it to the HistoryManager. Reads go through the repositories on a worker
thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from floq.database.models.base import generate_id, get_current_timestamp
from floq.database.repositories import CommentRepository, TaskRepository
from floq.domain.entities.comment import CommentDTO
from floq.domain.entities.result_types import DomainResult
from floq.domain.entities.task import TaskDTO
from floq.domain.exceptions import (
    AmbiguousIdError,
    NotFoundError,
    ValidationError,
)
from floq.domain.interfaces.task_store import COMMENTS_TABLE, TASKS_TABLE, ITaskStore
from floq.domain.lifecycle import (
    TaskStatus,
    check_convert,
    check_delete,
    check_link,
    check_move,
    check_new_task,
    normalize_status,
    normalize_text,
    require_text,
)
from floq.history import (
    ConvertToProjectCommand,
    CreateCommentCommand,
    CreateTaskCommand,
    DeleteCommentCommand,
    DeleteTaskCommand,
    HistoryManager,
    LinkTaskCommand,
    MoveTaskCommand,
    SetContextCommand,
    UndoableCommand,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskService:
    """
    Service for task business logic.

    Mutations return the description of the command that ran; ``undo`` and
    ``redo`` return the description of what they reversed, or None when
    there was nothing to do.
    """

    def __init__(
        self,
        store: ITaskStore,
        history: HistoryManager,
        task_repo: TaskRepository,
        comment_repo: CommentRepository,
    ):
        """Initialize service with the store, history and repositories."""
        self.store = store
        self.history = history
        self.task_repo = task_repo
        self.comment_repo = comment_repo

    # --- Helper Methods ---

    async def _query(self, fn: Callable[[], DomainResult[T]]) -> T:
        """Run a repository call off the loop and unwrap its result."""
        return (await asyncio.to_thread(fn)).unwrap()

    async def _run(self, command: UndoableCommand) -> str:
        await self.history.execute(command)
        logger.info("%s", command.description)
        return command.description

    @staticmethod
    def _pick_one(resource: str, key: str, matches: List[Any], label: Callable[[Any], str]) -> Any:
        if not matches:
            raise NotFoundError(resource, key)
        if len(matches) > 1:
            raise AmbiguousIdError(resource, key, [(m.id, label(m)) for m in matches])
        return matches[0]

    # --- Reads ---

    async def get_task(self, task_id: str) -> TaskDTO:
        """Get a task by its full id."""
        return await self._query(lambda: self.task_repo.get(task_id))

    async def resolve_task(self, id_or_prefix: str) -> TaskDTO:
        """
        Resolve a full id or a unique id prefix to a task.

        Raises:
            NotFoundError: Nothing matches.
            AmbiguousIdError: More than one task matches the prefix.
        """
        key = require_text(id_or_prefix, "id", "Task id")
        matches = await self._query(lambda: self.task_repo.find_by_prefix(key))
        exact = [t for t in matches if t.id == key]
        return self._pick_one("Task", key, exact or matches, lambda t: t.title)

    async def resolve_project(self, id_prefix_or_title: str) -> TaskDTO:
        """Resolve a project by id prefix, falling back to an exact title match."""
        key = require_text(id_prefix_or_title, "id", "Project")
        matches = await self._query(lambda: self.task_repo.find_by_prefix(key, is_project=True))
        if not matches:
            matches = await self._query(lambda: self.task_repo.find_projects_by_title(key))
        return self._pick_one("Project", key, matches, lambda t: t.title)

    async def resolve_comment(self, id_or_prefix: str) -> CommentDTO:
        """Resolve a full id or unique id prefix to a comment."""
        key = require_text(id_or_prefix, "id", "Comment id")
        matches = await self._query(lambda: self.comment_repo.find_by_prefix(key))
        exact = [c for c in matches if c.id == key]
        return self._pick_one("Comment", key, exact or matches, lambda c: c.content[:40])

    async def list_tasks(
        self,
        status: Optional[str] = None,
        context: Optional[str] = None,
        parent_id: Optional[str] = None,
        include_projects: bool = False,
    ) -> List[TaskDTO]:
        """
        List tasks.

        Args:
            status: Only tasks in this status.
            context: Only tasks with this context; "" selects tasks without one.
            parent_id: Only children of this project.
            include_projects: Include project rows as well as leaf tasks.
        """
        filters: Dict[str, Any] = {}
        if status is not None:
            filters["status"] = normalize_status(status)
        if context is not None:
            filters["context"] = context.strip()
        if parent_id is not None:
            filters["parent_id"] = parent_id
        if not include_projects:
            filters["is_project"] = False
        return await self._query(lambda: self.task_repo.list(filters=filters))

    async def list_projects(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List projects with their child task counts.

        Returns:
            Dicts of ``{"project": TaskDTO, "active": int, "done": int}``.
        """
        filters: Dict[str, Any] = {"is_project": True}
        if status is not None:
            filters["status"] = normalize_status(status)
        projects = await self._query(lambda: self.task_repo.list(filters=filters))
        counts = await self._query(lambda: self.task_repo.count_children([p.id for p in projects]))
        return [{"project": p, **counts[p.id]} for p in projects]

    async def list_comments(self, task_id: str) -> List[CommentDTO]:
        """List a task's comments, oldest first."""
        return await self._query(lambda: self.comment_repo.list_for_task(task_id))

    async def list_contexts(self) -> List[str]:
        """Distinct contexts currently in use."""
        return await self._query(self.task_repo.list_contexts)

    async def search_tasks(self, query: str, limit: Optional[int] = None) -> List[TaskDTO]:
        """Case-insensitive search over titles and descriptions."""
        return await self._query(lambda: self.task_repo.search(query, limit=limit))

    # --- Task Mutations ---

    async def add_task(
        self,
        title: str,
        parent_id: Optional[str] = None,
        context: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> TaskDTO:
        """
        Create a task in the inbox, or in ``next`` when added under a project.

        Returns:
            The task as inserted.
        """
        parent = await self.get_task(parent_id) if parent_id else None
        now = get_current_timestamp()
        task = TaskDTO(
            id=generate_id(),
            title=require_text(title, "title", "Task title"),
            description=normalize_text(description),
            status=TaskStatus.NEXT.value if parent_id else TaskStatus.INBOX.value,
            parent_id=parent_id,
            context=normalize_text(context),
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )
        check_new_task(task, parent)
        await self._run(
            CreateTaskCommand(store=self.store, task=task, description=f'Added: "{task.title}"')
        )
        return task

    async def add_project(self, title: str, description: Optional[str] = None) -> TaskDTO:
        """Create a new project; titles must be unique among projects."""
        title = require_text(title, "title", "Project name")
        existing = await self._query(lambda: self.task_repo.find_projects_by_title(title))
        if existing:
            raise ValidationError(f"Project '{title}' already exists", field="title")

        now = get_current_timestamp()
        project = TaskDTO(
            id=generate_id(),
            title=title,
            description=normalize_text(description),
            status=TaskStatus.NEXT.value,
            is_project=True,
            created_at=now,
            updated_at=now,
        )
        check_new_task(project, None)
        await self._run(
            CreateTaskCommand(
                store=self.store, task=project, description=f'Created project: "{title}"'
            )
        )
        return project

    async def move_task(
        self, task_id: str, status: str, waiting_for: Optional[str] = None
    ) -> str:
        """Move a task to ``status``; ``waiting`` needs ``waiting_for``."""
        task = await self.get_task(task_id)
        to_status = normalize_status(status)
        to_waiting_for = check_move(task, to_status, waiting_for)

        if to_status == TaskStatus.DONE.value:
            description = f'Completed: "{task.title}"'
        elif to_status == TaskStatus.WAITING.value:
            description = f'Moved "{task.title}" to waiting ({to_waiting_for})'
        else:
            description = f'Moved "{task.title}" to {to_status}'

        return await self._run(
            MoveTaskCommand(
                store=self.store,
                task_id=task.id,
                from_status=task.status,
                to_status=to_status,
                from_waiting_for=task.waiting_for,
                to_waiting_for=to_waiting_for,
                description=description,
            )
        )

    async def complete_task(self, task_id: str) -> str:
        """Mark a task done."""
        return await self.move_task(task_id, TaskStatus.DONE.value)

    async def convert_to_project(self, task_id: str) -> str:
        """Turn a leaf task into a project."""
        task = await self.get_task(task_id)
        check_convert(task)
        return await self._run(
            ConvertToProjectCommand(
                store=self.store,
                task_id=task.id,
                original_status=task.status,
                original_waiting_for=task.waiting_for,
                description=f'Made project: "{task.title}"',
            )
        )

    async def link_task(self, task_id: str, project_id: str) -> str:
        """Attach a task to a project."""
        task = await self.get_task(task_id)
        project = await self.get_task(project_id)
        check_link(task, project)
        return await self._run(
            LinkTaskCommand(
                store=self.store,
                task_id=task.id,
                from_parent_id=task.parent_id,
                to_parent_id=project.id,
                description=f'Linked "{task.title}" to {project.title}',
            )
        )

    async def unlink_task(self, task_id: str) -> str:
        """Detach a task from its project."""
        task = await self.get_task(task_id)
        check_link(task, None)
        if task.parent_id is None:
            raise ValidationError(f"'{task.title}' is not part of a project", field="parent_id")
        return await self._run(
            LinkTaskCommand(
                store=self.store,
                task_id=task.id,
                from_parent_id=task.parent_id,
                to_parent_id=None,
                description=f'Unlinked "{task.title}"',
            )
        )

    async def set_context(self, task_id: str, context: Optional[str]) -> str:
        """Set or clear (``None``/"") a task's context."""
        task = await self.get_task(task_id)
        to_context = normalize_text(context)
        if to_context is None:
            description = f'Cleared context of "{task.title}"'
        else:
            description = f'Set context of "{task.title}" to {to_context}'
        return await self._run(
            SetContextCommand(
                store=self.store,
                task_id=task.id,
                from_context=task.context,
                to_context=to_context,
                description=description,
            )
        )

    async def delete_task(self, task_id: str) -> str:
        """Delete a task and its comments."""
        rows = await self.store.select(TASKS_TABLE, {"id": task_id})
        if not rows:
            raise NotFoundError("Task", task_id)
        task = TaskDTO.from_row(rows[0])
        children = await self.store.select(TASKS_TABLE, {"parent_id": task.id})
        check_delete(task, len(children))
        comments = [
            CommentDTO.from_row(row)
            for row in await self.store.select(COMMENTS_TABLE, {"task_id": task.id})
        ]
        return await self._run(
            DeleteTaskCommand(
                store=self.store,
                task=task,
                comments=tuple(comments),
                description=f'Deleted: "{task.title}"',
            )
        )

    # --- Comment Mutations ---

    async def add_comment(self, task_id: str, content: str) -> CommentDTO:
        """Attach a comment to a task."""
        task = await self.get_task(task_id)
        comment = CommentDTO(
            id=generate_id(),
            task_id=task.id,
            content=require_text(content, "content", "Comment"),
            created_at=get_current_timestamp(),
        )
        await self._run(
            CreateCommentCommand(store=self.store, comment=comment, description="Comment added")
        )
        return comment

    async def delete_comment(self, comment_id: str) -> str:
        """Delete a comment."""
        comment = await self._query(lambda: self.comment_repo.get(comment_id))
        return await self._run(
            DeleteCommentCommand(store=self.store, comment=comment, description="Comment deleted")
        )

    # --- History ---

    async def undo(self) -> Optional[str]:
        """Undo the last action, returning its description or None."""
        command = await self.history.undo_last()
        return command.description if command is not None else None

    async def redo(self) -> Optional[str]:
        """Redo the last undone action, returning its description or None."""
        command = await self.history.redo_last()
        return command.description if command is not None else None
