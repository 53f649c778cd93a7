"""
Task Repository.

SQLAlchemy ORM-based repository for the read side of tasks: lookups, id
prefix resolution, listings and search. Writes go through the history
commands and the TaskStore.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select

from floq.database.models.task import Task
from floq.database.orm_manager import ORMManager
from floq.domain.entities.result_types import (
    DomainError,
    DomainResult,
    DomainSuccess,
)
from floq.domain.entities.task import TaskDTO
from floq.domain.interfaces.task_store import TASKS_TABLE


class TaskRepository:
    """
    Task repository using SQLAlchemy ORM.

    Provides task queries with error handling via the DomainResult pattern.
    """

    def __init__(self, orm_manager: ORMManager):
        """
        Initialize repository with ORM manager.

        Args:
            orm_manager: ORM manager instance.
        """
        self.orm_manager = orm_manager

    def _to_dto(self, task: Task) -> TaskDTO:
        """Convert Task model to TaskDTO."""
        return TaskDTO(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            is_project=bool(task.is_project),
            parent_id=task.parent_id,
            waiting_for=task.waiting_for,
            context=task.context,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def get(self, task_id: str) -> DomainResult[TaskDTO]:
        """
        Get task by ID.

        Args:
            task_id: Task UUID.

        Returns:
            DomainResult with task data or not found error.
        """
        try:
            with self.orm_manager.get_session() as session:
                task = session.execute(select(Task).where(Task.id == task_id)).scalar_one_or_none()

                if not task:
                    return DomainError.not_found("Task", task_id)

                return DomainSuccess.create(data=self._to_dto(task))

        except Exception as e:
            return DomainError.operation_failed("get_task", TASKS_TABLE, str(e))

    def find_by_prefix(
        self, prefix: str, is_project: Optional[bool] = None
    ) -> DomainResult[List[TaskDTO]]:
        """
        Find tasks whose id starts with ``prefix``.

        Args:
            prefix: Leading characters of the id.
            is_project: Restrict to projects (True) or leaf tasks (False).

        Returns:
            DomainResult with every matching task.
        """
        try:
            with self.orm_manager.get_session() as session:
                query = select(Task).where(Task.id.startswith(prefix, autoescape=True))
                if is_project is not None:
                    query = query.where(Task.is_project == is_project)
                tasks = session.execute(query.order_by(Task.created_at.asc())).scalars().all()
                return DomainSuccess.create(data=[self._to_dto(t) for t in tasks])

        except Exception as e:
            return DomainError.operation_failed("find_task", TASKS_TABLE, str(e))

    def find_projects_by_title(self, title: str) -> DomainResult[List[TaskDTO]]:
        """Find projects with exactly this title."""
        try:
            with self.orm_manager.get_session() as session:
                projects = (
                    session.execute(
                        select(Task).where(Task.is_project.is_(True), Task.title == title)
                    )
                    .scalars()
                    .all()
                )
                return DomainSuccess.create(data=[self._to_dto(p) for p in projects])

        except Exception as e:
            return DomainError.operation_failed("find_project", TASKS_TABLE, str(e))

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> DomainResult[List[TaskDTO]]:
        """
        List tasks with optional filtering.

        Args:
            filters: Dictionary of field filters. Supported keys: status,
                is_project, parent_id, context. A context of "" selects
                tasks without a context.
            limit: Maximum number of results.
            offset: Number of results to skip.

        Returns:
            DomainResult with list of task DTOs, oldest first.
        """
        try:
            with self.orm_manager.get_session() as session:
                query = select(Task)

                if filters:
                    if "status" in filters:
                        query = query.where(Task.status == filters["status"])
                    if "is_project" in filters:
                        query = query.where(Task.is_project == bool(filters["is_project"]))
                    if "parent_id" in filters:
                        parent_id = filters["parent_id"]
                        if parent_id is None:
                            query = query.where(Task.parent_id.is_(None))
                        else:
                            query = query.where(Task.parent_id == parent_id)
                    if "context" in filters:
                        context = filters["context"]
                        if context == "" or context is None:
                            query = query.where(Task.context.is_(None))
                        else:
                            query = query.where(Task.context == context)

                query = query.order_by(Task.created_at.asc(), Task.id.asc())

                if limit:
                    query = query.limit(limit)
                if offset:
                    query = query.offset(offset)

                tasks = session.execute(query).scalars().all()
                return DomainSuccess.create(data=[self._to_dto(t) for t in tasks])

        except Exception as e:
            return DomainError.operation_failed("list_tasks", TASKS_TABLE, str(e))

    def count_children(self, project_ids: List[str]) -> DomainResult[Dict[str, Dict[str, int]]]:
        """
        Count child tasks per project.

        Args:
            project_ids: Projects to count for.

        Returns:
            DomainResult mapping project id to {"active": n, "done": n}.
        """
        counts: Dict[str, Dict[str, int]] = {pid: {"active": 0, "done": 0} for pid in project_ids}
        if not project_ids:
            return DomainSuccess.create(data=counts)
        try:
            with self.orm_manager.get_session() as session:
                rows = session.execute(
                    select(Task.parent_id, Task.status, func.count(Task.id))
                    .where(Task.parent_id.in_(project_ids))
                    .group_by(Task.parent_id, Task.status)
                ).all()
                for parent_id, status, count in rows:
                    bucket = "done" if status == "done" else "active"
                    counts[parent_id][bucket] += count
                return DomainSuccess.create(data=counts)

        except Exception as e:
            return DomainError.operation_failed("count_children", TASKS_TABLE, str(e))

    def list_contexts(self) -> DomainResult[List[str]]:
        """Distinct contexts in use, alphabetically."""
        try:
            with self.orm_manager.get_session() as session:
                rows = session.execute(
                    select(Task.context)
                    .where(Task.context.is_not(None))
                    .distinct()
                    .order_by(Task.context.asc())
                ).all()
                return DomainSuccess.create(data=[r[0] for r in rows])

        except Exception as e:
            return DomainError.operation_failed("list_contexts", TASKS_TABLE, str(e))

    def search(self, query: str, limit: Optional[int] = None) -> DomainResult[List[TaskDTO]]:
        """
        Case-insensitive search over title and description.

        Args:
            query: Text to look for.
            limit: Maximum number of results.

        Returns:
            DomainResult with matching tasks, most recently updated first.
        """
        query = query.strip()
        if not query:
            return DomainSuccess.create(data=[])
        try:
            with self.orm_manager.get_session() as session:
                needle = query.lower()
                stmt = (
                    select(Task)
                    .where(
                        or_(
                            func.lower(Task.title).contains(needle, autoescape=True),
                            func.lower(func.coalesce(Task.description, "")).contains(
                                needle, autoescape=True
                            ),
                        )
                    )
                    .order_by(Task.updated_at.desc())
                )
                if limit:
                    stmt = stmt.limit(limit)
                tasks = session.execute(stmt).scalars().all()
                return DomainSuccess.create(data=[self._to_dto(t) for t in tasks])

        except Exception as e:
            return DomainError.operation_failed("search_tasks", TASKS_TABLE, str(e))
