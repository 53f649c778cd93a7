"""
App Context - Explicit wiring of the store, history and services.

One AppContext is created when the application starts and closed when it
exits. Everything that needs the history or the store receives it from here;
there is no process-wide instance.

Example usage:
    with AppContext.from_config(load_config()) as app:
        await app.task_service.add_task("Buy milk")
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from floq.config import MAX_HISTORY_SIZE, FloqConfig
from floq.database.orm_manager import ORMManager
from floq.database.repositories import CommentRepository, TaskRepository
from floq.database.store import TaskStore
from floq.history import HistoryManager
from floq.services.task_service import TaskService

logger = logging.getLogger(__name__)


class AppContext:
    """
    Owner of the per-run collaborators.

    Creates and caches the store, repositories, history manager and task
    service so they all share one ORM manager.
    """

    def __init__(self, orm_manager: ORMManager, history_size: int = MAX_HISTORY_SIZE):
        """
        Initialize the context.

        Args:
            orm_manager: ORM manager instance; closed together with the context.
            history_size: Undo depth for the history manager.
        """
        self._orm_manager = orm_manager
        self._history_size = history_size
        self._lock = threading.RLock()  # RLock allows reentrant locking
        self._closed = False

        self._store: Optional[TaskStore] = None
        self._task_repo: Optional[TaskRepository] = None
        self._comment_repo: Optional[CommentRepository] = None
        self._history: Optional[HistoryManager] = None
        self._task_service: Optional[TaskService] = None

    @classmethod
    def from_config(cls, config: FloqConfig) -> "AppContext":
        """Build a context for the configured database."""
        return cls(ORMManager(config.db_path), history_size=config.history_size)

    @property
    def orm_manager(self) -> ORMManager:
        """Get the ORM manager."""
        return self._orm_manager

    @property
    def store(self) -> TaskStore:
        """Get or create the row store."""
        with self._lock:
            if self._store is None:
                self._store = TaskStore(self._orm_manager)
            return self._store

    @property
    def task_repository(self) -> TaskRepository:
        """Get or create the task repository."""
        with self._lock:
            if self._task_repo is None:
                self._task_repo = TaskRepository(self._orm_manager)
            return self._task_repo

    @property
    def comment_repository(self) -> CommentRepository:
        """Get or create the comment repository."""
        with self._lock:
            if self._comment_repo is None:
                self._comment_repo = CommentRepository(self._orm_manager)
            return self._comment_repo

    @property
    def history(self) -> HistoryManager:
        """Get or create the history manager."""
        with self._lock:
            if self._history is None:
                self._history = HistoryManager(max_size=self._history_size)
            return self._history

    @property
    def task_service(self) -> TaskService:
        """Get or create the task service."""
        with self._lock:
            if self._task_service is None:
                self._task_service = TaskService(
                    store=self.store,
                    history=self.history,
                    task_repo=self.task_repository,
                    comment_repo=self.comment_repository,
                )
            return self._task_service

    def close(self) -> None:
        """Drop the history and release the database."""
        with self._lock:
            if self._closed:
                return
            if self._history is not None:
                self._history.clear()
            self._orm_manager.close()
            self._closed = True
            logger.debug("App context closed")

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
