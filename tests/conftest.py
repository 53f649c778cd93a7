"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from typing import Generator

import pytest

from floq.database.orm_manager import ORMManager
from floq.database.repositories import CommentRepository, TaskRepository
from floq.database.store import TaskStore
from floq.history import HistoryManager
from floq.services import AppContext, TaskService

FLOQ_ENV_VARS = ("FLOQ_DB_PATH", "FLOQ_CONFIG_DIR", "FLOQ_DEBUG", "FLOQ_LOG_FILE")


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Point every FLOQ_* setting at a per-test directory."""
    for name in FLOQ_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    config_dir = tmp_path / "floq-home"
    monkeypatch.setenv("FLOQ_CONFIG_DIR", str(config_dir))
    yield config_dir


@pytest.fixture
def temp_db_path(tmp_path: Path) -> str:
    """Get a fresh test database path."""
    return os.path.join(tmp_path, "test.db")


@pytest.fixture
def orm_manager(temp_db_path: str) -> Generator[ORMManager, None, None]:
    """Create an ORM manager with a temporary database."""
    manager = ORMManager(temp_db_path)
    yield manager
    manager.close()


@pytest.fixture
def store(orm_manager: ORMManager) -> TaskStore:
    """Create a row store on the test database."""
    return TaskStore(orm_manager)


@pytest.fixture
def task_repo(orm_manager: ORMManager) -> TaskRepository:
    """Create a task repository."""
    return TaskRepository(orm_manager)


@pytest.fixture
def comment_repo(orm_manager: ORMManager) -> CommentRepository:
    """Create a comment repository."""
    return CommentRepository(orm_manager)


@pytest.fixture
def history() -> HistoryManager:
    """Create an empty history manager."""
    return HistoryManager()


@pytest.fixture
def task_service(
    store: TaskStore,
    history: HistoryManager,
    task_repo: TaskRepository,
    comment_repo: CommentRepository,
) -> TaskService:
    """Create a task service with all dependencies."""
    return TaskService(
        store=store,
        history=history,
        task_repo=task_repo,
        comment_repo=comment_repo,
    )


@pytest.fixture
def app_context(temp_db_path: str) -> Generator[AppContext, None, None]:
    """Create an application context on the test database."""
    context = AppContext(ORMManager(temp_db_path))
    yield context
    context.close()
