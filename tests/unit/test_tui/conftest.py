"""TUI-specific test fixtures and mocks.

This module provides fixtures for testing TUI widgets in isolation:
- sample_tasks: TaskDTOs covering every status plus a project
- sample_comments: Comments on the first sample task
- mock_task_service: Mocked TaskService for isolated pane tests
- mock_history: Mocked HistoryManager
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from floq.domain.entities import CommentDTO, TaskDTO

CREATED = datetime(2024, 1, 15, 10, 0)


@pytest.fixture
def sample_project() -> TaskDTO:
    """Project with two child tasks in sample_tasks."""
    return TaskDTO(
        id="project-uuid-001",
        title="Garden",
        status="next",
        is_project=True,
        created_at=CREATED,
        updated_at=CREATED,
    )


@pytest.fixture
def sample_tasks(sample_project: TaskDTO) -> list[TaskDTO]:
    """Tasks in the format returned by TaskService.list_tasks()."""
    return [
        TaskDTO(
            id="task-uuid-001",
            title="Buy seeds",
            description="Tomatoes and basil",
            status="next",
            parent_id=sample_project.id,
            context="@shop",
            created_at=CREATED,
            updated_at=CREATED,
        ),
        TaskDTO(
            id="task-uuid-002",
            title="Get fence quote",
            status="waiting",
            waiting_for="Bob",
            parent_id=sample_project.id,
            created_at=CREATED,
            updated_at=CREATED,
        ),
        TaskDTO(
            id="task-uuid-003",
            title="Call mum",
            status="done",
            created_at=CREATED,
            updated_at=CREATED,
        ),
    ]


@pytest.fixture
def sample_comments() -> list[CommentDTO]:
    return [
        CommentDTO(
            id="comment-uuid-001",
            task_id="task-uuid-001",
            content="Check the allotment shop first",
            created_at=datetime(2024, 1, 15, 11, 30),
        ),
        CommentDTO(
            id="comment-uuid-002",
            task_id="task-uuid-001",
            content="Basil sold out",
            created_at=datetime(2024, 1, 16, 9, 5),
        ),
    ]


@pytest.fixture
def mock_task_service(sample_tasks: list[TaskDTO]) -> MagicMock:
    """Create a mocked TaskService for isolated pane tests.

    Mutations return the description a real service would; individual
    tests can override specific methods as needed.
    """
    mock = MagicMock()

    mock.list_tasks = AsyncMock(return_value=sample_tasks)
    mock.list_projects = AsyncMock(return_value=[])
    mock.list_comments = AsyncMock(return_value=[])
    mock.get_task = AsyncMock(return_value=sample_tasks[0])
    mock.add_task = AsyncMock(return_value=sample_tasks[0])
    mock.add_project = AsyncMock()
    mock.complete_task = AsyncMock(return_value='Completed: "Buy seeds"')
    mock.move_task = AsyncMock(return_value='Moved "Buy seeds" to someday')
    mock.convert_to_project = AsyncMock(return_value='Made project: "Buy seeds"')
    mock.resolve_project = AsyncMock()
    mock.link_task = AsyncMock(return_value='Linked "Buy seeds" to Garden')
    mock.unlink_task = AsyncMock(return_value='Unlinked "Buy seeds"')
    mock.set_context = AsyncMock(return_value='Cleared context of "Buy seeds"')
    mock.add_comment = AsyncMock()
    mock.delete_task = AsyncMock(return_value='Deleted: "Buy seeds"')
    mock.undo = AsyncMock(return_value=None)
    mock.redo = AsyncMock(return_value=None)

    return mock


@pytest.fixture
def mock_history() -> MagicMock:
    """Create a mocked HistoryManager."""
    mock = MagicMock()
    mock.get_undo_description.return_value = None
    mock.subscribe.return_value = MagicMock()
    return mock
