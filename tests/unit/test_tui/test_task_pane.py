"""Tests for TaskPane actions.

The pane is built outside an app; ``notify``, ``run_worker`` and the
prompt are replaced with mocks so only the action logic runs.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from floq.domain.entities import TaskDTO
from floq.domain.exceptions import ValidationError
from floq.history import HistoryManager
from floq.tui.constants import PROJECTS_TAB, STATUS_TABS
from floq.tui.screens.main import TaskPane, tab_label


@pytest.fixture
def pane(mock_history: MagicMock, mock_task_service: MagicMock) -> TaskPane:
    widget = TaskPane(history=mock_history, task_service=mock_task_service)
    widget.notify = MagicMock()
    widget.run_worker = MagicMock()
    return widget


@pytest.fixture
def selected(pane: TaskPane, sample_tasks: list[TaskDTO]) -> TaskDTO:
    """Make the first sample task the table selection."""
    pane._selected_task = MagicMock(return_value=sample_tasks[0])
    return sample_tasks[0]


class TestTabLabels:
    def test_known_tabs(self) -> None:
        for label, value in STATUS_TABS:
            assert tab_label(value) == label

    def test_unknown_tab(self) -> None:
        assert tab_label("archive") == "Archive"

    def test_first_tab_is_inbox(self, pane: TaskPane) -> None:
        assert pane.current_tab == "inbox"


class TestHistorySubscription:
    """Tests for reloading on history changes."""

    async def test_mount_subscribes_and_unmount_unsubscribes(
        self, mock_task_service: MagicMock
    ) -> None:
        history = HistoryManager()
        widget = TaskPane(history=history, task_service=mock_task_service)
        widget.query_one = MagicMock()
        widget.reload = AsyncMock()

        await widget.on_mount()
        assert len(history._listeners) == 1
        widget.reload.assert_awaited_once()

        widget.on_unmount()
        assert history._listeners == []

    def test_history_change_schedules_exclusive_reload(self, pane: TaskPane) -> None:
        pane.reload = MagicMock(return_value="reload-coroutine")

        pane._on_history_changed()

        pane.run_worker.assert_called_once_with(
            "reload-coroutine", group="reload", exclusive=True
        )


class TestPerform:
    """Tests for the shared mutation wrapper."""

    async def test_success_toasts_undo_description(
        self, pane: TaskPane, mock_history: MagicMock
    ) -> None:
        mock_history.get_undo_description.return_value = 'Completed: "Buy seeds"'

        await pane._perform(AsyncMock())

        pane.notify.assert_called_once_with('Completed: "Buy seeds"')

    async def test_rejection_toasts_error(self, pane: TaskPane) -> None:
        action = AsyncMock(side_effect=ValidationError("'Buy seeds' is already done"))

        await pane._perform(action)

        pane.notify.assert_called_once_with("'Buy seeds' is already done", severity="error")


class TestTaskActions:
    """Tests for the single-key task actions."""

    async def test_done(
        self, pane: TaskPane, selected: TaskDTO, mock_task_service: MagicMock
    ) -> None:
        pane._perform = AsyncMock()

        await pane.action_done()

        action = pane._perform.call_args.args[0]
        await action()
        mock_task_service.complete_task.assert_awaited_once_with(selected.id)

    async def test_done_without_selection(
        self, pane: TaskPane, mock_task_service: MagicMock
    ) -> None:
        pane._selected_task = MagicMock(return_value=None)
        pane._perform = AsyncMock()

        await pane.action_done()

        pane._perform.assert_not_awaited()

    async def test_move(
        self, pane: TaskPane, selected: TaskDTO, mock_task_service: MagicMock
    ) -> None:
        pane._perform = AsyncMock()

        await pane.action_move("someday")

        await pane._perform.call_args.args[0]()
        mock_task_service.move_task.assert_awaited_once_with(selected.id, "someday")

    async def test_move_ignores_other_statuses(self, pane: TaskPane, selected: TaskDTO) -> None:
        pane._perform = AsyncMock()

        await pane.action_move("done")

        pane._perform.assert_not_awaited()

    def test_add_prompts_for_task(self, pane: TaskPane) -> None:
        pane._prompt = MagicMock()

        pane.action_add()

        assert pane._prompt.call_args.args[0] == "New task"

    def test_add_on_projects_tab_prompts_for_project(self, pane: TaskPane) -> None:
        pane._prompt = MagicMock()
        pane._tab = PROJECTS_TAB

        pane.action_add()

        assert pane._prompt.call_args.args[0] == "New project"

    async def test_link_with_empty_answer_unlinks(
        self, pane: TaskPane, selected: TaskDTO, mock_task_service: MagicMock
    ) -> None:
        pane._prompt = MagicMock()

        pane.action_link()
        link = pane._prompt.call_args.args[1]
        await link("")

        mock_task_service.unlink_task.assert_awaited_once_with(selected.id)
        mock_task_service.link_task.assert_not_awaited()

    async def test_link_resolves_project(
        self,
        pane: TaskPane,
        selected: TaskDTO,
        sample_project: TaskDTO,
        mock_task_service: MagicMock,
    ) -> None:
        pane._prompt = MagicMock()
        mock_task_service.resolve_project = AsyncMock(return_value=sample_project)

        pane.action_link()
        await pane._prompt.call_args.args[1]("Garden")

        mock_task_service.resolve_project.assert_awaited_once_with("Garden")
        mock_task_service.link_task.assert_awaited_once_with(selected.id, sample_project.id)

    async def test_context_empty_answer_clears(
        self, pane: TaskPane, selected: TaskDTO, mock_task_service: MagicMock
    ) -> None:
        pane._prompt = MagicMock()

        pane.action_context()
        await pane._prompt.call_args.args[1]("")

        mock_task_service.set_context.assert_awaited_once_with(selected.id, None)
        assert pane._prompt.call_args.kwargs["value"] == "@shop"


class TestDeleteResult:
    """Tests for handling the delete modal result."""

    def test_confirmed_delete_runs(self, pane: TaskPane, mock_task_service: MagicMock) -> None:
        pane._perform = MagicMock(return_value="perform-coroutine")

        pane._handle_delete_result("task-uuid-001", True)

        pane.run_worker.assert_called_once_with("perform-coroutine")

    async def test_confirmed_delete_targets_the_task(
        self, pane: TaskPane, mock_task_service: MagicMock
    ) -> None:
        pane._perform = MagicMock()

        pane._handle_delete_result("task-uuid-001", True)

        await pane._perform.call_args.args[0]()
        mock_task_service.delete_task.assert_awaited_once_with("task-uuid-001")

    def test_cancelled_delete_does_nothing(self, pane: TaskPane) -> None:
        pane._perform = MagicMock()

        pane._handle_delete_result("task-uuid-001", False)
        pane._handle_delete_result("task-uuid-001", None)

        pane.run_worker.assert_not_called()


class TestUndoRedo:
    """Tests for the undo and redo keys."""

    async def test_undo(self, pane: TaskPane, mock_task_service: MagicMock) -> None:
        mock_task_service.undo = AsyncMock(return_value='Added: "Buy seeds"')

        await pane.action_undo()

        pane.notify.assert_called_once_with('Undone: Added: "Buy seeds"')

    async def test_nothing_to_undo(self, pane: TaskPane) -> None:
        await pane.action_undo()

        pane.notify.assert_called_once_with("Nothing to undo", severity="warning")

    async def test_redo(self, pane: TaskPane, mock_task_service: MagicMock) -> None:
        mock_task_service.redo = AsyncMock(return_value='Added: "Buy seeds"')

        await pane.action_redo()

        pane.notify.assert_called_once_with('Redone: Added: "Buy seeds"')

    async def test_nothing_to_redo(self, pane: TaskPane) -> None:
        await pane.action_redo()

        pane.notify.assert_called_once_with("Nothing to redo", severity="warning")

    async def test_failed_undo_is_reported(
        self, pane: TaskPane, mock_task_service: MagicMock
    ) -> None:
        mock_task_service.undo = AsyncMock(side_effect=ValidationError("boom"))

        await pane.action_undo()

        pane.notify.assert_called_once_with("Undo failed: boom", severity="error")
