"""Tests for TaskTable cell rendering.

Rendering is exposed as static methods, so these tests need no app.
"""

from rich.text import Text

from floq.domain.entities import TaskDTO
from floq.tui.constants import PROJECT_COLOR, PROJECT_ICON, STATUS_ICONS
from floq.tui.widgets.task_table import TaskTable


class TestStatusCell:
    """Tests for the status icon column."""

    def test_each_status_has_its_icon(self, sample_tasks: list[TaskDTO]) -> None:
        for task in sample_tasks:
            cell = TaskTable.render_status_cell(task)
            assert isinstance(cell, Text)
            assert cell.plain == STATUS_ICONS[task.status]

    def test_project_icon(self, sample_project: TaskDTO) -> None:
        cell = TaskTable.render_status_cell(sample_project)

        assert cell.plain == PROJECT_ICON
        assert str(cell.style) == PROJECT_COLOR

    def test_unknown_status(self) -> None:
        task = TaskDTO(id="t", title="Odd", status="archived")

        assert TaskTable.render_status_cell(task).plain == "?"


class TestTitleCell:
    def test_done_tasks_are_struck_through(self, sample_tasks: list[TaskDTO]) -> None:
        done = sample_tasks[2]

        assert str(TaskTable.render_title_cell(done).style) == "dim strike"

    def test_open_tasks_are_plain(self, sample_tasks: list[TaskDTO]) -> None:
        cell = TaskTable.render_title_cell(sample_tasks[0])

        assert cell.plain == "Buy seeds"
        assert str(cell.style) == ""

    def test_projects_use_project_color(self, sample_project: TaskDTO) -> None:
        assert str(TaskTable.render_title_cell(sample_project).style) == PROJECT_COLOR


class TestInfoCell:
    """Tests for the info column."""

    def test_waiting_for(self, sample_tasks: list[TaskDTO]) -> None:
        cell = TaskTable.render_info_cell(sample_tasks[1])

        assert cell.plain == "⧗ Bob"

    def test_project_progress(self, sample_project: TaskDTO) -> None:
        cell = TaskTable.render_info_cell(sample_project, {sample_project.id: (2, 1)})

        assert cell.plain == "1/3 done"

    def test_project_without_counts(self, sample_project: TaskDTO) -> None:
        assert TaskTable.render_info_cell(sample_project).plain == ""
        assert TaskTable.render_info_cell(sample_project, {}).plain == ""

    def test_plain_task(self, sample_tasks: list[TaskDTO]) -> None:
        assert TaskTable.render_info_cell(sample_tasks[0]).plain == ""
