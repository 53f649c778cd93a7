"""Task table widget for the TUI task pane.

This module provides the TaskTable widget that displays the tasks of the
active tab using Textual's DataTable for virtualized rendering.

Example usage:
    table = TaskTable(id="task-table")
    table.show_tasks(tasks)
"""

import logging
from typing import Optional

from rich.text import Text
from textual.widgets import DataTable

from floq.domain.entities.task import TaskDTO
from floq.tui.constants import (
    PROJECT_COLOR,
    PROJECT_ICON,
    RICH_STATUS_COLORS,
    STATUS_ICONS,
)

logger = logging.getLogger(__name__)

# Child task counts per project id: (active, done)
ProjectCounts = dict[str, tuple[int, int]]


class TaskTable(DataTable):
    """Task list for one status tab.

    Keyboard Navigation:
        - j: Move cursor down one row
        - k: Move cursor up one row
        - g: Move cursor to first row
        - G: Move cursor to last row

    Row keys are task ids; the cursor stays on the same task across reloads
    when that task is still listed.
    """

    BINDINGS = [
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("g", "scroll_top", "First"),
        ("G", "scroll_bottom", "Last"),
    ]

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the TaskTable widget."""
        super().__init__(
            name=name,
            id=id,
            classes=classes,
            cursor_type="row",
            zebra_stripes=True,
        )

        self.add_column("", width=2, key="status")
        self.add_column("Task", width=None, key="title")
        self.add_column("Context", width=12, key="context")
        self.add_column("Info", width=18, key="info")

        self._tasks: list[TaskDTO] = []

    @property
    def tasks(self) -> list[TaskDTO]:
        """Tasks currently shown, in display order."""
        return list(self._tasks)

    @staticmethod
    def render_status_cell(task: TaskDTO) -> Text:
        """Render the status column as a colored icon."""
        if task.is_project:
            return Text(PROJECT_ICON, style=PROJECT_COLOR)
        icon = STATUS_ICONS.get(task.status, "?")
        return Text(icon, style=RICH_STATUS_COLORS.get(task.status, "white"))

    @staticmethod
    def render_title_cell(task: TaskDTO) -> Text:
        style = "dim strike" if task.status == "done" else ""
        if task.is_project:
            style = PROJECT_COLOR
        return Text(task.title, style=style)

    @staticmethod
    def render_info_cell(task: TaskDTO, counts: Optional[ProjectCounts] = None) -> Text:
        """Render the info column: waiting-for, project progress or nothing."""
        if task.is_project and counts is not None and task.id in counts:
            active, done = counts[task.id]
            return Text(f"{done}/{active + done} done", style="dim")
        if task.waiting_for:
            return Text(f"⧗ {task.waiting_for}", style="yellow")
        return Text("")

    def show_tasks(self, tasks: list[TaskDTO], counts: Optional[ProjectCounts] = None) -> None:
        """Replace the table contents, keeping the cursor on the same task."""
        selected_id = self.get_selected_task_id()

        self.clear()
        self._tasks = list(tasks)
        for task in self._tasks:
            self.add_row(
                self.render_status_cell(task),
                self.render_title_cell(task),
                Text(task.context or "", style="cyan"),
                self.render_info_cell(task, counts),
                key=task.id,
            )

        if selected_id is not None:
            for row_index, task in enumerate(self._tasks):
                if task.id == selected_id:
                    self.move_cursor(row=row_index)
                    break
        logger.debug("Showing %d tasks", len(self._tasks))

    def get_selected_task(self) -> Optional[TaskDTO]:
        """Task under the cursor, if any."""
        if not self._tasks:
            return None
        row = self.cursor_row
        if 0 <= row < len(self._tasks):
            return self._tasks[row]
        return None

    def get_selected_task_id(self) -> Optional[str]:
        task = self.get_selected_task()
        return task.id if task else None
