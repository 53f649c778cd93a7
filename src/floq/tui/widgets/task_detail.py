"""Task detail widget for the TUI detail pane.

Shows the selected task's fields followed by its comments, oldest first.
"""

from typing import Optional

from rich.text import Text
from textual.widgets import Static

from floq.domain.entities.comment import CommentDTO
from floq.domain.entities.task import TaskDTO
from floq.tui.constants import RICH_STATUS_COLORS

EMPTY_MESSAGE = "No task selected"


class TaskDetail(Static):
    """Read-only view of one task and its comments."""

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(EMPTY_MESSAGE, name=name, id=id, classes=classes)
        self._task_id: Optional[str] = None

    @property
    def task_id(self) -> Optional[str]:
        """Id of the task currently displayed."""
        return self._task_id

    @staticmethod
    def build_detail(
        task: TaskDTO,
        comments: list[CommentDTO],
        project_title: Optional[str] = None,
    ) -> Text:
        """Build the Rich text for a task and its comments."""
        text = Text()
        text.append(task.title, style="bold")
        text.append("\n\n")

        kind = "project" if task.is_project else "task"
        text.append("Status:  ", style="dim")
        text.append(task.status, style=RICH_STATUS_COLORS.get(task.status, ""))
        text.append(f" ({kind})\n")

        if task.waiting_for:
            text.append("Waiting: ", style="dim")
            text.append(f"{task.waiting_for}\n", style="yellow")
        if task.context:
            text.append("Context: ", style="dim")
            text.append(f"{task.context}\n", style="cyan")
        if project_title:
            text.append("Project: ", style="dim")
            text.append(f"{project_title}\n", style="bold blue")
        if task.due_date:
            text.append("Due:     ", style="dim")
            text.append(f"{task.due_date:%Y-%m-%d}\n")
        text.append("ID:      ", style="dim")
        text.append(f"{task.id}\n", style="dim")

        if task.description:
            text.append("\n")
            text.append(task.description)
            text.append("\n")

        text.append(f"\nComments ({len(comments)})\n", style="bold")
        for comment in comments:
            stamp = f"{comment.created_at:%Y-%m-%d %H:%M}" if comment.created_at else ""
            text.append(f"  {stamp} ", style="dim")
            text.append(f"{comment.content}\n")

        return text

    def show_task(
        self,
        task: TaskDTO,
        comments: list[CommentDTO],
        project_title: Optional[str] = None,
    ) -> None:
        """Display ``task`` with its comments."""
        self._task_id = task.id
        self.update(self.build_detail(task, comments, project_title))

    def clear_task(self) -> None:
        """Reset to the empty state."""
        self._task_id = None
        self.update(EMPTY_MESSAGE)
