"""Delete confirmation modal for the TUI.

Asks before a task (and its comments) or an empty project is deleted.
The deletion itself goes through the history, so the hint reminds the
user it can be undone.

Example usage:
    modal = DeleteModal(task, comment_count=2)
    await self.app.push_screen(modal, callback=self._handle_delete_result)
"""

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from floq.domain.entities.task import TaskDTO


class DeleteModal(ModalScreen[bool]):
    """Yes/no dialog dismissing with True when the user confirms."""

    BINDINGS = [
        ("y", "confirm", "Delete"),
        ("n", "cancel", "Keep"),
        ("escape", "cancel", "Keep"),
    ]

    def __init__(
        self,
        task: TaskDTO,
        comment_count: int = 0,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._task = task
        self._comment_count = comment_count

    @property
    def task(self) -> TaskDTO:
        """The task awaiting confirmation."""
        return self._task

    @staticmethod
    def consequences(task: TaskDTO, comment_count: int) -> list[str]:
        """Lines describing what else disappears with ``task``."""
        lines = []
        if comment_count == 1:
            lines.append("Its comment will be deleted too.")
        elif comment_count > 1:
            lines.append(f"Its {comment_count} comments will be deleted too.")
        if task.is_project:
            lines.append("Only empty projects can be deleted.")
        return lines

    def compose(self) -> ComposeResult:
        """Compose the title, the task name, the consequences and the buttons."""
        kind = "project" if self._task.is_project else "task"
        with Container():
            yield Static(f"⚠ Delete {kind}?", classes="modal-title")
            yield Static(f'"{self._task.title}"', classes="modal-item-name", markup=False)

            for line in self.consequences(self._task, self._comment_count):
                yield Static(line, classes="modal-warning-item")

            yield Static("Press u afterwards to undo.", classes="modal-undo-hint")

            with Horizontal(classes="modal-buttons"):
                yield Button("Delete (y)", id="confirm-button", variant="error")
                yield Button("Keep (n)", id="cancel-button", variant="default")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Map the buttons onto the y/n actions."""
        if event.button.id == "confirm-button":
            self.action_confirm()
        else:
            self.action_cancel()
