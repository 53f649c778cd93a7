"""Task pane for the TUI application.

This module provides the TaskPane class that composes the status tab bar,
the task table and the detail pane, and binds every task action to a key.

All mutations go through the TaskService, and therefore through the
HistoryManager. The pane does not reload after its own actions: it
subscribes to the history and reloads whenever the history reports a
change, so undo and redo refresh the screen the same way a new action does.

Example usage:
    from floq.tui.screens.main import TaskPane

    class FloqTUI(App):
        def compose(self):
            yield TaskPane(history=context.history, task_service=context.task_service)
"""

import logging
from functools import partial
from typing import Awaitable, Callable, Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Static, Tab, Tabs

from floq.domain.entities.task import TaskDTO
from floq.domain.exceptions import FloqError, NotFoundError
from floq.history import HistoryManager
from floq.services import TaskService
from floq.tui.constants import MOVE_KEYS, PROJECTS_TAB, STATUS_TABS
from floq.tui.widgets import DeleteModal, PromptModal, TaskDetail, TaskTable

logger = logging.getLogger(__name__)


def tab_label(value: str) -> str:
    """Display label for a tab value."""
    for label, tab_value in STATUS_TABS:
        if tab_value == value:
            return label
    return value.title()


class TaskPane(Vertical):
    """Tab bar, task table and detail pane.

    Keyboard navigation:
    - Tab / Shift+Tab: Next / previous status tab
    - u / Ctrl+R: Undo / redo
    - r: Refresh data
    """

    BINDINGS = [
        Binding("tab", "next_tab", "Next Tab", show=False),
        Binding("shift+tab", "previous_tab", "Prev Tab", show=False),
        Binding("a", "add", "Add", show=True),
        Binding("d", "done", "Done", show=True),
        Binding("i", "move('inbox')", "Inbox", show=False),
        Binding("n", "move('next')", "Next", show=False),
        Binding("s", "move('someday')", "Someday", show=False),
        Binding("w", "waiting", "Waiting", show=True),
        Binding("p", "convert", "Project", show=True),
        Binding("l", "link", "Link", show=False),
        Binding("c", "context", "Context", show=False),
        Binding("m", "comment", "Comment", show=False),
        Binding("x", "delete", "Delete", show=True),
        Binding("u", "undo", "Undo", show=True),
        Binding("ctrl+r", "redo", "Redo", show=True),
        Binding("r", "refresh", "Refresh", show=False),
    ]

    def __init__(
        self,
        history: HistoryManager,
        task_service: TaskService,
        *,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the task pane.

        Args:
            history: History whose changes trigger a reload.
            task_service: Service every action is routed through.
            id: Optional widget ID.
            classes: Optional CSS classes.
        """
        super().__init__(id=id, classes=classes)
        self.history = history
        self.task_service = task_service
        self._tab: str = STATUS_TABS[0][1]
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def current_tab(self) -> str:
        """Value of the active tab."""
        return self._tab

    def compose(self) -> ComposeResult:
        """Compose the tab bar and the two panes."""
        yield Tabs(
            *[Tab(label, id=f"tab-{value}") for label, value in STATUS_TABS],
            id="status-tabs",
        )

        with Horizontal(id="pane-container"):
            with Vertical(id="task-pane"):
                yield Static("", id="task-pane-header")
                yield TaskTable(id="task-table", classes="pane-content")

            with Vertical(id="detail-pane"):
                yield Static("DETAILS", id="detail-pane-header")
                yield TaskDetail(id="task-detail", classes="pane-content")

        yield Static("", id="history-status")

    async def on_mount(self) -> None:
        """Subscribe to the history and load the first tab."""
        self._unsubscribe = self.history.subscribe(self._on_history_changed)
        self.query_one("#task-table", TaskTable).focus()
        await self.reload()

    def on_unmount(self) -> None:
        """Stop listening to the history."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_history_changed(self) -> None:
        self.run_worker(self.reload(), group="reload", exclusive=True)

    # --- Loading ---

    async def reload(self) -> None:
        """Re-query the active tab and the selected task."""
        table = self.query_one("#task-table", TaskTable)
        try:
            if self._tab == PROJECTS_TAB:
                entries = await self.task_service.list_projects()
                tasks = [entry["project"] for entry in entries]
                counts = {
                    entry["project"].id: (entry["active"], entry["done"]) for entry in entries
                }
                table.show_tasks(tasks, counts)
            else:
                tasks = await self.task_service.list_tasks(status=self._tab)
                table.show_tasks(tasks)
        except FloqError as e:
            logger.error(f"Failed to load {self._tab}: {e}")
            self.notify(str(e), severity="error")
            return

        self._update_task_header(len(tasks))
        self._update_history_status()
        await self._show_detail(table.get_selected_task_id())

    async def _show_detail(self, task_id: Optional[str]) -> None:
        detail = self.query_one("#task-detail", TaskDetail)
        if task_id is None:
            detail.clear_task()
            return

        try:
            task = await self.task_service.get_task(task_id)
            comments = await self.task_service.list_comments(task_id)
            project_title = None
            if task.parent_id:
                try:
                    project_title = (await self.task_service.get_task(task.parent_id)).title
                except NotFoundError:
                    project_title = None
        except NotFoundError:
            detail.clear_task()
            return
        except FloqError as e:
            logger.error(f"Failed to load task {task_id[:8]}: {e}")
            self.notify(str(e), severity="error")
            return

        detail.show_task(task, comments, project_title)

    def _update_task_header(self, count: int) -> None:
        header = self.query_one("#task-pane-header", Static)
        header.update(f"{tab_label(self._tab).upper()} ({count})")

    def _update_history_status(self) -> None:
        state = self.history.get_state()
        status = self.query_one("#history-status", Static)
        if state.last_command_description:
            status.update(
                f"u: undo {state.last_command_description}  ({state.undo_count} in history)"
            )
        else:
            status.update("Nothing to undo")

    @on(Tabs.TabActivated, "#status-tabs")
    async def on_status_tab_activated(self, event: Tabs.TabActivated) -> None:
        """Switch the table to the activated tab."""
        if event.tab is None or event.tab.id is None:
            return
        self._tab = event.tab.id.removeprefix("tab-")
        await self.reload()

    @on(DataTable.RowHighlighted, "#task-table")
    def on_task_highlighted(self, event: DataTable.RowHighlighted) -> None:
        """Load the detail pane for the highlighted task."""
        task_id = event.row_key.value if event.row_key is not None else None
        self.run_worker(self._show_detail(task_id), group="detail", exclusive=True)

    # --- Helpers ---

    def _selected_task(self) -> Optional[TaskDTO]:
        task = self.query_one("#task-table", TaskTable).get_selected_task()
        if task is None:
            self.notify("No task selected", severity="warning")
        return task

    async def _perform(self, action: Callable[[], Awaitable[object]]) -> None:
        """Run a mutation and report its outcome as a toast."""
        try:
            await action()
        except FloqError as e:
            logger.info(f"Action rejected: {e}")
            self.notify(str(e), severity="error")
            return
        description = self.history.get_undo_description()
        if description:
            self.notify(description)

    def _prompt(
        self,
        title: str,
        then: Callable[[str], Awaitable[object]],
        *,
        placeholder: str = "",
        value: str = "",
        allow_empty: bool = False,
    ) -> None:
        """Ask for a line of text and pass it to ``then`` unless cancelled."""

        def handle(result: Optional[str]) -> None:
            if result is None:
                return
            self.run_worker(self._perform(lambda: then(result)))

        modal = PromptModal(title, placeholder=placeholder, value=value, allow_empty=allow_empty)
        self.app.push_screen(modal, callback=handle)

    # --- Actions ---

    def action_next_tab(self) -> None:
        """Activate the next status tab."""
        self.query_one("#status-tabs", Tabs).action_next_tab()

    def action_previous_tab(self) -> None:
        """Activate the previous status tab."""
        self.query_one("#status-tabs", Tabs).action_previous_tab()

    def action_add(self) -> None:
        """Add a task to the inbox, or a project on the Projects tab."""
        if self._tab == PROJECTS_TAB:
            self._prompt(
                "New project",
                lambda title: self.task_service.add_project(title),
                placeholder="Project name",
            )
        else:
            self._prompt(
                "New task",
                lambda title: self.task_service.add_task(title),
                placeholder="What needs doing?",
            )

    async def action_done(self) -> None:
        """Mark the selected task as done."""
        task = self._selected_task()
        if task:
            await self._perform(lambda: self.task_service.complete_task(task.id))

    async def action_move(self, status: str) -> None:
        """Move the selected task to ``status``."""
        if status not in MOVE_KEYS.values():
            return
        task = self._selected_task()
        if task:
            await self._perform(lambda: self.task_service.move_task(task.id, status))

    def action_waiting(self) -> None:
        """Move the selected task to waiting, asking who it is waiting for."""
        task = self._selected_task()
        if task:
            self._prompt(
                "Waiting for",
                lambda who: self.task_service.move_task(task.id, "waiting", waiting_for=who),
                placeholder="Who are you waiting on?",
                value=task.waiting_for or "",
            )

    async def action_convert(self) -> None:
        """Convert the selected task into a project."""
        task = self._selected_task()
        if task:
            await self._perform(lambda: self.task_service.convert_to_project(task.id))

    def action_link(self) -> None:
        """Link the selected task to a project, or unlink it with an empty answer."""
        task = self._selected_task()
        if not task:
            return

        async def link(project: str) -> str:
            if not project:
                return await self.task_service.unlink_task(task.id)
            target = await self.task_service.resolve_project(project)
            return await self.task_service.link_task(task.id, target.id)

        self._prompt("Link to project", link, placeholder="Project name or id", allow_empty=True)

    def action_context(self) -> None:
        """Set the selected task's context; an empty answer clears it."""
        task = self._selected_task()
        if task:
            self._prompt(
                "Context",
                lambda context: self.task_service.set_context(task.id, context or None),
                placeholder="@home, @work, ...",
                value=task.context or "",
                allow_empty=True,
            )

    def action_comment(self) -> None:
        """Add a comment to the selected task."""
        task = self._selected_task()
        if task:
            self._prompt(
                f'Comment on "{task.title}"',
                lambda content: self.task_service.add_comment(task.id, content),
            )

    async def action_delete(self) -> None:
        """Ask for confirmation, then delete the selected task."""
        task = self._selected_task()
        if not task:
            return

        try:
            comments = await self.task_service.list_comments(task.id)
        except FloqError as e:
            self.notify(str(e), severity="error")
            return

        modal = DeleteModal(task, comment_count=len(comments))
        await self.app.push_screen(modal, callback=partial(self._handle_delete_result, task.id))

    def _handle_delete_result(self, task_id: str, confirmed: Optional[bool]) -> None:
        """Delete ``task_id`` once the modal is confirmed."""
        if confirmed:
            self.run_worker(self._perform(lambda: self.task_service.delete_task(task_id)))

    async def action_undo(self) -> None:
        """Undo the last action."""
        try:
            description = await self.task_service.undo()
        except FloqError as e:
            self.notify(f"Undo failed: {e}", severity="error")
            return
        if description is None:
            self.notify("Nothing to undo", severity="warning")
        else:
            self.notify(f"Undone: {description}")

    async def action_redo(self) -> None:
        """Redo the last undone action."""
        try:
            description = await self.task_service.redo()
        except FloqError as e:
            self.notify(f"Redo failed: {e}", severity="error")
            return
        if description is None:
            self.notify("Nothing to redo", severity="warning")
        else:
            self.notify(f"Redone: {description}")

    async def action_refresh(self) -> None:
        """Refresh all data in the current view."""
        await self.reload()
        self.notify("Data refreshed")
