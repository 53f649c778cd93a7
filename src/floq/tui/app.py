"""floq TUI Application.

This module provides the main TUI application that composes the status tabs,
task table and detail pane around one AppContext.

Example usage:
    from floq.tui.app import FloqTUI

    with AppContext.from_config(load_config()) as context:
        FloqTUI(context).run()
"""

import sys
from pathlib import Path

try:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Footer, Header
except ImportError:
    print("TUI requires textual. Install with: pip install floq[tui]")
    sys.exit(1)

from floq.services import AppContext
from floq.tui.screens.main import TaskPane


class FloqTUI(App):
    """floq TUI Application.

    Layout:
        ┌────────────────────────────────────────────────────────────┐
        │ Header: floq                                               │
        ├────────────────────────────────────────────────────────────┤
        │ Inbox │ Next │ Waiting │ Someday │ Projects │ Done         │
        ├──────────────────────────────┬─────────────────────────────┤
        │ TASKS                 60%    │ DETAILS               40%   │
        ├──────────────────────────────┴─────────────────────────────┤
        │ History status                                             │
        │ Footer: Keybindings                                        │
        └────────────────────────────────────────────────────────────┘

    The application does not own the context; whoever created it closes it
    after ``run()`` returns.
    """

    TITLE = "floq"
    CSS_PATH = Path(__file__).parent / "styles" / "app.tcss"

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("question_mark", "help", "Help", show=False),
    ]

    def __init__(self, context: AppContext) -> None:
        """Initialize the TUI application with an application context."""
        super().__init__()
        self.context = context

    def compose(self) -> ComposeResult:
        """Compose the application layout with header, main pane, and footer."""
        yield Header()
        yield TaskPane(
            history=self.context.history,
            task_service=self.context.task_service,
            id="task-pane-root",
        )
        yield Footer()

    async def action_help(self) -> None:
        """Show help modal with keyboard shortcuts."""
        from floq.tui.widgets.help_modal import HelpModal

        await self.push_screen(HelpModal())
