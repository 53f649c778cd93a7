"""Help modal listing the floq key bindings.

Example usage:
    await self.app.push_screen(HelpModal())
"""

from rich.table import Table
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

# Section -> (keys, what they do)
SHORTCUTS: dict[str, list[tuple[str, str]]] = {
    "Views": [
        ("Tab / Shift+Tab", "Next / previous status tab"),
        ("j / k", "Down / up"),
        ("g / G", "First / last task"),
        ("r", "Refresh"),
    ],
    "Tasks": [
        ("a", "Add task (project on the Projects tab)"),
        ("d", "Mark done"),
        ("i / n / s", "Move to inbox / next / someday"),
        ("w", "Move to waiting, asks who for"),
        ("p", "Convert to project"),
        ("l", "Link to project, empty answer unlinks"),
        ("c", "Set context, empty answer clears"),
        ("m", "Add comment"),
        ("x", "Delete"),
    ],
    "History": [
        ("u", "Undo last change"),
        ("Ctrl+R", "Redo"),
    ],
    "App": [
        ("?", "This help"),
        ("q", "Quit"),
    ],
}


def build_shortcut_table() -> Table:
    """Rich table of SHORTCUTS, one section header row per group."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column()
    for section, shortcuts in SHORTCUTS.items():
        table.add_row(f"[bold magenta]{section}[/bold magenta]", "")
        for keys, action in shortcuts:
            table.add_row(keys, action)
        table.add_row("", "")
    return table


class HelpModal(ModalScreen):
    """Key reference; any key closes it."""

    CSS = """
    HelpModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.5);
    }

    HelpModal > Container {
        width: 64;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #help-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $primary;
    }
    """

    def compose(self) -> ComposeResult:
        with Container():
            yield Static("floq keys", id="help-title")
            yield Static(build_shortcut_table())

    def on_key(self, event) -> None:
        event.stop()
        self.dismiss()
