"""TUI constants for consistent visual representation across all widgets.

This module provides status icons, colors and the tab layout used by the
task table, the detail pane and the tab bar.
"""

# Status icons for task list display
STATUS_ICONS: dict[str, str] = {
    "inbox": "○",
    "next": "▶",
    "waiting": "◷",
    "someday": "◇",
    "done": "✓",
}

# Status colors for Rich Text styling
RICH_STATUS_COLORS: dict[str, str] = {
    "inbox": "cyan",
    "next": "green",
    "waiting": "yellow",
    "someday": "magenta",
    "done": "dim",
}

PROJECT_ICON: str = "■"
PROJECT_COLOR: str = "bold blue"

# Pseudo-tab showing projects instead of a status
PROJECTS_TAB: str = "projects"

# Tab bar entries
# Format: (display_label, value)
STATUS_TABS: list[tuple[str, str]] = [
    ("Inbox", "inbox"),
    ("Next", "next"),
    ("Waiting", "waiting"),
    ("Someday", "someday"),
    ("Projects", PROJECTS_TAB),
    ("Done", "done"),
]

# Single-key moves bound on the task pane
MOVE_KEYS: dict[str, str] = {
    "i": "inbox",
    "n": "next",
    "s": "someday",
}
