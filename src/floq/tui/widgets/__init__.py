"""TUI widgets for floq."""

from floq.tui.widgets.delete_modal import DeleteModal
from floq.tui.widgets.help_modal import HelpModal
from floq.tui.widgets.prompt_modal import PromptModal
from floq.tui.widgets.task_detail import TaskDetail
from floq.tui.widgets.task_table import TaskTable

__all__ = [
    "DeleteModal",
    "HelpModal",
    "PromptModal",
    "TaskDetail",
    "TaskTable",
]
