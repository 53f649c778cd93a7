"""Undoable command history."""

from floq.config import MAX_HISTORY_SIZE
from floq.history.commands import (
    COMMAND_TYPES,
    ConvertToProjectCommand,
    CreateCommentCommand,
    CreateTaskCommand,
    DeleteCommentCommand,
    DeleteTaskCommand,
    LinkTaskCommand,
    MoveTaskCommand,
    SetContextCommand,
    UndoableCommand,
)
from floq.history.manager import HistoryManager, HistoryState

__all__ = [
    "MAX_HISTORY_SIZE",
    "COMMAND_TYPES",
    "UndoableCommand",
    "HistoryManager",
    "HistoryState",
    "CreateTaskCommand",
    "DeleteTaskCommand",
    "MoveTaskCommand",
    "LinkTaskCommand",
    "ConvertToProjectCommand",
    "SetContextCommand",
    "CreateCommentCommand",
    "DeleteCommentCommand",
]
