"""
History Manager - Undo/redo stacks over undoable commands.

The manager owns two stacks. ``execute``, ``undo`` and ``redo`` are
serialized with an asyncio.Lock so two operations never interleave their
stack mutations, and a failed store call always leaves the stacks as they
were before the call.

Example usage:
    history = HistoryManager()
    unsubscribe = history.subscribe(screen.reload)

    await history.execute(command)
    if not await history.undo():
        notify("Nothing to undo")
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from floq.config import MAX_HISTORY_SIZE
from floq.history.commands import UndoableCommand

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass(frozen=True)
class HistoryState:
    """Snapshot of the history for display."""

    undo_count: int
    redo_count: int
    last_command_description: Optional[str]


class HistoryManager:
    """
    Undo/redo history using the command pattern.

    Attributes:
        max_size: Maximum depth of the undo stack. The oldest entry is
            dropped, without being undone, once the stack grows past it.
    """

    def __init__(self, max_size: int = MAX_HISTORY_SIZE):
        if not 1 <= max_size <= MAX_HISTORY_SIZE:
            raise ValueError(f"max_size must be between 1 and {MAX_HISTORY_SIZE}")
        self.max_size = max_size
        self._undo_stack: Deque[UndoableCommand] = deque()
        self._redo_stack: List[UndoableCommand] = []
        self._listeners: List[Listener] = []
        self._lock = asyncio.Lock()
        # Bumped by clear(); an operation that started before it records nothing
        self._generation = 0

    # --- Operations ---

    async def execute(self, command: UndoableCommand) -> None:
        """
        Execute ``command`` and record it for undo.

        A new action invalidates everything that could have been redone.

        Raises:
            Whatever ``command.execute()`` raised; the stacks are untouched.
        """
        async with self._lock:
            generation = self._generation
            try:
                await command.execute()
            except Exception as e:
                logger.warning("Execute failed for %r: %s", command.description, e)
                raise

            if generation != self._generation:
                logger.debug("History cleared during %r, not recording it", command.description)
                return

            self._undo_stack.append(command)
            self._redo_stack.clear()
            if len(self._undo_stack) > self.max_size:
                evicted = self._undo_stack.popleft()
                logger.debug("History full, forgetting %r", evicted.description)
            logger.debug("Executed %r", command.description)

        self._notify()

    async def undo(self) -> bool:
        """
        Undo the most recent command.

        Returns:
            True if a command was undone, False if there was nothing to undo.

        Raises:
            Whatever ``command.undo()`` raised; the command stays undoable.
        """
        return await self.undo_last() is not None

    async def redo(self) -> bool:
        """
        Re-execute the most recently undone command.

        Returns:
            True if a command was redone, False if there was nothing to redo.

        Raises:
            Whatever ``command.execute()`` raised; the command stays redoable.
        """
        return await self.redo_last() is not None

    async def undo_last(self) -> Optional[UndoableCommand]:
        """Like ``undo()``, but return the command that was undone (or None)."""
        async with self._lock:
            if not self._undo_stack:
                return None

            # Popped only once undo() completes, so a failure or a
            # cancellation leaves the command on the stack
            command = self._undo_stack[-1]
            generation = self._generation
            try:
                await command.undo()
            except Exception as e:
                logger.warning("Undo failed for %r: %s", command.description, e)
                raise

            if generation == self._generation:
                self._undo_stack.pop()
                self._redo_stack.append(command)
            logger.debug("Undid %r", command.description)

        self._notify()
        return command

    async def redo_last(self) -> Optional[UndoableCommand]:
        """Like ``redo()``, but return the command that was redone (or None)."""
        async with self._lock:
            if not self._redo_stack:
                return None

            command = self._redo_stack[-1]
            generation = self._generation
            try:
                await command.execute()
            except Exception as e:
                logger.warning("Redo failed for %r: %s", command.description, e)
                raise

            if generation == self._generation:
                self._redo_stack.pop()
                self._undo_stack.append(command)
            logger.debug("Redid %r", command.description)

        self._notify()
        return command

    def clear(self) -> None:
        """
        Forget all history.

        An execute, undo or redo still in flight completes its write but
        leaves the emptied stacks alone.
        """
        self._generation += 1
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._notify()

    # --- Queries ---

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self._redo_stack) > 0

    def get_undo_description(self) -> Optional[str]:
        """Description of the command that would be undone."""
        return self._undo_stack[-1].description if self._undo_stack else None

    def get_redo_description(self) -> Optional[str]:
        """Description of the command that would be redone."""
        return self._redo_stack[-1].description if self._redo_stack else None

    def get_state(self) -> HistoryState:
        """Get the current history state."""
        return HistoryState(
            undo_count=len(self._undo_stack),
            redo_count=len(self._redo_stack),
            last_command_description=self.get_undo_description(),
        )

    # --- Subscription ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener`` to be called after every change.

        Listeners take no arguments; they are expected to re-query the store.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("History listener %r failed", listener)
