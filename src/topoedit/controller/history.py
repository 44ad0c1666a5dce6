"""
Undo / Redo History
===================
Bounded stacks of executed commands.

Executing a new command clears the redo stack. When the undo stack exceeds
its depth the oldest entry is silently discarded. Undo and redo on an empty
stack return None; that is "nothing happened", not an error.
"""
from __future__ import annotations

from collections import deque
import logging
from typing import Optional

from topoedit.config import MAX_HISTORY
from topoedit.controller.commands import Command

logger = logging.getLogger(__name__)


class CommandHistory:
    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        if max_history < 1:
            raise ValueError(f"History depth must be positive, got {max_history}.")
        self.max_history = max_history
        self._undo_stack: deque[Command] = deque(maxlen=max_history)
        self._redo_stack: list[Command] = []

    def execute(self, cmd: Command) -> None:
        """Run `cmd` and record it for undo."""
        cmd.execute()
        if len(self._undo_stack) == self.max_history:
            logger.debug(f"History full, dropping oldest: {self._undo_stack[0]!r}")
        self._undo_stack.append(cmd)
        self._redo_stack.clear()
        logger.debug(f"Executed {cmd!r}")

    def undo(self) -> Optional[Command]:
        """Revert the most recent command and return it, or None."""
        if not self._undo_stack:
            return None
        cmd = self._undo_stack.pop()
        cmd.undo()
        self._redo_stack.append(cmd)
        logger.debug(f"Undid {cmd!r}")
        return cmd

    def redo(self) -> Optional[Command]:
        """Re-run the most recently undone command and return it, or None."""
        if not self._redo_stack:
            return None
        cmd = self._redo_stack.pop()
        cmd.execute()
        self._undo_stack.append(cmd)
        logger.debug(f"Redid {cmd!r}")
        return cmd

    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def clear(self) -> None:
        """Forget everything, e.g. after a bulk reload of the arena."""
        self._undo_stack.clear()
        self._redo_stack.clear()
