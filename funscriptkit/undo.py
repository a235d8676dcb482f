"""Undo and redo history for a script's actions and selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .funscript import FunscriptData

if TYPE_CHECKING:
    from .funscript import Funscript


@dataclass
class ScriptState:
    """A saved copy of a script's data, tagged with the kind of edit."""

    type: int = -1
    data: FunscriptData = field(default_factory=FunscriptData)


class FunscriptUndoSystem:
    """Two stacks of script snapshots bound to one script."""

    def __init__(self, script: Funscript) -> None:
        if script is None:
            raise ValueError("no script")
        self.script = script
        self.undo_stack: list[ScriptState] = []
        self.redo_stack: list[ScriptState] = []

    def _state_of_script(self, type: int) -> ScriptState:
        return ScriptState(type, self.script.data.copy())

    def clear_redo(self) -> None:
        """Forget everything that could be redone."""
        self.redo_stack.clear()

    def snapshot(self, type: int, clear_redo: bool = True) -> None:
        """Save the script's current data before an edit of kind ``type``."""
        self.undo_stack.append(self._state_of_script(type))
        if clear_redo:
            self.clear_redo()

    def undo(self) -> bool:
        """Restore the last snapshot; report whether there was one."""
        if not self.undo_stack:
            return False
        top = self.undo_stack.pop()
        self.redo_stack.append(self._state_of_script(top.type))
        self.script.rollback(top.data)
        return True

    def redo(self) -> bool:
        """Reapply the last undone state; report whether there was one."""
        if not self.redo_stack:
            return False
        top = self.redo_stack.pop()
        self.snapshot(top.type, False)
        self.script.rollback(top.data)
        return True

    def match_undo_top(self, type: int) -> bool:
        """Whether the most recent snapshot is of kind ``type``."""
        return bool(self.undo_stack) and self.undo_stack[-1].type == type

    def undo_empty(self) -> bool:
        return not self.undo_stack

    def redo_empty(self) -> bool:
        return not self.redo_stack