"""An editable script: time-ordered actions, a selection and change events."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from .action import FunscriptAction, FunscriptArray
from .spline import FunscriptSpline
from .strokes import get_action_at_time as _index_at_time
from .strokes import last_stroke, position_at_time
from .strokes import range_extend as _range_extend
from .util import clamp

log = logging.getLogger(__name__)

EXTENSION = ".funscript"
AXIS_NAMES = ("surge", "sway", "suck", "twist", "roll", "pitch", "vib", "pump", "raw")

ACTIONS_CHANGED = "actions_changed"
SELECTION_CHANGED = "selection_changed"
NAME_CHANGED = "name_changed"

_FLOAT_MAX = sys.float_info.max

Listener = Callable[[str, "Funscript", "str | None"], None]


def _array_of(actions: Iterable[FunscriptAction]) -> FunscriptArray:
    """Build an array keeping the given order and every item."""
    result = FunscriptArray()
    for action in actions:
        result.add_unsorted(action)
    return result


@dataclass
class FunscriptData:
    """The actions of a script and the subset currently selected."""

    actions: FunscriptArray = field(default_factory=FunscriptArray)
    selection: FunscriptArray = field(default_factory=FunscriptArray)

    def copy(self) -> FunscriptData:
        return FunscriptData(self.actions.copy(), self.selection.copy())


@dataclass
class Metadata:
    """Descriptive fields stored alongside the actions."""

    type: str = "basic"
    title: str = ""
    creator: str = ""
    script_url: str = ""
    video_url: str = ""
    tags: list[str] = field(default_factory=list)
    performers: list[str] = field(default_factory=list)
    description: str = ""
    license: str = ""
    notes: str = ""
    duration: int = 0


def _metadata_from_dict(obj: dict[str, Any]) -> Metadata:
    metadata = Metadata()
    for item in fields(Metadata):
        if item.name in obj:
            value = obj[item.name]
            if isinstance(getattr(metadata, item.name), list):
                value = list(value)
            setattr(metadata, item.name, value)
        else:
            log.warning('The field "%s" was not found.', item.name)
    return metadata


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Funscript:
    """A script being edited, with a selection and deferred change events."""

    def __init__(self) -> None:
        self._data = FunscriptData()
        self._funscript_changed = False
        self._unsaved_edits = False
        self._selection_changed = False
        self._pending: list[tuple[str, str | None]] = []
        self._listeners: list[Listener] = []
        self.edit_time = datetime.now()
        self.relative_path = Path()
        self.title = ""
        self.enabled = True
        self.script_spline = FunscriptSpline()
        self._notify_actions_changed(False)

    # state -----------------------------------------------------------------

    @property
    def data(self) -> FunscriptData:
        return self._data

    @property
    def actions(self) -> FunscriptArray:
        return self._data.actions

    @property
    def selection(self) -> FunscriptArray:
        return self._data.selection

    @property
    def has_unsaved_edits(self) -> bool:
        return self._unsaved_edits

    @property
    def has_selection(self) -> bool:
        return bool(self._data.selection)

    def _notify_actions_changed(self, is_edit: bool) -> None:
        self._funscript_changed = True
        if is_edit and not self._unsaved_edits:
            self._unsaved_edits = True
            self.edit_time = datetime.now()

    def _notify_selection_changed(self) -> None:
        self._selection_changed = True

    def add_listener(self, callback: Listener) -> None:
        """Register ``callback(kind, script, old_name)`` for change events."""
        self._listeners.append(callback)

    def _emit(self, kind: str, detail: str | None) -> None:
        for callback in list(self._listeners):
            callback(kind, self, detail)

    def update(self) -> None:
        """Deliver the events gathered since the last call."""
        pending, self._pending = self._pending, []
        for kind, detail in pending:
            self._emit(kind, detail)
        if self._funscript_changed:
            self._funscript_changed = False
            self._emit(ACTIONS_CHANGED, None)
        if self._selection_changed:
            self._selection_changed = False
            self._emit(SELECTION_CHANGED, None)

    def update_relative_path(self, path: str) -> None:
        """Set the script's path; the title becomes its file name without extension."""
        self.relative_path = Path(path)
        if self.title:
            self._pending.append((NAME_CHANGED, self.title))
        self.title = PurePath(path).stem

    def clear_unsaved_edits(self) -> None:
        self._unsaved_edits = False

    def rollback(self, data: FunscriptData) -> None:
        """Replace actions and selection wholesale."""
        self._data = data
        self._notify_actions_changed(True)

    # lookups ---------------------------------------------------------------

    def _index_of(self, action: FunscriptAction) -> int | None:
        if not self._data.actions:
            return None
        return self._data.actions.find(action)

    def get_action(self, action: FunscriptAction) -> FunscriptAction | None:
        index = self._index_of(action)
        return None if index is None else self._data.actions[index]

    def get_action_at_time(self, time: float, error_time: float) -> FunscriptAction | None:
        index = _index_at_time(self._data.actions, time, error_time)
        return None if index is None else self._data.actions[index]

    def next_action_ahead(self, time: float) -> FunscriptAction | None:
        actions = self._data.actions
        index = actions.upper_bound(time)
        return actions[index] if index < len(actions) else None

    def previous_action_behind(self, time: float) -> FunscriptAction | None:
        actions = self._data.actions
        index = actions.lower_bound(time)
        return actions[index - 1] if index > 0 else None

    def closest_action(self, time: float) -> FunscriptAction | None:
        return self.get_action_at_time(time, _FLOAT_MAX)

    def closest_action_selection(self, time: float) -> FunscriptAction | None:
        selection = self._data.selection
        index = _index_at_time(selection, time, _FLOAT_MAX)
        return None if index is None else selection[index]

    def position_at_time(self, time: float) -> float:
        return position_at_time(self._data.actions, time)

    # editing ---------------------------------------------------------------

    def add_action(self, action: FunscriptAction) -> None:
        self._data.actions.add(action)
        self._notify_actions_changed(True)

    def add_multiple_actions(self, actions: Iterable[FunscriptAction]) -> None:
        for action in actions:
            self._data.actions.add(action)
        self._data.actions.sort()
        self._notify_actions_changed(True)

    def edit_action(self, old_action: FunscriptAction, new_action: FunscriptAction) -> bool:
        """Move ``old_action`` to the time and position of ``new_action``."""
        index = self._index_of(old_action)
        if index is None:
            return False
        current = self._data.actions[index]
        self._data.actions[index] = current.with_time(new_action.at_s).with_pos(new_action.pos)
        self._check_for_invalidated_actions()
        self._notify_actions_changed(True)
        self._data.actions.sort()
        return True

    def add_edit_action(self, action: FunscriptAction, frame_time: float) -> None:
        """Replace an action within ``frame_time`` of ``action``, or add it."""
        index = _index_at_time(self._data.actions, action.at_s, frame_time)
        if index is not None:
            self._data.actions[index] = action
            self._notify_actions_changed(True)
            self._check_for_invalidated_actions()
        else:
            self.add_action(action)

    def _check_for_invalidated_actions(self) -> None:
        selection = self._data.selection
        kept = [selected for selected in selection if self._index_of(selected) is not None]
        if len(kept) != len(selection):
            self._data.selection = _array_of(kept)
            self._notify_selection_changed()

    def remove_action(self, action: FunscriptAction, check_invalid_selection: bool = True) -> None:
        if self._data.actions.remove(action):
            self._notify_actions_changed(True)
            if check_invalid_selection:
                self._check_for_invalidated_actions()

    def remove_actions(self, actions: Iterable[FunscriptAction]) -> None:
        doomed = actions if isinstance(actions, FunscriptArray) else FunscriptArray(actions)
        self._data.actions = _array_of(a for a in self._data.actions if a not in doomed)
        self._notify_actions_changed(True)
        self._check_for_invalidated_actions()

    def get_last_stroke(self, time: float) -> list[FunscriptAction]:
        return last_stroke(self._data.actions, time)

    def set_actions(self, actions: Iterable[FunscriptAction]) -> None:
        if isinstance(actions, FunscriptArray):
            self._data.actions = actions.copy()
        else:
            self._data.actions = FunscriptArray(actions)
        self._notify_actions_changed(True)

    def remove_actions_in_interval(self, from_time: float, to_time: float) -> None:
        self._data.actions = _array_of(
            a for a in self._data.actions if not from_time <= a.at_s <= to_time
        )
        self._check_for_invalidated_actions()
        self._notify_actions_changed(True)

    # selection -------------------------------------------------------------

    def range_extend_selection(self, range_extend: int) -> None:
        """Stretch each selected stroke outwards by ``range_extend``; clears the selection."""
        actions = self._data.actions
        selection = self._data.selection
        indices = [i for i, action in enumerate(actions) if action in selection]
        if not indices:
            return
        self.clear_selection()
        positions = _range_extend([actions[i].pos for i in indices], range_extend)
        for index, pos in zip(indices, positions):
            actions[index] = actions[index].with_pos(pos)
        self._notify_actions_changed(True)

    def toggle_selection(self, action: FunscriptAction) -> bool:
        """Flip whether ``action`` is selected; return the new state."""
        selection = self._data.selection
        was_selected = selection.remove(action)
        if not was_selected:
            selection.add(action)
        self._notify_selection_changed()
        return not was_selected

    def set_selected(self, action: FunscriptAction, selected: bool) -> None:
        selection = self._data.selection
        is_selected = selection.find(action) is not None
        if is_selected and not selected:
            selection.remove(action)
        elif not is_selected and selected:
            selection.add(action)
        self._notify_selection_changed()

    def _deselect_extremes(self, keep_top: bool) -> None:
        selection = self._data.selection
        if len(selection) < 3:
            return
        deselect: list[FunscriptAction] = []
        for prev, current, following in zip(selection, selection[1:], selection[2:]):
            if keep_top:
                first = prev if prev.pos < current.pos else current
                second = first if first.pos < following.pos else following
            else:
                first = prev if prev.pos > current.pos else current
                second = first if first.pos > following.pos else following
            deselect.append(first)
            if first.at_s != second.at_s:
                deselect.append(second)
        for action in deselect:
            self.set_selected(action, False)
        self._notify_selection_changed()

    def select_top_actions(self) -> None:
        """Keep only the peaks of the selection."""
        self._deselect_extremes(keep_top=True)

    def select_bottom_actions(self) -> None:
        """Keep only the valleys of the selection."""
        self._deselect_extremes(keep_top=False)

    def select_mid_actions(self) -> None:
        """Keep what is neither a peak nor a valley of the selection."""
        if len(self._data.selection) < 3:
            return
        original = self._data.selection.copy()
        self.select_top_actions()
        top = self._data.selection
        self._data.selection = original.copy()
        self.select_bottom_actions()
        bottom = self._data.selection
        self._data.selection = _array_of(a for a in original if a not in top and a not in bottom)
        self._data.selection.sort()
        self._notify_selection_changed()

    def select_time(self, from_time: float, to_time: float, clear: bool = True) -> None:
        """Toggle every action between the two times, clearing first if asked."""
        if clear:
            self.clear_selection()
        for action in list(self._data.actions):
            if from_time <= action.at_s <= to_time:
                self.toggle_selection(action)
            elif action.at_s > to_time:
                break
        if not clear:
            self._data.selection.sort()
        self._notify_selection_changed()

    def get_selection(self, from_time: float, to_time: float) -> FunscriptArray:
        """Actions between the two times, inclusive."""
        actions = self._data.actions
        start = actions.lower_bound(from_time)
        end = actions.upper_bound(to_time)
        return _array_of(a for a in actions[start:end] if from_time <= a.at_s <= to_time)

    def select_action(self, action: FunscriptAction) -> None:
        if self.get_action(action) is not None:
            if self.toggle_selection(action):
                self._data.selection.sort()
            self._notify_selection_changed()

    def deselect_action(self, action: FunscriptAction) -> None:
        found = self.get_action(action)
        if found is not None:
            self.set_selected(found, False)
        self._notify_selection_changed()

    def select_all(self) -> None:
        self.clear_selection()
        self._data.selection = self._data.actions.copy()
        self._notify_selection_changed()

    def remove_selected_actions(self) -> None:
        if len(self._data.selection) == len(self._data.actions):
            self._data.actions.clear()
        else:
            self.remove_actions(self._data.selection)
        self.clear_selection()
        self._notify_actions_changed(True)
        self._notify_selection_changed()

    def _move_all_actions_time(self, time_offset: float) -> None:
        self.clear_selection()
        self._data.actions = _array_of(a.with_time(a.at_s + time_offset) for a in self._data.actions)
        self._notify_actions_changed(True)

    def _move_actions_position(self, indices: list[int], pos_offset: int) -> None:
        self.clear_selection()
        actions = self._data.actions
        for index in indices:
            actions[index] = actions[index].with_pos(clamp(actions[index].pos + pos_offset, 0, 100))
        self._notify_actions_changed(True)

    def move_selection_time(self, time_offset: float, frame_time: float) -> None:
        """Shift the selection in time without passing the neighbouring actions."""
        selection = self._data.selection
        if not selection:
            return
        if len(selection) == len(self._data.actions):
            self._move_all_actions_time(time_offset)
            self.select_all()
            return

        prev = self.previous_action_behind(selection[0].at_s)
        following = self.next_action_ahead(selection[-1].at_s)
        if time_offset > 0:
            if following is not None:
                max_bound = following.at_s - frame_time
                time_offset = min(time_offset, max_bound - selection[-1].at_s)
        elif prev is not None:
            min_bound = prev.at_s + frame_time
            time_offset = max(time_offset, min_bound - selection[0].at_s)

        new_selection = FunscriptArray()
        for selected in list(selection):
            moving = self.get_action(selected)
            if moving is not None:
                moved = moving.with_time(moving.at_s + time_offset)
                new_selection.add(moved)
                self.remove_action(moving, False)
                self.add_action(moved)
        self.clear_selection()
        self._data.selection = new_selection
        self._notify_actions_changed(True)

    def move_selection_position(self, pos_offset: int) -> None:
        """Shift selected positions by ``pos_offset``, clamped to 0..100."""
        selection = self._data.selection
        if not selection:
            return
        actions = self._data.actions
        if len(selection) == len(actions):
            self._move_actions_position(list(range(len(actions))), pos_offset)
            self.select_all()
            return

        indices = [i for i in (self._index_of(a) for a in selection) if i is not None]
        self.clear_selection()
        for index in indices:
            moved = actions[index].with_pos(clamp(actions[index].pos + pos_offset, 0, 100))
            actions[index] = moved
            self._data.selection.add_unsorted(moved)
        self._data.selection.sort()
        self._notify_actions_changed(True)

    def clear_selection(self) -> None:
        self._data.selection.clear()

    def set_selection(self, actions: Iterable[FunscriptAction]) -> None:
        self.clear_selection()
        for action in actions:
            self._data.selection.add(action)
        self._notify_selection_changed()

    def is_selected(self, action: FunscriptAction) -> bool:
        return self._data.selection.find(action) is not None

    def equalize_selection(self) -> None:
        """Space the inner selected actions evenly between the first and last."""
        selection = self._data.selection
        if len(selection) < 3:
            return
        selection.sort()
        first = selection[0]
        step = (selection[-1].at_s - first.at_s) / (len(selection) - 1)
        copied = list(selection)
        self.remove_selected_actions()
        for i in range(1, len(copied) - 1):
            copied[i] = copied[i].with_time(first.at_s + i * step)
        for action in copied:
            self.add_action(action)
        self._data.selection = _array_of(copied)

    def invert_selection(self) -> None:
        """Mirror the selected positions around the middle of the range."""
        if not self._data.selection:
            return
        inverted = [a.with_pos(abs(a.pos - 100)) for a in self._data.selection]
        self.remove_selected_actions()
        for action in inverted:
            self.add_action(action)
        self._data.selection = _array_of(inverted)

    # sampling --------------------------------------------------------------

    def spline(self, time: float) -> float:
        return self.script_spline.sample(self._data.actions, time)

    def spline_clamped(self, time: float) -> float:
        return clamp(self.spline(time) * 100.0, 0.0, 100.0)

    # serialisation ---------------------------------------------------------

    def to_json(self, metadata: Metadata | None = None) -> dict[str, Any]:
        """The script as a JSON-ready dict with millisecond timestamps."""
        json_actions: list[dict[str, int]] = []
        last_timestamp = -1
        for action in self._data.actions:
            if action.at_s < 0.0:
                continue
            timestamp = _round_half_away(action.at_s * 1000.0)
            if timestamp == last_timestamp:
                log.warning(
                    "Action was ignored since it had the same millisecond timestamp as the previous one."
                )
                continue
            json_actions.append({"at": timestamp, "pos": clamp(int(action.pos), 0, 100)})
            last_timestamp = timestamp
        return {
            "actions": json_actions,
            "metadata": asdict(metadata if metadata is not None else Metadata()),
            "version": "1.0",
            "inverted": False,
            "range": 100,
        }

    def from_json(self, obj: Any) -> Metadata:
        """Load actions from a JSON dict and return its metadata."""
        if not isinstance(obj, dict) or not isinstance(obj.get("actions"), list):
            log.error("Failed to load Funscript. No action array found.")
            raise ValueError("no action array found")
        self._data.actions.clear()
        for item in obj["actions"]:
            time = float(item["at"]) / 1000.0
            pos = int(item["pos"])
            if time >= 0.0:
                self._data.actions.add(FunscriptAction(time, clamp(pos, 0, 100)))
        raw = obj.get("metadata")
        metadata = _metadata_from_dict(raw) if isinstance(raw, dict) else Metadata()
        self._notify_actions_changed(False)
        return metadata