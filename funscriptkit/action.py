"""Script actions and the time-ordered container that holds them."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from operator import attrgetter
from typing import overload

_AT_S = attrgetter("at_s")


@dataclass(frozen=True, eq=False)
class FunscriptAction:
    """A single point of a script: a time in seconds and a position.

    Actions are ordered by time alone.  Two actions are equal when both
    time and position match; ``tag`` and ``flags`` do not take part.
    """

    at_s: float
    pos: int
    tag: int = 0
    flags: int = 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FunscriptAction):
            return NotImplemented
        return self.at_s < other.at_s

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, FunscriptAction):
            return NotImplemented
        return self.at_s > other.at_s

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunscriptAction):
            return NotImplemented
        return self.at_s == other.at_s and self.pos == other.pos

    def __hash__(self) -> int:
        return hash((self.at_s, self.pos))

    def with_time(self, at_s: float) -> FunscriptAction:
        """Return a copy moved to ``at_s``."""
        return replace(self, at_s=at_s)

    def with_pos(self, pos: int) -> FunscriptAction:
        """Return a copy with position ``pos``."""
        return replace(self, pos=pos)


class FunscriptArray(Sequence):
    """Actions kept sorted by time, at most one per timestamp."""

    __slots__ = ("_items",)

    def __init__(self, actions: Iterable[FunscriptAction] = ()) -> None:
        self._items: list[FunscriptAction] = []
        for action in actions:
            self.add(action)

    @overload
    def __getitem__(self, index: int) -> FunscriptAction: ...

    @overload
    def __getitem__(self, index: slice) -> list[FunscriptAction]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __setitem__(self, index: int, action: FunscriptAction) -> None:
        self._items[index] = action

    def __delitem__(self, index: int | slice) -> None:
        if isinstance(index, slice):
            self._items[index] = []
        else:
            self._items.pop(index)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FunscriptAction]:
        return iter(self._items)

    def __contains__(self, action: object) -> bool:
        return isinstance(action, FunscriptAction) and self.find(action) is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FunscriptArray):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FunscriptArray({self._items!r})"

    def lower_bound(self, at_s: float) -> int:
        """Index of the first action whose time is not before ``at_s``."""
        return bisect_left(self._items, at_s, key=_AT_S)

    def upper_bound(self, at_s: float) -> int:
        """Index of the first action whose time is after ``at_s``."""
        return bisect_right(self._items, at_s, key=_AT_S)

    def find(self, action: FunscriptAction) -> int | None:
        """Index of an action equal to ``action``, or None."""
        index = self.lower_bound(action.at_s)
        if index < len(self._items) and self._items[index] == action:
            return index
        return None

    def add(self, action: FunscriptAction) -> bool:
        """Insert in time order; refuse an action whose timestamp is taken."""
        index = self.lower_bound(action.at_s)
        if index < len(self._items) and self._items[index].at_s == action.at_s:
            return False
        self._items.insert(index, action)
        return True

    def add_unsorted(self, action: FunscriptAction) -> None:
        """Append without keeping order; call :meth:`sort` afterwards."""
        self._items.append(action)

    def remove(self, action: FunscriptAction) -> bool:
        """Remove an action equal to ``action``; report whether one was found."""
        index = self.find(action)
        if index is None:
            return False
        self._items.pop(index)
        return True

    def sort(self) -> None:
        """Restore time order."""
        self._items.sort(key=_AT_S)

    def clear(self) -> None:
        self._items.clear()

    def copy(self) -> FunscriptArray:
        result = FunscriptArray()
        result._items = list(self._items)
        return result