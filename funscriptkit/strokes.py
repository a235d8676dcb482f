"""Searches and stroke analysis over time-ordered script actions."""

from __future__ import annotations

import math
from enum import Enum

from .action import FunscriptAction, FunscriptArray
from .util import clamp


def get_action_at_time(actions: FunscriptArray, time: float, max_error_time: float) -> int | None:
    """Index of the action closest to ``time`` within ``max_error_time``, or None."""
    if not actions:
        return None
    smallest_error = math.inf
    best: int | None = None

    start = actions.lower_bound(time - max_error_time)
    if start == len(actions):
        start = 0
    elif start > 0:
        start -= 1

    limit = time + max_error_time / 2
    for index in range(start, len(actions)):
        action = actions[index]
        if action.at_s > limit:
            break
        error = abs(time - action.at_s)
        if error <= max_error_time:
            if error <= smallest_error:
                smallest_error = error
                best = index
            else:
                break
    return best


def position_at_time(actions: FunscriptArray, time: float) -> float:
    """Linearly interpolated position at ``time``."""
    count = len(actions)
    if count == 0:
        return 0.0
    if count == 1:
        return float(actions[0].pos)

    start = actions.lower_bound(time)
    if start == count:
        start = 0
    elif start > 0:
        start -= 1

    for index in range(start, count - 1):
        action = actions[index]
        following = actions[index + 1]
        if action.at_s < time < following.at_s:
            progress = (time - action.at_s) / (following.at_s - action.at_s)
            return action.pos + progress * (following.pos - action.pos)
        if action.at_s == time:
            return float(action.pos)

    return float(actions[-1].pos)


def last_stroke(actions: FunscriptArray, time: float) -> list[FunscriptAction]:
    """The stroke before the one containing the action nearest ``time``.

    Actions are returned newest first; an empty list means no such stroke.
    """
    if not actions:
        return []
    it = min(range(len(actions)), key=lambda i: abs(actions[i].at_s - time))
    if it <= 1:
        return []

    going_up = actions[it - 1].pos > actions[it].pos
    prev_pos = actions[it - 1].pos
    for search in range(it - 1, 0, -1):
        before = actions[search - 1].pos
        if (before > prev_pos) != going_up:
            break
        if before == prev_pos and before != actions[search].pos:
            break
        prev_pos = before
        it = search

    it -= 1
    if it == 0:
        return []
    going_up = not going_up
    prev_pos = actions[it].pos
    stroke = [actions[it]]
    it -= 1
    while True:
        pos = actions[it].pos
        if (pos > prev_pos) != going_up or pos == prev_pos:
            break
        stroke.append(actions[it])
        prev_pos = pos
        if it == 0:
            break
        it -= 1
    return stroke


def stretch_position(position: int, lowest: int, highest: int, extension: int) -> int:
    """Map ``position`` from lowest..highest onto the range widened by ``extension``."""
    new_high = clamp(highest + extension, 0, 100)
    new_low = clamp(lowest - extension, 0, 100)
    if highest == lowest:
        return clamp(position, 0, 100)
    relative = (position - lowest) / (highest - lowest)
    return clamp(int(relative * (new_high - new_low) + new_low), 0, 100)


class _Direction(Enum):
    NONE = 0
    UP = 1
    DOWN = 2


def range_extend(positions: list[int], extension: int) -> list[int]:
    """Stretch every stroke of ``positions`` outwards by ``extension``."""
    result = list(positions)
    if extension == 0 or not result:
        return result

    last_extreme_index = 0
    last_value = result[0]
    last_extreme_value = last_value
    lowest = highest = last_value
    direction = _Direction.NONE
    last_index = len(result) - 1

    for index, _ in enumerate(result):
        current = result[index]
        if direction is _Direction.NONE:
            if current < last_extreme_value:
                direction = _Direction.DOWN
            elif current > last_extreme_value:
                direction = _Direction.UP
        elif (
            (current < last_value and direction is _Direction.UP)
            or (current > last_value and direction is _Direction.DOWN)
            or index == last_index
        ):
            for i in range(last_extreme_index + 1, index):
                result[i] = stretch_position(result[i], lowest, highest, extension)
            last_extreme_value = result[index - 1]
            last_extreme_index = index - 1
            highest = lowest = last_extreme_value
            direction = _Direction.DOWN if direction is _Direction.UP else _Direction.UP

        last_value = result[index]
        highest = max(highest, last_value)
        lowest = min(lowest, last_value)
    return result