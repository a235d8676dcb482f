"""Catmull-Rom sampling of a script's positions over time."""

from __future__ import annotations

from .action import FunscriptArray


def _catmull_rom(v0: float, v1: float, v2: float, v3: float, s: float) -> float:
    s2 = s * s
    s3 = s2 * s
    f1 = -s3 + 2.0 * s2 - s
    f2 = 3.0 * s3 - 5.0 * s2 + 2.0
    f3 = -3.0 * s3 + 4.0 * s2 + s
    f4 = s3 - s2
    return (f1 * v0 + f2 * v1 + f3 * v2 + f4 * v3) / 2.0


def _control_indices(count: int, index: int) -> tuple[int, int, int, int]:
    last = count - 1
    return tuple(min(max(index + d, 0), last) for d in (-1, 0, 1, 2))  # type: ignore[return-value]


def _segment_value(actions: FunscriptArray, index: int, time: float, flat_shortcut: bool) -> float:
    i0, i1, i2, i3 = _control_indices(len(actions), index)
    if flat_shortcut and actions[i1].pos == actions[i2].pos:
        return actions[i1].pos / 100.0
    span = actions[i2].at_s - actions[i1].at_s
    s = (time - actions[i1].at_s) / span
    return _catmull_rom(
        actions[i0].pos / 100.0,
        actions[i1].pos / 100.0,
        actions[i2].pos / 100.0,
        actions[i3].pos / 100.0,
        s,
    )


def catmull_rom_spline(actions: FunscriptArray, index: int, time: float) -> float:
    """Value in 0..1 of the segment starting at ``index``, sampled at ``time``."""
    return _segment_value(actions, index, time, flat_shortcut=False)


def _catmull_rom_flat(actions: FunscriptArray, index: int, time: float) -> float:
    return _segment_value(actions, index, time, flat_shortcut=True)


def sample_at_index(actions: FunscriptArray, index: int, time: float) -> float:
    """Sample the segment at ``index`` if ``time`` lies in it, else the last position."""
    if not actions:
        return 0.0
    if 0 <= index and index + 1 < len(actions):
        if actions[index].at_s <= time <= actions[index + 1].at_s:
            return catmull_rom_spline(actions, index, time)
    return actions[-1].pos / 100.0


class FunscriptSpline:
    """Spline sampler that remembers the last segment it used."""

    def __init__(self) -> None:
        self.cache_idx = 0

    def sample(self, actions: FunscriptArray, time: float) -> float:
        """Smoothed position in 0..1 at ``time``."""
        count = len(actions)
        if count == 0:
            return 0.0
        if count == 1:
            return actions[0].pos / 100.0
        if self.cache_idx + 1 >= count:
            self.cache_idx = 0

        idx = self.cache_idx
        if actions[idx].at_s <= time <= actions[idx + 1].at_s:
            return _catmull_rom_flat(actions, idx, time)
        if idx + 2 < count and actions[idx + 1].at_s <= time <= actions[idx + 2].at_s:
            self.cache_idx = idx + 1
            return _catmull_rom_flat(actions, self.cache_idx, time)

        upper = actions.upper_bound(time)
        if upper == count:
            return actions[-1].pos / 100.0
        if upper == 0:
            return actions[0].pos / 100.0
        self.cache_idx = upper - 1
        return _catmull_rom_flat(actions, self.cache_idx, time)