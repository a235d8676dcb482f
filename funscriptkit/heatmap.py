"""Speed heatmap of a script, as a speed profile and an RGBA bitmap."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .action import FunscriptAction
from .util import clamp

MAX_SPEED_PER_SECOND = 400.0
MAX_RESOLUTION = 4096
SPEED_TEXTURE_RESOLUTION = 2048


def _rgb(r: int, g: int, b: int) -> tuple[float, float, float]:
    return (r / 255.0, g / 255.0, b / 255.0)


HEAT_COLORS: tuple[tuple[float, float, float], ...] = (
    _rgb(0, 0, 0),
    _rgb(30, 144, 255),
    _rgb(0, 255, 255),
    _rgb(0, 255, 0),
    _rgb(255, 255, 0),
    _rgb(255, 0, 0),
)

# Gradient marks (position, 0xRRGGBBAA) used for speed-coloured lines.
LINE_COLORS: tuple[tuple[float, int], ...] = (
    (0.0, 0xFFFFFFFF),
    (1.0 / 3.0, 0x66FF00FF),
    (2.0 / 3.0, 0xFFFF00FF),
    (1.0, 0xFF0000FF),
)


def _sample_index(at_s: float, time_step: float) -> int | None:
    if time_step <= 0.0:
        return None
    value = at_s / time_step
    if not math.isfinite(value) or value < 0.0:
        return None
    return int(value)


def speed_buffer(
    total_duration: float,
    actions: Sequence[FunscriptAction],
    resolution: int = SPEED_TEXTURE_RESOLUTION,
) -> list[float]:
    """Average stroke speed per time slot, scaled to 0..1 by the maximum speed."""
    speeds = [0.0] * resolution
    counts = [0] * resolution
    time_step = total_duration / resolution

    for prev, following in zip(actions, actions[1:]):
        duration = following.at_s - prev.at_s
        speed = abs(prev.pos - following.pos) / duration
        prev_idx = _sample_index(prev.at_s, time_step)
        next_idx = _sample_index(following.at_s, time_step)
        if prev_idx is None or next_idx is None:
            continue
        if prev_idx == next_idx:
            if prev_idx < resolution:
                counts[prev_idx] += 1
                speeds[prev_idx] += speed
        elif prev_idx < resolution and next_idx < resolution:
            for x in range(prev_idx, next_idx):
                counts[x] += 1
                speeds[x] += speed

    return [
        clamp(speed / (count if count > 0 else 1) / MAX_SPEED_PER_SECOND, 0.0, 1.0)
        for speed, count in zip(speeds, counts)
    ]


def _smoothstep(t: float) -> float:
    t = clamp(t, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def ramp_color(speed: float) -> tuple[float, float, float]:
    """Colour of a normalised speed on the black-blue-cyan-green-yellow-red ramp."""
    x = clamp(speed, 0.0, 1.0) * (len(HEAT_COLORS) - 1)
    index = int(x)
    if index >= len(HEAT_COLORS) - 1:
        return HEAT_COLORS[-1]
    t = _smoothstep(x - index)
    low, high = HEAT_COLORS[index], HEAT_COLORS[index + 1]
    return tuple(a + (b - a) * t for a, b in zip(low, high))  # type: ignore[return-value]


def _sample_linear(values: Sequence[float], u: float) -> float:
    """Linearly filtered lookup with clamp-to-edge, as a texture sampler does."""
    count = len(values)
    coord = u * count - 0.5
    base = math.floor(coord)
    frac = coord - base
    i0 = min(max(base, 0), count - 1)
    i1 = min(max(base + 1, 0), count - 1)
    return values[i0] + (values[i1] - values[i0]) * frac


def _to_byte(value: float) -> int:
    return int(round(clamp(value, 0.0, 1.0) * 255.0))


class FunscriptHeatmap:
    """Holds a script's speed profile and renders it as an image."""

    def __init__(self) -> None:
        self.speeds: list[float] = [0.0] * SPEED_TEXTURE_RESOLUTION

    def update(self, total_duration: float, actions: Sequence[FunscriptAction]) -> None:
        """Recompute the speed profile for ``actions`` over ``total_duration`` seconds."""
        self.speeds = speed_buffer(total_duration, actions, SPEED_TEXTURE_RESOLUTION)

    def render_to_bitmap(self, width: int, height: int) -> bytes:
        """RGBA pixels, bottom row first; brightness fades to black towards the top."""
        width = min(width, MAX_RESOLUTION)
        height = min(height, MAX_RESOLUTION)
        if width <= 0 or height <= 0:
            raise ValueError("bitmap dimensions must be positive")

        column_colors = [
            ramp_color(_sample_linear(self.speeds, (x + 0.5) / width)) for x in range(width)
        ]
        bitmap = bytearray()
        for row in range(height):
            screen_y = height - 1 - row
            fade = (screen_y + 0.5) / height
            for r, g, b in column_colors:
                bitmap += bytes((_to_byte(r * fade), _to_byte(g * fade), _to_byte(b * fade), 255))
        return bytes(bitmap)