"""Small numeric, time and string helpers."""

from __future__ import annotations

import math
import re

DEFAULT_TRIM_CHARS = "\t\n\v\f\r "

_TIME_RE = re.compile(r"\s*([+-]?\d+):\s*([+-]?\d+):\s*([+-]?\d+)")
_MS_RE = re.compile(r"\.\s*([+-]?\d+)")


def clamp(v, mn, mx):
    """Limit ``v`` to the range ``mn``..``mx``."""
    if v < mn:
        return mn
    if v > mx:
        return mx
    return v


def map_range(val, a1, a2, b1, b2):
    """Map ``val`` from the range a1..a2 onto b1..b2."""
    return b1 + (val - a1) * (b2 - b1) / (a2 - a1)


def lerp(start, end, t):
    """Linear interpolation from ``start`` to ``end``."""
    return start + (end - start) * t


def parse_time(text: str) -> float:
    """Parse ``HH:MM:SS`` or ``HH:MM:SS.mmm`` into seconds.

    The part after the dot is an integer count of milliseconds.
    Raises ValueError on malformed or out-of-range input.
    """
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"not a time: {text!r}")
    hours, minutes, seconds = (int(g) for g in match.groups())
    milliseconds = 0
    ms_match = _MS_RE.match(text, match.end())
    if ms_match is not None:
        milliseconds = int(ms_match.group(1))

    if hours < 0 or not 0 <= minutes <= 59 or not 0 <= seconds <= 59 or not 0 <= milliseconds <= 999:
        raise ValueError(f"time out of range: {text!r}")
    return hours * 3600.0 + minutes * 60.0 + seconds + milliseconds / 1000.0


def format_time(seconds: float, with_ms: bool) -> str:
    """Format seconds as ``HH:MM:SS`` with optional ``.mmm``; inf and NaN count as 0."""
    if math.isinf(seconds) or math.isnan(seconds):
        seconds = 0.0
    hours = math.trunc(seconds / 3600.0)
    consumed = 3600.0 * hours
    minutes = math.trunc((seconds - consumed) / 60.0)
    consumed += 60.0 * minutes
    secs = math.trunc(seconds - consumed)
    if with_ms:
        consumed += secs
        ms = math.trunc((seconds - consumed) * 1000.0)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_bytes(size: int) -> str:
    """Human readable size in bytes, KB, MB or GB."""
    if size < 1024:
        return f"{size:d} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024.0:.2f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024.0 * 1024.0):.2f} MB"
    return f"{size / (1024.0 * 1024.0 * 1024.0):.2f} GB"


def ltrim(text: str, chars: str = DEFAULT_TRIM_CHARS) -> str:
    return text.lstrip(chars)


def rtrim(text: str, chars: str = DEFAULT_TRIM_CHARS) -> str:
    return text.rstrip(chars)


def trim(text: str, chars: str = DEFAULT_TRIM_CHARS) -> str:
    return ltrim(rtrim(text, chars), chars)


def contains_insensitive(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test; an empty haystack never matches."""
    size = len(needle)
    lowered = needle.lower()
    return any(haystack[i:i + size].lower() == lowered for i in range(len(haystack)))


def string_equals_insensitive(a: str, b: str) -> bool:
    """Case-insensitive equality of two non-empty strings."""
    if len(a) != len(b):
        return False
    return contains_insensitive(a, b)


def string_starts_with(text: str, start: str) -> bool:
    return text.startswith(start)


def string_ends_with(text: str, ending: str) -> bool:
    return text.endswith(ending)