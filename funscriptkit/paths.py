"""File, path, shell and colour helpers used around script editing."""

from __future__ import annotations

import colorsys
import logging
import math
import os
import subprocess
import sys
from pathlib import Path

import platformdirs

log = logging.getLogger(__name__)

_WINDOWS_MAX_PATH = 260
_LONG_PATH_PREFIX = "\\\\?\\"
_GOLDEN_RATIO_CONJUGATE = 0.618033988749895

PREF_AUTHOR = "OFS"
PREF_APP = "OFS3_data"


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def _is_macos() -> bool:
    return sys.platform == "darwin"


def _long_path(path: str | os.PathLike) -> str:
    """Prefix very long paths on Windows so the OS accepts them."""
    text = os.fspath(path)
    if _is_windows() and len(text) >= _WINDOWS_MAX_PATH and not text.startswith(_LONG_PATH_PREFIX):
        return _LONG_PATH_PREFIX + text
    return text


def sanitize_string(text: str) -> str:
    """Replace single and double quotes with spaces, as dialog tools dislike them."""
    return text.translate({ord("'"): " ", ord('"'): " "})


def path_from_string(text: str | os.PathLike) -> Path:
    """Build a path using the platform's preferred separators."""
    return Path(os.path.normpath(os.fspath(text))) if os.fspath(text) else Path()


def filename(path: str | os.PathLike) -> str:
    """Final path component with its last extension removed."""
    return path_from_string(path).stem


def read_file(path: str | os.PathLike) -> bytes:
    """Return the whole content of a file; raises OSError if it cannot be read."""
    with open(_long_path(path), "rb") as handle:
        return handle.read()


def read_file_string(path: str | os.PathLike) -> str:
    """Return the content of a file as UTF-8 text; raises OSError if it cannot be read."""
    return read_file(path).decode("utf-8")


def write_file(path: str | os.PathLike, data: bytes) -> int:
    """Write ``data`` to ``path``, replacing it, and return the bytes written."""
    with open(_long_path(path), "wb") as handle:
        return handle.write(data)


def file_exists(path: str | os.PathLike) -> bool:
    """Whether something exists at ``path``; logs a warning when it does not."""
    exists = os.path.exists(_long_path(path))
    if not exists:
        log.warning('"%s" doesn\'t exist', os.fspath(path))
    return exists


def directory_exists(path: str | os.PathLike) -> bool:
    """Whether ``path`` names an existing directory."""
    return path_from_string(path).is_dir()


def create_directories(path: str | os.PathLike) -> Path:
    """Create ``path`` and any missing parents; raises OSError on failure."""
    try:
        os.makedirs(_long_path(path), exist_ok=True)
    except OSError as error:
        log.error("Failed to create directory: %s", error)
        raise
    return Path(path)


def base_path() -> Path:
    """Directory the application's bundled data lives under."""
    return Path(__file__).resolve().parent


def resource(path: str) -> str:
    """Location of a bundled data file such as ``fonts/x.ttf``."""
    return str(base_path() / "data" / path_from_string(path))


def _pref_root() -> Path:
    root = Path(platformdirs.user_data_path(PREF_APP, PREF_AUTHOR, roaming=True))
    root.mkdir(parents=True, exist_ok=True)
    return root


def pref_path(path: str = "") -> str:
    """Per-user preference directory, or ``path`` inside it when given."""
    root = _pref_root()
    if path:
        return str(root / path_from_string(path))
    return str(root)


def ffmpeg_path() -> Path:
    """Where the ffmpeg executable is expected."""
    if _is_windows():
        return path_from_string(pref_path("ffmpeg.exe"))
    return Path("ffmpeg")


def open_url(url: str) -> bool:
    """Open ``url`` with the desktop's default handler; report success."""
    if _is_windows():
        os.startfile(url)  # type: ignore[attr-defined]
        return True
    if _is_macos():
        log.error("Not implemented for this platform.")
        raise NotImplementedError("opening URLs is not supported on this platform")
    return subprocess.run(["xdg-open", url], check=False).returncode == 0


def open_file_explorer(path: str) -> bool:
    """Show ``path`` in the system file manager; report success."""
    if _is_windows():
        subprocess.Popen(["explorer", path])
        return True
    if _is_macos():
        log.error("Not implemented for this platform.")
        raise NotImplementedError("opening a file explorer is not supported on this platform")
    return open_url(path)


def _to_byte(value: float) -> int:
    return int(min(max(value, 0.0), 1.0) * 255.0 + 0.5)


class ColorCycler:
    """Hands out well-spread colours by stepping the hue by the golden ratio."""

    def __init__(self, hue: float = 0.0) -> None:
        self.hue = hue

    def next_color(self, s: float, v: float, alpha: float = 1.0) -> int:
        """Next colour packed as 0xAABBGGRR."""
        self.hue = math.fmod(self.hue + _GOLDEN_RATIO_CONJUGATE, 1.0)
        r, g, b = colorsys.hsv_to_rgb(self.hue, s, v)
        return (
            _to_byte(r)
            | (_to_byte(g) << 8)
            | (_to_byte(b) << 16)
            | (_to_byte(alpha) << 24)
        )