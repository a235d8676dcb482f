"""Buffered log file written by a background thread."""

from __future__ import annotations

import enum
import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, TextIO

from .paths import pref_path

_console = logging.getLogger("funscriptkit")

_HEADER_LIMIT = 32
LOG_FILE_NAME = "OFS.log"


class LogLevel(enum.IntEnum):
    INFO = 0
    WARN = 1
    DEBUG = 2
    ERROR = 3

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LABELS = {
    LogLevel.INFO: "INFO ",
    LogLevel.WARN: "WARN ",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.ERROR: "ERROR",
}

_LOGGING_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.ERROR: logging.ERROR,
}


def format_header(level: LogLevel | int, seconds: float) -> str:
    """Line header such as ``[ 1.500][INFO ]: ``, at most 32 characters."""
    try:
        label = LogLevel(level).label
    except ValueError:
        label = "-----"
    return f"[{seconds:6.3f}][{label:5s}]: "[:_HEADER_LIMIT]


class FileLogger:
    """Collects log lines in memory and writes them to a file when flushed."""

    def __init__(
        self,
        path: str | os.PathLike | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self._clock = clock
        self._t0 = clock()
        self._buffer: list[str] = []
        self._cond = threading.Condition()
        self._flush_requested = False
        self._should_exit = False
        self._handle: TextIO | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        """Open the log file and start the writer thread."""
        if self._handle is not None:
            return
        if self.path is None:
            self.path = Path(pref_path(LOG_FILE_NAME))
        self._handle = open(self.path, "w", encoding="utf-8", newline="")
        self._should_exit = False
        self._flush_requested = False
        self._thread = threading.Thread(target=self._run, name="MessageLogging", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Write what is still buffered, stop the thread and close the file."""
        if self._handle is None:
            return
        with self._cond:
            self._should_exit = True
            self._cond.notify()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._handle.close()
        self._handle = None

    def __enter__(self) -> FileLogger:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _run(self) -> None:
        handle = self._handle
        assert handle is not None
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._flush_requested or self._should_exit)
                pending = "".join(self._buffer)
                self._buffer.clear()
                self._flush_requested = False
                exiting = self._should_exit
            if pending:
                handle.write(pending)
                handle.flush()
            if exiting:
                return

    def _ends_with_newline(self) -> bool:
        return not self._buffer or self._buffer[-1].endswith("\n")

    def log_prefixed(self, prefix: str, msg: str, new_line: bool = True) -> None:
        """Buffer ``prefix`` and ``msg``, ending the line when ``new_line`` is set."""
        text = prefix + msg + ("\n" if new_line else "")
        with self._cond:
            if text:
                self._buffer.append(text)
            if new_line and not self._ends_with_newline():
                self._buffer.append("\n")

    def log(self, level: LogLevel, msg: str, new_line: bool = True) -> None:
        """Buffer ``msg`` under a timestamped level header and echo it to the console."""
        header = format_header(level, self._clock() - self._t0)
        try:
            console_level = LogLevel(level).logging_level
        except ValueError:
            console_level = logging.INFO
        _console.log(console_level, "%s", msg)
        self.log_prefixed(header, msg, new_line)

    def flush(self) -> None:
        """Ask the writer thread to write the buffered text."""
        with self._cond:
            if self._buffer:
                self._flush_requested = True
                self._cond.notify()