"""Levelled console logging with fixed-width prefixes."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Severity of a log message, from least to most severe."""

    DEBUG = 0
    VERBOSE = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5


_PREFIXES = {
    LogLevel.DEBUG: "[DEBUG]   : ",
    LogLevel.VERBOSE: "[VERBOSE] : ",
    LogLevel.INFO: "[INFO]    : ",
    LogLevel.WARNING: "[WARNING] : ",
    LogLevel.ERROR: "[ERROR]   : ",
    LogLevel.FATAL: "[FATAL]   : ",
}


class Logger:
    """Writes messages at or above a threshold level.

    Messages up to WARNING go to standard output, ERROR and FATAL to
    standard error. Messages are written as given; no newline is added.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.DEBUG,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.level = LogLevel(level)
        self._out = out
        self._err = err

    def _stream_for(self, level: LogLevel) -> TextIO:
        if level >= LogLevel.ERROR:
            return self._err if self._err is not None else sys.stderr
        return self._out if self._out is not None else sys.stdout

    def log(self, level: LogLevel, message: str) -> None:
        """Write ``message`` with the prefix of ``level`` unless it is filtered out."""
        level = LogLevel(level)
        if level < self.level:
            return
        self._stream_for(level).write(_PREFIXES[level] + message)

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def verbose(self, message: str) -> None:
        self.log(LogLevel.VERBOSE, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: str) -> None:
        self.log(LogLevel.FATAL, message)