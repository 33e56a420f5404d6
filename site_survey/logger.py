"""Logging for the **SiteSurvey** crawler.

Everything goes to *stderr*: stdout carries the crawl report.  The console
handler also owns the live ``Pages/Queue/Errors`` status line, so a log
record is never printed into the middle of it::

    from site_survey.logger import configure, show_progress, end_progress

    configure(level="INFO", log_file="crawl.log")
    show_progress("Pages:   3  Queue:   7  Errors:   0")
    end_progress()

Crawl errors are part of the report itself and are logged at INFO, so the
default WARNING level keeps the console to the status line.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, TextIO, Union

LOGGER_NAME: Final[str] = "SiteSurvey"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(message)s"

_LevelT = Union[int, str]


class ProgressConsoleHandler(logging.StreamHandler):
    """stderr handler that also keeps one rewritable status line."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(stream if stream is not None else sys.stderr)
        self._line_open = False

    def show(self, line: str) -> None:
        """Overwrite the status line with *line* (no newline)."""
        self.acquire()
        try:
            self.stream.write("\r" + line)
            self.flush()
            self._line_open = True
        finally:
            self.release()

    def close_line(self) -> None:
        """Terminate a pending status line so the next output starts clean."""
        self.acquire()
        try:
            if self._line_open:
                self.stream.write("\n")
                self.flush()
                self._line_open = False
        finally:
            self.release()

    def emit(self, record: logging.LogRecord) -> None:
        self.close_line()
        super().emit(record)


_console: Optional[ProgressConsoleHandler] = None


def configure(
    *,
    level: _LevelT = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the project logger: console on stderr, optional rotating file.

    Existing handlers are closed and replaced, and the console handler is bound
    to the *current* ``sys.stderr``.
    """
    global _console
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    _console = ProgressConsoleHandler()
    _console.setFormatter(logging.Formatter(log_format))
    lg.addHandler(_console)

    if log_file is not None:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format))
        lg.addHandler(file_handler)

    lg.propagate = False
    return lg


def show_progress(line: str) -> None:
    """Render *line* as the live status line on the console handler."""
    if _console is None:
        configure()
    _console.show(line)


def end_progress() -> None:
    """Finish the status line, if one is showing."""
    if _console is not None:
        _console.close_line()


__all__ = ["LOGGER_NAME", "ProgressConsoleHandler", "configure", "show_progress", "end_progress"]
