# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Logging for declarg.

Library modules obtain their logger with `get_logger(__name__)` and never
configure handlers themselves. Two levels are added to the ones of the
``logging`` module: ``TRACE`` (5), used for environment lookups and the name
lookup, and ``NOTICE`` (25). Programs call `setup_logging()` once to get a
console log on stderr.
"""

from __future__ import annotations

import atexit
import datetime
import logging
import os
import sys
from enum import Enum, IntEnum, unique
from logging.handlers import QueueHandler, QueueListener
from queue import SimpleQueue
from typing import Any, TextIO, cast


@unique
class ColorMode(Enum):
    """Whether the console log contains ANSI colors."""

    ALWAYS = "always"
    #: Colored if the stream is a tty and ``NO_COLOR`` is unset.
    AUTO = "auto"
    NEVER = "never"


def resolve_color_mode(mode: ColorMode, stream: TextIO = sys.stderr) -> bool:
    if sys.platform == "win32" or mode is ColorMode.NEVER:
        return False
    if mode is ColorMode.ALWAYS:
        return True
    return os.getenv("NO_COLOR") is None and stream.isatty()


@unique
class Loglevel(IntEnum):
    """Levels of the ``logging`` module plus ``NOTICE`` and ``TRACE``."""

    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    NOTICE = 25
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = 5

    @classmethod
    def from_str(cls, string: str) -> Loglevel:
        """Parses a level name (case insensitive) or a syslog priority.

        Priorities range from 0 to 8; 0 to 2 all map to ``CRITICAL`` and 8
        is ``TRACE``.
        """
        if string.isdigit():
            priority = int(string)
            if priority >= len(_PRIORITIES):
                raise ValueError(f"{string} not a valid priority")
            return _PRIORITIES[priority]

        try:
            return cls[string.upper()]
        except KeyError:
            raise ValueError(f"{string} not a valid loglevel") from None


logging.addLevelName(Loglevel.TRACE, "TRACE")
logging.addLevelName(Loglevel.NOTICE, "NOTICE")


_PRIORITIES = (
    Loglevel.CRITICAL,
    Loglevel.CRITICAL,
    Loglevel.CRITICAL,
    Loglevel.ERROR,
    Loglevel.WARNING,
    Loglevel.NOTICE,
    Loglevel.INFO,
    Loglevel.DEBUG,
    Loglevel.TRACE,
)

_RESET = "\033[0m"
_STYLES: dict[int, str] = {
    Loglevel.TRACE: "\033[0;38;5;245m",
    Loglevel.DEBUG: "\033[0;38;5;245m",
    Loglevel.NOTICE: "\033[1m",
    Loglevel.WARNING: "\033[33m",
    Loglevel.ERROR: "\033[31m",
    Loglevel.CRITICAL: "\033[31m\033[1m",
}


class ConsoleFormatter(logging.Formatter):
    """Formats records as ``<timestamp> <logger>: <message>``."""

    def __init__(self, colored: bool = False) -> None:
        super().__init__()
        self.colored = colored

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        dt = datetime.datetime.fromtimestamp(record.created)
        return dt.strftime("%b %d %H:%M:%S.%f")[:-3]

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.colored:
            message = f"{_STYLES.get(record.levelno, '')}{message}{_RESET}"

        line = f"{self.formatTime(record)} {record.name}: {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: Loglevel | None = None,
    color_mode: ColorMode = ColorMode.AUTO,
    logger_name: str = "declarg",
) -> None:
    """Attaches a console handler writing to stderr.

    Calling this again replaces the handler installed before.

    :param level: Minimum level shown. If None, ``DECLARG_LOGLEVEL`` is
                  read, falling back to WARNING.
    :param color_mode: Whether the output is colored.
    :param logger_name: The logger to attach the handler to.
    """
    if level is None:
        raw = os.getenv("DECLARG_LOGLEVEL")
        level = Loglevel.from_str(raw) if raw is not None else Loglevel.WARNING

    logger = logging.getLogger(logger_name)
    # Records are filtered by the handler; NOTSET would defer to the root logger.
    logger.setLevel(Loglevel.TRACE)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(ConsoleFormatter(resolve_color_mode(color_mode)))

    queue: SimpleQueue[Any] = SimpleQueue()
    logger.addHandler(QueueHandler(queue))
    listener = QueueListener(queue, stderr_handler, respect_handler_level=True)
    listener.start()
    atexit.register(listener.stop)


class Logger(logging.Logger):
    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(Loglevel.TRACE):
            self._log(Loglevel.TRACE, msg, args, **kwargs)

    def notice(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(Loglevel.NOTICE):
            self._log(Loglevel.NOTICE, msg, args, **kwargs)


logging.setLoggerClass(Logger)


def get_logger(name: str) -> Logger:
    return cast(Logger, logging.getLogger(name))
