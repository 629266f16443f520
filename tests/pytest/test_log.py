# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import datetime
import logging

import pytest

from declarg.log import ColorMode, ConsoleFormatter, Loglevel, get_logger, resolve_color_mode


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", Loglevel.CRITICAL),
        ("3", Loglevel.ERROR),
        ("4", Loglevel.WARNING),
        ("5", Loglevel.NOTICE),
        ("6", Loglevel.INFO),
        ("info", Loglevel.INFO),
        ("Trace", Loglevel.TRACE),
    ],
)
def test_loglevel_from_str(raw: str, expected: Loglevel) -> None:
    assert Loglevel.from_str(raw) is expected


@pytest.mark.parametrize("raw", ["9", "verbose", ""])
def test_loglevel_from_str_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        Loglevel.from_str(raw)


def test_extra_levels() -> None:
    assert logging.getLevelName(5) == "TRACE"
    assert logging.getLevelName(25) == "NOTICE"


def test_logger_trace(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(Loglevel.TRACE, logger="declarg")
    logger = get_logger("declarg.test")
    logger.trace("trace %d", 1)
    logger.notice("notice")
    assert [(r.levelname, r.message) for r in caplog.records] == [
        ("TRACE", "trace 1"),
        ("NOTICE", "notice"),
    ]


def test_console_formatter() -> None:
    created = datetime.datetime(2024, 3, 1, 12, 30, 45, 123456).timestamp()
    record = logging.LogRecord("declarg.parser", Loglevel.INFO, __file__, 1, "hello %s", ("you",), None)
    record.created = created
    assert ConsoleFormatter().format(record) == "Mar 01 12:30:45.123 declarg.parser: hello you"

    record = logging.LogRecord("declarg", Loglevel.ERROR, __file__, 1, "oops", (), None)
    assert ConsoleFormatter(colored=True).format(record).endswith("\033[31moops\033[0m")


def test_color_mode() -> None:
    assert resolve_color_mode(ColorMode.NEVER) is False
