"""Tests for ColoredFormatter and setup_logging."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from session_player.utils.logging import ColoredFormatter, setup_logging

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


class TtyStream(StringIO):
    def isatty(self) -> bool:
        return True


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="session_player.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    def _tty_formatter(self) -> ColoredFormatter:
        return ColoredFormatter("%(levelname)s | %(message)s", stream=TtyStream())

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        output = self._tty_formatter().format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        fmt = self._tty_formatter()

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert "\033[" not in fmt.format(_make_record(logging.ERROR))

    def test_original_record_not_mutated(self):
        record = _make_record(logging.WARNING)

        self._tty_formatter().format(record)

        assert record.levelname == "WARNING"


class TestSetupLogging:
    """Tests for the root logger setup."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_handler_and_level(self):
        stream = StringIO()

        setup_logging("debug", stream=stream)
        logging.getLogger("session_player.demo").debug("hello %s", "there")

        assert logging.getLogger().level == logging.DEBUG
        assert "hello there" in stream.getvalue()
        assert "session_player.demo" in stream.getvalue()

    def test_repeated_setup_replaces_own_handler(self):
        first = setup_logging("INFO", stream=StringIO())
        second = setup_logging("INFO", stream=StringIO())

        root = logging.getLogger()
        assert second in root.handlers
        assert first not in root.handlers

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("chatty", stream=StringIO())

        assert logging.getLogger().level == logging.INFO
