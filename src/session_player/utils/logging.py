"""Console logging: a colored formatter and the root logger setup."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colors the levelname field with ANSI codes.

    Colors are off when ``NO_COLOR`` is set or the target stream is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = LOG_FORMAT,
        datefmt: str | None = DATE_FORMAT,
        *,
        stream: TextIO | None = None,
    ) -> None:
        super().__init__(fmt, datefmt)
        self._stream = stream

    def use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stderr
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color():
            color = self.COLORS.get(record.levelno, "")
            # Copy so other handlers see the plain levelname
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(log_level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Install a single colored console handler on the root logger."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    target = stream or sys.stderr

    handler = logging.StreamHandler(target)
    handler.setFormatter(ColoredFormatter(stream=target))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_session_player", False):
            root.removeHandler(existing)
    handler._session_player = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(resolved_level)
    return handler
