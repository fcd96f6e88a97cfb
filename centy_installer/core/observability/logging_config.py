"""
Logging configuration for processes that embed the installer.

Installer modules only ever do ``logger = logging.getLogger(__name__)``;
handlers belong to the host process.  A host without logging of its
own calls ``setup_logging()`` once to see stage progress on stderr.

Level: explicit argument > CENTY_LOG_LEVEL > WARNING.
CENTY_LOG_FILE adds a file handler (level CENTY_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys

_FMT_CONSOLE = "%(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

LEVEL_ENV = "CENTY_LOG_LEVEL"
FILE_ENV = "CENTY_LOG_FILE"
FILE_LEVEL_ENV = "CENTY_LOG_FILE_LEVEL"


def setup_logging(
    level: str | None = None,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Attach installer log output to the root logger.

    Replaces any handlers already on the root logger, so calling it
    twice does not duplicate output.  Below INFO the console lines
    carry timestamp, level and logger name; otherwise only the message.
    """
    console_level = _parse_level(level or os.environ.get(LEVEL_ENV))
    log_file = log_file or os.environ.get(FILE_ENV) or None
    log_file_level = log_file_level or os.environ.get(FILE_LEVEL_ENV) or None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    fmt = _FMT_DETAIL if console_level < logging.INFO else _FMT_CONSOLE
    console.setFormatter(logging.Formatter(fmt, datefmt=_DATEFMT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names give WARNING."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
