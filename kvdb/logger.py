"""Process-wide logger writing console-style lines to stdout, stderr or a file."""

from __future__ import annotations

import logging
import sys
from datetime import datetime

from .configuration import LoggingConfig

FATAL = logging.CRITICAL

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": FATAL,
}

# Level name and ANSI colour for each level.
_STYLES = {
    logging.DEBUG: ("DEBUG", 35),
    logging.INFO: ("INFO", 34),
    logging.WARNING: ("WARN", 33),
    logging.ERROR: ("ERROR", 31),
    FATAL: ("FATAL", 31),
}

_logger = logging.getLogger("kvdb")


class _ConsoleFormatter(logging.Formatter):
    """Tab-separated timestamp, coloured level and message."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        offset = stamp.strftime("%z")
        zone = "Z" if offset in ("", "+0000", "-0000") else offset
        timestamp = f"{stamp:%Y-%m-%dT%H:%M:%S}.{stamp.microsecond // 1000:03d}{zone}"
        name, color = _STYLES.get(record.levelno, (record.levelname, 31))
        return f"{timestamp}\t\x1b[{color}m{name}\x1b[0m\t{record.getMessage()}"


class _StdStreamHandler(logging.StreamHandler):
    """Writes to whatever the named standard stream is at the moment of writing."""

    def __init__(self, name: str) -> None:
        self._use_stderr = name == "stderr"
        super().__init__()

    @property
    def stream(self):
        return sys.stderr if self._use_stderr else sys.stdout

    @stream.setter
    def stream(self, value) -> None:
        pass


def configure(cfg: LoggingConfig) -> None:
    """Set the level and destination of the process-wide logger.

    An unknown level falls back to info; an empty output means stdout.
    """
    output = cfg.output or "stdout"
    if output in ("stdout", "stderr"):
        handler: logging.Handler = _StdStreamHandler(output)
    else:
        handler = logging.FileHandler(output, encoding="utf-8")
    handler.setFormatter(_ConsoleFormatter())

    for old in list(_logger.handlers):
        _logger.removeHandler(old)
        old.close()
    _logger.addHandler(handler)
    _logger.setLevel(_LEVELS.get(cfg.level.lower(), logging.INFO))
    _logger.propagate = False


def info(msg: str) -> None:
    _logger.info(msg)


def warn(msg: str) -> None:
    _logger.warning(msg)


def error(msg: str) -> None:
    _logger.error(msg)


def fatal(msg: str) -> None:
    """Log ``msg`` at fatal level and exit the process with status 1."""
    _logger.log(FATAL, msg)
    raise SystemExit(1)