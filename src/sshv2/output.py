"""Colored output utilities and logging."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

# ANSI color codes
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
DIM = "\033[2m"
NC = "\033[0m"  # No color / reset

_logger = logging.getLogger("sshv2")


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        if not _supports_color():
            return msg
        if record.levelno >= logging.ERROR:
            return f"{RED}{msg}{NC}"
        elif record.levelno >= logging.WARNING:
            return f"{YELLOW}{msg}{NC}"
        elif record.levelno <= logging.DEBUG:
            return f"{DIM}{msg}{NC}"
        return msg


def setup_logging(debug: bool = False) -> None:
    """Configure the sshv2 logger.

    Args:
        debug: If True, show DEBUG messages (transport chatter). Otherwise WARNING.
    """
    level = logging.DEBUG if debug else logging.WARNING
    _logger.setLevel(level)

    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColoredFormatter("%(message)s"))
        _logger.addHandler(handler)
    else:
        for h in _logger.handlers:
            h.setLevel(level)


def debug(msg: str) -> None:
    """Log debug message (only shown with --debug)."""
    _logger.debug(msg)


def _supports_color(stream: object = None) -> bool:
    if stream is None:
        stream = sys.stderr
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not callable(isatty):
        return False
    return bool(isatty())


def _colorize(color: str, text: str, stream: object = None) -> str:
    if _supports_color(stream):
        return f"{color}{text}{NC}"
    return text


def error(msg: str, *, exit_now: bool = True) -> None:
    """Print error message and optionally exit.

    Args:
        msg: The error message to print.
        exit_now: If True (default), exit with code 1 after printing.
    """
    print(_colorize(RED, f"error: {msg}"), file=sys.stderr)
    if exit_now:
        sys.exit(1)


def warn(msg: str) -> None:
    """Print warning message."""
    print(_colorize(YELLOW, f"warning: {msg}"), file=sys.stderr)


def info(msg: str) -> None:
    """Print info message."""
    print(_colorize(CYAN, msg), file=sys.stderr)


def success(msg: str) -> None:
    """Print success message."""
    print(_colorize(GREEN, msg), file=sys.stderr)


def emit_record(record: dict[str, Any]) -> None:
    """Print an output record as one JSON line on stdout."""
    print(json.dumps(record, sort_keys=True))


def colorize_exit(exit_code: int) -> str:
    """Colorize an exit status label (for stderr)."""
    label = f"exit {exit_code}"
    if exit_code == 0:
        return _colorize(GREEN, label)
    return _colorize(RED, label)
