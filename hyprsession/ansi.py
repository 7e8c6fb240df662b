"""ANSI styling for the progress output.

Colors are disabled when NO_COLOR is set or the stream is not a TTY,
and forced with FORCE_COLOR.
"""

import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "DIM",
    "GREEN",
    "RED",
    "RESET",
    "YELLOW",
    "LogStyles",
    "make_style",
    "should_colorize",
]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
GREEN = "32"
YELLOW = "33"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell if ANSI colors should be written to `stream` (stderr by default)."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def make_style(*codes: str) -> tuple[str, str]:
    """Return a (prefix, suffix) pair usable inside a log format string."""
    if not codes:
        return ("", RESET)
    return (f"{_ESC}{';'.join(codes)}m", RESET)


class LogStyles:
    """Styles per log level."""

    SUCCESS = (GREEN,)
    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)
