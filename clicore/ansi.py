"""ANSI terminal color helpers.

Colors are only emitted when the target stream is a terminal, unless
overridden with the NO_COLOR / FORCE_COLOR environment variables.
"""

import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "DIM",
    "RED",
    "RESET",
    "YELLOW",
    "LogStyles",
    "OutputStyles",
    "colorize",
    "make_style",
    "should_colorize",
]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
YELLOW = "33"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell if ANSI colors should be written to `stream`.

    Args:
        stream: The output stream to check. Defaults to sys.stderr.

    Returns:
        True if colors should be used
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, *codes: str) -> str:
    """Wrap `text` in the given ANSI codes (no-op without codes)."""
    if not codes:
        return text
    return f"{_ESC}{';'.join(codes)}m{text}{RESET}"


def make_style(*codes: str) -> tuple[str, str]:
    """Return a (prefix, suffix) pair usable in format strings."""
    if not codes:
        return ("", RESET)
    return (f"{_ESC}{';'.join(codes)}m", RESET)


class LogStyles:
    """Styles used by the screen log formatter."""

    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)


class OutputStyles:
    """Styles used by the interactive output sink."""

    WARNING = (YELLOW,)
    ERROR = (RED, BOLD)
