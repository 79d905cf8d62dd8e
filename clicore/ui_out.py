"""Output sinks commands write their text to."""

from __future__ import annotations

import io
import sys
from typing import TYPE_CHECKING, Protocol

from .ansi import OutputStyles, colorize, should_colorize

if TYPE_CHECKING:
    from typing import TextIO

__all__ = ["BufferOutput", "OutputSink", "StreamOutput"]


class OutputSink(Protocol):
    """Where commands, help and warnings are rendered."""

    def write(self, text: str) -> None:
        """Write `text` as is."""

    def warning(self, text: str) -> None:
        """Write a warning message."""

    def error(self, text: str) -> None:
        """Write an error message."""


class StreamOutput:
    """Output sink writing to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None, colored: bool | None = None) -> None:
        self.stream = stream or sys.stdout
        self.colored = should_colorize(self.stream) if colored is None else colored

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _styled_line(self, text: str, styles: tuple[str, ...]) -> None:
        self.write((colorize(text, *styles) if self.colored else text) + "\n")

    def warning(self, text: str) -> None:
        self._styled_line(f"Warning: {text}", OutputStyles.WARNING)

    def error(self, text: str) -> None:
        self._styled_line(text, OutputStyles.ERROR)


class BufferOutput:
    """Output sink keeping everything in memory."""

    def __init__(self) -> None:
        self._buffer = io.StringIO()

    def write(self, text: str) -> None:
        self._buffer.write(text)

    def warning(self, text: str) -> None:
        self._buffer.write(f"Warning: {text}\n")

    def error(self, text: str) -> None:
        self._buffer.write(f"{text}\n")

    def getvalue(self) -> str:
        """Return everything written so far."""
        return self._buffer.getvalue()
