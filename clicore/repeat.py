"""Command line saving and repetition.

Each line executed is saved, to be repeated when the user enters an empty
line or by a command replaying the previous one. Commands call
`dont_repeat` if they must not be run again that way.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .models import UsageError

__all__ = ["RepeatState"]


@dataclass
class RepeatState:
    """Saved command lines and repetition flags of one session.

    Attributes:
        saved_line: The line being (or last) executed
        previous_saved_line: The line executed before `saved_line`
        no_repeat: The current command asked not to be repeated
        repeat_arguments: Arguments to use instead of the typed ones on repetition
        previous_repeat_arguments: `repeat_arguments` of the previous line
        suppress_dont_repeat: While set, `dont_repeat` has no effect
    """

    saved_line: str = ""
    previous_saved_line: str = ""
    no_repeat: bool = False
    repeat_arguments: str | None = None
    previous_repeat_arguments: str | None = None
    suppress_dont_repeat: bool = False

    def begin_command(self) -> None:
        """Reset the per-command flags, done before every command body runs."""
        self.no_repeat = False
        self.repeat_arguments = None

    def dont_repeat(self) -> None:
        """Prevent the current command from being repeated by an empty line."""
        if self.suppress_dont_repeat:
            return
        self.no_repeat = True

    @contextmanager
    def prevent_dont_repeat(self) -> Iterator[None]:
        """Make `dont_repeat` ineffective inside the block."""
        previous = self.suppress_dont_repeat
        self.suppress_dont_repeat = True
        try:
            yield
        finally:
            self.suppress_dont_repeat = previous

    def repeat_previous(self) -> str:
        """Give the currently running command access to the previous line.

        The current command becomes non-repeatable, and the current and
        previous lines (with their repeat arguments) are swapped, so that
        `get_saved_command_line` returns the line to replay.

        Raises:
            UsageError: there is no previous line, nothing is changed then
        """
        if not self.previous_saved_line:
            msg = "No previous command to relaunch"
            raise UsageError(msg)
        self.dont_repeat()
        self.saved_line, self.previous_saved_line = self.previous_saved_line, self.saved_line
        self.repeat_arguments, self.previous_repeat_arguments = self.previous_repeat_arguments, self.repeat_arguments
        return self.saved_line

    def save_command_line(self, text: str) -> None:
        """Remember `text` as the current line, the current one becomes the previous."""
        self.previous_saved_line = self.saved_line
        self.previous_repeat_arguments = self.repeat_arguments
        self.saved_line = text
        self.repeat_arguments = None

    def set_repeat_arguments(self, args: str) -> None:
        """Use `args` instead of the typed arguments if the command is repeated."""
        self.repeat_arguments = args

    def get_saved_command_line(self) -> str:
        """Return the line an empty input would repeat."""
        return self.saved_line

    def line_to_repeat(self) -> str | None:
        """Return the line to run for an empty input, None if there is none."""
        if self.no_repeat or not self.saved_line:
            return None
        return self.saved_line

    def apply_repeat_arguments(self, command_text: str) -> None:
        """Rewrite the saved line as `command_text` followed by the repeat arguments.

        Does nothing unless the command called `set_repeat_arguments`.

        Args:
            command_text: The command part of the saved line, without its arguments
        """
        if self.repeat_arguments is None:
            return
        command_text = command_text.rstrip()
        self.saved_line = f"{command_text} {self.repeat_arguments}" if self.repeat_arguments else command_text
