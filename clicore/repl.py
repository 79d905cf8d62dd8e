"""Interactive read-eval loop."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import questionary

from .logging_setup import get_logger
from .models import ExitCode, SessionExit, UsageError

if TYPE_CHECKING:
    from .interpreter import Interpreter

__all__ = ["Repl", "ask_line"]


def ask_line(prompt: str) -> str | None:
    """Read one line from the terminal.

    Returns:
        The line, None on end of input or Ctrl+C
    """
    return questionary.text(prompt, qmark="").ask()


class Repl:
    """Feeds lines to an interpreter and reports their errors.

    Args:
        interpreter: The session to run lines in
        ask: Reads a line given the prompt, None ending the loop
    """

    def __init__(self, interpreter: Interpreter, ask: Callable[[str], str | None] | None = None) -> None:
        self.interpreter = interpreter
        self.ask = ask or ask_line
        self.log = get_logger("repl")
        self.failed = False

    def run_line(self, line: str, from_tty: bool = True) -> ExitCode | None:
        """Run one line.

        Usage errors and command failures are reported and the session goes on.

        Returns:
            None to continue, else the exit code of the session
        """
        self.failed = False
        try:
            self.interpreter.handle_line(line, from_tty)
        except SessionExit:
            return ExitCode.SUCCESS
        except UsageError as e:
            self.failed = True
            self.interpreter.output.error(str(e))
        except AssertionError:
            self.log.exception("Integrity check failed running %r, this is a bug in a command definition", line)
            return ExitCode.INTERNAL_ERROR
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.failed = True
            self.log.exception("%r failed:", line)
            self.interpreter.output.error(str(e))
        return None

    def run(self) -> ExitCode:
        """Read and run lines until "quit" or the end of input."""
        while True:
            line = self.ask(self.interpreter.prompt.value)
            if line is None:
                return ExitCode.SUCCESS
            code = self.run_line(line)
            if code is not None:
                return code
