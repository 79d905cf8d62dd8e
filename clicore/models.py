"""Common types and exceptions."""

from enum import IntEnum

__all__ = [
    "CLASS_HELP_NAMES",
    "AmbiguousCommandError",
    "CliError",
    "ClicoreError",
    "CommandClass",
    "ExitCode",
    "InternalError",
    "NoArgumentError",
    "SessionExit",
    "UndefinedCommandError",
    "UsageError",
]


class CommandClass(IntEnum):
    """Top-level categories commands are grouped into for "help"."""

    # Pseudo classes understood by help_list
    DEPRECATED = -3
    ALL_CLASSES = -2
    ALL_COMMANDS = -1

    NO_CLASS = -1
    RUN = 0
    VARS = 1
    STACK = 2
    FILES = 3
    SUPPORT = 4
    INFO = 5
    BREAKPOINT = 6
    TRACE = 7
    ALIAS = 8  # user-defined aliases
    BOOKMARK = 9
    OBSCURE = 10
    MAINTENANCE = 11
    TUI = 12
    USER = 13

    # "show" commands without a matching "set"
    NO_SET = 14


# Name to use in "help <classname>"
CLASS_HELP_NAMES: dict[CommandClass, str] = {
    CommandClass.RUN: "running",
    CommandClass.VARS: "data",
    CommandClass.STACK: "stack",
    CommandClass.FILES: "files",
    CommandClass.SUPPORT: "support",
    CommandClass.INFO: "status",
    CommandClass.BREAKPOINT: "breakpoints",
    CommandClass.TRACE: "tracepoints",
    CommandClass.ALIAS: "aliases",
    CommandClass.BOOKMARK: "bookmark",
    CommandClass.OBSCURE: "obscure",
    CommandClass.MAINTENANCE: "internals",
    CommandClass.TUI: "text-user-interface",
    CommandClass.USER: "user-defined",
}


class CliError(Exception):
    """Base class of the errors raised while running commands."""


class UsageError(CliError):
    """User-visible, non-fatal error: reported to the user, the session goes on."""


class UndefinedCommandError(UsageError):
    """No command matches the given text."""


class AmbiguousCommandError(UsageError):
    """More than one command matches the given text."""

    def __init__(self, message: str, candidates: list[str]) -> None:
        super().__init__(message)
        self.candidates = candidates


class NoArgumentError(UsageError):
    """A required argument is missing."""


class SessionExit(CliError):
    """Raised to leave the interactive session."""


class InternalError(AssertionError):
    """A registration or programming bug in a module using the engine."""


class ClicoreError(BaseException):
    """Used for errors which already triggered logging."""


class ExitCode(IntEnum):
    """Exit codes of the clicore console script."""

    SUCCESS = 0
    USAGE_ERROR = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 3
