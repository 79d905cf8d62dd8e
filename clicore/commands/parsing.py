"""Command name parsing utilities."""

from __future__ import annotations

from ..constants import COMMAND_NAME_PUNCTUATION, SINGLE_CHAR_COMMANDS

__all__ = [
    "find_command_name_length",
    "skip_spaces",
    "valid_cmd_char_p",
    "valid_user_defined_cmd_name_p",
]


def skip_spaces(text: str) -> str:
    """Return `text` without its leading blanks."""
    return text.lstrip(" \t")


def valid_cmd_char_p(char: str) -> bool:
    """Tell if `char` may appear in a command name."""
    return char.isalnum() or char in COMMAND_NAME_PUNCTUATION


def valid_user_defined_cmd_name_p(name: str) -> bool:
    """Tell if `name` is acceptable as the name of a new command.

    Stricter than what the matcher accepts: the single character
    commands like "!" can't be redefined.
    """
    return bool(name) and all(valid_cmd_char_p(char) for char in name)


def find_command_name_length(text: str) -> int:
    """Return the length of the command word at the start of `text`.

    Args:
        text: The input, without leading blanks

    Returns:
        0 when `text` does not start with a command word
    """
    if not text:
        return 0
    # "!ls" or "|grep": the punctuation is a command by itself
    if text[0] in SINGLE_CHAR_COMMANDS:
        return 1
    length = 0
    while length < len(text) and valid_cmd_char_p(text[length]):
        length += 1
    return length
