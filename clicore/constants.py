"""Shared constants for clicore."""

import os
from pathlib import Path

__all__ = [
    "COMMAND_NAME_PUNCTUATION",
    "CONFIG_FILE",
    "DEFAULT_HISTORY_SIZE",
    "DEFAULT_PROMPT",
    "INT_MAX",
    "INT_MIN",
    "SINGLE_CHAR_COMMANDS",
    "UINT_MAX",
    "UNLIMITED_KEYWORD",
]

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "clicore" / "config.toml"

DEFAULT_PROMPT = "(cli) "
DEFAULT_HISTORY_SIZE = 256

# Characters allowed in command names besides alphanumerics
COMMAND_NAME_PUNCTUATION = frozenset("-_.")

# Commands made of a single punctuation character, matched without a separator
SINGLE_CHAR_COMMANDS = frozenset("!|")

# Integer ranges of the setting storage
UINT_MAX = 2**32 - 1
INT_MAX = 2**31 - 1
INT_MIN = -(2**31)

UNLIMITED_KEYWORD = "unlimited"
