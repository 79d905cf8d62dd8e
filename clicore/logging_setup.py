"""Loggers of the clicore package.

Every logger returned by `get_logger` writes to the handlers installed by
`init_logger`: the terminal, and a file in debug mode.
"""

import logging
import os

from .ansi import LogStyles, make_style, should_colorize

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

FILE_FORMAT = r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"


class LogObjects:
    """Handlers shared by every logger created through `get_logger`, and the debug switch."""

    handlers: list[logging.Handler] = []
    debug: bool = bool(os.environ.get("CLICORE_DEBUG"))


def is_debug() -> bool:
    """Tell if debug logging is on (CLICORE_DEBUG or --debug)."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Switch debug logging, affecting loggers created afterwards."""
    LogObjects.debug = value


class ScreenLogFormatter(logging.Formatter):
    """Terminal formatter, warnings and errors colored when stderr allows it."""

    def __init__(self) -> None:
        super().__init__()
        base = r"%(name)18s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        colored = should_colorize()
        styles = {
            logging.WARNING: LogStyles.WARNING,
            logging.ERROR: LogStyles.ERROR,
            logging.CRITICAL: LogStyles.CRITICAL,
        }
        self._by_level: dict[int, logging.Formatter] = {}
        for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
            prefix, suffix = make_style(*styles[level]) if colored and level in styles else ("", "")
            self._by_level[level] = logging.Formatter(f"{prefix}{base}{suffix}")

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._by_level.get(record.levelno, self._by_level[logging.INFO])
        return formatter.format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Install the shared handlers.

    Args:
        filename: Also log everything to this file
        force_debug: Turn debug mode on
    """
    if force_debug:
        set_debug(True)

    if filename:
        to_file = logging.FileHandler(filename)
        to_file.setFormatter(logging.Formatter(fmt=FILE_FORMAT))
        LogObjects.handlers.append(to_file)
    to_screen = logging.StreamHandler()
    to_screen.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(to_screen)


def get_logger(name: str = "clicore", level: int | None = None) -> logging.Logger:
    """Return the logger called `name`, attached to the shared handlers.

    Args:
        name: Logger name
        level: Logging level, DEBUG or WARNING depending on debug mode if not given
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else (logging.DEBUG if is_debug() else logging.WARNING))
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug("logger %s ready", name)
    return logger
