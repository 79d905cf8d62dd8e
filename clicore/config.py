"""Typed access to the [clicore] section of the configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_HISTORY_SIZE, DEFAULT_PROMPT

if TYPE_CHECKING:
    import logging

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_TRUE_STRINGS", "CORE_DEFAULTS", "Configuration", "coerce_to_bool"]

ConfigValue = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

CORE_DEFAULTS: dict[str, ConfigValue] = {
    "prompt": DEFAULT_PROMPT,
    "colored_output": True,
    "history_size": DEFAULT_HISTORY_SIZE,
}


def coerce_to_bool(value: ConfigValue | None, default: bool = False) -> bool:
    """Read a TOML value as a boolean.

    Strings are true unless blank or one of BOOL_FALSE_STRINGS (any case),
    other values use their truth value, None gives `default`.
    """
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        return bool(text) and text not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """A configuration table.

    Args:
        logger: Where to warn about values of the wrong type
        defaults: Values used for the keys absent from the table
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        defaults: dict[str, ConfigValue] | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        super().__init__(*args, **kwargs)
        self.log = logger
        self._defaults = dict(defaults or {})

    def get(self, name: str, default: ConfigValue | None = None) -> ConfigValue | None:  # type: ignore[override]
        """Return the value of `name`, else its section default, else `default`."""
        if name in self:
            return self[name]  # type: ignore[no-any-return]
        return self._defaults.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Return `name` as a boolean, see `coerce_to_bool`."""
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Return `name` as an integer, warning and using `default` if it isn't one."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            self.log.warning("%s should be an integer, got %r", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Return `name` as a string."""
        value = self.get(name)
        return default if value is None else str(value)

    def has_explicit(self, name: str) -> bool:
        """Tell if `name` was given in the file rather than defaulted."""
        return name in self
