"""Reading the TOML configuration.

The configuration is a single file, or a directory whose ``*.toml`` files are
merged in name order. ``[clicore] include = [...]`` pulls more files (or
directories) in, after the including one.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CONFIG_FILE
from .models import ClicoreError
from .utils import merge

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader"]


class ConfigLoader:
    """Accumulates configuration files into one mapping.

    Args:
        log: Receives the loading progress and the critical errors
    """

    def __init__(self, log: logging.Logger) -> None:
        self.log = log
        self._config: dict[str, Any] = {}

    @property
    def config(self) -> dict[str, Any]:
        """Everything loaded so far."""
        return self._config

    def load(self, config_filename: str = "", *, required: bool = True) -> dict[str, Any]:
        """Read `config_filename` (CONFIG_FILE if empty) into the configuration.

        Args:
            config_filename: File or directory, environment variables and ~ are expanded
            required: Fail when nothing exists at that path

        Returns:
            The accumulated configuration

        Raises:
            ClicoreError: the file is missing (and required) or not valid TOML
        """
        if not required and not self._resolve(config_filename).exists():
            self.log.debug("No configuration at %s", self._resolve(config_filename))
            return self._config
        merge(self._config, self._read(config_filename))
        return self._config

    @staticmethod
    def _resolve(config_filename: str) -> Path:
        if config_filename:
            return Path(os.path.expandvars(config_filename)).expanduser()
        return CONFIG_FILE

    def _read(self, config_filename: str) -> dict[str, Any]:
        path = self._resolve(config_filename)
        if path.is_dir():
            config: dict[str, Any] = {}
            for toml_path in sorted(path.glob("*.toml")):
                merge(config, self._parse(toml_path))
        else:
            config = self._parse(path)

        for included in list(config.get("clicore", {}).get("include", [])):
            merge(config, self._read(included))
        return config

    def _parse(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            self.log.critical("Configuration file %s does not exist", path)
            raise ClicoreError

        self.log.info("Reading %s", path)
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            self.log.critical("Invalid TOML in %s: %s", path, e)
            raise ClicoreError from e
