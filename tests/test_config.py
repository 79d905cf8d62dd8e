"""Tests for configuration loading."""

import pytest

from clicore.config import CORE_DEFAULTS, Configuration, coerce_to_bool
from clicore.config_loader import ConfigLoader
from clicore.logging_setup import get_logger
from clicore.models import ClicoreError
from clicore.utils import flatten, merge

log = get_logger("tests")


class TestConfigLoader:
    """Reading TOML files."""

    def test_single_file(self, tmp_path):
        """A file is parsed."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[clicore]\nprompt = "> "\n')
        assert ConfigLoader(log).load(str(config_file)) == {"clicore": {"prompt": "> "}}

    def test_include(self, tmp_path):
        """Included files are merged in."""
        extra = tmp_path / "extra.toml"
        extra.write_text("[settings]\nconfirm = false\n")
        config_file = tmp_path / "config.toml"
        config_file.write_text(f'[clicore]\ninclude = ["{extra}"]\n\n[settings]\nprompt = "$ "\n')
        config = ConfigLoader(log).load(str(config_file))
        assert config["settings"] == {"prompt": "$ ", "confirm": False}

    def test_directory(self, tmp_path):
        """Every .toml file of a directory is merged, in name order."""
        (tmp_path / "b.toml").write_text("[settings]\nconfirm = true\n")
        (tmp_path / "a.toml").write_text("[settings]\nconfirm = false\nprompt = 'a'\n")
        (tmp_path / "notes.txt").write_text("not toml")
        config = ConfigLoader(log).load(str(tmp_path))
        assert config["settings"] == {"confirm": True, "prompt": "a"}

    def test_missing_required(self, tmp_path):
        """A missing required file fails."""
        with pytest.raises(ClicoreError):
            ConfigLoader(log).load(str(tmp_path / "nope.toml"))

    def test_missing_optional(self, tmp_path):
        """A missing optional file gives an empty configuration."""
        assert ConfigLoader(log).load(str(tmp_path / "nope.toml"), required=False) == {}

    def test_invalid(self, tmp_path):
        """Syntax errors fail."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[clicore\n")
        with pytest.raises(ClicoreError):
            ConfigLoader(log).load(str(config_file))

    def test_environment_expansion(self, tmp_path, monkeypatch):
        """Variables in the path are expanded."""
        monkeypatch.setenv("CLICORE_TEST_DIR", str(tmp_path))
        (tmp_path / "config.toml").write_text("[settings]\nconfirm = true\n")
        assert ConfigLoader(log).load("$CLICORE_TEST_DIR/config.toml") == {"settings": {"confirm": True}}


class TestConfiguration:
    """Typed access to the [clicore] section."""

    def test_defaults(self):
        """Missing keys use the section defaults."""
        core = Configuration({}, logger=log, defaults=CORE_DEFAULTS)
        assert core.get_str("prompt") == "(cli) "
        assert core.get_int("history_size") == 256
        assert not core.has_explicit("prompt")

    def test_explicit(self):
        """Given keys win over the defaults."""
        core = Configuration({"history_size": "12", "colored_output": "no"}, logger=log, defaults=CORE_DEFAULTS)
        assert core.get_int("history_size") == 12
        assert core.get_bool("colored_output") is False
        assert core.has_explicit("history_size")

    def test_invalid_int(self):
        """Invalid integers fall back to the default."""
        core = Configuration({"history_size": "lots"}, logger=log)
        assert core.get_int("history_size", 5) == 5

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, True), ("", False), ("off", False), ("Disabled", False), ("whatever", True), (0, False), (1, True)],
    )
    def test_coerce_to_bool(self, value, expected):
        """Loose booleans."""
        assert coerce_to_bool(value, default=True) is expected


class TestUtils:
    """Dictionary helpers."""

    def test_merge(self):
        """Tables merge recursively, lists are concatenated."""
        merged = merge({"a": {"b": 1}, "l": [1]}, {"a": {"c": 2}, "l": [2], "d": 3})
        assert merged == {"a": {"b": 1, "c": 2}, "l": [1, 2], "d": 3}

    def test_flatten(self):
        """Nested tables become space separated paths."""
        assert flatten({"print": {"pretty": True, "elements": 200}, "width": 80}) == {
            "print pretty": True,
            "print elements": 200,
            "width": 80,
        }
