"""Tests for the interpreter and its built-in commands."""

import pytest

from clicore.models import AmbiguousCommandError, CommandClass, SessionExit, UndefinedCommandError, UsageError

from .testtools import Recorder


@pytest.fixture
def step(interpreter):
    """A "step" command recording its calls."""
    handler = Recorder("step")
    interpreter.registry.add_com("step", CommandClass.RUN, handler, "Step program.")
    return handler


class TestExecuteCommand:
    """Running lines."""

    def test_arguments(self, interpreter, step):
        """The text after the command is passed, trailing blanks removed."""
        interpreter.execute_command("  step 3   ")
        assert step.calls == [("3", False)]

    def test_empty_line(self, interpreter, step):
        """Blank lines do nothing."""
        interpreter.execute_command("   ")
        assert step.calls == []

    def test_undefined(self, interpreter):
        """Unknown commands raise a usage error."""
        with pytest.raises(UndefinedCommandError, match='Undefined command: "frob".'):
            interpreter.execute_command("frob")

    def test_ambiguous(self, interpreter, step):
        """Ambiguous abbreviations raise a usage error."""
        interpreter.registry.add_com("stepi", CommandClass.RUN, Recorder(), "doc")
        with pytest.raises(AmbiguousCommandError, match='Ambiguous command "ste": step, stepi.'):
            interpreter.execute_command("ste")

    def test_string_setting_keeps_blanks(self, interpreter):
        """String settings get their trailing blanks."""
        interpreter.execute_command("set prompt (gdb) ")
        assert interpreter.prompt.value == "(gdb) "

    def test_echo(self, interpreter, output):
        """Echo processes escapes and adds no newline."""
        interpreter.execute_command(r"echo hello\tworld\n")
        assert output.getvalue() == "hello\tworld\n"

    def test_quit(self, interpreter):
        """Quit ends the session."""
        with pytest.raises(SessionExit):
            interpreter.execute_command("q")

    def test_deprecated(self, interpreter, step, output):
        """Deprecated commands warn and run."""
        interpreter.registry.deprecate(interpreter.registry.cmdlist.get("step"), "next")
        interpreter.execute_command("step")
        assert output.getvalue() == "Warning: command 'step' is deprecated.\nUse 'next'.\n\n"
        assert step.calls == [("", False)]

    def test_hooks(self, interpreter):
        """Hooks run around the command."""
        log = []
        registry = interpreter.registry
        stop = registry.add_com("stop", CommandClass.RUN, Recorder("stop", log), "doc")
        registry.add_hook(stop, registry.add_com("hook-stop", CommandClass.USER, Recorder("pre", log), "doc"))
        registry.add_hook(stop, registry.add_com("hookpost-stop", CommandClass.USER, Recorder("post", log), "doc"), post=True)
        interpreter.execute_command("stop")
        assert log == ["pre", "stop", "post"]

    def test_post_hook_skipped_on_error(self, interpreter):
        """A failing command does not run its post hook."""
        log = []
        registry = interpreter.registry

        def fail(args, from_tty):
            raise UsageError("failed")

        stop = registry.add_com("stop", CommandClass.RUN, fail, "doc")
        registry.add_hook(stop, registry.add_com("hookpost-stop", CommandClass.USER, Recorder("post", log), "doc"), post=True)
        with pytest.raises(UsageError):
            interpreter.execute_command("stop")
        assert log == []


class TestRepetition:
    """Repeating commands with an empty line."""

    def test_repeat(self, interpreter, step):
        """An empty line repeats the previous command."""
        interpreter.handle_line("step 2")
        interpreter.handle_line("")
        assert step.calls == [("2", True), ("2", True)]

    def test_nothing_to_repeat(self, interpreter, step):
        """An empty first line does nothing."""
        interpreter.handle_line("  ")
        assert step.calls == []

    def test_dont_repeat(self, interpreter):
        """Commands calling dont_repeat are not repeated."""
        calls = []

        def run(args, from_tty):
            calls.append(args)
            interpreter.repeat.dont_repeat()

        interpreter.registry.add_com("run", CommandClass.RUN, run, "doc")
        interpreter.handle_line("run")
        interpreter.handle_line("")
        assert calls == [""]

    def test_repeat_arguments(self, interpreter):
        """Commands can change the arguments used on repetition."""
        calls = []

        def list_cmd(args, from_tty):
            calls.append(args)
            interpreter.repeat.set_repeat_arguments("+")

        interpreter.registry.add_com("list", CommandClass.FILES, list_cmd, "doc")
        interpreter.handle_line("list 10")
        assert interpreter.repeat.get_saved_command_line() == "list +"
        interpreter.handle_line("")
        assert calls == ["10", "+"]

    def test_dont_repeat_survives_nested_command(self, interpreter, step):
        """Running another command doesn't undo dont_repeat."""
        calls = []

        def run(args, from_tty):
            calls.append(args)
            interpreter.repeat.dont_repeat()
            interpreter.execute_command("step")

        interpreter.registry.add_com("run", CommandClass.RUN, run, "doc")
        interpreter.handle_line("run")
        interpreter.handle_line("")
        assert calls == [""]

    def test_repeat_arguments_survive_nested_command(self, interpreter):
        """Capturing another command's output keeps the repeat arguments."""

        def list_cmd(args, from_tty):
            interpreter.repeat.set_repeat_arguments("+")
            interpreter.execute_command_to_string("echo x")

        interpreter.registry.add_com("list", CommandClass.FILES, list_cmd, "doc")
        interpreter.handle_line("list 10")
        assert interpreter.repeat.get_saved_command_line() == "list +"

    def test_nested_commands_keep_line(self, interpreter, step):
        """Commands run by other commands don't rewrite the saved line."""

        def outer(args, from_tty):
            interpreter.execute_command("step 9")

        interpreter.registry.add_com("outer", CommandClass.USER, outer, "doc")
        interpreter.handle_line("outer")
        assert interpreter.repeat.get_saved_command_line() == "outer"

    def test_alias_command_not_repeated(self, interpreter):
        """Defining an alias is not repeated."""
        interpreter.handle_line("alias e = echo x")
        assert interpreter.repeat.line_to_repeat() is None


class TestToString:
    """Capturing command output."""

    def test_captured(self, interpreter, output):
        """The output is returned, not written."""
        assert interpreter.execute_command_to_string("echo hi") == "hi"
        assert output.getvalue() == ""

    def test_show(self, interpreter):
        """Show commands describe their value."""
        interpreter.execute_command("set history size 10")
        assert interpreter.execute_command_to_string("show history size") == "The size of the command history is 10.\n"
        interpreter.execute_command("set history size unlimited")
        assert interpreter.execute_command_to_string("show history size") == "The size of the command history is unlimited.\n"

    def test_dont_repeat_prevented(self, interpreter):
        """Captured commands can't disable repetition."""

        def run(args, from_tty):
            interpreter.repeat.dont_repeat()

        interpreter.registry.add_com("run", CommandClass.RUN, run, "doc")
        interpreter.execute_command_to_string("run")
        assert not interpreter.repeat.no_repeat
        assert not interpreter.repeat.suppress_dont_repeat

    def test_output_restored_on_error(self, interpreter, output):
        """The output is restored when the command fails."""
        with pytest.raises(UsageError):
            interpreter.execute_command_to_string("frob")
        assert interpreter.output is output
        assert interpreter.registry.output is output


class TestAlias:
    """The alias command."""

    def test_simple(self, interpreter, step):
        """An alias runs its command."""
        interpreter.execute_command("alias st = step")
        interpreter.execute_command("st 1")
        assert step.calls == [("1", False)]
        assert interpreter.registry.cmdlist.get("st").theclass == CommandClass.ALIAS

    def test_default_args(self, interpreter, step):
        """Default arguments come before the given ones."""
        interpreter.execute_command("alias s5 = step 5")
        interpreter.execute_command("s5 more")
        assert step.calls == [("5 more", False)]

    def test_abbreviation_flag(self, interpreter, step):
        """-a creates an alias that can't be abbreviated."""
        interpreter.execute_command("alias -a stp = step")
        assert not interpreter.registry.cmdlist.get("stp").allow_abbrev

    def test_multi_word(self, interpreter):
        """Aliases of subcommands live under the same prefix."""
        interpreter.execute_command("alias set p = set prompt")
        interpreter.execute_command("set p >> ")
        assert interpreter.prompt.value == ">> "

    @pytest.mark.parametrize(
        ("line", "message"),
        [
            ("alias st", "Usage: alias"),
            ("alias = step", "Usage: alias"),
            ("alias -x st = step", "Unrecognized option at: -x"),
            ("alias st! = step", "Invalid command name: st!"),
            ("alias st = nope", "Invalid command to alias to: nope"),
            ("alias step = step", "Alias already exists: step"),
            ("alias show p = set prompt", "ALIAS and COMMAND prefixes do not match."),
        ],
    )
    def test_errors(self, interpreter, step, line, message):
        """Bad definitions are reported."""
        with pytest.raises(UsageError, match=message):
            interpreter.execute_command(line)

    def test_listed_in_help(self, interpreter, step):
        """User aliases are listed in their help class."""
        interpreter.execute_command("alias st = step")
        assert "st -- Step program." in interpreter.execute_command_to_string("help aliases")


class TestSettings:
    """Built-in settings and their configuration."""

    def test_set_confirm(self, interpreter):
        """Boolean settings accept on/off words."""
        interpreter.execute_command("set confirm off")
        assert interpreter.confirm.value is False

    def test_info_set(self, interpreter):
        """Info set shows every setting."""
        text = interpreter.execute_command_to_string("info set")
        assert 'prompt:  The prompt is "(cli) ".\n' in text
        assert "history size:  The size of the command history is 256.\n" in text

    def test_apply_settings(self, interpreter):
        """Nested tables are applied, failures collected."""
        failed = interpreter.apply_settings({"confirm": False, "history": {"size": 20}, "bogus": 1, "prompt": "$ "})
        assert failed == ["bogus"]
        assert interpreter.confirm.value is False
        assert interpreter.history_size.value == 20
        assert interpreter.prompt.value == "$ "

    def test_load_config(self, interpreter, tmp_path):
        """The configuration file sets the core options then the settings."""
        config = tmp_path / "config.toml"
        config.write_text('[clicore]\nprompt = "> "\nhistory_size = 10\n\n[settings]\nconfirm = "off"\n\n[settings.history]\nsize = 30\n')
        core = interpreter.load_config(str(config))
        assert interpreter.prompt.value == "> "
        assert interpreter.history_size.value == 30
        assert interpreter.confirm.value is False
        assert core.get_bool("colored_output") is True

    def test_missing_config(self, interpreter, tmp_path):
        """A missing optional configuration changes nothing."""
        interpreter.load_config(str(tmp_path / "none.toml"))
        assert interpreter.prompt.value == "(cli) "


class TestComplete:
    """Completion through the interpreter."""

    def test_builtins(self, interpreter):
        """Built-in commands and settings complete."""
        assert interpreter.complete("ec") == ["echo"]
        assert interpreter.complete("set hist") == ["history"]
        assert interpreter.complete("set confirm o") == ["on", "off"]
        assert interpreter.complete("set history size u") == ["unlimited"]
