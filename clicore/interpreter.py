"""Command interpreter: a registry, its dispatcher and the session state."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from .commands.lookup import MatchKind, lookup_cmd, lookup_cmd_1
from .commands.models import Prefix
from .commands.parsing import skip_spaces, valid_user_defined_cmd_name_p
from .commands.registry import CommandRegistry
from .completions import CompletionTracker, complete_line
from .config import CORE_DEFAULTS, Configuration
from .config_loader import ConfigLoader
from .constants import DEFAULT_HISTORY_SIZE, DEFAULT_PROMPT
from .dispatch import Dispatcher
from .help import help_cmd
from .logging_setup import get_logger
from .models import CLASS_HELP_NAMES, CommandClass, SessionExit, UsageError
from .repeat import RepeatState
from .setshow import (
    add_setshow_boolean_cmd,
    add_setshow_string_cmd,
    add_setshow_zuinteger_unlimited_cmd,
    cmd_show_list,
    process_escapes,
)
from .setting import Cell, uses_string
from .state import NotificationState
from .ui_out import BufferOutput, StreamOutput
from .utils import flatten

if TYPE_CHECKING:
    from .commands.models import CommandList, CommandNode
    from .ui_out import OutputSink

__all__ = ["Interpreter"]

CLASS_DOCS: dict[CommandClass, str] = {
    CommandClass.RUN: "Running the program.",
    CommandClass.VARS: "Examining data.",
    CommandClass.STACK: "Examining the stack.",
    CommandClass.FILES: "Specifying and examining files.",
    CommandClass.SUPPORT: "Support facilities.",
    CommandClass.INFO: "Status inquiries.",
    CommandClass.BREAKPOINT: "Making program stop at certain points.",
    CommandClass.TRACE: "Tracing of program execution without stopping the program.",
    CommandClass.ALIAS: "User-defined aliases of other commands.",
    CommandClass.BOOKMARK: "Commands related to bookmarks.",
    CommandClass.OBSCURE: "Obscure features.",
    CommandClass.MAINTENANCE: "Maintenance commands.",
    CommandClass.TUI: "Text User Interface commands.",
    CommandClass.USER: "User-defined commands.",
}

ALIAS_USAGE = "Usage: alias [-a] [--] ALIAS = COMMAND [DEFAULT-ARGS...]"


def _setting_text(value: Any) -> str:  # noqa: ANN401
    """Render a configuration value as "set" argument text."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, list):
        return " ".join(str(item) for item in value)
    return str(value)


class Interpreter:  # pylint: disable=too-many-instance-attributes
    """A command line session.

    Owns the command registry, the repetition state and the notification
    flags, and registers the built-in commands.

    Args:
        output: Where commands write, stdout by default
    """

    def __init__(self, output: OutputSink | None = None) -> None:
        self.log = get_logger("interpreter")
        self.output: OutputSink = output or StreamOutput()
        self.registry = CommandRegistry(self.output)
        self.repeat = RepeatState()
        self.notifications = NotificationState()
        self.dispatcher = Dispatcher(self.repeat, self.notifications, self.output)

        self.prompt = Cell(DEFAULT_PROMPT)
        self.confirm = Cell(True)
        self.history_size = Cell(DEFAULT_HISTORY_SIZE)
        self.colored_output = Cell(True)

        self._register_help_classes()
        self._register_builtins()
        self._register_settings()

    # Output redirection

    def _set_output(self, output: OutputSink) -> None:
        self.output = output
        self.registry.output = output
        self.dispatcher.output = output

    @contextmanager
    def redirect_output(self, output: OutputSink) -> Iterator[None]:
        """Send everything written by commands to `output` inside the block."""
        previous = self.output
        self._set_output(output)
        try:
            yield
        finally:
            self._set_output(previous)

    # Execution

    def execute_command(self, line: str, from_tty: bool = False) -> None:
        """Look up and run the command in `line`, with its hooks.

        Raises:
            UsageError: the command is unknown or ambiguous, or failed on user input
        """
        self._execute(line, from_tty, top_level=False)

    def _execute(self, line: str, from_tty: bool, *, top_level: bool) -> None:
        text = skip_spaces(line)
        if not text.strip():
            return

        clist = self.registry.cmdlist
        result = lookup_cmd(text, clist)
        node = result.command
        assert node is not None
        command_text = text[: len(text) - len(result.rest)]

        if node.deprecated_warn_user or (result.alias is not None and result.alias.deprecated_warn_user):
            self.dispatcher.deprecated_cmd_warning(command_text, clist)

        rest = result.rest
        # string settings keep their trailing blanks
        if node.setting is None or not uses_string(node.setting.var_type):
            rest = rest.rstrip()
        args = " ".join(part for part in (result.default_args, rest) if part)

        self.dispatcher.run_pre_hook(node, from_tty)
        self.dispatcher.execute(node, args, from_tty, top_level=top_level)
        if top_level:
            self.repeat.apply_repeat_arguments(command_text)
        self.dispatcher.run_post_hook(node, from_tty)

    def handle_line(self, line: str, from_tty: bool = True) -> None:
        """Run a line typed by the user.

        An empty line repeats the previous command, unless it called `dont_repeat`.
        """
        if not line.strip():
            line_to_repeat = self.repeat.line_to_repeat()
            if line_to_repeat is None:
                return
            self.log.debug("repeating %r", line_to_repeat)
            self._execute(line_to_repeat, from_tty, top_level=True)
            return
        self.repeat.save_command_line(line)
        self._execute(line, from_tty, top_level=True)

    def execute_command_to_string(self, line: str, from_tty: bool = False) -> str:
        """Run the command in `line` and return what it wrote.

        The command can't disable repetition of the line being executed.
        """
        buffer = BufferOutput()
        with self.redirect_output(buffer), self.repeat.prevent_dont_repeat():
            self.execute_command(line, from_tty)
        return buffer.getvalue()

    def complete(self, text: str) -> list[str]:
        """Return the completion candidates for the last word of `text`."""
        return complete_line(text, self.registry.cmdlist, CompletionTracker())

    # Configuration

    def apply_settings(self, settings: dict[str, Any]) -> list[str]:
        """Run "set PATH VALUE" for each entry of `settings`.

        Nested tables are joined with spaces, `{"history": {"size": 10}}`
        runs "set history size 10".

        Returns:
            The paths that could not be applied
        """
        failed = []
        for path, value in flatten(settings).items():
            try:
                self.execute_command(f"set {path} {_setting_text(value)}")
            except UsageError as e:
                self.log.error("Invalid setting %s: %s", path, e)  # noqa: TRY400
                failed.append(path)
        return failed

    def load_config(self, config_filename: str = "", *, required: bool = False) -> Configuration:
        """Load the configuration file and apply it.

        Raises:
            ClicoreError: the file is invalid (or missing when `required`)
        """
        config = ConfigLoader(self.log).load(config_filename, required=required)
        core = Configuration(config.get("clicore", {}), logger=self.log, defaults=CORE_DEFAULTS)
        self.prompt.value = core.get_str("prompt", DEFAULT_PROMPT)
        self.colored_output.value = core.get_bool("colored_output", True)
        self._apply_colors()
        self.history_size.value = core.get_int("history_size", DEFAULT_HISTORY_SIZE)
        self.apply_settings(config.get("settings", {}))
        return core

    def _apply_colors(self) -> None:
        if isinstance(self.output, StreamOutput):
            self.output.colored = self.colored_output.value

    # Built-in commands

    def _register_help_classes(self) -> None:
        for theclass, name in CLASS_HELP_NAMES.items():
            self.registry.insert(name, theclass, CLASS_DOCS[theclass])

    def _register_builtins(self) -> None:
        registry = self.registry
        help_node = registry.add_com(
            "help",
            CommandClass.SUPPORT,
            self._cmd_help,
            'Print list of commands.\nType "help" followed by a class name for a list of commands in that class,\n'
            '"help all" for the list of all commands, or "help" followed by a command name for its documentation.',
        )
        registry.add_com_alias("h", help_node, CommandClass.SUPPORT, allow_abbrev=True)
        registry.add_com(
            "echo",
            CommandClass.SUPPORT,
            self._cmd_echo,
            "Print a constant string.  Give string as argument.\n"
            "C escape sequences may be used in the argument.\n"
            "No newline is added at the end of the argument;\n"
            'use "\\n" if you want a newline to be printed.',
        )
        registry.add_com(
            "alias",
            CommandClass.SUPPORT,
            self._cmd_alias,
            "Define a new command that is an alias of an existing command.\n"
            f"{ALIAS_USAGE}\n"
            "ALIAS is the name of the alias command to create.\n"
            "COMMAND is the command being aliased to.\n\n"
            "Options:\n"
            "  -a\n"
            "    Specify that ALIAS is an abbreviation of COMMAND.\n"
            "    Abbreviations can't be abbreviated further.\n\n"
            "DEFAULT-ARGS are prepended to the arguments given when ALIAS is used.",
        )
        quit_node = registry.add_com("quit", CommandClass.SUPPORT, self._cmd_quit, "Exit the command line.")
        registry.add_com_alias("q", quit_node, CommandClass.SUPPORT)
        registry.add_info("set", self._cmd_info_set, "Show all settings.")

    def _register_settings(self) -> None:
        registry = self.registry
        add_setshow_string_cmd(
            registry,
            "prompt",
            CommandClass.SUPPORT,
            cell=self.prompt,
            set_doc="Set the prompt.",
            show_doc="Show the prompt.",
        )
        add_setshow_boolean_cmd(
            registry,
            "confirm",
            CommandClass.SUPPORT,
            cell=self.confirm,
            set_doc="Set whether to confirm potentially dangerous operations.",
            show_doc="Show whether to confirm potentially dangerous operations.",
        )

        _, set_history = registry.insert_basic_prefix(
            "history", CommandClass.SUPPORT, "Generic command for setting command history parameters.", cmdlist=registry.setlist
        )
        _, show_history = registry.insert_show_prefix(
            "history", CommandClass.SUPPORT, "Generic command for showing command history parameters.", cmdlist=registry.showlist
        )
        add_setshow_zuinteger_unlimited_cmd(
            registry,
            "size",
            CommandClass.SUPPORT,
            cell=self.history_size,
            set_doc="Set the size of the command history.",
            show_doc="Show the size of the command history.",
            help_doc='This is the number of previous commands to keep a record of.\nIf set to "unlimited", the number of commands kept in the history list is unlimited.',
            set_list=set_history,
            show_list=show_history,
        )

        _, set_style = registry.insert_basic_prefix("style", CommandClass.SUPPORT, "Style-specific settings.", cmdlist=registry.setlist)
        _, show_style = registry.insert_show_prefix("style", CommandClass.SUPPORT, "Style-specific settings.", cmdlist=registry.showlist)
        add_setshow_boolean_cmd(
            registry,
            "enabled",
            CommandClass.SUPPORT,
            cell=self.colored_output,
            set_doc="Set if CLI styling is enabled.",
            show_doc="Show if CLI styling is enabled.",
            set_func=lambda _args, _from_tty, _node: self._apply_colors(),
            set_list=set_style,
            show_list=show_style,
        )

    def _cmd_help(self, args: str, _from_tty: bool) -> None:
        help_cmd(args, self.registry, self.output)

    def _cmd_echo(self, args: str, _from_tty: bool) -> None:
        self.output.write(process_escapes(args))

    def _cmd_quit(self, _args: str, _from_tty: bool) -> None:
        self.repeat.dont_repeat()
        raise SessionExit

    def _cmd_info_set(self, _args: str, from_tty: bool) -> None:
        cmd_show_list(self.registry.showlist, self.output, from_tty)

    def _cmd_alias(self, args: str, _from_tty: bool) -> None:
        """alias [-a] [--] ALIAS = COMMAND [DEFAULT-ARGS...]."""
        self.repeat.dont_repeat()
        if "=" not in args:
            raise UsageError(ALIAS_USAGE)
        alias_text, command_text = (part.strip() for part in args.split("=", 1))

        alias_words = alias_text.split()
        abbrev = False
        while alias_words and alias_words[0].startswith("-"):
            option = alias_words.pop(0)
            if option == "--":
                break
            if option != "-a":
                msg = f"Unrecognized option at: {option}"
                raise UsageError(msg)
            abbrev = True
        if not alias_words or not command_text:
            raise UsageError(ALIAS_USAGE)
        for word in alias_words:
            if not valid_user_defined_cmd_name_p(word):
                msg = f"Invalid command name: {word}"
                raise UsageError(msg)

        result = lookup_cmd_1(command_text, self.registry.cmdlist)
        if result.kind is not MatchKind.UNIQUE:
            msg = f"Invalid command to alias to: {command_text}"
            raise UsageError(msg)
        target = result.command
        assert target is not None

        cmdlist = self._alias_list(alias_words, target)
        name = alias_words[-1]
        if name in cmdlist:
            msg = f"Alias already exists: {' '.join(alias_words)}"
            raise UsageError(msg)

        alias = self.registry.insert_alias(name, target, CommandClass.ALIAS, allow_abbrev=not abbrev, cmdlist=cmdlist)
        alias.default_args = " ".join(part for part in (result.default_args, result.rest.strip()) if part)

    def _alias_list(self, alias_words: list[str], target: CommandNode) -> CommandList:
        """Return the list a (possibly multi-word) alias is created in."""
        if len(alias_words) == 1:
            return self.registry.cmdlist
        prefix = lookup_cmd(" ".join(alias_words[:-1]), self.registry.cmdlist).command
        if not isinstance(prefix, Prefix) or prefix is not target.parent:
            msg = "ALIAS and COMMAND prefixes do not match."
            raise UsageError(msg)
        return prefix.subcommands
