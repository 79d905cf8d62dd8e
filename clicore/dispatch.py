"""Invocation of resolved commands and their hooks."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from .commands.lookup import lookup_cmd_composition
from .commands.models import Alias, Leaf
from .logging_setup import get_logger
from .models import InternalError, UsageError

if TYPE_CHECKING:
    from .commands.models import CommandList, CommandNode
    from .repeat import RepeatState
    from .state import NotificationState
    from .ui_out import OutputSink

__all__ = ["Dispatcher"]


class Dispatcher:
    """Runs command handlers for a session.

    Args:
        repeat: Repetition state, reset before every top-level command body
        notifications: Flags commands may suppress while they run
        output: Where deprecation warnings are written
    """

    def __init__(self, repeat: RepeatState, notifications: NotificationState, output: OutputSink) -> None:
        self.repeat = repeat
        self.notifications = notifications
        self.output = output
        self.log = get_logger("dispatch")

    @contextmanager
    def suppress_notification(self, flag: str | None) -> Iterator[None]:
        """Raise the notification `flag` inside the block, restoring it afterwards."""
        if flag is None:
            yield
            return
        if not hasattr(self.notifications, flag):
            msg = f"unknown notification flag {flag!r}"
            raise InternalError(msg)
        previous = getattr(self.notifications, flag)
        setattr(self.notifications, flag, True)
        try:
            yield
        finally:
            setattr(self.notifications, flag, previous)

    def _invoke(self, node: CommandNode, args: str, from_tty: bool) -> None:
        if isinstance(node, Alias):
            node = node.base_command
        if not isinstance(node, Leaf):
            msg = "That is not a command, just a help topic."
            raise UsageError(msg)
        self.log.debug("running %r with %r", node.full_name, args)
        with self.suppress_notification(node.suppress_notification):
            node.handler(args, from_tty)

    def execute(self, node: CommandNode, args: str = "", from_tty: bool = False, *, top_level: bool = True) -> None:
        """Run the handler of `node`.

        The command is repeatable unless it calls `dont_repeat`. Errors
        raised by the handler propagate unchanged.

        Args:
            node: The command to run
            args: Argument text passed to the handler
            from_tty: The command was typed by the user
            top_level: Reset the repetition flags first. Commands run by
                another command keep the flags the caller set.

        Raises:
            UsageError: `node` is a help topic
        """
        if node.is_help_class:
            msg = "That is not a command, just a help topic."
            raise UsageError(msg)
        if top_level:
            self.repeat.begin_command()
        self._invoke(node, args, from_tty)

    def _run_hook(self, node: CommandNode, hook: CommandNode | None, from_tty: bool) -> None:
        # The marker is shared by both hooks: a hook running `node` again won't run them
        if hook is None or node.hook_in:
            return
        node.hook_in = True
        try:
            self._invoke(hook, "", from_tty)
        finally:
            node.hook_in = False

    def run_pre_hook(self, node: CommandNode, from_tty: bool = False) -> None:
        """Run the command hooked before `node`, if any."""
        self._run_hook(node, node.hook_pre, from_tty)

    def run_post_hook(self, node: CommandNode, from_tty: bool = False) -> None:
        """Run the command hooked after `node`, if any."""
        self._run_hook(node, node.hook_post, from_tty)

    def deprecated_cmd_warning(self, text: str, clist: CommandList) -> None:
        """Warn about the deprecated alias or command used in `text`.

        Args:
            text: The command part of the line, e.g. "set print pretty"
            clist: The list `text` is looked up in
        """
        composition = lookup_cmd_composition(text, clist)
        if composition is None:
            return
        alias, cmd = composition.alias, composition.cmd
        if not ((alias is not None and alias.deprecated_warn_user) or cmd.deprecated_warn_user):
            return

        if alias is None:
            self.output.warning(f"command '{cmd.full_name}' is deprecated.")
        elif cmd.deprecated:
            self.output.warning(f"command '{alias.full_name}' ({cmd.full_name}) is deprecated.")
        else:
            self.output.warning(f"'{alias.full_name}', an alias for the command '{cmd.full_name}', is deprecated.")

        replacement = alias.replacement if alias is not None and not cmd.deprecated else cmd.replacement
        self.output.write(f"Use '{replacement}'.\n\n" if replacement else "No alternative known.\n\n")
