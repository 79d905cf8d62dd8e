"""Registration surface of the command tree."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..constants import SINGLE_CHAR_COMMANDS
from ..help import help_list
from ..logging_setup import get_logger
from ..models import CommandClass, InternalError
from ..setshow import cmd_show_list
from ..state import NotificationState
from ..ui_out import StreamOutput
from .models import Alias, CommandList, CommandNode, HelpTopic, Leaf, Prefix
from .parsing import valid_user_defined_cmd_name_p

if TYPE_CHECKING:
    from ..ui_out import OutputSink
    from .models import CommandFunc, Completer

__all__ = ["CommandRegistry"]


def _check_name(name: str) -> None:
    if not (valid_user_defined_cmd_name_p(name) or name in SINGLE_CHAR_COMMANDS):
        msg = f"invalid command name {name!r}"
        raise InternalError(msg)


class CommandRegistry:
    """Owns the root command lists and creates commands in them.

    Besides the top level list, the registry provides the "set", "show" and
    "info" prefixes every set/show or status command is registered under.
    """

    def __init__(self, output: OutputSink | None = None) -> None:
        self.output: OutputSink = output or StreamOutput()
        self.log = get_logger("registry")
        self.cmdlist = CommandList()

        set_cmd, self.setlist = self.insert_basic_prefix(
            "set",
            CommandClass.VARS,
            "Evaluate expression EXP and assign result to variable VAR.\nUse \"set\" followed by a subcommand to change a setting.",
        )
        show_cmd, self.showlist = self.insert_show_prefix("show", CommandClass.INFO, "Generic command for showing things about the debugger.")
        info_cmd, self.infolist = self.insert_basic_prefix("info", CommandClass.INFO, "Generic command for showing things about the program being debugged.")
        self.set_cmd = set_cmd
        self.show_cmd = show_cmd
        self.info_cmd = info_cmd

    def _list(self, cmdlist: CommandList | None) -> CommandList:
        return self.cmdlist if cmdlist is None else cmdlist

    def _add(self, node: CommandNode, cmdlist: CommandList | None) -> CommandNode:
        _check_name(node.name)
        self._list(cmdlist).add(node)
        self.log.debug("registered %s %r", type(node).__name__.lower(), node.full_name)
        return node

    def insert(
        self,
        name: str,
        theclass: CommandClass,
        doc: str,
        handler: CommandFunc | None = None,
        *,
        cmdlist: CommandList | None = None,
        allow_abbrev: bool = True,
    ) -> CommandNode:
        """Create a command in `cmdlist` (the top level by default).

        Without a handler the node is a help topic: it is listed by help
        but can't be executed.

        Raises:
            InternalError: duplicate or invalid name
        """
        node: CommandNode
        if handler is None:
            node = HelpTopic(name=name, theclass=theclass, doc=doc, allow_abbrev=allow_abbrev)
        else:
            node = Leaf(name=name, theclass=theclass, doc=doc, handler=handler, allow_abbrev=allow_abbrev)
        return self._add(node, cmdlist)

    def insert_suppress_notification(
        self,
        name: str,
        theclass: CommandClass,
        doc: str,
        handler: CommandFunc,
        suppress_notification: str,
        *,
        cmdlist: CommandList | None = None,
    ) -> CommandNode:
        """Like `insert`, the command suppressing a notification while it runs.

        Args:
            suppress_notification: Name of a NotificationState flag
        """
        _check_flag(suppress_notification)
        node = self.insert(name, theclass, doc, handler, cmdlist=cmdlist)
        node.suppress_notification = suppress_notification
        return node

    def insert_prefix(
        self,
        name: str,
        theclass: CommandClass,
        doc: str,
        handler: CommandFunc | None = None,
        *,
        allow_unknown: bool = False,
        cmdlist: CommandList | None = None,
        allow_abbrev: bool = True,
        suppress_notification: str | None = None,
    ) -> tuple[Prefix, CommandList]:
        """Create a prefix command and return it with its subcommand list.

        Without a handler, the prefix lists its subcommands when run.

        Args:
            allow_unknown: Pass text that is not a subcommand to the handler
                instead of reporting an undefined command
        """
        if suppress_notification is not None:
            _check_flag(suppress_notification)
        prefix = Prefix(
            name=name,
            theclass=theclass,
            doc=doc,
            handler=_noop,
            allow_unknown=allow_unknown,
            allow_abbrev=allow_abbrev,
            suppress_notification=suppress_notification,
        )
        prefix.handler = handler or self._basic_prefix_handler(prefix)
        self._add(prefix, cmdlist)
        return prefix, prefix.subcommands

    def insert_basic_prefix(
        self,
        name: str,
        theclass: CommandClass,
        doc: str,
        *,
        allow_unknown: bool = False,
        cmdlist: CommandList | None = None,
    ) -> tuple[Prefix, CommandList]:
        """Create a prefix command listing its subcommands when run."""
        return self.insert_prefix(name, theclass, doc, allow_unknown=allow_unknown, cmdlist=cmdlist)

    def insert_show_prefix(
        self,
        name: str,
        theclass: CommandClass,
        doc: str,
        *,
        allow_unknown: bool = False,
        cmdlist: CommandList | None = None,
    ) -> tuple[Prefix, CommandList]:
        """Create a prefix command showing every setting below it when run."""
        prefix, subcommands = self.insert_prefix(name, theclass, doc, allow_unknown=allow_unknown, cmdlist=cmdlist)
        prefix.handler = self._show_prefix_handler(prefix)
        return prefix, subcommands

    def insert_alias(
        self,
        name: str,
        target: CommandNode,
        theclass: CommandClass,
        allow_abbrev: bool = True,
        *,
        cmdlist: CommandList | None = None,
    ) -> Alias:
        """Create `name` as another name for `target`.

        Raises:
            InternalError: `target` is itself an alias, or the name is taken
        """
        if isinstance(target, Alias):
            msg = f"alias {name!r} can't target the alias {target.full_name!r}"
            raise InternalError(msg)
        alias = Alias(
            name=name,
            theclass=theclass,
            doc=target.doc,
            target=target,
            allow_abbrev=allow_abbrev,
        )
        self._add(alias, cmdlist)
        target.aliases.append(alias)
        return alias

    def add_com(self, name: str, theclass: CommandClass, handler: CommandFunc | None, doc: str) -> CommandNode:
        """Create a top level command."""
        return self.insert(name, theclass, doc, handler)

    def add_com_alias(self, name: str, target: CommandNode, theclass: CommandClass, allow_abbrev: bool = True) -> Alias:
        """Create a top level alias."""
        return self.insert_alias(name, target, theclass, allow_abbrev)

    def add_info(self, name: str, handler: CommandFunc, doc: str) -> CommandNode:
        """Create an "info" subcommand."""
        return self.insert(name, CommandClass.INFO, doc, handler, cmdlist=self.infolist)

    def add_info_alias(self, name: str, target: CommandNode, allow_abbrev: bool = True) -> Alias:
        """Create an alias in the "info" subcommands."""
        return self.insert_alias(name, target, CommandClass.INFO, allow_abbrev, cmdlist=self.infolist)

    def deprecate(self, node: CommandNode, replacement: str | None = None) -> CommandNode:
        """Mark `node` as deprecated, optionally naming its replacement."""
        node.deprecated = True
        node.deprecated_warn_user = True
        node.replacement = replacement
        return node

    def set_completer(self, node: CommandNode, completer: Completer | None) -> None:
        """Set the completion callback of `node`."""
        node.completer = completer

    def add_hook(self, node: CommandNode, hook: CommandNode, *, post: bool = False) -> None:
        """Run `hook` before (or after, when `post` is set) every run of `node`.

        Raises:
            InternalError: `node` already has such a hook
        """
        if post:
            if node.hook_post is not None:
                msg = f"{node.full_name!r} already has a post-hook"
                raise InternalError(msg)
            node.hook_post = hook
            hook.hookee_post = node
        else:
            if node.hook_pre is not None:
                msg = f"{node.full_name!r} already has a pre-hook"
                raise InternalError(msg)
            node.hook_pre = hook
            hook.hookee_pre = node

    def walk(self, cmdlist: CommandList | None = None) -> Iterator[CommandNode]:
        """Yield every node below `cmdlist`, depth first, in display order."""
        for node in self._list(cmdlist):
            yield node
            if isinstance(node, Prefix):
                yield from self.walk(node.subcommands)

    def _basic_prefix_handler(self, prefix: Prefix) -> CommandFunc:
        def list_subcommands(_args: str, _from_tty: bool) -> None:
            help_list(prefix.subcommands, f"{prefix.full_name} ", CommandClass.ALL_COMMANDS, self.output)

        return list_subcommands

    def _show_prefix_handler(self, prefix: Prefix) -> CommandFunc:
        def show_all(_args: str, from_tty: bool) -> None:
            cmd_show_list(prefix.subcommands, self.output, from_tty)

        return show_all


def _noop(_args: str, _from_tty: bool) -> None:
    """Placeholder handler, replaced right after the prefix is created."""


def _check_flag(name: str) -> None:
    if name not in NotificationState.flag_names():
        msg = f"unknown notification flag {name!r}"
        raise InternalError(msg)
