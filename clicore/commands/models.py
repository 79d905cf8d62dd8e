"""Data models of the command tree."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..models import CommandClass, InternalError

if TYPE_CHECKING:
    from ..completions import CompletionTracker
    from ..setting import Setting, VarType

__all__ = [
    "Alias",
    "CommandFunc",
    "CommandList",
    "CommandNode",
    "Completer",
    "HelpTopic",
    "Leaf",
    "Prefix",
]

# Command handlers receive the argument text (possibly empty) and whether
# the command was typed by the user at a terminal
CommandFunc = Callable[[str, bool], None]

# Completers receive the node, the tracker to fill, the text following the
# command and the word being completed
Completer = Callable[["CommandNode", "CompletionTracker", str, str], None]


@dataclass(kw_only=True, eq=False)
class CommandNode:  # pylint: disable=too-many-instance-attributes
    """One named, documented entry of the command tree.

    Never instantiated directly, see HelpTopic, Leaf, Prefix and Alias.
    """

    name: str
    theclass: CommandClass = CommandClass.NO_CLASS
    doc: str = ""
    allow_abbrev: bool = True
    default_args: str = ""
    completer: Completer | None = None

    deprecated: bool = False
    deprecated_warn_user: bool = False
    replacement: str | None = None

    suppress_notification: str | None = None  # NotificationState flag name

    hook_pre: CommandNode | None = None
    hook_post: CommandNode | None = None
    hookee_pre: CommandNode | None = None  # command this node is a pre-hook of
    hookee_post: CommandNode | None = None
    hook_in: bool = False  # set while one of this node's hooks runs

    setting: Setting | None = None
    var_type: VarType | None = None
    enums: tuple[str, ...] = ()

    parent: Prefix | None = None
    aliases: list[Alias] = field(default_factory=list)
    context: Any = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.full_name!r}>"

    @property
    def is_prefix(self) -> bool:
        """True if the node owns subcommands."""
        return False

    @property
    def is_alias(self) -> bool:
        """True if the node redirects to another one."""
        return False

    @property
    def is_help_class(self) -> bool:
        """True if the node is a help topic rather than a command."""
        return False

    @property
    def prefixname(self) -> str:
        """Words of the enclosing prefixes, each followed by a space."""
        if self.parent is None:
            return ""
        return f"{self.parent.prefixname}{self.parent.name} "

    @property
    def full_name(self) -> str:
        """The complete command path, e.g. "set print pretty"."""
        return f"{self.prefixname}{self.name}"

    @property
    def summary(self) -> str:
        """First line of the documentation."""
        return self.doc.strip().split("\n", 1)[0] if self.doc else ""


@dataclass(kw_only=True, eq=False)
class HelpTopic(CommandNode):
    """A help class or topic: listed by help, never executed."""

    @property
    def is_help_class(self) -> bool:
        return True


@dataclass(kw_only=True, eq=False)
class Leaf(CommandNode):
    """A runnable command."""

    handler: CommandFunc


@dataclass(kw_only=True, eq=False)
class Prefix(Leaf):
    """A command owning a list of subcommands.

    When `allow_unknown` is set, text that does not name a subcommand is
    passed to the prefix's own handler instead of being reported.
    """

    subcommands: CommandList = field(init=False)
    allow_unknown: bool = False

    def __post_init__(self) -> None:
        self.subcommands = CommandList(owner=self)

    @property
    def is_prefix(self) -> bool:
        return True


@dataclass(kw_only=True, eq=False)
class Alias(CommandNode):
    """Another name for `target`, possibly supplying default arguments."""

    target: CommandNode

    @property
    def is_alias(self) -> bool:
        return True

    @property
    def base_command(self) -> CommandNode:
        """The non-alias command this alias resolves to."""
        node: CommandNode = self
        while isinstance(node, Alias):
            node = node.target
        return node


class CommandList:
    """Ordered list of sibling commands, with unique names.

    Insertion order is the display order, lookups are done by name.
    """

    def __init__(self, owner: Prefix | None = None) -> None:
        self.owner = owner
        self._nodes: list[CommandNode] = []

    def __iter__(self) -> Iterator[CommandNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        # an empty list is still a list to insert into
        return True

    def __contains__(self, name: object) -> bool:
        return any(node.name == name for node in self._nodes)

    def __repr__(self) -> str:
        owner = self.owner.full_name if self.owner else "<root>"
        return f"<CommandList {owner}: {', '.join(self.names())}>"

    def get(self, name: str) -> CommandNode | None:
        """Return the node called exactly `name`, if any."""
        for node in self._nodes:
            if node.name == name:
                return node
        return None

    def names(self) -> list[str]:
        """Return the names of the nodes, in display order."""
        return [node.name for node in self._nodes]

    def add(self, node: CommandNode) -> CommandNode:
        """Append `node`, which becomes a child of this list's owner.

        Raises:
            InternalError: if a sibling already uses the same name
        """
        if node.name in self:
            msg = f"duplicate command name {self.owner.full_name + ' ' if self.owner else ''}{node.name!r}"
            raise InternalError(msg)
        node.parent = self.owner
        self._nodes.append(node)
        return node
