"""Resolution of command text against the command tree.

The matcher consumes command words one at a time. Within a list, a word
matches a sibling exactly, or is an abbreviation of every sibling allowing
abbreviations whose name starts with it. An exact match always wins; two or
more remaining candidates make the lookup ambiguous at that level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..models import AmbiguousCommandError, NoArgumentError, UndefinedCommandError
from .models import Alias, CommandNode, Prefix
from .parsing import find_command_name_length, skip_spaces

if TYPE_CHECKING:
    from .models import CommandList

__all__ = [
    "Composition",
    "LookupResult",
    "MatchKind",
    "find_cmd",
    "lookup_cmd",
    "lookup_cmd_1",
    "lookup_cmd_composition",
    "lookup_cmd_exact",
    "undefined_command_message",
]


class MatchKind(Enum):
    """Outcome of a lookup."""

    NONE = "none"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass
class LookupResult:  # pylint: disable=too-many-instance-attributes
    """Result of `lookup_cmd_1`.

    Attributes:
        kind: NONE, UNIQUE or AMBIGUOUS
        command: The resolved command (aliases followed), UNIQUE only
        result_list: The list the last word was matched in
        prefix: For AMBIGUOUS, the enclosing prefix command, None at the root
        rest: The text following the consumed words. For AMBIGUOUS, the text
            starting at the ambiguous word
        default_args: Default arguments of the aliases traversed, outermost first
        alias: The last alias traversed, if any
        matches: For AMBIGUOUS, the candidates
    """

    kind: MatchKind
    command: CommandNode | None = None
    result_list: CommandList | None = None
    prefix: CommandNode | None = None
    rest: str = ""
    default_args: str = ""
    alias: Alias | None = None
    matches: list[CommandNode] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """True for a unique match."""
        return self.kind is MatchKind.UNIQUE


@dataclass
class Composition:
    """How a complete command string is made up."""

    alias: Alias | None
    prefix_cmd: CommandNode | None
    cmd: CommandNode


def _join_args(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def find_cmd(word: str, clist: CommandList, ignore_help_classes: bool = True) -> list[CommandNode]:
    """Return the nodes of `clist` matched by `word`.

    Args:
        word: A single command word
        clist: The siblings to search
        ignore_help_classes: Skip help topics

    Returns:
        A single node on exact match, else every node `word` abbreviates
    """
    candidates: list[CommandNode] = []
    for node in clist:
        if ignore_help_classes and node.is_help_class:
            continue
        if node.name == word:
            return [node]
        if node.allow_abbrev and node.name.startswith(word):
            candidates.append(node)
    return candidates


def lookup_cmd_1(text: str, clist: CommandList, *, ignore_help_classes: bool = True) -> LookupResult:
    """Resolve the longest valid command path at the start of `text`.

    Does no error reporting, see `lookup_cmd` for that.

    Args:
        text: The command line (leading blanks allowed)
        clist: The list to start from
        ignore_help_classes: Skip help topics when matching

    Returns:
        The lookup result
    """
    line = skip_spaces(text)
    length = find_command_name_length(line)
    if length == 0:
        return LookupResult(MatchKind.NONE, rest=text)

    found = find_cmd(line[:length], clist, ignore_help_classes)
    if not found:
        return LookupResult(MatchKind.NONE, rest=text)
    if len(found) > 1:
        return LookupResult(MatchKind.AMBIGUOUS, result_list=clist, rest=line, matches=found)

    node = found[0]
    rest = skip_spaces(line[length:])
    alias = None
    default_args = ""
    while isinstance(node, Alias):
        alias = node
        default_args = _join_args(default_args, node.default_args)
        node = node.target

    if isinstance(node, Prefix) and rest:
        sub = lookup_cmd_1(rest, node.subcommands, ignore_help_classes=ignore_help_classes)
        if sub.kind is MatchKind.AMBIGUOUS:
            if sub.prefix is None:
                sub.prefix = node
            return sub
        if sub.kind is MatchKind.UNIQUE:
            sub.default_args = _join_args(default_args, sub.default_args)
            if sub.alias is None:
                sub.alias = alias
            return sub
        # Not a subcommand: the prefix itself is the match, the rest its arguments

    return LookupResult(
        MatchKind.UNIQUE,
        command=node,
        result_list=clist,
        rest=rest,
        default_args=default_args,
        alias=alias,
    )


def undefined_command_message(cmdtype: str, word: str) -> str:
    """Build the message reported for an unknown command.

    Args:
        cmdtype: The enclosing prefix words followed by a space, or ""
        word: The offending text
    """
    help_target = f" {cmdtype.rstrip()}" if cmdtype else ""
    return f'Undefined {cmdtype}command: "{word}".  Try "help{help_target}".'


def _first_word(text: str) -> str:
    words = skip_spaces(text).split(maxsplit=1)
    return words[0] if words else ""


def lookup_cmd(
    text: str,
    clist: CommandList,
    cmdtype: str = "",
    *,
    allow_unknown: bool = False,
    ignore_help_classes: bool = True,
) -> LookupResult:
    """Look up a command, reporting failures as usage errors.

    Args:
        text: The command line
        clist: The list to start from
        cmdtype: Words of the prefix owning `clist` followed by a space, for messages
        allow_unknown: Return a NONE result instead of raising when nothing matches
        ignore_help_classes: Skip help topics when matching

    Returns:
        A UNIQUE result (or NONE when `allow_unknown` is set)

    Raises:
        NoArgumentError: `text` is empty
        UndefinedCommandError: nothing matches, or a prefix gets an unknown subcommand
        AmbiguousCommandError: several commands match
    """
    if not skip_spaces(text):
        msg = f"Lack of needed {cmdtype}command"
        raise NoArgumentError(msg)

    result = lookup_cmd_1(text, clist, ignore_help_classes=ignore_help_classes)

    if result.kind is MatchKind.NONE:
        if allow_unknown:
            return result
        raise UndefinedCommandError(undefined_command_message(cmdtype, _first_word(text)))

    if result.kind is MatchKind.AMBIGUOUS:
        local_cmdtype = f"{result.prefix.full_name} " if result.prefix else cmdtype
        word = result.rest[: find_command_name_length(result.rest)]
        names = [node.name for node in result.matches]
        msg = f'Ambiguous {local_cmdtype}command "{word}": {", ".join(names)}.'
        raise AmbiguousCommandError(msg, names)

    node = result.command
    assert node is not None
    if isinstance(node, Prefix) and result.rest and not node.allow_unknown:
        raise UndefinedCommandError(undefined_command_message(f"{node.full_name} ", _first_word(result.rest)))
    return result


def lookup_cmd_exact(name: str, clist: CommandList, ignore_help_classes: bool = True) -> CommandNode | None:
    """Return the command called exactly `name` in `clist`, never an abbreviation.

    Aliases are followed to their base command.
    """
    node = clist.get(name)
    if node is None or (ignore_help_classes and node.is_help_class):
        return None
    if isinstance(node, Alias):
        return node.base_command
    return node


def lookup_cmd_composition(text: str, clist: CommandList) -> Composition | None:
    """Split a complete command string into alias, prefix command and command.

    Args:
        text: e.g. "set print pretty"
        clist: The list to start from

    Returns:
        None if `text` does not resolve to a single command
    """
    prefix_cmd: CommandNode | None = None
    current = clist
    while True:
        text = skip_spaces(text)
        length = find_command_name_length(text)
        if length == 0:
            return None
        found = find_cmd(text[:length], current)
        if len(found) != 1:
            return None

        node = found[0]
        alias = node if isinstance(node, Alias) else None
        if alias is not None:
            node = alias.base_command

        text = skip_spaces(text[length:])
        if not text or not isinstance(node, Prefix):
            return Composition(alias=alias, prefix_cmd=prefix_cmd, cmd=node)
        prefix_cmd = node
        current = node.subcommands
