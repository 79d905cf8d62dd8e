"""Completion of command lines.

The engine only computes candidates, the interactive front end decides how
they are shown and inserted.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from .commands.lookup import MatchKind, lookup_cmd_1
from .commands.models import Prefix

if TYPE_CHECKING:
    from .commands.models import CommandList

__all__ = ["CompletionTracker", "complete_line", "complete_on_cmdlist", "complete_on_enum"]


class CompletionTracker:
    """Ordered set of completion candidates."""

    def __init__(self) -> None:
        self._candidates: dict[str, None] = {}

    def __iter__(self) -> Iterator[str]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._candidates

    def add(self, candidate: str) -> None:
        """Add `candidate`, duplicates are ignored."""
        self._candidates.setdefault(candidate, None)

    def extend(self, candidates: Iterable[str]) -> None:
        """Add several candidates."""
        for candidate in candidates:
            self.add(candidate)

    def matches(self) -> list[str]:
        """Return the candidates, in the order they were found."""
        return list(self._candidates)


def complete_on_cmdlist(clist: CommandList, tracker: CompletionTracker, text: str, ignore_help_classes: bool = True) -> None:
    """Add the names of `clist` starting with `text`.

    Deprecated commands are only offered when nothing else matches.
    """
    for include_deprecated in (False, True):
        found = False
        for node in clist:
            if not node.name.startswith(text):
                continue
            if ignore_help_classes and node.is_help_class:
                continue
            if node.deprecated and not include_deprecated:
                continue
            tracker.add(node.name)
            found = True
        if found:
            return


def complete_on_enum(tracker: CompletionTracker, values: Iterable[str], text: str) -> None:
    """Add the `values` starting with `text`."""
    tracker.extend(value for value in values if value.startswith(text))


def _last_word(text: str) -> str:
    if not text or text[-1] in " \t":
        return ""
    return text.split()[-1]


def complete_line(text: str, clist: CommandList, tracker: CompletionTracker) -> list[str]:
    """Fill `tracker` with the candidates for the last word of `text`.

    Command words are completed against the list they are looked up in.
    Once the command is known, its completer (if any) gets the argument text
    and the word being completed.

    Returns:
        The candidates
    """
    word = _last_word(text)
    result = lookup_cmd_1(text, clist)

    match result.kind:
        case MatchKind.NONE:
            if not text.strip() or (word and word == text.lstrip(" \t")):
                complete_on_cmdlist(clist, tracker, word)
        case MatchKind.AMBIGUOUS:
            if result.result_list is not None and result.rest == word:
                complete_on_cmdlist(result.result_list, tracker, word)
        case MatchKind.UNIQUE:
            node = result.command
            assert node is not None
            if not result.rest and word:
                # still typing the command word itself
                assert result.result_list is not None
                complete_on_cmdlist(result.result_list, tracker, word)
            elif isinstance(node, Prefix) and result.rest == word:
                complete_on_cmdlist(node.subcommands, tracker, word)
                if node.allow_unknown and node.completer is not None:
                    node.completer(node, tracker, result.rest, word)
            elif node.completer is not None:
                node.completer(node, tracker, result.rest, word)
    return tracker.matches()
