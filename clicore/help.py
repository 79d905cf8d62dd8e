"""Help listings for the command tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .commands.lookup import lookup_cmd
from .commands.models import Alias, Prefix
from .models import CLASS_HELP_NAMES, CommandClass

if TYPE_CHECKING:
    from .commands.models import CommandList, CommandNode
    from .commands.registry import CommandRegistry
    from .ui_out import OutputSink

__all__ = ["help_all", "help_cmd", "help_cmd_list", "help_list", "print_doc_line"]


def print_doc_line(node: CommandNode, output: OutputSink) -> None:
    """Write "name, aliases -- summary" for `node`."""
    names = ", ".join([node.full_name] + [alias.full_name for alias in node.aliases if not alias.deprecated])
    output.write(f"{names} -- {node.summary}\n")


def help_cmd_list(clist: CommandList, theclass: CommandClass, recurse: bool, output: OutputSink) -> int:
    """Write one line per command of `clist` belonging to `theclass`.

    Aliases are shown on their target's line (or on their own for the ALIAS
    class), deprecated commands are not shown.

    Args:
        clist: The commands to list
        theclass: A class, ALL_COMMANDS, or ALL_CLASSES to list the help topics
        recurse: Also look for commands of `theclass` below prefix commands
        output: Where to write

    Returns:
        The number of lines written
    """
    count = 0
    for node in clist:
        if node.deprecated:
            continue
        # user aliases are only listed by "help aliases"
        if isinstance(node, Alias) and not (theclass == CommandClass.ALIAS and node.theclass == theclass):
            continue
        if theclass == CommandClass.ALL_CLASSES:
            if node.is_help_class:
                print_doc_line(node, output)
                count += 1
            continue
        if node.is_help_class:
            continue
        if theclass == CommandClass.ALL_COMMANDS or node.theclass == theclass:
            print_doc_line(node, output)
            count += 1
        if recurse and theclass != CommandClass.ALL_COMMANDS and isinstance(node, Prefix):
            count += help_cmd_list(node.subcommands, theclass, recurse, output)
    return count


def help_list(clist: CommandList, cmdtype: str, theclass: CommandClass, output: OutputSink) -> None:
    """Write the help page of a list of commands.

    Args:
        clist: The commands to list
        cmdtype: Words of the owning prefix followed by a space, or ""
        theclass: A class, ALL_COMMANDS or ALL_CLASSES
        output: Where to write
    """
    # "info " becomes "info sub", as in "List of info subcommands"
    subtype = f"{cmdtype.rstrip()} sub" if cmdtype else ""
    if theclass == CommandClass.ALL_CLASSES:
        output.write(f"List of classes of {subtype}commands:\n\n")
    elif theclass == CommandClass.ALL_COMMANDS:
        output.write(f"List of {subtype}commands:\n\n")
    else:
        output.write(f"List of commands in class {CLASS_HELP_NAMES.get(theclass, theclass.name.lower())}:\n\n")

    help_cmd_list(clist, theclass, theclass >= 0, output)

    if theclass == CommandClass.ALL_CLASSES:
        output.write('\nType "help all" for the list of all commands.')
    help_target = f" {cmdtype.rstrip()}" if cmdtype else ""
    output.write(f'\nType "help{help_target}" followed by {subtype}command name for full documentation.\n')
    output.write("Command name abbreviations are allowed if unambiguous.\n")


def help_all(clist: CommandList, output: OutputSink) -> None:
    """Write every command, grouped by class."""
    for theclass, class_name in CLASS_HELP_NAMES.items():
        nodes = [node for node in clist if node.theclass == theclass and not node.is_help_class and not isinstance(node, Alias)]
        if not nodes:
            continue
        output.write(f"\nCommand class: {class_name}\n\n")
        for node in nodes:
            print_doc_line(node, output)
    unclassified = [node for node in clist if node.theclass == CommandClass.NO_CLASS and not node.is_help_class]
    if unclassified:
        output.write("\nUnclassified commands\n\n")
        for node in unclassified:
            print_doc_line(node, output)


def help_cmd(text: str, registry: CommandRegistry, output: OutputSink) -> None:
    """Write the documentation of the command or class named by `text`.

    Raises:
        UsageError: `text` names no command, or is ambiguous
    """
    text = text.strip()
    if not text:
        help_list(registry.cmdlist, "", CommandClass.ALL_CLASSES, output)
        return
    if text == "all":
        help_all(registry.cmdlist, output)
        return

    result = lookup_cmd(text, registry.cmdlist, "", ignore_help_classes=False)
    node = result.command
    assert node is not None

    if result.alias is not None:
        output.write(f"{result.alias.full_name} is an alias of {node.full_name}.\n")
    output.write(f"{node.doc.rstrip()}\n")

    if node.is_help_class:
        output.write("\n")
        help_list(registry.cmdlist, "", node.theclass, output)
        return

    if node.hook_pre or node.hook_post:
        output.write("\nThis command has a hook (or hooks) defined:\n")
        if node.hook_pre:
            output.write(f"\tThis command is run after  : {node.hook_pre.full_name} (pre hook)\n")
        if node.hook_post:
            output.write(f"\tThis command is run before : {node.hook_post.full_name} (post hook)\n")

    if isinstance(node, Prefix):
        output.write("\n")
        help_list(node.subcommands, f"{node.full_name} ", CommandClass.ALL_COMMANDS, output)
