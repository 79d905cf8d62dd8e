"""The set/show command family.

Each `add_setshow_*_cmd` call registers a "set NAME" and a "show NAME"
command sharing one `Setting`. The set command parses its argument according
to the variable kind and stores it, the show command formats the current
value.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NamedTuple

from .commands.models import Alias, CommandNode, Leaf, Prefix
from .completions import complete_on_enum
from .constants import INT_MAX, INT_MIN, UINT_MAX, UNLIMITED_KEYWORD
from .models import CommandClass, InternalError, NoArgumentError, UsageError
from .setting import AutoBoolean, Cell, Setting, VarType, uses_string

if TYPE_CHECKING:
    from .commands.models import CommandList
    from .commands.registry import CommandRegistry
    from .completions import CompletionTracker
    from .ui_out import OutputSink

__all__ = [
    "SetFunc",
    "SetShowCommands",
    "ShowFunc",
    "add_setshow_auto_boolean_cmd",
    "add_setshow_boolean_cmd",
    "add_setshow_cmd",
    "add_setshow_enum_cmd",
    "add_setshow_filename_cmd",
    "add_setshow_integer_cmd",
    "add_setshow_optional_filename_cmd",
    "add_setshow_string_cmd",
    "add_setshow_string_noescape_cmd",
    "add_setshow_uinteger_cmd",
    "add_setshow_zinteger_cmd",
    "add_setshow_zuinteger_cmd",
    "add_setshow_zuinteger_unlimited_cmd",
    "cmd_show_list",
    "do_show_command",
    "error_no_arg",
    "get_setshow_command_value_string",
    "parse_cli_boolean_value",
    "parse_setting_value",
    "process_escapes",
]

# Called after a successful "set", with the argument text, from_tty and the set command
SetFunc = Callable[[str, bool, CommandNode], None]

# Renders a "show", receiving the output, from_tty, the show command and the value string
ShowFunc = Callable[["OutputSink", bool, CommandNode, str], None]

_TRUE_WORDS = ("on", "1", "yes", "enable")
_FALSE_WORDS = ("off", "0", "no", "disable")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "e": "\033",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_REVERSE_ESCAPES = {value: key for key, value in _ESCAPES.items() if key not in "'\"e"}


class SetShowCommands(NamedTuple):
    """The two commands created by an `add_setshow_*_cmd` call."""

    set_cmd: CommandNode
    show_cmd: CommandNode


def error_no_arg(why: str) -> None:
    """Report a missing argument.

    Raises:
        NoArgumentError: always
    """
    msg = f"Argument required ({why})."
    raise NoArgumentError(msg)


def _matches_word(arg: str, words: tuple[str, ...]) -> bool:
    return any(word.startswith(arg) for word in words)


def parse_cli_boolean_value(arg: str) -> bool | None:
    """Parse on/off style text.

    Args:
        arg: Any unambiguous prefix of on, 1, yes, enable, off, 0, no or disable

    Returns:
        The boolean, or None if `arg` is not a valid boolean
    """
    arg = arg.strip()
    if not arg:
        return True
    is_true = _matches_word(arg, _TRUE_WORDS)
    is_false = _matches_word(arg, _FALSE_WORDS)
    if is_true == is_false:
        return None
    return is_true


def _parse_auto_boolean(arg: str) -> AutoBoolean:
    arg = arg.strip()
    if arg:
        candidates = {value for value, words in _AUTO_BOOLEAN_WORDS.items() if _matches_word(arg, words)}
        if len(candidates) == 1:
            return candidates.pop()
    msg = '"on", "off" or "auto" expected.'
    raise UsageError(msg)


_AUTO_BOOLEAN_WORDS = {
    AutoBoolean.TRUE: _TRUE_WORDS,
    AutoBoolean.FALSE: _FALSE_WORDS,
    AutoBoolean.AUTO: ("auto", "-1"),
}


def _is_unlimited_literal(arg: str) -> bool:
    return arg.strip() == UNLIMITED_KEYWORD


def _parse_number(arg: str) -> int:
    """Read a C style integer: 0x hexadecimal, leading 0 octal, else decimal."""
    text = arg.strip()
    digits = text[1:] if text[:1] in "+-" else text
    if digits[:2].lower() == "0x":
        base, digits = 16, digits[2:]
    elif len(digits) > 1 and digits.startswith("0"):
        base, digits = 8, digits[1:]
    else:
        base = 10
    if not digits or not all(char in _DIGITS[base] for char in digits.lower()):
        msg = f'Invalid number "{text}".'
        raise UsageError(msg)
    value = int(digits, base)
    return -value if text.startswith("-") else value


_DIGITS = {8: "01234567", 10: "0123456789", 16: "0123456789abcdef"}


def _out_of_range(value: int) -> UsageError:
    return UsageError(f"integer {value} out of range")


def _parse_unsigned(var_type: VarType, arg: str) -> int:
    if var_type is VarType.UINTEGER:
        if not arg.strip():
            error_no_arg('integer to set it to, or "unlimited".')
        if _is_unlimited_literal(arg):
            return UINT_MAX
    elif not arg.strip():
        error_no_arg("integer to set it to.")
    value = _parse_number(arg)
    if var_type is VarType.UINTEGER and value == 0:
        return UINT_MAX
    if value < 0 or value > UINT_MAX:
        raise _out_of_range(value)
    return value


def _parse_signed(var_type: VarType, arg: str) -> int:
    if var_type is VarType.ZINTEGER:
        if not arg.strip():
            error_no_arg("integer to set it to.")
        value = _parse_number(arg)
        if value < INT_MIN or value > INT_MAX:
            raise _out_of_range(value)
        return value

    if not arg.strip():
        error_no_arg('integer to set it to, or "unlimited".')
    if var_type is VarType.INTEGER:
        if _is_unlimited_literal(arg):
            return INT_MAX
        value = _parse_number(arg)
        if value == 0:
            return INT_MAX
        if value < 0 or value > INT_MAX:
            raise _out_of_range(value)
        return value

    # ZUINTEGER_UNLIMITED
    if _is_unlimited_literal(arg):
        return -1
    value = _parse_number(arg)
    if value > INT_MAX:
        raise _out_of_range(value)
    if value < -1:
        msg = "only -1 is allowed to set as unlimited"
        raise UsageError(msg)
    return value


def process_escapes(text: str) -> str:
    """Interpret C style backslash escapes, a trailing backslash is dropped."""
    result: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        pos += 1
        if char != "\\":
            result.append(char)
            continue
        if pos == len(text):
            break
        char = text[pos]
        if char in "01234567":
            end = pos
            while end < len(text) and end < pos + 3 and text[end] in "01234567":
                end += 1
            result.append(chr(int(text[pos:end], 8)))
            pos = end
            continue
        result.append(_ESCAPES.get(char, char))
        pos += 1
    return "".join(result)


def _escape_string(text: str) -> str:
    return "".join(f"\\{_REVERSE_ESCAPES[char]}" if char in _REVERSE_ESCAPES else char for char in text)


def _parse_enum(arg: str, enums: tuple[str, ...]) -> str:
    words = arg.split(maxsplit=1)
    if not words:
        msg = f"Requires an argument. Valid arguments are {', '.join(enums)}."
        raise UsageError(msg)
    word = words[0]
    if word in enums:
        match = word
    else:
        candidates = [name for name in enums if name.startswith(word)]
        if len(candidates) > 1:
            msg = f'Ambiguous item "{word}".'
            raise UsageError(msg)
        if not candidates:
            msg = f'Undefined item: "{word}".'
            raise UsageError(msg)
        match = candidates[0]
    if len(words) > 1:
        msg = f'Junk after item "{word}": {words[1]}'
        raise UsageError(msg)
    return match


def parse_setting_value(var_type: VarType, arg: str | None, enums: tuple[str, ...] = ()) -> Any:  # noqa: ANN401,C901
    """Convert the argument of a "set" command to the stored value.

    Args:
        var_type: Kind of the variable
        arg: Text typed after the command name, None or "" if nothing was
        enums: Allowed names, for ENUM

    Returns:
        A value of the storage type of `var_type`

    Raises:
        UsageError: `arg` is not acceptable for `var_type`
    """
    arg = arg or ""
    match var_type:
        case VarType.BOOLEAN:
            value = parse_cli_boolean_value(arg)
            if value is None:
                msg = '"on" or "off" expected.'
                raise UsageError(msg)
            return value
        case VarType.AUTO_BOOLEAN:
            return _parse_auto_boolean(arg)
        case VarType.UINTEGER | VarType.ZUINTEGER:
            return _parse_unsigned(var_type, arg)
        case VarType.INTEGER | VarType.ZINTEGER | VarType.ZUINTEGER_UNLIMITED:
            return _parse_signed(var_type, arg)
        case VarType.STRING:
            return process_escapes(arg)
        case VarType.STRING_NOESCAPE:
            return arg
        case VarType.FILENAME:
            if not arg.strip():
                error_no_arg("filename to set it to.")
            return os.path.expanduser(arg.rstrip())
        case VarType.OPTIONAL_FILENAME:
            arg = arg.rstrip()
            return os.path.expanduser(arg) if arg else ""
        case VarType.ENUM:
            return _parse_enum(arg, enums)
    msg = f"unhandled variable kind {var_type}"
    raise InternalError(msg)


def get_setshow_command_value_string(node: CommandNode) -> str:
    """Return the current value of the setting of `node` as shown by "show"."""
    setting = node.setting
    if setting is None:
        msg = f"{node.full_name!r} has no setting"
        raise InternalError(msg)
    var_type = setting.var_type
    match var_type:
        case VarType.BOOLEAN:
            return "on" if setting.get(VarType.BOOLEAN) else "off"
        case VarType.AUTO_BOOLEAN:
            return str(setting.get(VarType.AUTO_BOOLEAN).value)
        case VarType.UINTEGER | VarType.ZUINTEGER:
            value = setting.get(VarType.UINTEGER, VarType.ZUINTEGER)
            return UNLIMITED_KEYWORD if var_type is VarType.UINTEGER and value == UINT_MAX else str(value)
        case VarType.INTEGER | VarType.ZINTEGER | VarType.ZUINTEGER_UNLIMITED:
            value = setting.get(VarType.INTEGER, VarType.ZINTEGER, VarType.ZUINTEGER_UNLIMITED)
            if (var_type is VarType.INTEGER and value == INT_MAX) or (var_type is VarType.ZUINTEGER_UNLIMITED and value == -1):
                return UNLIMITED_KEYWORD
            return str(value)
        case VarType.STRING:
            return _escape_string(setting.get(VarType.STRING))
        case VarType.STRING_NOESCAPE | VarType.OPTIONAL_FILENAME | VarType.FILENAME:
            return setting.get(VarType.STRING_NOESCAPE, VarType.OPTIONAL_FILENAME, VarType.FILENAME)
        case VarType.ENUM:
            return setting.get(VarType.ENUM)
    msg = f"unhandled variable kind {var_type}"
    raise InternalError(msg)


def _show_value_text(node: CommandNode, value: str) -> str:
    """Build "The thing is value." from a "Show the thing." documentation."""
    line = node.summary
    if line.startswith("Show "):
        line = line[5:]
    line = line.rstrip(".")
    if line:
        line = line[0].upper() + line[1:]
    if node.setting is not None and uses_string(node.setting.var_type):
        return f'{line} is "{value}".\n'
    return f"{line} is {value}.\n"


def do_show_command(node: CommandNode, output: OutputSink, from_tty: bool, show_func: ShowFunc | None = None) -> None:
    """Write the current value of the setting of `node`."""
    value = get_setshow_command_value_string(node)
    if show_func is not None:
        show_func(output, from_tty, node, value)
    else:
        output.write(_show_value_text(node, value))


def cmd_show_list(showlist: CommandList, output: OutputSink, from_tty: bool = False) -> None:
    """Run every "show" command of `showlist`, descending into prefixes.

    Each value is preceded by its path below "show", e.g. "print pretty:  ".
    Aliases and show-only informational commands are skipped.
    """
    for node in showlist:
        if isinstance(node, Alias):
            continue
        if isinstance(node, Prefix):
            cmd_show_list(node.subcommands, output, from_tty)
            continue
        if node.theclass == CommandClass.NO_SET or not isinstance(node, Leaf):
            continue
        path = node.full_name.split(" ", 1)[1] if " " in node.full_name else node.name
        output.write(f"{path}:  ")
        node.handler("", from_tty)


def _enum_completer(values: tuple[str, ...]) -> Callable[[CommandNode, CompletionTracker, str, str], None]:
    def complete_values(_node: CommandNode, tracker: CompletionTracker, _text: str, word: str) -> None:
        complete_on_enum(tracker, values, word)

    return complete_values


def _doc(doc: str, help_doc: str) -> str:
    return f"{doc}\n{help_doc}" if help_doc else doc


def add_setshow_cmd(  # noqa: PLR0913
    registry: CommandRegistry,
    name: str,
    theclass: CommandClass,
    var_type: VarType,
    *,
    cell: Cell[Any] | None = None,
    setter: Callable[[Any], None] | None = None,
    getter: Callable[[], Any] | None = None,
    set_doc: str,
    show_doc: str,
    help_doc: str = "",
    set_func: SetFunc | None = None,
    show_func: ShowFunc | None = None,
    set_list: CommandList | None = None,
    show_list: CommandList | None = None,
    enums: tuple[str, ...] = (),
) -> SetShowCommands:
    """Register "set NAME" and "show NAME" for a variable of kind `var_type`.

    Args:
        registry: Where to register
        name: The variable name
        theclass: Help class of both commands
        var_type: Kind of the variable
        cell: Storage of the value, or
        setter: Function storing the value (with `getter`)
        getter: Function returning the value (with `setter`)
        set_doc: First line of the set documentation
        show_doc: First line of the show documentation, "Show the thing." style
        help_doc: Documentation appended to both
        set_func: Called after every successful set
        show_func: Custom renderer of the show output
        set_list: List to register the set command in, "set" by default
        show_list: List to register the show command in, "show" by default
        enums: Allowed names for ENUM variables

    Returns:
        The set and show commands

    Raises:
        InternalError: not exactly one of `cell` or `setter`/`getter` given
    """
    has_accessors = setter is not None or getter is not None
    if (cell is None and (setter is None or getter is None)) or (cell is not None and has_accessors):
        msg = f"{name!r} needs either a cell or a setter and a getter"
        raise InternalError(msg)
    if var_type is VarType.ENUM:
        if not enums:
            msg = f"enum setting {name!r} has no allowed values"
            raise InternalError(msg)
        if cell is not None and cell.value not in enums:
            msg = f"enum setting {name!r} holds {cell.value!r}, not one of {enums}"
            raise InternalError(msg)

    if cell is not None:
        setting = Setting.from_cell(var_type, cell)
    else:
        setting = Setting.from_accessors(var_type, setter, getter)

    if set_list is None:
        set_list = registry.setlist
    if show_list is None:
        show_list = registry.showlist
    set_cmd = registry.insert(name, theclass, _doc(set_doc, help_doc), _noop, cmdlist=set_list)
    show_cmd = registry.insert(name, theclass, _doc(show_doc, help_doc), _noop, cmdlist=show_list)
    assert isinstance(set_cmd, Leaf)
    assert isinstance(show_cmd, Leaf)

    def do_set(args: str, from_tty: bool) -> None:
        setting.set(parse_setting_value(var_type, args, enums), var_type)
        registry.log.debug("%s set to %r", set_cmd.full_name, args)
        if set_func is not None:
            set_func(args, from_tty, set_cmd)

    def do_show(_args: str, from_tty: bool) -> None:
        do_show_command(show_cmd, registry.output, from_tty, show_func)

    set_cmd.handler = do_set
    show_cmd.handler = do_show
    for node in (set_cmd, show_cmd):
        node.setting = setting
        node.var_type = var_type
        node.enums = enums

    match var_type:
        case VarType.BOOLEAN:
            set_cmd.completer = _enum_completer(("on", "off"))
        case VarType.AUTO_BOOLEAN:
            set_cmd.completer = _enum_completer(("on", "off", "auto"))
        case VarType.ENUM:
            set_cmd.completer = _enum_completer(enums)
        case VarType.UINTEGER | VarType.INTEGER | VarType.ZUINTEGER_UNLIMITED:
            set_cmd.completer = _enum_completer((UNLIMITED_KEYWORD,))

    return SetShowCommands(set_cmd, show_cmd)


def _noop(_args: str, _from_tty: bool) -> None:
    """Placeholder handler, replaced once the commands exist."""


def _kind_registrar(var_type: VarType) -> Callable[..., SetShowCommands]:
    def register(registry: CommandRegistry, name: str, theclass: CommandClass, **kwargs: Any) -> SetShowCommands:  # noqa: ANN401
        return add_setshow_cmd(registry, name, theclass, var_type, **kwargs)

    register.__name__ = f"add_setshow_{var_type.value}_cmd"
    register.__doc__ = f"Register set/show commands for a {var_type.value} variable, see `add_setshow_cmd`."
    return register


add_setshow_boolean_cmd = _kind_registrar(VarType.BOOLEAN)
add_setshow_auto_boolean_cmd = _kind_registrar(VarType.AUTO_BOOLEAN)
add_setshow_uinteger_cmd = _kind_registrar(VarType.UINTEGER)
add_setshow_integer_cmd = _kind_registrar(VarType.INTEGER)
add_setshow_string_cmd = _kind_registrar(VarType.STRING)
add_setshow_string_noescape_cmd = _kind_registrar(VarType.STRING_NOESCAPE)
add_setshow_optional_filename_cmd = _kind_registrar(VarType.OPTIONAL_FILENAME)
add_setshow_filename_cmd = _kind_registrar(VarType.FILENAME)
add_setshow_zinteger_cmd = _kind_registrar(VarType.ZINTEGER)
add_setshow_zuinteger_cmd = _kind_registrar(VarType.ZUINTEGER)
add_setshow_zuinteger_unlimited_cmd = _kind_registrar(VarType.ZUINTEGER_UNLIMITED)


def add_setshow_enum_cmd(
    registry: CommandRegistry,
    name: str,
    theclass: CommandClass,
    enums: tuple[str, ...],
    **kwargs: Any,  # noqa: ANN401
) -> SetShowCommands:
    """Register set/show commands for a variable holding one of `enums`."""
    return add_setshow_cmd(registry, name, theclass, VarType.ENUM, enums=tuple(enums), **kwargs)
