"""Runtime-checked storage of the values behind set/show commands.

A `Setting` refers either to a `Cell` owned by the module registering the
command, or to a getter/setter pair supplied by that module. Every access
names the variable kind(s) the caller expects: the kinds must share one
storage representation and the setting's own kind must be one of them.
Any violation is a registration bug and raises `InternalError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .constants import UINT_MAX
from .models import InternalError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "Accessors",
    "AutoBoolean",
    "Cell",
    "Setting",
    "Storage",
    "VarType",
    "storage_of",
    "uses_string",
]

T = TypeVar("T")


class VarType(Enum):
    """Kinds of "set" / "show" variables."""

    BOOLEAN = "boolean"
    AUTO_BOOLEAN = "auto_boolean"
    UINTEGER = "uinteger"  # 0 or "unlimited" stores UINT_MAX
    INTEGER = "integer"  # 0 or "unlimited" stores INT_MAX
    STRING = "string"  # backslash escapes processed
    STRING_NOESCAPE = "string_noescape"
    OPTIONAL_FILENAME = "optional_filename"
    FILENAME = "filename"
    ZINTEGER = "zinteger"  # zero really means zero
    ZUINTEGER = "zuinteger"
    ZUINTEGER_UNLIMITED = "zuinteger_unlimited"  # -1 stands for unlimited
    ENUM = "enum"  # one of the registered names


class AutoBoolean(Enum):
    """Value of an AUTO_BOOLEAN setting."""

    TRUE = "on"
    FALSE = "off"
    AUTO = "auto"


class Storage(Enum):
    """Underlying representation shared by a group of kinds."""

    BOOL = "bool"
    AUTO_BOOL = "auto_boolean"
    UINT = "unsigned int"
    INT = "int"
    STRING = "string"
    ENUM_NAME = "enum name"


_STORAGE: dict[VarType, Storage] = {
    VarType.BOOLEAN: Storage.BOOL,
    VarType.AUTO_BOOLEAN: Storage.AUTO_BOOL,
    VarType.UINTEGER: Storage.UINT,
    VarType.INTEGER: Storage.INT,
    VarType.STRING: Storage.STRING,
    VarType.STRING_NOESCAPE: Storage.STRING,
    VarType.OPTIONAL_FILENAME: Storage.STRING,
    VarType.FILENAME: Storage.STRING,
    VarType.ZINTEGER: Storage.INT,
    VarType.ZUINTEGER: Storage.UINT,
    VarType.ZUINTEGER_UNLIMITED: Storage.INT,
    VarType.ENUM: Storage.ENUM_NAME,
}


def storage_of(var_type: VarType) -> Storage:
    """Return the storage representation of `var_type`."""
    return _STORAGE[var_type]


def uses_string(var_type: VarType) -> bool:
    """Tell if settings of `var_type` are backed by a string."""
    return _STORAGE[var_type] is Storage.STRING


def _check_value(storage: Storage, value: Any) -> None:  # noqa: ANN401
    """Raise InternalError if `value` can't be stored in `storage`."""
    match storage:
        case Storage.BOOL:
            valid = isinstance(value, bool)
        case Storage.AUTO_BOOL:
            valid = isinstance(value, AutoBoolean)
        case Storage.UINT:
            valid = isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT_MAX
        case Storage.INT:
            valid = isinstance(value, int) and not isinstance(value, bool)
        case Storage.STRING | Storage.ENUM_NAME:
            valid = isinstance(value, str)
    if not valid:
        msg = f"{value!r} can't be stored as {storage.value}"
        raise InternalError(msg)


@dataclass
class Cell(Generic[T]):
    """A mutable value owned by the module registering a setting."""

    value: T


@dataclass(frozen=True)
class Accessors:
    """User provided access functions of a setting."""

    setter: Callable[[Any], None]
    getter: Callable[[], Any]


class Setting:
    """A kind-tagged reference to a value that can be set or shown."""

    def __init__(self) -> None:
        self._var_type = VarType.BOOLEAN
        self._cell: Cell[Any] | None = None
        self._accessors: Accessors | None = None

    @classmethod
    def from_cell(cls, var_type: VarType, cell: Cell[Any]) -> Setting:
        """Create a setting stored in `cell`."""
        setting = cls()
        setting.bind_cell(var_type, cell)
        return setting

    @classmethod
    def from_accessors(cls, var_type: VarType, setter: Callable[[Any], None], getter: Callable[[], Any]) -> Setting:
        """Create a setting accessed through `setter` and `getter`."""
        setting = cls()
        setting.bind_accessors(var_type, setter, getter)
        return setting

    @property
    def var_type(self) -> VarType:
        """Kind of the referenced variable."""
        return self._var_type

    @property
    def empty(self) -> bool:
        """True when no cell is bound."""
        return self._cell is None

    def __bool__(self) -> bool:
        return self._accessors is not None or not self.empty

    def __repr__(self) -> str:
        backing = "accessors" if self._accessors else ("cell" if self._cell else "empty")
        return f"<Setting {self._var_type.value} ({backing})>"

    def set_type(self, var_type: VarType) -> None:
        """Set the kind of the variable, only allowed before a cell is bound."""
        if not self.empty:
            msg = f"can't change the kind of a {self._var_type.value} setting bound to a cell"
            raise InternalError(msg)
        self._var_type = var_type

    def bind_cell(self, var_type: VarType, cell: Cell[Any]) -> None:
        """Reference `cell`, holding a value of kind `var_type`."""
        if cell is None:
            msg = "can't bind a setting to a missing cell"
            raise InternalError(msg)
        if self._accessors is not None:
            msg = "setting already uses accessor functions"
            raise InternalError(msg)
        self.set_type(var_type)
        self._cell = cell

    def bind_accessors(self, var_type: VarType, setter: Callable[[Any], None], getter: Callable[[], Any]) -> None:
        """Use `setter` and `getter` to access a value of kind `var_type`."""
        if not self.empty:
            msg = "setting already references a cell"
            raise InternalError(msg)
        if setter is None or getter is None:
            msg = "both a setter and a getter are required"
            raise InternalError(msg)
        self._var_type = var_type
        self._accessors = Accessors(setter, getter)

    def _check_kinds(self, kinds: tuple[VarType, ...]) -> Storage:
        """Validate the kinds requested at a call site and return their storage."""
        if not kinds:
            msg = "at least one variable kind must be requested"
            raise InternalError(msg)
        storages = {_STORAGE[kind] for kind in kinds}
        if len(storages) != 1:
            names = ", ".join(kind.value for kind in kinds)
            msg = f"kinds {names} do not share the same storage"
            raise InternalError(msg)
        if self._var_type not in kinds:
            msg = f"setting is a {self._var_type.value}, not one of {', '.join(k.value for k in kinds)}"
            raise InternalError(msg)
        return storages.pop()

    def get(self, *kinds: VarType) -> Any:  # noqa: ANN401
        """Return the current value.

        Args:
            *kinds: The kinds the caller can handle, all sharing one storage

        Returns:
            The value, from the getter if any, else from the cell
        """
        self._check_kinds(kinds)
        if self._accessors is not None:
            return self._accessors.getter()
        if self._cell is None:
            msg = "reading an empty setting"
            raise InternalError(msg)
        return self._cell.value

    def set(self, value: Any, *kinds: VarType) -> None:  # noqa: ANN401
        """Store `value`, using the setter if any, else writing the cell.

        Args:
            value: The new value, of the storage type of `kinds`
            *kinds: The kinds the caller can handle, all sharing one storage
        """
        storage = self._check_kinds(kinds)
        _check_value(storage, value)
        if self._accessors is not None:
            self._accessors.setter(value)
            return
        if self._cell is None:
            msg = "writing an empty setting"
            raise InternalError(msg)
        self._cell.value = value
