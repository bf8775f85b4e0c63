"""Schema model: type tags, typed write slots and entries.

Responsibilities:
- Define the closed set of value types a schema entry can declare.
- Wrap caller-supplied setters in one slot variant per type so the tag and
  the written value type cannot disagree.
- Provide setter factories for attributes and mapping items.

Key types:
- `ConfType`: value type tags.
- `BoolSlot`, `IntSlot`, `FloatSlot`, `DoubleSlot`, `CharSlot`, `StrSlot`.
- `ConfEntry`: one declared key bound to a slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, MutableMapping, Union


class ConfType(str, Enum):
    """Value type declared by a schema entry."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    STR = "str"


@dataclass(frozen=True, slots=True)
class BoolSlot:
    """Write capability for a boolean target."""

    type: ClassVar[ConfType] = ConfType.BOOL
    setter: Callable[[bool], None]


@dataclass(frozen=True, slots=True)
class IntSlot:
    """Write capability for an integer target."""

    type: ClassVar[ConfType] = ConfType.INT
    setter: Callable[[int], None]


@dataclass(frozen=True, slots=True)
class FloatSlot:
    """Write capability for a single-precision float target."""

    type: ClassVar[ConfType] = ConfType.FLOAT
    setter: Callable[[float], None]


@dataclass(frozen=True, slots=True)
class DoubleSlot:
    """Write capability for a double-precision float target."""

    type: ClassVar[ConfType] = ConfType.DOUBLE
    setter: Callable[[float], None]


@dataclass(frozen=True, slots=True)
class CharSlot:
    """Write capability for a single-character target."""

    type: ClassVar[ConfType] = ConfType.CHAR
    setter: Callable[[str], None]


@dataclass(frozen=True, slots=True)
class StrSlot:
    """Write capability for a string target.

    Every successful match hands the setter a new string; the caller owns it.
    """

    type: ClassVar[ConfType] = ConfType.STR
    setter: Callable[[str], None]


Slot = Union[BoolSlot, IntSlot, FloatSlot, DoubleSlot, CharSlot, StrSlot]

SLOT_TYPES: dict[ConfType, type] = {
    ConfType.BOOL: BoolSlot,
    ConfType.INT: IntSlot,
    ConfType.FLOAT: FloatSlot,
    ConfType.DOUBLE: DoubleSlot,
    ConfType.CHAR: CharSlot,
    ConfType.STR: StrSlot,
}


@dataclass(frozen=True, slots=True)
class ConfEntry:
    """A declared configuration key and where its parsed value is written.

    Attributes:
        key: Literal text that must start a configuration line.
        target: Typed slot receiving the coerced value.
    """

    key: str
    target: Slot

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("Schema entry `key` must be a non-empty string.")

    @property
    def type(self) -> ConfType | None:
        """Declared value type, or `None` for a target outside the slot variants."""

        return getattr(self.target, "type", None)

    @classmethod
    def of(cls, conf_type: ConfType | str, setter: Callable[[Any], None], key: str) -> ConfEntry:
        """Build an entry from a type tag, a setter and a key.

        Raises:
            ValueError: If the type tag is not a known `ConfType`.
        """

        slot_type = SLOT_TYPES[parse_conf_type(conf_type)]
        return cls(key=key, target=slot_type(setter))


def parse_conf_type(value: ConfType | str) -> ConfType:
    """Resolve a `ConfType` from an enum member or its lowercase name."""

    if isinstance(value, ConfType):
        return value
    try:
        return ConfType(str(value).strip().lower())
    except ValueError:
        supported = ", ".join(member.value for member in ConfType)
        raise ValueError(
            f"Unsupported entry type `{value}`; supported: {supported}."
        ) from None


def attribute_setter(target: object, name: str) -> Callable[[Any], None]:
    """Return a setter writing to `target.<name>`."""

    def _set(value: Any) -> None:
        setattr(target, name, value)

    return _set


def item_setter(target: MutableMapping[str, Any], key: str) -> Callable[[Any], None]:
    """Return a setter writing to `target[key]`."""

    def _set(value: Any) -> None:
        target[key] = value

    return _set
