from __future__ import annotations
from enum import Enum
from typing import Any, Mapping

from enumscan.internals import errors as er


class UnderlyingType(Enum):
    """Fixed-width integer representation backing an enumeration."""
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"

    def __str__(self) -> str:
        return self.value

    @property
    def bits(self) -> int:
        return BIT_WIDTHS[self]

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def fits(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def cast(self, value: int) -> int:
        """Two's-complement wrap of ``value`` into this representation."""
        mask = (1 << self.bits) - 1
        value &= mask
        if self.signed and value > self.max_value:
            value -= 1 << self.bits
        return value

    @classmethod
    def parse(cls, name: str) -> "UnderlyingType":
        try:
            return cls(name)
        except ValueError:
            er.raise_error(er.ConfigurationError, "CE1003", name=name,
                           expected=", ".join(t.value for t in cls))


BIT_WIDTHS: Mapping[UnderlyingType, int] = {
    UnderlyingType.I8: 8,
    UnderlyingType.I16: 16,
    UnderlyingType.I32: 32,
    UnderlyingType.I64: 64,
    UnderlyingType.U8: 8,
    UnderlyingType.U16: 16,
    UnderlyingType.U32: 32,
    UnderlyingType.U64: 64,
}

# Representation assumed for enums that do not declare one, as for an
# unscoped C++ enum without a fixed type.
DEFAULT_UNDERLYING = UnderlyingType.I32


def require_enum_type(enum_type: Any) -> type[Enum]:
    """Return ``enum_type`` if it is an ``enum.Enum`` subclass, else raise CE2002."""
    if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
        name = getattr(enum_type, "__name__", repr(enum_type))
        er.raise_error(er.EnumTypeMismatchError, "CE2002", name=name)
    return enum_type


def underlying_type_of(enum_type: type[Enum]) -> UnderlyingType:
    """Underlying representation of ``enum_type``.

    Read from the ``__underlying__`` class attribute (an ``UnderlyingType`` or
    its name, e.g. ``"u8"``); defaults to i32.
    """
    declared = getattr(require_enum_type(enum_type), "__underlying__", None)
    if declared is None:
        return DEFAULT_UNDERLYING
    if isinstance(declared, UnderlyingType):
        return declared
    return UnderlyingType.parse(str(declared))


def is_named_member(enum_type: type[Enum], member: Any) -> bool:
    """True for a declared member, False for Flag compositions and pseudo-members."""
    if not isinstance(member, enum_type) or member.name is None:
        return False
    return enum_type.__members__.get(member.name) is member


def lookup_member(enum_type: type[Enum], value: int) -> Enum | None:
    """The declared member whose value is ``value``, or None.

    Goes through the enum's own lookup so aliases resolve to the canonical
    (first declared) member; anything the lookup synthesises, such as a
    ``Flag`` composition, does not count. Neither does a ``_missing_`` hook
    that answers with some other member's value.
    """
    try:
        member = enum_type(value)
    except (ValueError, TypeError):
        return None
    if not is_named_member(enum_type, member) or member.value != value:
        return None
    return member

