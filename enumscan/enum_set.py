"""Fixed-capacity set of enum members backed by an integer bit vector.

Capacity is the number of members discovery finds for the enum, and each
member is addressed by its discovery ordinal rather than its raw value, so
sparse or negative enums get a compact vector and the complement of a set
never contains anything but real members.

    >>> s = EnumSet.singleton(Fruit.Apple) | Fruit.Orange
    >>> s.count(), s.size()
    (2, 3)
    >>> bool(s & Fruit.Banana)
    False

Enums that mix in ``SetOperatorsMixin`` also build sets straight from
members: ``Fruit.Apple | Fruit.Orange``.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Iterable, Iterator, TypeVar, Union

from enumscan.internals import errors as er
from enumscan.reflection.discovery import Discovery, discover
from enumscan.semantics.typesys import require_enum_type

E = TypeVar("E", bound=Enum)


class EnumSet(Generic[E]):
    __slots__ = ("_enum_type", "_bits")

    def __init__(self, enum_type: type[E], members: Union[E, Iterable[E]] = ()) -> None:
        self._enum_type = require_enum_type(enum_type)
        self._bits = 0
        if isinstance(members, Enum):
            members = (members,)
        for member in members:
            self._bits |= self._bit(member)

    @classmethod
    def singleton(cls, member: E) -> "EnumSet[E]":
        if not isinstance(member, Enum):
            er.raise_error(er.EnumTypeMismatchError, "CE2002", name=type(member).__name__)
        return cls(type(member), (member,))

    @classmethod
    def full(cls, enum_type: type[E]) -> "EnumSet[E]":
        return ~cls(enum_type)

    @property
    def enum_type(self) -> type[E]:
        return self._enum_type

    @property
    def bits(self) -> int:
        """The bit vector; bit ``i`` is the member with discovery ordinal ``i``."""
        return self._bits

    @property
    def _discovery(self) -> Discovery:
        return discover(self._enum_type)

    def _bit(self, member: Any) -> int:
        if not isinstance(member, self._enum_type):
            self._mismatch(member)
        return 1 << self._discovery.ordinal(member)

    def _mismatch(self, other: Any) -> None:
        right = f"EnumSet[{other.enum_type.__name__}]" if isinstance(other, EnumSet) else repr(other)
        er.raise_error(er.EnumTypeMismatchError, "CE2001",
                       left=self._enum_type.__name__, right=right)

    def _operand_bits(self, other: Any) -> int:
        """Bits of ``other``, accepting a bare member as a singleton."""
        if isinstance(other, EnumSet):
            if other._enum_type is not self._enum_type:
                self._mismatch(other)
            return other._bits
        return self._bit(other)

    def _with_bits(self, bits: int) -> "EnumSet[E]":
        result = EnumSet(self._enum_type)
        result._bits = bits
        return result

    # -- set algebra

    def __or__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return self._with_bits(self._bits | self._operand_bits(other))

    def __and__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return self._with_bits(self._bits & self._operand_bits(other))

    def __xor__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return self._with_bits(self._bits ^ self._operand_bits(other))

    __ror__ = __or__
    __rand__ = __and__
    __rxor__ = __xor__

    def __ior__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        self._bits |= self._operand_bits(other)
        return self

    def __iand__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        self._bits &= self._operand_bits(other)
        return self

    def __ixor__(self, other: Any) -> "EnumSet[E]":
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        self._bits ^= self._operand_bits(other)
        return self

    def __invert__(self) -> "EnumSet[E]":
        mask = (1 << self.size()) - 1
        return self._with_bits(~self._bits & mask)

    # -- queries

    def __bool__(self) -> bool:
        return self._bits != 0

    def size(self) -> int:
        """Capacity: the number of members discovered for the enum."""
        return self._discovery.count

    def count(self) -> int:
        """Number of members in the set."""
        return self._bits.bit_count()

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, member: object) -> bool:
        if not isinstance(member, self._enum_type) or member not in self._discovery:
            return False
        return bool(self._bits & (1 << self._discovery.ordinal(member)))

    def __iter__(self) -> Iterator[E]:
        disc = self._discovery
        for i in range(disc.count):
            if self._bits >> i & 1:
                yield disc.member_at(i)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumSet):
            return NotImplemented
        return self._enum_type is other._enum_type and self._bits == other._bits

    __hash__ = None  # in-place operators mutate

    def copy(self) -> "EnumSet[E]":
        return self._with_bits(self._bits)

    __copy__ = copy

    def __repr__(self) -> str:
        names = "|".join(m.name for m in self)
        return f"EnumSet[{self._enum_type.__name__}]({names})"


def union(a: E, b: E) -> EnumSet[E]:
    """Two-member set ``{a, b}``; same as ``EnumSet.singleton(a) | b``."""
    return EnumSet.singleton(a) | b


class SetOperatorsMixin:
    """Enum mixin that makes ``|``, ``&``, ``^`` and ``~`` on members yield EnumSets.

    Must come before the enum base: ``class Fruit(SetOperatorsMixin, Enum)``.
    Operands that are neither members nor sets are left to the other operand,
    so plain integer arithmetic on ``IntEnum`` members keeps working.
    """

    def __or__(self, other):
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return EnumSet.singleton(self) | other

    def __and__(self, other):
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return EnumSet.singleton(self) & other

    def __xor__(self, other):
        if not isinstance(other, (EnumSet, Enum)):
            return NotImplemented
        return EnumSet.singleton(self) ^ other

    __ror__ = __or__
    __rand__ = __and__
    __rxor__ = __xor__

    def __invert__(self):
        return ~EnumSet.singleton(self)
