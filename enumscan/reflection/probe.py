"""Name probing: decide from rendered text whether a value is a named member.

A C++ compiler renders ``__PRETTY_FUNCTION__`` of ``n<E, V>()`` with the
member's qualified name when ``V`` is a declared enumerator and with a cast
expression (``(E)42``) otherwise. ``render_signature`` produces the same text
for a Python enum, and ``pretty_name`` recovers the member name from it by
looking only at the trailing identifier.

The text layout differs between toolchains. ``SignatureStyle`` holds the
layout and the length of the fixed suffix that must be trimmed before the
trailing identifier can be read.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from enumscan.internals import errors as er
from enumscan.semantics.typesys import (
    lookup_member,
    require_enum_type,
    underlying_type_of,
)


@dataclass(frozen=True)
class SignatureStyle:
    """How one toolchain renders ``n<E, V>()``."""
    name: str
    template: str       # with {enum} and {value} placeholders
    member_format: str  # with {enum} and {member}
    cast_format: str    # with {enum}, {value} and {hex}
    suffix_trim: int

    def render_value(self, enum_type: type[Enum], value: int) -> str:
        member = lookup_member(enum_type, value)
        if member is not None:
            return self.member_format.format(enum=enum_type.__name__, member=member.name)
        bits = underlying_type_of(enum_type).bits
        return self.cast_format.format(enum=enum_type.__name__, value=value,
                                       hex=hex(value & ((1 << bits) - 1)))

    def render(self, enum_type: type[Enum], value: int) -> str:
        return self.template.format(enum=enum_type.__name__,
                                    value=self.render_value(enum_type, value))


GNU = SignatureStyle(
    name="gnu",
    template="constexpr auto enumscan::n() [with E = {enum}; E V = {value}]",
    member_format="{enum}::{member}",
    cast_format="({enum}){value}",
    suffix_trim=len("]"),
)

MSVC = SignatureStyle(
    name="msvc",
    template="auto __cdecl enumscan::n<enum {enum},{value}>(void) noexcept",
    member_format="{enum}::{member}",
    cast_format="(enum {enum}){hex}",
    suffix_trim=len(">(void) noexcept"),
)

STYLES = {s.name: s for s in (GNU, MSVC)}
DEFAULT_STYLE = GNU


def get_style(name: str) -> SignatureStyle:
    try:
        return STYLES[name.lower()]
    except KeyError:
        er.raise_error(er.ConfigurationError, "CE1004", name=name,
                       expected=", ".join(STYLES))


class StaticName(str):
    """An immutable member name; empty when the probed value is not a member."""

    __slots__ = ()

    @property
    def size(self) -> int:
        return len(self)

    @property
    def data(self) -> bytes:
        """UTF-8 text with a trailing NUL, for handing to C."""
        return self.encode("utf-8") + b"\0"


EMPTY_NAME = StaticName("")


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def pretty_name(text: str) -> StaticName:
    """Trailing identifier of ``text`` if it starts like an identifier, else empty.

    >>> pretty_name("(Fruit)42")
    ''
    >>> pretty_name("Fruit::Apple")
    'Apple'
    """
    start = len(text)
    while start > 0 and _is_ident_char(text[start - 1]):
        start -= 1
    name = text[start:]

    if name and (name[0].isalpha() or name[0] == "_"):
        return StaticName(name)
    return EMPTY_NAME


def render_signature(enum_type: Any, value: Any, style: SignatureStyle = DEFAULT_STYLE) -> str:
    """Text the compiler would produce for ``n<enum_type, value>()``."""
    enum_type = require_enum_type(enum_type)
    return style.render(enum_type, _as_int(enum_type, value))


@lru_cache(maxsize=None)
def _probe(enum_type: type[Enum], value: int, style: SignatureStyle) -> StaticName:
    signature = style.render(enum_type, value)
    return pretty_name(signature[:len(signature) - style.suffix_trim])


def probe_name(enum_type: Any, value: Any, style: SignatureStyle = DEFAULT_STYLE) -> StaticName:
    """Bare member name for ``value`` of ``enum_type``, empty if it is not a member."""
    enum_type = require_enum_type(enum_type)
    return _probe(enum_type, _as_int(enum_type, value), style)


def is_valid(enum_type: Any, value: Any, style: SignatureStyle = DEFAULT_STYLE) -> bool:
    return probe_name(enum_type, value, style).size != 0


def _as_int(enum_type: type[Enum], value: Any) -> int:
    if isinstance(value, Enum):
        if not isinstance(value, enum_type):
            er.raise_error(er.EnumTypeMismatchError, "CE2003", value=value,
                           enum=enum_type.__name__)
        value = value.value
    if isinstance(value, bool) or not isinstance(value, int):
        er.raise_error(er.EnumTypeMismatchError, "CE2003", value=value,
                       enum=enum_type.__name__)
    return int(value)
