"""Range enumeration: find every named member inside an enum's scan window.

``discover`` probes each offset of the window with ``probe_name`` and keeps
the candidates that come back with a name, in ascending offset order. Results
are computed once per (enum, window, style) and shared read-only afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, Optional, Tuple, Union

from enumscan.internals import errors as er
from enumscan.reflection.enum_range import EnumRange, get_enum_range
from enumscan.reflection.probe import (
    DEFAULT_STYLE,
    EMPTY_NAME,
    SignatureStyle,
    StaticName,
    _probe,
    probe_name,
)
from enumscan.semantics.typesys import (
    lookup_member,
    require_enum_type,
    underlying_type_of,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """One probed point of the window: ``value`` is ``cast(min + offset)``."""
    offset: int
    value: int
    name: StaticName = EMPTY_NAME

    @property
    def valid(self) -> bool:
        return self.name.size != 0


@dataclass(frozen=True)
class Discovery:
    """Members of one enum found inside one window."""
    enum_type: type
    window: EnumRange
    candidates: Tuple[Candidate, ...]
    members: Tuple[Enum, ...]
    _ordinals: Mapping[Enum, int] = field(repr=False, compare=False)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.candidates)

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(c.value for c in self.candidates)

    def __len__(self) -> int:
        return self.count

    def __iter__(self):
        return iter(self.members)

    def __contains__(self, member: object) -> bool:
        return isinstance(member, self.enum_type) and member in self._ordinals

    def ordinal(self, member: Enum) -> int:
        """Dense index of ``member`` in discovery order.

        Raises:
            MemberIndexError RE2020: the member lies outside the window.
        """
        if not isinstance(member, self.enum_type):
            er.raise_error(er.EnumTypeMismatchError, "CE2003", value=member,
                           enum=self.enum_type.__name__)
        try:
            return self._ordinals[member]
        except KeyError:
            er.raise_error(er.MemberIndexError, "RE2020", member=member,
                           enum=self.enum_type.__name__,
                           min=self.window.min, max=self.window.max)

    def member_at(self, ordinal: int) -> Enum:
        return self.members[ordinal]


def scan(enum_type: Any, window: Optional[EnumRange] = None,
         style: SignatureStyle = DEFAULT_STYLE) -> Tuple[Candidate, ...]:
    """Probe every offset of the window; no early exit, ascending offsets."""
    enum_type = require_enum_type(enum_type)
    if window is None:
        window = get_enum_range(enum_type)
    underlying = underlying_type_of(enum_type)

    result = []
    for offset in range(window.width):
        value = underlying.cast(window.min + offset)
        result.append(Candidate(offset, value, _probe(enum_type, value, style)))
    return tuple(result)


@lru_cache(maxsize=None)
def _discover(enum_type: type, window: EnumRange, style: SignatureStyle) -> Discovery:
    valid = []
    members = []
    seen = set()
    for candidate in scan(enum_type, window, style):
        # small unsigned types wrap, so one value can come up at two offsets
        if not candidate.valid or candidate.value in seen:
            continue
        seen.add(candidate.value)
        valid.append(candidate)
        members.append(lookup_member(enum_type, candidate.value))

    ordinals = {member: i for i, member in enumerate(members)}
    logger.debug("discovered %d member(s) of %s in %s", len(members),
                 enum_type.__name__, window)
    return Discovery(enum_type, window, tuple(valid), tuple(members), ordinals)


def discover(enum_type: Any, style: SignatureStyle = DEFAULT_STYLE) -> Discovery:
    enum_type = require_enum_type(enum_type)
    return _discover(enum_type, get_enum_range(enum_type), style)


def clear_cache() -> None:
    """Drop memoized discovery and probe results."""
    _discover.cache_clear()
    _probe.cache_clear()


def enum_values(enum_type: Any) -> Tuple[Enum, ...]:
    return discover(enum_type).members


def enum_names(enum_type: Any) -> Tuple[str, ...]:
    return discover(enum_type).names


def enum_count(enum_type: Any) -> int:
    return discover(enum_type).count


def enum_name(value: Any, enum_type: Any = None) -> StaticName:
    """Member name for ``value``; empty when it does not name a member.

    ``value`` may be a member (its type is used when ``enum_type`` is omitted)
    or a plain integer together with ``enum_type``.
    """
    if enum_type is None:
        if not isinstance(value, Enum):
            er.raise_error(er.EnumTypeMismatchError, "CE2002", name=type(value).__name__)
        enum_type = type(value)
    return probe_name(enum_type, value)


def enum_cast(enum_type: Any, key: Union[str, int]) -> Optional[Enum]:
    """Discovered member named ``key`` (or with value ``key``), else None."""
    disc = discover(enum_type)
    if isinstance(key, str):
        for candidate, member in zip(disc.candidates, disc.members):
            if candidate.name == key:
                return member
        return None
    for candidate, member in zip(disc.candidates, disc.members):
        if candidate.value == key:
            return member
    return None


def enum_contains(enum_type: Any, value: Any) -> bool:
    disc = discover(enum_type)
    if isinstance(value, Enum):
        return value in disc
    return value in disc.values


def enum_index(member: Enum) -> int:
    return discover(type(member)).ordinal(member)
