from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from enumscan.internals.report import Span


@dataclass
class MemberRef:
    """``B = A``: the value of an earlier member of the same enum."""
    name: str
    loc: Optional[Span] = None


@dataclass
class MemberDecl:
    name: str
    value: Union[int, MemberRef, None] = None  # None: previous value + 1
    loc: Optional[Span] = None


@dataclass
class Attribute:
    name: str
    args: Tuple[int, ...] = ()
    loc: Optional[Span] = None


@dataclass
class EnumDecl:
    name: str
    underlying: Optional[str] = None
    members: List[MemberDecl] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    loc: Optional[Span] = None
    name_span: Optional[Span] = None
    underlying_span: Optional[Span] = None


@dataclass
class Program:
    enums: List[EnumDecl] = field(default_factory=list)
