"""Declared enums: checking, value assignment and class generation.

Each declaration carries its member names and values explicitly, so the
generated ``IntEnum`` classes are exactly what was declared. They are then
handed to the same discovery and EnumSet machinery as hand-written enums.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from lark import UnexpectedInput

from enumscan.enum_set import SetOperatorsMixin
from enumscan.internals import errors as er
from enumscan.internals.parser import improve_parse_error, parse_to_ast
from enumscan.internals.report import Reporter, Span, span_of
from enumscan.reflection.enum_range import EnumRange
from enumscan.semantics.ast import EnumDecl, MemberRef, Program
from enumscan.semantics.typesys import DEFAULT_UNDERLYING, UnderlyingType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedEnum:
    name: str
    underlying: UnderlyingType
    members: Tuple[Tuple[str, int], ...]
    window: EnumRange
    loc: Optional[Span] = None


class DeclaredEnum(SetOperatorsMixin, IntEnum):
    """Base of every class generated from a declaration."""


def _fmt_loc(span: Optional[Span]) -> str:
    return f"{span.line}:{span.col}" if span else "<unknown>"


def _resolve_underlying(decl: EnumDecl, reporter: Reporter) -> Optional[UnderlyingType]:
    if decl.underlying is None:
        return DEFAULT_UNDERLYING
    try:
        return UnderlyingType.parse(decl.underlying)
    except er.ConfigurationError:
        er.emit(reporter, er.ERR.CE1003, decl.underlying_span, name=decl.underlying,
                expected=", ".join(t.value for t in UnderlyingType))
        return None


def _resolve_window(decl: EnumDecl, default: EnumRange, reporter: Reporter) -> Optional[EnumRange]:
    window = EnumRange(default.min, default.max, decl.name)
    for attr in decl.attributes:
        if attr.name != "range":
            er.emit(reporter, er.ERR.CE3005, attr.loc, attr=attr.name, name=decl.name)
            continue
        if len(attr.args) != 2:
            er.emit(reporter, er.ERR.CE1002, attr.loc, enum=decl.name,
                    min=attr.args[0] if attr.args else None,
                    max=attr.args[1] if len(attr.args) > 1 else None)
            return None
        lo, hi = attr.args
        if hi <= lo:
            er.emit(reporter, er.ERR.CE1001, attr.loc, enum=decl.name, min=lo, max=hi)
            return None
        window = EnumRange(lo, hi, decl.name)
    return window


def _reserved(name: str, enum: str) -> bool:
    """Names ``enum.Enum`` refuses or will not turn into members."""
    if name == "mro":
        return True
    if len(name) > 2 and name[0] == name[-1] == "_" and name[1] != "_" and name[-2] != "_":
        return True
    if len(name) > 4 and name[:2] == name[-2:] == "__" and name[2] != "_" and name[-3] != "_":
        return True
    private = f"_{enum.lstrip('_')}__"
    return len(name) > len(private) and name.startswith(private) and name[-2:] != "__"


def _resolve_members(decl: EnumDecl, underlying: UnderlyingType,
                     reporter: Reporter) -> Tuple[Tuple[str, int], ...]:
    values: Dict[str, int] = {}
    by_value: Dict[int, str] = {}
    members: List[Tuple[str, int]] = []
    next_value = 0

    for m in decl.members:
        if m.name in values:
            er.emit(reporter, er.ERR.CE3002, m.loc, member=m.name, name=decl.name)
            continue
        if _reserved(m.name, decl.name):
            er.emit(reporter, er.ERR.CE3007, m.loc, member=m.name, name=decl.name)
            continue

        if isinstance(m.value, MemberRef):
            if m.value.name not in values:
                er.emit(reporter, er.ERR.CE3006, m.value.loc, ref=m.value.name, name=decl.name)
                continue
            value = values[m.value.name]
        elif m.value is None:
            value = next_value
        else:
            value = m.value

        if not underlying.fits(value):
            er.emit(reporter, er.ERR.CE3003, m.loc, value=value, name=decl.name,
                    member=m.name, underlying=underlying,
                    lo=underlying.min_value, hi=underlying.max_value)
            continue

        if value in by_value:
            er.emit(reporter, er.ERR.CW3001, m.loc, name=decl.name, member=m.name,
                    target=by_value[value], value=value)
        else:
            by_value[value] = m.name

        values[m.name] = value
        members.append((m.name, value))
        next_value = value + 1

    return tuple(members)


def _discoverable(value: int, window: EnumRange, underlying: UnderlyingType) -> bool:
    """True if some probe point ``v`` in the window has ``cast(v) == value``."""
    modulus = 1 << underlying.bits
    return window.min + (value - window.min) % modulus <= window.max


def _check_window(decl: EnumDecl, resolved: ResolvedEnum, reporter: Reporter) -> None:
    spans = {m.name: m.loc for m in decl.members}

    found = 0
    for name, value in resolved.members:
        if _discoverable(value, resolved.window, resolved.underlying):
            found += 1
            continue
        er.emit(reporter, er.ERR.CW3002, spans.get(name), name=decl.name, member=name,
                value=value, min=resolved.window.min, max=resolved.window.max)

    if found == 0:
        er.emit(reporter, er.ERR.CW3003, decl.name_span, name=decl.name)


def resolve_program(program: Program, reporter: Reporter,
                    default_window: Optional[EnumRange] = None) -> List[ResolvedEnum]:
    """Check declarations and assign member values.

    Errors and warnings go to ``reporter``; declarations with errors are
    left out of the result.
    """
    default_window = default_window or EnumRange()
    seen: Dict[str, Optional[Span]] = {}
    resolved: List[ResolvedEnum] = []

    for decl in program.enums:
        if decl.name in seen:
            er.emit(reporter, er.ERR.CE3001, decl.name_span, name=decl.name,
                    prev_loc=_fmt_loc(seen[decl.name]))
            continue
        seen[decl.name] = decl.name_span

        before = sum(1 for d in reporter.items if d.kind == "error")
        underlying = _resolve_underlying(decl, reporter)
        window = _resolve_window(decl, default_window, reporter)
        members = _resolve_members(decl, underlying or DEFAULT_UNDERLYING, reporter)
        errors = sum(1 for d in reporter.items if d.kind == "error") - before
        if errors or underlying is None or window is None:
            continue

        r = ResolvedEnum(decl.name, underlying, members, window, decl.loc)
        _check_window(decl, r, reporter)
        resolved.append(r)

    return resolved


def build_enum(resolved: ResolvedEnum) -> type[DeclaredEnum]:
    """Generate the ``IntEnum`` class for one resolved declaration."""
    cls = DeclaredEnum(resolved.name, list(resolved.members), module=__name__)
    cls.__underlying__ = resolved.underlying
    cls.__enum_range__ = resolved.window
    logger.debug("built enum %s : %s with %d member(s)", resolved.name,
                 resolved.underlying, len(resolved.members))
    return cls


def _parse_error_detail(e: UnexpectedInput) -> str:
    token = getattr(e, "token", None)
    if token is not None:
        what = "end of input" if token.type == "$END" else f"'{token}'"
    else:
        what = f"character '{getattr(e, 'char', '?')}'"
    hint = improve_parse_error(e).split("\n")[-1]
    if hint.startswith("Hint: "):
        return f"unexpected {what} ({hint[len('Hint: '):]})"
    return f"unexpected {what}"


def parse_declarations(src: str, filename: str = "<input>",
                       reporter: Optional[Reporter] = None,
                       default_window: Optional[EnumRange] = None,
                       dump_parse: bool = False) -> List[ResolvedEnum]:
    """Parse and check ``src``; diagnostics are collected in ``reporter``."""
    reporter = reporter if reporter is not None else Reporter(src, filename)
    try:
        program, _ = parse_to_ast(src, dump_parse=dump_parse)
    except UnexpectedInput as e:
        line, col = getattr(e, "line", 1), getattr(e, "column", 1)
        if not isinstance(line, int) or not isinstance(col, int):
            line, col = 1, 1
        er.emit(reporter, er.ERR.CE3004, span_of(getattr(e, "token", None)) or Span(line, col, line, col),
                detail=_parse_error_detail(e))
        return []
    return resolve_program(program, reporter, default_window)


def load_enums(src: str, filename: str = "<input>",
               default_window: Optional[EnumRange] = None) -> Dict[str, type[DeclaredEnum]]:
    """Parse ``src`` and build one enum class per declaration.

    Raises:
        DeclarationError: on any error diagnostic; warnings are tolerated.
    """
    reporter = Reporter(src, filename)
    resolved = parse_declarations(src, filename, reporter, default_window)
    if reporter.has_errors:
        first = next(d for d in reporter.items if d.kind == "error")
        raise er.DeclarationError(first.code, first.message, reporter)
    return {r.name: build_enum(r) for r in resolved}
