"""Scan window configuration.

Discovery probes every integer in ``[min, max]`` (both ends included). A
member whose value lies outside the window is silently absent from every
discovery result, so enums with large or very negative values must widen
their window:

    @enum_range(-1024, 1024)
    class Wide(IntEnum):
        LOW = -1000
        HIGH = 1000

The same can be done with a ``__enum_range__ = (min, max)`` class attribute,
or from outside the class with ``set_enum_range``. A registered window takes
precedence over the class attribute, which takes precedence over the default.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar

from enumscan.internals import errors as er
from enumscan.semantics.typesys import require_enum_type

ENUM_MIN = -128
ENUM_MAX = 128

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class EnumRange:
    min: int = ENUM_MIN
    max: int = ENUM_MAX
    owner: str = field(default="<default>", compare=False)

    def __post_init__(self) -> None:
        for bound in (self.min, self.max):
            if isinstance(bound, bool) or not isinstance(bound, int):
                er.raise_error(er.ConfigurationError, "CE1002", enum=self.owner,
                               min=self.min, max=self.max)
        if self.max <= self.min:
            er.raise_error(er.ConfigurationError, "CE1001", enum=self.owner,
                           min=self.min, max=self.max)

    @property
    def width(self) -> int:
        return self.max - self.min + 1

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.min <= value <= self.max

    def __str__(self) -> str:
        return f"[{self.min}, {self.max}]"


DEFAULT_RANGE = EnumRange()

_registry: Dict[type, EnumRange] = {}


def _coerce(value: Any, owner: str) -> EnumRange:
    if isinstance(value, EnumRange):
        return EnumRange(value.min, value.max, owner)
    try:
        lo, hi = value
    except (TypeError, ValueError):
        er.raise_error(er.ConfigurationError, "CE1002", enum=owner, min=value, max=None)
    return EnumRange(lo, hi, owner)


def set_enum_range(enum_type: Any, min: int = ENUM_MIN, max: int = ENUM_MAX) -> EnumRange:
    """Register the scan window for ``enum_type``; validated immediately."""
    enum_type = require_enum_type(enum_type)
    window = EnumRange(min, max, enum_type.__name__)
    _registry[enum_type] = window
    return window


def reset_enum_range(enum_type: Optional[type] = None) -> None:
    """Forget a registered window (or all of them when no type is given)."""
    if enum_type is None:
        _registry.clear()
    else:
        _registry.pop(enum_type, None)


def enum_range(min: int = ENUM_MIN, max: int = ENUM_MAX) -> Callable[[type[E]], type[E]]:
    """Class decorator form of ``set_enum_range``."""
    def decorate(enum_type: type[E]) -> type[E]:
        set_enum_range(enum_type, min, max)
        return enum_type
    return decorate


def get_enum_range(enum_type: Any) -> EnumRange:
    enum_type = require_enum_type(enum_type)
    window = _registry.get(enum_type)
    if window is not None:
        return window
    declared = getattr(enum_type, "__enum_range__", None)
    if declared is not None:
        return _coerce(declared, enum_type.__name__)
    return DEFAULT_RANGE
