# enumscan/internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional, Type

from enumscan.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    CONFIG    = "config"
    TYPE      = "type"
    DECL      = "declaration"
    RUNTIME   = "runtime"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


#
# --- Exceptions
#

class EnumScanError(Exception):
    """Base class for errors raised by the library API.

    Every instance carries the catalog ``code`` it was built from, so callers
    can match on codes the same way diagnostics are matched.
    """

    def __init__(self, code: str, text: str) -> None:
        super().__init__(f"{code}: {text}")
        self.code = code
        self.text = text


class ConfigurationError(EnumScanError, ValueError):
    """Invalid scan window or underlying representation."""


class EnumTypeMismatchError(EnumScanError, TypeError):
    """A non-enum type was probed, or two enumeration types were mixed."""


class MemberIndexError(EnumScanError, IndexError):
    """A member has no bit in the set because discovery did not find it."""


class DeclarationError(EnumScanError):
    """Enum declarations failed to parse or failed semantic checks.

    ``reporter`` holds the collected diagnostics when there are any.
    """

    def __init__(self, code: str, text: str, reporter: Optional[Reporter] = None) -> None:
        super().__init__(code, text)
        self.reporter = reporter


def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_error(exc_type: Type[EnumScanError], code: str, **kwargs) -> NoReturn:
    """Raise ``exc_type`` with the formatted catalog message for ``code``."""
    raise exc_type(code, _fmt(code, **kwargs))

def raise_internal_error(code: str, **kwargs) -> NoReturn:
    """Raise a RuntimeError for internal errors.

    Internal errors (CE0xxx codes) indicate library bugs, not user input issues.

    Args:
        code: Error code (e.g., "CE0001")
        **kwargs: Format parameters for the error message

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors (library bugs) - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "unknown grammar node '{node}'",
    Category.INTERNAL, "The declaration parser produced a node the builder does not handle."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "no IR type for a zero-capacity EnumSet of '{enum}'",
    Category.INTERNAL, "LLVM has no zero-width integer; callers must skip empty sets."))

# Configuration errors - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "scan window for '{enum}' requires max > min (got min={min}, max={max})",
    Category.CONFIG, "A scan window must contain at least two values."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "scan window bounds for '{enum}' must be integers (got min={min!r}, max={max!r})",
    Category.CONFIG, "Scan window bounds are plain integers."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "unknown underlying type '{name}' (expected one of: {expected})",
    Category.CONFIG, "Underlying types are fixed-width integers i8..i64 and u8..u64."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "unknown signature style '{name}' (expected one of: {expected})",
    Category.CONFIG, "Only the GNU and MSVC signature renderings are modelled."))

# Type errors - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "cannot combine EnumSet[{left}] with {right}",
    Category.TYPE, "Both operands of a set operation must belong to the same enumeration."))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "'{name}' is not an enumeration type",
    Category.TYPE, "Discovery and EnumSet only accept enum.Enum subclasses."))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "{value!r} is not a member of '{enum}'",
    Category.TYPE, "Only members of the set's own enumeration can be stored in it."))

# Declaration errors - CE3xxx range
_add(ErrorMessage("CE3001", Severity.ERROR,
    "enum '{name}' already declared (first declared at {prev_loc})",
    Category.DECL, "Each enum name can only be declared once per source."))

_add(ErrorMessage("CE3002", Severity.ERROR,
    "member '{member}' already declared in enum '{name}'",
    Category.DECL, "Member names must be unique within one enum."))

_add(ErrorMessage("CE3003", Severity.ERROR,
    "value {value} of '{name}::{member}' does not fit in {underlying} [{lo}, {hi}]",
    Category.DECL, "Explicit or implicit member values must fit the underlying type."))

_add(ErrorMessage("CE3004", Severity.ERROR,
    "parse error: {detail}",
    Category.DECL, "The source is not a valid sequence of enum declarations."))

_add(ErrorMessage("CE3005", Severity.ERROR,
    "unknown attribute '@{attr}' on enum '{name}'",
    Category.DECL, "Only @range(min, max) is recognised."))

_add(ErrorMessage("CE3006", Severity.ERROR,
    "unknown member '{ref}' referenced in enum '{name}'",
    Category.DECL, "A member can only take the value of a member declared before it."))

_add(ErrorMessage("CE3007", Severity.ERROR,
    "member name '{member}' is reserved in enum '{name}'",
    Category.DECL, "Python enums reserve mro, _sunder_, __dunder__ and _Enum__private names."))

_add(ErrorMessage("CW3001", Severity.WARNING,
    "'{name}::{member}' aliases '{name}::{target}' (value {value})",
    Category.DECL, "Aliases share a value; discovery reports the first declared name only."))

_add(ErrorMessage("CW3002", Severity.WARNING,
    "'{name}::{member}' = {value} lies outside the scan window [{min}, {max}] and will not be discovered",
    Category.DECL, "Discovery only probes values inside the configured window."))

_add(ErrorMessage("CW3003", Severity.WARNING,
    "enum '{name}' has no members inside its scan window",
    Category.DECL, "Its EnumSet has zero capacity and is always empty."))

# Runtime errors - RExxxx range
_add(ErrorMessage("RE2020", Severity.ERROR,
    "'{member}' has no bit in EnumSet[{enum}]: not discovered in scan window [{min}, {max}]",
    Category.RUNTIME, "EnumSet bits are addressed by discovery ordinal; undiscovered members cannot be stored."))

_add(ErrorMessage("RE2021", Severity.ERROR,
    "cannot read '{path}': {reason}",
    Category.RUNTIME, "The declaration file could not be opened."))
