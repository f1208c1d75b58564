"""enumscan - enum member discovery and fixed-capacity enum sets."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("enumscan")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        __version__ = "unknown"
    __dev__ = True

from enumscan.internals.errors import (
    ConfigurationError,
    DeclarationError,
    EnumScanError,
    EnumTypeMismatchError,
    MemberIndexError,
)
from enumscan.reflection.enum_range import (
    ENUM_MAX,
    ENUM_MIN,
    EnumRange,
    enum_range,
    get_enum_range,
    reset_enum_range,
    set_enum_range,
)
from enumscan.reflection.probe import (
    GNU,
    MSVC,
    SignatureStyle,
    StaticName,
    is_valid,
    pretty_name,
    probe_name,
    render_signature,
)
from enumscan.reflection.discovery import (
    Candidate,
    Discovery,
    clear_cache,
    discover,
    enum_cast,
    enum_contains,
    enum_count,
    enum_index,
    enum_name,
    enum_names,
    enum_values,
    scan,
)
from enumscan.enum_set import EnumSet, SetOperatorsMixin, union
from enumscan.semantics.typesys import UnderlyingType
from enumscan.semantics.declarations import load_enums, parse_declarations

__all__ = [
    "Candidate", "ConfigurationError", "DeclarationError", "Discovery",
    "ENUM_MAX", "ENUM_MIN", "EnumRange", "EnumScanError", "EnumSet",
    "EnumTypeMismatchError", "GNU", "MSVC", "MemberIndexError",
    "SetOperatorsMixin", "SignatureStyle", "StaticName", "UnderlyingType",
    "clear_cache", "discover", "enum_cast", "enum_contains", "enum_count",
    "enum_index", "enum_name", "enum_names", "enum_range", "enum_values",
    "get_enum_range", "is_valid", "load_enums", "parse_declarations",
    "pretty_name", "probe_name", "render_signature", "reset_enum_range",
    "scan", "set_enum_range", "union",
]
