"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from enumscan.internals.version import print_banner
from enumscan.semantics.typesys import underlying_type_of


def _format_text(discoveries) -> str:
    out = []
    for disc in discoveries:
        underlying = underlying_type_of(disc.enum_type)
        noun = "member" if disc.count == 1 else "members"
        out.append(f"enum {disc.enum_type.__name__} : {underlying} in {disc.window} "
                   f"({disc.count} {noun})")
        for c in disc.candidates:
            out.append(f"  {c.value:>6}  {c.name}")
    return "\n".join(out)


def _format_json(discoveries) -> str:
    doc = {"enums": [
        {
            "name": disc.enum_type.__name__,
            "underlying": str(underlying_type_of(disc.enum_type)),
            "window": [disc.window.min, disc.window.max],
            "count": disc.count,
            "members": [
                {"name": str(c.name), "value": c.value, "offset": c.offset}
                for c in disc.candidates
            ],
        }
        for disc in discoveries
    ]}
    return json.dumps(doc, indent=2)


def main(argv: list[str] | None = None) -> int:
    """Discover the members of declared enums and optionally emit IR.

    Returns:
        0 on success, 1 if warnings were reported, 2 on errors.
    """
    ap = argparse.ArgumentParser(prog="enumscan",
                                 description="Enum member discovery over a scan window")

    ap.add_argument("source", nargs='?', help="Path to an enum declaration file")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("--min", type=int, default=None, metavar="N",
                    help="Default scan window minimum (default: -128)")
    ap.add_argument("--max", type=int, default=None, metavar="N",
                    help="Default scan window maximum (default: 128)")
    ap.add_argument("--style", choices=["gnu", "msvc"], default="gnu",
                    help="Signature rendering used for name probing")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--json", action="store_true", help="Print discovered members as JSON")
    ap.add_argument("--dump-ll", action="store_true",
                    help="Dump member table LLVM IR to terminal")
    ap.add_argument("--write-ll", metavar="OUT", help="Write member table LLVM IR to OUT")
    ap.add_argument("--verify", action="store_true",
                    help="Run emitted IR through the LLVM verifier")
    ap.add_argument("--no-color", action="store_true", help="Plain diagnostics")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.json:
        print_banner()

    if args.version:
        return 0

    if not args.source:
        ap.print_usage(sys.stderr)
        print("enumscan: error: a source file is required", file=sys.stderr)
        return 2

    from enumscan.internals import errors as er
    from enumscan.internals.report import Reporter
    from enumscan.reflection.discovery import discover
    from enumscan.reflection.enum_range import ENUM_MAX, ENUM_MIN, EnumRange
    from enumscan.reflection.probe import get_style
    from enumscan.semantics.declarations import build_enum, parse_declarations

    use_color = False if args.no_color else None
    src_path = Path(args.source)

    try:
        src = src_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reporter = Reporter(None, str(src_path))
        er.emit(reporter, er.ERR.RE2021, None, path=src_path, reason=e)
        reporter.print(use_color=use_color)
        return 2

    try:
        default_window = EnumRange(
            ENUM_MIN if args.min is None else args.min,
            ENUM_MAX if args.max is None else args.max,
            "<command line>",
        )
    except er.ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(src, str(src_path))
    resolved = parse_declarations(src, str(src_path), reporter, default_window,
                                  dump_parse=args.dump_parse)
    if reporter.has_errors:
        reporter.print(use_color=use_color)
        return 2

    style = get_style(args.style)
    discoveries = [discover(build_enum(r), style) for r in resolved]

    if args.json:
        print(_format_json(discoveries))
    else:
        print(_format_text(discoveries))

    if args.dump_ll or args.write_ll or args.verify:
        from enumscan.backend.codegen_llvm import emit_member_tables, verify_module

        module = emit_member_tables(discoveries, module_name=src_path.stem)
        if args.verify:
            try:
                verify_module(module)
            except RuntimeError as e:
                print(f"Error: LLVM verification failed: {e}", file=sys.stderr)
                return 2
        if args.dump_ll:
            print(str(module))
        if args.write_ll:
            Path(args.write_ll).write_text(str(module), encoding="utf-8")

    reporter.print(use_color=use_color)
    return reporter.exit_code()
