#!/usr/bin/env python3
"""thriftcheck/main.py — CLI entry-point for thriftcheck.

Usage examples
--------------
    # Check a Thrift file and everything it includes
    python -m thriftcheck check service.thrift -I idl/

    # Normalize recoverable requiredness problems while checking
    python -m thriftcheck check service.thrift --fix

    # Fail the build on warnings too
    python -m thriftcheck check service.thrift --werror

    # Summarize the declarations of every loaded document
    python -m thriftcheck parse service.thrift

Exit codes
----------
    0   Success (warnings may have been printed).
    1   Syntax, include or semantic error.
    2   Infrastructure failure (missing input file).
    3   Warnings were emitted and ``--werror`` was given.

The module doubles as ``python -m thriftcheck`` via the companion
``thriftcheck/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence, TextIO

from thriftcheck import __version__
from thriftcheck.ast_nodes import Thrift
from thriftcheck.errors import ThriftError
from thriftcheck.parser import parse_file
from thriftcheck.semantic import CheckResult, Checker, Options

_log = logging.getLogger("thriftcheck")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_WARNINGS: int = 3


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``thriftcheck`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("thriftcheck")
    root.setLevel(level)
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Return *raw* as a ``Path``, raising on missing files."""
    p = Path(raw).expanduser()
    if not p.is_file():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _load(raw: str, include_dirs: Sequence[str]) -> Optional[Thrift]:
    """Parse *raw* and its includes; log and return ``None`` on failure."""
    path = _resolve_path(raw, "IDL file")
    try:
        return parse_file(path, include_dirs=include_dirs)
    except ThriftError as exc:
        _log.error("%s", exc)
        return None


def _emit_result(
    filename: str,
    result: CheckResult,
    fmt: str,
    stream: TextIO,
) -> None:
    """Write the warnings and error of one pass to *stream*."""
    if fmt == "json":
        record = {
            "file": filename,
            "warnings": list(result.warnings),
            "error": result.error.to_dict() if result.error else None,
        }
        stream.write(json.dumps(record) + "\n")
        return
    for w in result.warnings:
        stream.write(f"warning: {w}\n")
    if result.error is not None:
        stream.write(f"error: {result.error}\n")


# ===========================================================================
# Sub-command implementations
# ===========================================================================

def cmd_check(args: argparse.Namespace, stream: Optional[TextIO] = None) -> int:
    """Run the semantic checker over each input file and its includes."""
    stream = stream or sys.stdout
    checker = Checker(Options(fix_warnings=args.fix))
    exit_code = EXIT_OK
    warned = False
    for raw in args.files:
        tree = _load(raw, args.include_dirs)
        if tree is None:
            exit_code = EXIT_ERROR
            continue
        result = checker.check_all(tree)
        _emit_result(raw, result, args.format, stream)
        if not result.ok:
            exit_code = EXIT_ERROR
        warned = warned or bool(result.warnings)
    if exit_code == EXIT_OK and warned and args.werror:
        return EXIT_WARNINGS
    return exit_code


def cmd_parse(args: argparse.Namespace, stream: Optional[TextIO] = None) -> int:
    """Print the declarations of every document reachable from the input."""
    stream = stream or sys.stdout
    tree = _load(args.file, args.include_dirs)
    if tree is None:
        return EXIT_ERROR
    for doc in tree.depth_first_search():
        stream.write(f"{doc.filename}\n")
        for inc in doc.includes:
            stream.write(f"  include   {inc.path}\n")
        for td in doc.typedefs:
            stream.write(f"  typedef   {td.alias} = {td.type}\n")
        for c in doc.constants:
            stream.write(f"  const     {c.name}: {c.type}\n")
        for e in doc.enums:
            stream.write(f"  enum      {e.name} ({len(e.values)} values)\n")
        for s in doc.get_struct_likes():
            stream.write(f"  {s.category:<9} {s.name} ({len(s.fields)} fields)\n")
        for svc in doc.services:
            stream.write(f"  service   {svc.name} ({len(svc.functions)} functions)\n")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="thriftcheck",
        description="Semantic checker for Thrift IDL documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              thriftcheck check service.thrift -I idl/
              thriftcheck check service.thrift --fix --werror
              thriftcheck parse service.thrift
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_include_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-I", "--include-dir",
            dest="include_dirs",
            action="append",
            default=[],
            metavar="DIR",
            help="Additional directory searched for included files.",
        )

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Run the semantic checks.",
    )
    p_check.add_argument("files", nargs="+", metavar="FILE", help="IDL file(s) to check.")
    _add_include_args(p_check)
    p_check.add_argument(
        "--fix",
        action="store_true",
        help="Normalize union, argument and throws requiredness in place.",
    )
    p_check.add_argument(
        "--werror",
        action="store_true",
        help=f"Exit with status {EXIT_WARNINGS} when warnings were emitted.",
    )
    p_check.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )
    p_check.set_defaults(func=cmd_check)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Summarize the declarations of a document and its includes.",
    )
    p_parse.add_argument("file", metavar="FILE", help="IDL file to parse.")
    _add_include_args(p_parse)
    p_parse.set_defaults(func=cmd_parse)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the thriftcheck CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
