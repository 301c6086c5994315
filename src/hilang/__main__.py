#!/usr/bin/env python3
"""
Command line runner for hilang.

Usage:
    python -m hilang FILE [--store KEY=VALUE ...] [--check | --dump-ast] [--json]

Exit status is 0 when the program ends with an empty stream and 1 for
everything else: bad arguments, unreadable file, parse failure, fault,
unrecovered soft failure, or a leftover value.

Environment:
    HILANG_RECURSION_LIMIT  raise Python's recursion limit before running
                            deeply nested programs

Examples:
    # Run a program reading its input from the console
    echo 30 | python -m hilang examples/prime_sum.hi

    # Preload the store
    python -m hilang examples/countdown.hi --store n=5

    # Check syntax only
    python -m hilang examples/prime_sum.hi --check

    # Show the semantic tree
    python -m hilang examples/prime_sum.hi --dump-ast
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from .adapter import parse_program
from .ast import format_ast
from .errors import Diagnostic, DslError
from .runtime import int_val, text_val, parse_integer, create_context, Interpreter


class ArgumentParser(argparse.ArgumentParser):
    """argparse with usage errors mapped to exit status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_store_entry(entry: str) -> tuple:
    """Parse 'key=value' into (key, Value); integer text becomes Integer."""
    if '=' not in entry:
        raise ValueError(f"Invalid store entry: {entry} (expected key=value)")

    key, value_str = entry.split('=', 1)
    key = key.strip()
    value_str = value_str.strip()

    n = parse_integer(value_str)
    if n is not None:
        return (key, int_val(n))

    # Strip quotes if present
    if len(value_str) >= 2 and value_str.startswith('"') and value_str.endswith('"'):
        value_str = value_str[1:-1]

    return (key, text_val(value_str))


def report(prefix: str, diagnostic: Diagnostic, as_json: bool) -> None:
    """Print a one-line failure report to stderr."""
    if as_json:
        print(json.dumps({"error": prefix, **diagnostic.to_json()}), file=sys.stderr)
    else:
        print(f"{prefix} ({diagnostic.summary()})", file=sys.stderr)


def apply_recursion_limit() -> None:
    limit = os.environ.get('HILANG_RECURSION_LIMIT')
    if not limit:
        return
    try:
        sys.setrecursionlimit(int(limit))
    except ValueError:
        print(f"Warning: ignoring HILANG_RECURSION_LIMIT={limit!r}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    parser = ArgumentParser(
        prog='hilang',
        description='Run a hilang program',
    )
    parser.add_argument('file', help='hilang source file')
    parser.add_argument('-s', '--store', action='append', metavar='KEY=VALUE', default=[],
                        help='Preload the global store (can be repeated)')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--check', action='store_true',
                      help='Parse only; do not run')
    mode.add_argument('--dump-ast', action='store_true',
                      help='Print the semantic tree instead of running')
    parser.add_argument('--json', action='store_true',
                        help='Report diagnostics as JSON')

    args = parser.parse_args(argv)

    try:
        store = dict(parse_store_entry(entry) for entry in args.store)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    source_path = Path(args.file)
    try:
        source = source_path.read_text(encoding='utf-8')
    except (FileNotFoundError, IsADirectoryError, PermissionError):
        print(f"Cannot open file: {args.file}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError):
        print(f"Cannot read file: {args.file}", file=sys.stderr)
        return 1

    apply_recursion_limit()
    try:
        program = parse_program(source, filename=args.file)
    except DslError as e:
        report(f"Cannot parse file: {args.file}", e.diagnostic, args.json)
        return 1

    if args.check:
        print(f"OK: {source_path.name}")
        return 0

    if args.dump_ast:
        print(format_ast(program))
        return 0

    ctx = create_context(store=store, source=source, filename=args.file)
    result = Interpreter(ctx).run(program)

    if not result.success:
        report(f"Cannot execute successfully: {args.file}", result.diagnostic, args.json)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
