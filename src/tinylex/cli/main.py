# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the TinyLex command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from tinylex.calculator import BANNER, Interpreter
from tinylex.definitions import DefinitionFileError, load_definitions
from tinylex.lexer import Lexer, LexerError

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the TinyLex CLI."""
    parser = argparse.ArgumentParser(
        prog="tinylex",
        description="TinyLex: regex-driven line-oriented lexer",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every matched token to standard error",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # calc subcommand
    calc_parser = subparsers.add_parser(
        "calc",
        help="Evaluate simple arithmetic operations",
        description="Evaluate operations such as '47 + 11', one per line, until 'exit'.",
    )
    calc_parser.add_argument(
        "file",
        nargs="?",
        help="File to read operations from (default: standard input)",
    )

    # tokenize subcommand
    tokenize_parser = subparsers.add_parser(
        "tokenize",
        help="Print the tokens of a file",
        description="Split a file into tokens using the rules of a YAML definition file.",
    )
    tokenize_parser.add_argument(
        "file",
        help="File to tokenize",
    )
    tokenize_parser.add_argument(
        "-d",
        "--definitions",
        required=True,
        help="YAML file listing the token definitions in priority order",
    )

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "calc":
        return _cmd_calc(args)
    if args.command == "tokenize":
        return _cmd_tokenize(args)
    return 0


def _cmd_calc(args: argparse.Namespace) -> int:
    """Handle the calc subcommand."""
    if args.file is None:
        if sys.stdin.isatty():
            print(BANNER)
        label = "<stdin>"
        source = sys.stdin
    else:
        path = Path(args.file)
        if not path.is_file():
            print(f"Error: file '{path}' does not exist.", file=sys.stderr)
            return 1
        label = str(path)
        try:
            source = path.open(encoding="utf-8")
        except OSError as exc:
            print(f"Error: {label}: {exc}", file=sys.stderr)
            return 1

    try:
        with Interpreter(source, sys.stdout) as interpreter:
            errors = interpreter.execute()
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: {label}: {exc}", file=sys.stderr)
        return 1
    return 1 if errors else 0


def _cmd_tokenize(args: argparse.Namespace) -> int:
    """Handle the tokenize subcommand."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return 1

    try:
        definition_set = load_definitions(Path(args.definitions))
    except DefinitionFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        with Lexer.from_path(path, definition_set.definitions) as lexer:
            for token in lexer.tokens():
                print(f"{token.position}\t{token.type.name}\t{token.value}")
    except (LexerError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {path}: {exc}", file=sys.stderr)
        return 1
    return 0
