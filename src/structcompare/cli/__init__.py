#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/__init__.py
"""Command-line interface for structcompare.

Usage::

    structcompare diff original.json modified.yaml --preset api
    structcompare validate data.json --schema schema.json
    structcompare convert config.yaml --to json
    structcompare format data.json --indent 4 --sort-keys
    structcompare serve --port 8080
"""

import argparse
import sys

from structcompare import __version__
from structcompare.cli.builder import EXIT_ERROR, EXIT_SUCCESS
from structcompare.cli.commands import COMMANDS, dispatch_command

__all__ = ["main", "create_parser"]


def create_parser() -> argparse.ArgumentParser:
    """Create the top-level parser used for help and version output."""
    epilog = "Commands:\n" + "\n".join(f"  {name:<10} {help_text}" for name, help_text in COMMANDS.items())
    parser = argparse.ArgumentParser(
        prog="structcompare",
        description="Structural diffing, validation and conversion of JSON, YAML and XML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog + "\n\nRun 'structcompare <command> --help' for command options.",
    )
    parser.add_argument("--version", action="version", version=f"structcompare {__version__}")
    parser.add_argument("command", nargs="?", choices=sorted(COMMANDS), help=argparse.SUPPRESS)
    return parser


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return a process exit code."""
    if args is None:
        args = sys.argv[1:]

    result = dispatch_command(args)
    if result is not None:
        return result

    parser = create_parser()
    try:
        parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_SUCCESS

    parser.print_help(sys.stderr)
    return EXIT_ERROR
