#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/format.py
"""Pretty-print or minify a document as JSON."""

import argparse
import sys

from structcompare.cli.builder import (
    EXIT_SUCCESS,
    get_exit_code_for_exception,
    parse_or_exit_code,
    read_input,
    write_output,
)
from structcompare.constants import DEFAULT_JSON_INDENT, MAX_JSON_INDENT
from structcompare.exceptions import StructCompareError
from structcompare.formats.bridge import parse_document
from structcompare.formats.json_codec import serialize_json
from structcompare.utils.size import byte_size, format_file_size


def _indent(value: str) -> int:
    try:
        indent = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"indent must be an integer, got '{value}'") from e
    if not 0 <= indent <= MAX_JSON_INDENT:
        raise argparse.ArgumentTypeError(f"indent must be between 0 and {MAX_JSON_INDENT}, got {indent}")
    return indent


def _create_format_parser() -> argparse.ArgumentParser:
    """Create argparse parser for format command."""
    parser = argparse.ArgumentParser(
        prog="structcompare format",
        description="Pretty-print or minify a JSON, YAML or XML document as JSON",
    )
    parser.add_argument("file", help="Input document (use '-' for stdin)")
    parser.add_argument(
        "--indent",
        type=_indent,
        default=DEFAULT_JSON_INDENT,
        help=f"Spaces per indentation level, 0-{MAX_JSON_INDENT} (default: {DEFAULT_JSON_INDENT})",
    )
    parser.add_argument("--minify", action="store_true", help="Emit compact single-line JSON")
    parser.add_argument("--sort-keys", action="store_true", help="Sort object keys")
    parser.add_argument("--from", dest="from_format", help="Input format (default: auto-detect)")
    parser.add_argument("--output", "-o", help="Write output to file (default: stdout)")
    return parser


def handle_format_command(args: list[str] | None = None) -> int:
    """Handle format command."""
    parsed = parse_or_exit_code(_create_format_parser(), args)
    if isinstance(parsed, int):
        return parsed

    try:
        value = parse_document(read_input(parsed.file), parsed.from_format)
        formatted = serialize_json(value, indent=None if parsed.minify else parsed.indent, sort_keys=parsed.sort_keys)
        write_output(formatted, parsed.output)
    except (StructCompareError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    if parsed.output:
        print(f"Size: {format_file_size(byte_size(formatted))}", file=sys.stderr)
    return EXIT_SUCCESS
