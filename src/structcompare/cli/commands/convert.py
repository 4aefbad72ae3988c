#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/convert.py
"""Convert a document between JSON, YAML and XML."""

import argparse
import sys

from structcompare.cli.builder import (
    EXIT_PARSING_ERROR,
    EXIT_SUCCESS,
    get_exit_code_for_exception,
    parse_or_exit_code,
    read_input,
    write_output,
)
from structcompare.constants import SUPPORTED_FORMATS
from structcompare.exceptions import StructCompareError
from structcompare.formats.bridge import convert


def _create_convert_parser() -> argparse.ArgumentParser:
    """Create argparse parser for convert command."""
    parser = argparse.ArgumentParser(
        prog="structcompare convert",
        description="Convert a document between JSON, YAML and XML",
    )
    parser.add_argument("file", help="Input document (use '-' for stdin)")
    parser.add_argument("--to", "-t", dest="to_format", required=True, choices=SUPPORTED_FORMATS, help="Output format")
    parser.add_argument(
        "--from", dest="from_format", choices=SUPPORTED_FORMATS, help="Input format (default: auto-detect)"
    )
    parser.add_argument("--output", "-o", help="Write output to file (default: stdout)")
    return parser


def handle_convert_command(args: list[str] | None = None) -> int:
    """Handle convert command."""
    parsed = parse_or_exit_code(_create_convert_parser(), args)
    if isinstance(parsed, int):
        return parsed

    try:
        text = read_input(parsed.file)
    except (StructCompareError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    result = convert(text, parsed.from_format, parsed.to_format)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_PARSING_ERROR

    try:
        write_output(result.data or "", parsed.output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    return EXIT_SUCCESS
