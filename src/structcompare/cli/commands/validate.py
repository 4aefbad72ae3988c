#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/validate.py
"""Validate a JSON document, optionally against a JSON Schema.

Without a schema the document is checked for JSON syntax and the failure
position is reported. With ``--schema`` or ``--template`` the document is
checked against a Draft 7 schema. ``--generate-schema`` prints a schema
inferred from the document instead of validating it.
"""

import argparse
import sys

from structcompare.cli.builder import (
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    get_exit_code_for_exception,
    parse_or_exit_code,
    read_input,
    write_output,
)
from structcompare.exceptions import StructCompareError
from structcompare.formats.bridge import parse_document
from structcompare.formats.json_codec import serialize_json
from structcompare.schema import SCHEMA_TEMPLATES, generate_schema, get_schema_template, validate_against_schema
from structcompare.validation import validate


def _create_validate_parser() -> argparse.ArgumentParser:
    """Create argparse parser for validate command."""
    parser = argparse.ArgumentParser(
        prog="structcompare validate",
        description="Check JSON syntax or validate a document against a JSON Schema (Draft 7)",
    )
    parser.add_argument("file", help="Document to validate (use '-' for stdin)")
    schema_group = parser.add_mutually_exclusive_group()
    schema_group.add_argument("--schema", "-s", help="JSON Schema file")
    schema_group.add_argument("--template", choices=sorted(SCHEMA_TEMPLATES), help="Built-in schema template")
    schema_group.add_argument(
        "--generate-schema",
        action="store_true",
        help="Print a schema inferred from the document instead of validating",
    )
    parser.add_argument("--from", dest="from_format", help="Document format (default: auto-detect)")
    parser.add_argument("--output", "-o", help="Write generated schema to file (default: stdout)")
    return parser


def handle_validate_command(args: list[str] | None = None) -> int:
    """Handle validate command.

    Returns
    -------
    int
        0 when the document is valid, 3 when it is not

    """
    parsed = parse_or_exit_code(_create_validate_parser(), args)
    if isinstance(parsed, int):
        return parsed

    try:
        text = read_input(parsed.file)

        if not (parsed.schema or parsed.template or parsed.generate_schema) and parsed.from_format in (None, "json"):
            result = validate(text)
            if result.is_valid:
                print("Valid JSON")
                return EXIT_SUCCESS
            location = f" at line {result.line_number}, column {result.column_number}" if result.line_number else ""
            print(f"Invalid JSON{location}: {result.error}", file=sys.stderr)
            return EXIT_VALIDATION_ERROR

        document = parse_document(text, parsed.from_format)
        if parsed.generate_schema:
            write_output(serialize_json(generate_schema(document)), parsed.output)
            return EXIT_SUCCESS
        if parsed.template:
            schema = get_schema_template(parsed.template)
        elif parsed.schema:
            schema = parse_document(read_input(parsed.schema), "json")
        else:
            print(f"Valid {parsed.from_format.upper()}")
            return EXIT_SUCCESS
    except (StructCompareError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    result = validate_against_schema(document, schema)
    if result.is_valid:
        print("Valid: document matches schema")
        return EXIT_SUCCESS

    print(f"Invalid: {len(result.errors)} error(s)", file=sys.stderr)
    for issue in result.errors:
        print(f"  {issue.path} [{issue.keyword}] {issue.message}", file=sys.stderr)
    return EXIT_VALIDATION_ERROR
