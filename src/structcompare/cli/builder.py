#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/builder.py
"""Shared argument helpers and exit codes for structcompare commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import fields
from pathlib import Path

from structcompare.exceptions import (
    FormatError,
    ParsingError,
    SecurityError,
    ValidationError,
)
from structcompare.options import DiffOptions
from structcompare.utils.security import check_input_size

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_FORMAT_ERROR = 5
EXIT_PARSING_ERROR = 6
EXIT_SECURITY_ERROR = 8


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, SecurityError):
        return EXIT_SECURITY_ERROR

    if isinstance(exception, (ValidationError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR

    if isinstance(exception, FormatError):
        return EXIT_FORMAT_ERROR

    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR

    return EXIT_ERROR


def add_diff_option_arguments(parser: argparse.ArgumentParser) -> None:
    """Add one flag per ``DiffOptions`` field using the field metadata."""
    group = parser.add_argument_group("normalization options")
    for f in fields(DiffOptions):
        flag = f"--{f.metadata['cli_name']}"
        if f.name == "ignore_keys":
            group.add_argument(flag, dest=f.name, default=None, metavar="K1,K2", help=f.metadata["help"])
        else:
            group.add_argument(flag, dest=f.name, action="store_true", default=None, help=f.metadata["help"])


def read_input(path: str) -> str:
    """Read a command input, with ``-`` meaning stdin.

    Raises
    ------
    OSError
        If the file cannot be read or stdin is empty
    SecurityError
        If the input is longer than the input limit

    """
    if path == "-":
        data = sys.stdin.read()
        if not data:
            raise OSError("No data received from stdin")
        return check_input_size(data)
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Source file not found: {path}")
    return check_input_size(source.read_text(encoding="utf-8"))


def write_output(text: str, output: str | None) -> None:
    """Write ``text`` to ``output`` or print it to stdout."""
    if output:
        Path(output).write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        print(f"Output written to: {output}", file=sys.stderr)
    else:
        print(text)


def parse_or_exit_code(parser: argparse.ArgumentParser, args: list[str] | None) -> argparse.Namespace | int:
    """Parse ``args``, turning argparse's ``SystemExit`` into an exit code."""
    try:
        return parser.parse_args(args or [])
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
