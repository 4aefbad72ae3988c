#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/serve.py
"""Serve the diff API over HTTP.

Warning
-------
The server has no authentication. It is intended for local and
development use only.
"""

import sys

from structcompare.cli.builder import EXIT_VALIDATION_ERROR, parse_or_exit_code
from structcompare.server.config import create_argument_parser, load_config_from_args
from structcompare.server.http import run_server


def handle_serve_command(args: list[str] | None = None) -> int:
    """Handle serve command."""
    parsed = parse_or_exit_code(create_argument_parser(), args)
    if isinstance(parsed, int):
        return parsed

    try:
        config = load_config_from_args(parsed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    return run_server(config)
