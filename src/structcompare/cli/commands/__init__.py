#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/__init__.py
"""CLI command dispatch for structcompare."""

import logging
import sys

# Note: Command handlers are imported lazily in dispatch_command so that
# ``--help`` does not load the server or renderers

logger = logging.getLogger(__name__)

COMMANDS: dict[str, str] = {
    "diff": "Compare two documents structurally or as text",
    "validate": "Check JSON syntax or validate against a JSON Schema",
    "convert": "Convert between JSON, YAML and XML",
    "format": "Pretty-print or minify a document as JSON",
    "serve": "Serve the diff API over HTTP",
}


def dispatch_command(args: list[str] | None = None) -> int | None:
    """Run the subcommand named by the first argument.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments, defaulting to ``sys.argv[1:]``

    Returns
    -------
    int or None
        Exit code if a command was handled, None otherwise

    """
    if args is None:
        args = sys.argv[1:]

    if not args:
        return None

    command, rest = args[0], args[1:]

    if command == "diff":
        from structcompare.cli.commands.diff import handle_diff_command

        return handle_diff_command(rest)

    if command == "validate":
        from structcompare.cli.commands.validate import handle_validate_command

        return handle_validate_command(rest)

    if command == "convert":
        from structcompare.cli.commands.convert import handle_convert_command

        return handle_convert_command(rest)

    if command == "format":
        from structcompare.cli.commands.format import handle_format_command

        return handle_format_command(rest)

    if command == "serve":
        from structcompare.cli.commands.serve import handle_serve_command

        return handle_serve_command(rest)

    logger.debug("No command handler for %r", command)
    return None
