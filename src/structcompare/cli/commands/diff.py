#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/commands/diff.py
"""Structured document comparison command.

Compares two JSON, YAML or XML documents structurally (``--mode json``)
or two plain texts line by line (``--mode text``) and prints a summary,
a unified diff, or a JSON, HTML or Markdown report.
"""

import argparse
import logging
import sys
from typing import Any

from structcompare.cli.builder import (
    EXIT_SUCCESS,
    add_diff_option_arguments,
    get_exit_code_for_exception,
    parse_or_exit_code,
    read_input,
    write_output,
)
from structcompare.cli.config import load_cli_config, options_from_config
from structcompare.constants import DEFAULT_CONTEXT_LINES
from structcompare.diff.renderers import (
    HtmlDiffRenderer,
    JsonDiffRenderer,
    MarkdownDiffRenderer,
    UnifiedDiffRenderer,
)
from structcompare.diff.report import DiffReport, build_report
from structcompare.exceptions import StructCompareError
from structcompare.logging_utils import configure_logging
from structcompare.options import DiffOptions, available_presets, parse_ignore_keys

logger = logging.getLogger(__name__)


def _validate_context_lines(value: str) -> int:
    """Validate context lines is a non-negative integer.

    Raises
    ------
    argparse.ArgumentTypeError
        If value is not a non-negative integer

    """
    try:
        ivalue = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"context lines must be an integer, got '{value}'") from e

    if ivalue < 0:
        raise argparse.ArgumentTypeError(f"context lines must be non-negative, got {ivalue}")

    return ivalue


def _create_diff_parser() -> argparse.ArgumentParser:
    """Create argparse parser for diff command."""
    parser = argparse.ArgumentParser(
        prog="structcompare diff",
        description="Compare two structured documents (JSON, YAML or XML) or two plain texts",
        add_help=True,
    )

    parser.add_argument("original", help="Original document (use '-' for stdin)")
    parser.add_argument("modified", help="Modified document (use '-' for stdin)")

    parser.add_argument(
        "--mode",
        choices=["json", "text"],
        default="json",
        help="json (default): structural comparison; text: line comparison",
    )
    parser.add_argument("--preset", choices=available_presets(), help="Named set of normalization options")
    parser.add_argument("--config", help="Configuration file with default options (default: auto-discover)")
    add_diff_option_arguments(parser)

    parser.add_argument(
        "--format",
        "-f",
        choices=["summary", "unified", "json", "html", "markdown"],
        default="summary",
        help="Output format (default: summary)",
    )
    parser.add_argument("--output", "-o", help="Write output to file (default: stdout)")
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colorize output: auto (default, if terminal), always, never",
    )
    parser.add_argument(
        "--context",
        "-C",
        type=_validate_context_lines,
        default=DEFAULT_CONTEXT_LINES,
        help=f"Number of context lines (default: {DEFAULT_CONTEXT_LINES})",
    )
    parser.add_argument(
        "--ignore-whitespace",
        "-w",
        action="store_true",
        help="Ignore whitespace changes in text mode",
    )
    parser.add_argument(
        "--granularity",
        choices=["line", "sentence", "word"],
        default="line",
        help="Text mode granularity (default: line)",
    )
    parser.add_argument("--show-changes", action="store_true", help="List every structural change in the summary")
    parser.add_argument("--rich", action="store_true", help="Render the summary with rich tables")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    return parser


def resolve_options(parsed: argparse.Namespace) -> DiffOptions:
    """Combine config file, preset and flags into diff options.

    Flags win over the preset, which wins over the config file. Keys from
    ``--ignore-keys`` are added to those already ignored.

    Raises
    ------
    ValidationError
        If the preset or an option value is invalid
    argparse.ArgumentTypeError
        If the config file cannot be loaded

    """
    config: dict[str, Any] = load_cli_config(parsed.config)
    if parsed.preset:
        config["preset"] = parsed.preset
    options = options_from_config(config)

    overrides: dict[str, Any] = {
        name: True
        for name in ("ignore_key_order", "ignore_array_order", "sort_keys")
        if getattr(parsed, name)
    }
    if parsed.ignore_keys:
        overrides["ignore_keys"] = options.ignore_keys | parse_ignore_keys(parsed.ignore_keys)
    return options.create_updated(**overrides) if overrides else options


def _use_color(parsed: argparse.Namespace) -> bool:
    if parsed.color == "always":
        return True
    if parsed.color == "never" or parsed.output:
        return False
    return sys.stdout.isatty()


def _summary_lines(report: DiffReport, use_color: bool, show_changes: bool) -> list[str]:
    stats = report.stats
    lines = [f"Comparing {report.original_label} and {report.modified_label} ({report.mode} mode)"]
    if not stats.has_changes:
        lines.append("No differences found.")
    lines.append(
        f"added: {stats.added}  removed: {stats.removed}  modified: {stats.modified}  unchanged: {stats.unchanged}"
    )
    lines.append(f"differences: {stats.difference_count}")
    if show_changes and report.changes:
        lines.append("")
        lines.extend(UnifiedDiffRenderer(use_color=use_color).render_changes(report.changes))
    return lines


def _print_rich_summary(report: DiffReport, show_changes: bool) -> None:
    from rich.console import Console
    from rich.table import Table

    console = Console()
    stats = report.stats

    table = Table(title=f"{report.original_label} vs {report.modified_label}")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("[green]Added[/green]", str(stats.added))
    table.add_row("[red]Removed[/red]", str(stats.removed))
    table.add_row("[yellow]Modified[/yellow]", str(stats.modified))
    table.add_row("Unchanged", str(stats.unchanged))
    table.add_row("[bold]Differences[/bold]", f"[bold]{stats.difference_count}[/bold]")
    console.print(table)

    if show_changes and report.changes:
        changes = Table(title="Changes")
        changes.add_column("Path", style="cyan")
        changes.add_column("Kind")
        changes.add_column("Original")
        changes.add_column("Modified")
        for change in report.changes:
            data = change.to_dict()
            changes.add_row(
                change.path,
                change.kind.value,
                repr(data["old"]) if "old" in data else "",
                repr(data["new"]) if "new" in data else "",
            )
        console.print(changes)


def render_report(report: DiffReport, parsed: argparse.Namespace, use_color: bool) -> str:
    """Render ``report`` in the output format selected by ``parsed``."""
    if parsed.format == "html":
        return HtmlDiffRenderer().render(report)
    if parsed.format == "json":
        return JsonDiffRenderer().render(report)
    if parsed.format == "markdown":
        return MarkdownDiffRenderer(context_lines=parsed.context).render(report)
    if parsed.format == "unified":
        return "\n".join(UnifiedDiffRenderer(use_color=use_color, context_lines=parsed.context).render(report))
    return "\n".join(_summary_lines(report, use_color, parsed.show_changes))


def handle_diff_command(args: list[str] | None = None) -> int:
    """Handle diff command to compare two documents.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments (beyond 'diff')

    Returns
    -------
    int
        Exit code (0 for success)

    """
    parsed = parse_or_exit_code(_create_diff_parser(), args)
    if isinstance(parsed, int):
        return parsed

    configure_logging(parsed.log_level)

    try:
        if parsed.original == "-" and parsed.modified == "-":
            raise OSError("Cannot read both original and modified from stdin")
        options = resolve_options(parsed)
        original = read_input(parsed.original)
        modified = read_input(parsed.modified)

        report = build_report(
            original,
            modified,
            mode=parsed.mode,
            options=options,
            original_label="stdin" if parsed.original == "-" else parsed.original,
            modified_label="stdin" if parsed.modified == "-" else parsed.modified,
            context_lines=parsed.context,
            ignore_whitespace=parsed.ignore_whitespace,
            granularity=parsed.granularity,
        )
    except (StructCompareError, OSError, ValueError, argparse.ArgumentTypeError) as e:
        print(f"Error comparing documents: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    if parsed.format == "summary" and parsed.rich and not parsed.output:
        _print_rich_summary(report, parsed.show_changes)
        return EXIT_SUCCESS

    try:
        write_output(render_report(report, parsed, _use_color(parsed)), parsed.output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    return EXIT_SUCCESS
