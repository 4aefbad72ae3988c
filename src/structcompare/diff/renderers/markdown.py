#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/renderers/markdown.py
"""Markdown diff reports for pasting into issues and pull requests."""

from __future__ import annotations

import json

from structcompare.diff.report import DiffReport


def _cell(value: object) -> str:
    text = json.dumps(value, ensure_ascii=False)
    return "`" + text.replace("|", "\\|").replace("`", "'") + "`"


class MarkdownDiffRenderer:
    """Render a diff report as Markdown.

    The output has a statistics table, a change table in json mode and a
    fenced ``diff`` block with the unified diff.

    Parameters
    ----------
    context_lines : int, default = 3
        Context lines in the fenced diff block
    include_diff : bool, default = True
        Include the fenced unified diff

    """

    def __init__(self, context_lines: int = 3, include_diff: bool = True):
        """Initialize the Markdown renderer."""
        self.context_lines = context_lines
        self.include_diff = include_diff

    def render(self, report: DiffReport) -> str:
        """Render a report to a Markdown string."""
        stats = report.stats
        lines = [
            f"# {report.title}",
            "",
            f"*{report.original_label}* → *{report.modified_label}* ({report.mode} mode, "
            f"{report.created_at.strftime('%Y-%m-%d %H:%M UTC')})",
            "",
            "| Added | Removed | Modified | Unchanged | Total |",
            "|---:|---:|---:|---:|---:|",
            f"| {stats.added} | {stats.removed} | {stats.modified} | {stats.unchanged} | {stats.total} |",
            "",
        ]

        if report.changes:
            lines += ["## Changes", "", "| Path | Change | Original | Modified |", "|---|---|---|---|"]
            for change in report.changes:
                data = change.to_dict()
                old = _cell(data["old"]) if "old" in data else ""
                new = _cell(data["new"]) if "new" in data else ""
                lines.append(f"| `{change.path}` | {change.kind.value} | {old} | {new} |")
            lines.append("")
        elif not stats.has_changes:
            lines += ["No differences found.", ""]

        if self.include_diff and stats.has_changes:
            lines += ["## Diff", "", "```diff"]
            lines += list(report.line_diff.iter_unified_diff(self.context_lines))
            lines += ["```", ""]

        return "\n".join(lines)
