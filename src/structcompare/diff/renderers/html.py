#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/renderers/html.py
"""Standalone HTML diff reports.

A report page has a summary of the outcome counts, a table of structural
changes (json mode), and a numbered line view of both documents with
additions and deletions highlighted.
"""

from __future__ import annotations

import json
from html import escape
from io import StringIO
from typing import Sequence

from structcompare.diff.report import DiffReport
from structcompare.diff.structural import DiffChange
from structcompare.diff.text_diff import DiffOp

_CSS = """
    body { font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; color: #24292f;
           max-width: 1200px; margin: 0 auto; padding: 20px; background: #f6f8fa; }
    .report { background: #fff; padding: 24px 32px; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,.12); }
    h1 { border-bottom: 2px solid #0969da; padding-bottom: 8px; }
    .meta { color: #57606a; font-size: 13px; }
    .stats { display: flex; gap: 12px; margin: 16px 0; }
    .stat { border-radius: 6px; padding: 8px 14px; font-weight: 600; }
    .stat-added { background: #dafbe1; color: #116329; }
    .stat-removed { background: #ffebe9; color: #82071e; }
    .stat-modified { background: #fff8c5; color: #7d4e00; }
    .stat-unchanged { background: #eaeef2; color: #57606a; }
    table.changes { border-collapse: collapse; width: 100%; font-size: 13px; margin-bottom: 24px; }
    table.changes th, table.changes td { border: 1px solid #d0d7de; padding: 4px 8px; text-align: left;
                                         vertical-align: top; }
    table.changes code { white-space: pre-wrap; word-break: break-word; }
    .lines { border: 1px solid #d0d7de; border-radius: 6px; overflow: hidden;
             font-family: 'SFMono-Regular', Consolas, monospace; font-size: 13px; }
    .line { display: grid; grid-template-columns: 56px 56px 1fr; gap: 8px; padding: 1px 8px; }
    .line .num { color: #8c959f; text-align: right; }
    .line .text { white-space: pre-wrap; word-break: break-word; }
    .line-added { background: #e6ffec; }
    .line-deleted { background: #ffebe9; }
    details.collapsed { background: #f6f8fa; padding: 4px 8px; }
    details.collapsed summary { cursor: pointer; color: #57606a; }
"""


class HtmlDiffRenderer:
    """Render a diff report as a standalone HTML page.

    Parameters
    ----------
    show_context : bool, default = True
        Show unchanged lines; when False they are folded into collapsible blocks
    inline_styles : bool, default = True
        Embed the stylesheet in the page

    """

    def __init__(
        self,
        show_context: bool = True,
        inline_styles: bool = True,
    ):
        """Initialize the HTML diff renderer."""
        self.show_context = show_context
        self.inline_styles = inline_styles

    def render(self, report: DiffReport) -> str:
        """Render a report to an HTML string."""
        output = StringIO()
        self._write_prefix(report, output)
        self._write_summary(report, output)
        if report.changes:
            self._write_changes(report.changes, output)
        self._write_lines(report, output)
        output.write("  </div>\n</body>\n</html>\n")
        return output.getvalue()

    def _write_prefix(self, report: DiffReport, output: StringIO) -> None:
        title = escape(report.title)
        output.write("<!DOCTYPE html>\n<html lang='en'>\n<head>\n")
        output.write("  <meta charset='UTF-8'>\n")
        output.write("  <meta name='viewport' content='width=device-width, initial-scale=1.0'>\n")
        output.write(f"  <title>{title}</title>\n")
        if self.inline_styles:
            output.write(f"  <style>{_CSS}  </style>\n")
        output.write("</head>\n<body>\n  <div class='report'>\n")
        output.write(f"    <h1>{title}</h1>\n")

    def _write_summary(self, report: DiffReport, output: StringIO) -> None:
        stats = report.stats
        output.write(
            f"    <p class='meta'>{escape(report.original_label)} &rarr; {escape(report.modified_label)}"
            f" &middot; {escape(report.mode)} mode &middot; {escape(report.created_at.isoformat())}</p>\n"
        )
        output.write("    <div class='stats'>\n")
        for name in ("added", "removed", "modified", "unchanged"):
            output.write(f"      <span class='stat stat-{name}'>{getattr(stats, name)} {name}</span>\n")
        output.write("    </div>\n")
        if not stats.has_changes:
            output.write("    <p><em>No differences found.</em></p>\n")

    def _write_changes(self, changes: Sequence[DiffChange], output: StringIO) -> None:
        output.write("    <h2>Changes</h2>\n")
        output.write("    <table class='changes'>\n")
        output.write("      <tr><th>Path</th><th>Change</th><th>Original</th><th>Modified</th></tr>\n")
        for change in changes:
            data = change.to_dict()
            old = escape(json.dumps(data["old"], ensure_ascii=False)) if "old" in data else ""
            new = escape(json.dumps(data["new"], ensure_ascii=False)) if "new" in data else ""
            output.write(
                f"      <tr class='change-{change.kind.value}'><td><code>{escape(change.path)}</code></td>"
                f"<td>{change.kind.value}</td><td><code>{old}</code></td><td><code>{new}</code></td></tr>\n"
            )
        output.write("    </table>\n")

    def _write_lines(self, report: DiffReport, output: StringIO) -> None:
        operations = list(report.line_diff.iter_operations())
        if not operations:
            return
        output.write("    <h2>Documents</h2>\n")
        output.write("    <div class='lines'>\n")
        for op in operations:
            if op.tag == "equal":
                self._write_equal(op, output)
                continue
            if op.tag in ("delete", "replace"):
                self._write_block(op.old_slice, "line-deleted", output, old_start=op.old_range[0])
            if op.tag in ("insert", "replace"):
                self._write_block(op.new_slice, "line-added", output, new_start=op.new_range[0])
        output.write("    </div>\n")

    def _write_equal(self, op: DiffOp, output: StringIO) -> None:
        if self.show_context:
            self._write_block(
                op.new_slice, "line-context", output, old_start=op.old_range[0], new_start=op.new_range[0]
            )
            return
        count = len(op.new_slice)
        output.write("      <details class='collapsed'>\n")
        output.write(f"        <summary>{count} unchanged line{'s' if count != 1 else ''}</summary>\n")
        self._write_block(op.new_slice, "line-context", output, old_start=op.old_range[0], new_start=op.new_range[0])
        output.write("      </details>\n")

    def _write_block(
        self,
        lines: Sequence[str],
        line_class: str,
        output: StringIO,
        *,
        old_start: int | None = None,
        new_start: int | None = None,
    ) -> None:
        for offset, line in enumerate(lines):
            old_number = "" if old_start is None else str(old_start + offset + 1)
            new_number = "" if new_start is None else str(new_start + offset + 1)
            text = escape(line) if line else "&nbsp;"
            output.write(
                f"      <div class='line {line_class}'><span class='num'>{old_number}</span>"
                f"<span class='num'>{new_number}</span><span class='text'>{text}</span></div>\n"
            )
