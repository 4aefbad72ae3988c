#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/renderers/json.py
"""JSON renderer for machine-readable diff reports."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Union

from structcompare.diff.report import DiffReport
from structcompare.diff.text_diff import DiffResult

_LINE_TYPES = {"+": "added", "-": "deleted", " ": "context"}


def _split_hunks(diff_lines: Iterable[str]) -> Dict[str, Any]:
    """Group unified diff lines into file headers and hunks."""
    old_file = new_file = ""
    hunks: List[Dict[str, Any]] = []

    for line in diff_lines:
        if line.startswith("---"):
            old_file = line[4:].strip()
        elif line.startswith("+++"):
            new_file = line[4:].strip()
        elif line.startswith("@@"):
            hunks.append({"header": line, "changes": []})
        elif hunks and line[:1] in _LINE_TYPES:
            hunks[-1]["changes"].append({"type": _LINE_TYPES[line[:1]], "content": line[1:]})

    return {"type": "unified_diff", "old_file": old_file, "new_file": new_file, "hunks": hunks}


def _count_hunk_lines(hunks: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = dict.fromkeys(_LINE_TYPES.values(), 0)
    for hunk in hunks:
        for change in hunk["changes"]:
            counts[change["type"]] += 1
    return _statistics(counts["added"], counts["deleted"], counts["context"])


def _statistics(added: int, deleted: int, context: int) -> Dict[str, int]:
    return {
        "lines_added": added,
        "lines_deleted": deleted,
        "lines_context": context,
        "total_changes": added + deleted,
    }


def line_statistics(diff: DiffResult) -> Dict[str, int]:
    """Count added, deleted and context tokens over the whole comparison.

    Unlike hunk counts, context is not limited by ``context_lines``. A
    replaced block counts on both sides.
    """
    added = deleted = context = 0
    for op in diff.iter_operations():
        if op.tag == "equal":
            context += len(op.old_slice)
            continue
        added += len(op.new_slice)
        deleted += len(op.old_slice)
    return _statistics(added, deleted, context)


class JsonDiffRenderer:
    """Render a diff report, a line diff or raw unified lines as JSON.

    Reports produce ``mode``, ``stats``, ``options`` and ``changes`` next
    to the line hunks. Line diffs add their granularity and context size.
    Raw unified lines only produce hunks and hunk line counts.

    Parameters
    ----------
    pretty_print : bool, default = True
        Indent the output
    indent : int, default = 2
        Indentation width when pretty printing

    """

    def __init__(self, pretty_print: bool = True, indent: int = 2):
        """Initialize the renderer."""
        self.pretty_print = pretty_print
        self.indent = indent

    def render(self, diff: Union[DiffReport, DiffResult, Iterable[str]]) -> str:
        """Render ``diff`` to a JSON string."""
        if isinstance(diff, DiffReport):
            payload = self.build_report_data(diff)
        elif isinstance(diff, DiffResult):
            payload = _split_hunks(diff.iter_unified_diff())
            payload.update(
                statistics=line_statistics(diff),
                granularity=diff.granularity,
                context_lines=diff.context_lines,
            )
        else:
            payload = _split_hunks(diff)
            payload["statistics"] = _count_hunk_lines(payload["hunks"])

        return json.dumps(payload, indent=self.indent if self.pretty_print else None, ensure_ascii=False)

    def build_report_data(self, report: DiffReport) -> Dict[str, Any]:
        """Return ``report`` as a JSON-compatible dictionary."""
        return {
            "title": report.title,
            "created_at": report.created_at.isoformat(),
            "mode": report.mode,
            "original": report.original_label,
            "modified": report.modified_label,
            "options": report.options.to_dict(),
            "stats": report.stats.to_dict(),
            "changes": [change.to_dict() for change in report.changes],
            "hunks": _split_hunks(report.line_diff.iter_unified_diff())["hunks"],
            "statistics": line_statistics(report.line_diff),
        }
