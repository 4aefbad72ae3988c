#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/__init__.py
"""Structural and plain-text document comparison.

Key Features
------------
- Recursive comparison of parsed documents with added/removed/modified/
  unchanged classification
- Fail-soft text helpers for live editors (malformed input counts as no diff)
- Line, sentence and word comparison of plain text using difflib
- Reports rendered as unified diff, JSON, HTML or Markdown

Examples
--------
Count differences between two JSON texts:
    >>> from structcompare.diff import count_differences
    >>> count_differences('{"a": 1}', '{"a": 1, "b": 2}')
    1

Classify outcomes of two parsed documents:
    >>> from structcompare.diff import compare_values
    >>> compare_values([1, 2], [1]).stats.removed
    1

"""

from structcompare.diff.report import DiffReport, build_report
from structcompare.diff.structural import (
    ChangeKind,
    ComparisonResult,
    DiffChange,
    DiffStats,
    StructuralComparator,
    collect_changes,
    compare_values,
    count_differences,
    count_value_differences,
    diff_stats,
)
from structcompare.diff.text_diff import DiffResult, compare_files, compare_texts, text_diff_stats

__all__ = [
    "ChangeKind",
    "ComparisonResult",
    "DiffChange",
    "DiffReport",
    "DiffResult",
    "DiffStats",
    "StructuralComparator",
    "build_report",
    "collect_changes",
    "compare_files",
    "compare_texts",
    "compare_values",
    "count_differences",
    "count_value_differences",
    "diff_stats",
    "text_diff_stats",
]
