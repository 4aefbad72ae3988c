#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/renderers/__init__.py
"""Diff renderers for various output formats.

Available Renderers
-------------------
- HtmlDiffRenderer: Standalone HTML report page
- JsonDiffRenderer: Structured JSON output for programmatic access
- MarkdownDiffRenderer: Markdown report with tables and a fenced diff
- UnifiedDiffRenderer: Colorized unified diff and change lists for terminals

Examples
--------
Render a report as HTML:
    >>> from structcompare.diff import build_report
    >>> from structcompare.diff.renderers import HtmlDiffRenderer
    >>> report = build_report('{"a": 1}', '{"a": 2}')
    >>> html = HtmlDiffRenderer().render(report)

"""

from structcompare.diff.renderers.html import HtmlDiffRenderer
from structcompare.diff.renderers.json import JsonDiffRenderer
from structcompare.diff.renderers.markdown import MarkdownDiffRenderer
from structcompare.diff.renderers.unified import UnifiedDiffRenderer

__all__ = [
    "HtmlDiffRenderer",
    "JsonDiffRenderer",
    "MarkdownDiffRenderer",
    "UnifiedDiffRenderer",
]
