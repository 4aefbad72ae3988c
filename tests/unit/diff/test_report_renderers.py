#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for diff renderers."""

from __future__ import annotations

import json

import pytest

from structcompare.diff.renderers import HtmlDiffRenderer, JsonDiffRenderer, MarkdownDiffRenderer, UnifiedDiffRenderer
from structcompare.diff.renderers.unified import BOLD, GREEN, RED, RESET, colorize_diff
from structcompare.diff.report import DiffReport, build_report
from structcompare.diff.structural import collect_changes
from structcompare.diff.text_diff import compare_texts


@pytest.fixture()
def simple_report() -> DiffReport:
    """Provide a report with one modified value."""
    return build_report('{"a": 1}', '{"a": 2}')


@pytest.fixture()
def unchanged_report() -> DiffReport:
    """Provide a report without differences."""
    return build_report('{"a": 1}', '{"a": 1}')


@pytest.mark.unit
class TestUnifiedDiffRenderer:
    """Tests for UnifiedDiffRenderer."""

    def test_plain_report_lines(self, simple_report):
        """Test uncolored unified diff of the processed documents."""
        lines = list(UnifiedDiffRenderer(use_color=False).render(simple_report))
        assert lines[:2] == ["--- original", "+++ modified"]
        assert '-  "a": 1' in lines
        assert '+  "a": 2' in lines

    def test_colored_lines(self, simple_report):
        """Test ANSI colors for headers, additions and deletions."""
        lines = list(UnifiedDiffRenderer(use_color=True).render(simple_report))
        assert lines[0] == f"{BOLD}--- original{RESET}"
        assert f'{RED}-  "a": 1{RESET}' in lines
        assert f'{GREEN}+  "a": 2{RESET}' in lines

    def test_render_diff_result(self):
        """Test rendering a line diff directly."""
        lines = list(UnifiedDiffRenderer(use_color=False).render(compare_texts("x", "y")))
        assert lines[-2:] == ["-x", "+y"]

    def test_colorize_raw_lines(self):
        """Test colorizing raw unified diff lines."""
        assert list(colorize_diff([" same"], use_color=True)) == [" same"]

    def test_render_changes(self):
        """Test the one-line change descriptions."""
        changes = collect_changes({"a": 1, "c": "x"}, {"a": 2, "b": True})
        lines = list(UnifiedDiffRenderer(use_color=False).render_changes(changes))
        assert lines == ["~ $.a: 1 -> 2", '- $.c: "x"', "+ $.b: true"]

    def test_render_changes_colored(self):
        """Test that change lines are colored by kind."""
        changes = collect_changes({}, {"b": 1})
        (line,) = UnifiedDiffRenderer(use_color=True).render_changes(changes)
        assert line == f"{GREEN}+ $.b: 1{RESET}"


@pytest.mark.unit
class TestJsonDiffRenderer:
    """Tests for JsonDiffRenderer."""

    def test_report_payload(self, simple_report):
        """Test the structured report payload."""
        data = json.loads(JsonDiffRenderer().render(simple_report))

        assert data["mode"] == "json"
        assert data["stats"] == {"added": 0, "removed": 0, "modified": 1, "unchanged": 0, "total": 1}
        assert data["changes"] == [{"path": "$.a", "kind": "modified", "old": 1, "new": 2}]
        assert data["options"]["ignoreKeys"] == []
        assert data["statistics"]["lines_added"] == 1
        assert data["statistics"]["lines_deleted"] == 1
        assert data["hunks"][0]["header"].startswith("@@")

    def test_compact_output(self, simple_report):
        """Test that pretty_print=False produces a single line."""
        assert "\n" not in JsonDiffRenderer(pretty_print=False).render(simple_report)

    def test_diff_result_metadata(self):
        """Test rendering a plain line diff."""
        data = json.loads(JsonDiffRenderer().render(compare_texts("a b", "a c", granularity="word")))
        assert data["granularity"] == "word"
        assert data["context_lines"] == 3
        assert data["statistics"]["total_changes"] == 2

    def test_raw_lines(self):
        """Test parsing raw unified diff lines."""
        data = json.loads(JsonDiffRenderer().render(["--- a", "+++ b", "@@ -1 +1 @@", "-x", "+y"]))
        assert data["old_file"] == "a"
        assert data["hunks"][0]["changes"] == [
            {"type": "deleted", "content": "x"},
            {"type": "added", "content": "y"},
        ]


@pytest.mark.unit
class TestHtmlDiffRenderer:
    """Tests for HtmlDiffRenderer."""

    def test_summary_and_changes(self, simple_report):
        """Test that the page has a summary, change table and line view."""
        html_output = HtmlDiffRenderer().render(simple_report)

        assert html_output.startswith("<!DOCTYPE html>")
        assert "<span class='stat stat-modified'>1 modified</span>" in html_output
        assert "<tr class='change-modified'>" in html_output
        assert "line line-added" in html_output
        assert "<style>" in html_output

    def test_escapes_content(self):
        """Test that document content is HTML-escaped."""
        report = build_report('{"a": "<b>"}', '{"a": "<i>"}', title="<Report>")
        html_output = HtmlDiffRenderer().render(report)
        assert "<b>" not in html_output
        assert "&lt;Report&gt;" in html_output

    def test_collapses_context_when_disabled(self):
        """Test that show_context=False folds unchanged lines."""
        report = build_report('{"a": 1, "b": 2, "c": 3}', '{"a": 1, "b": 5, "c": 3}')
        html_output = HtmlDiffRenderer(show_context=False).render(report)
        assert "<details class='collapsed'>" in html_output
        assert "unchanged line" in html_output

    def test_no_differences(self, unchanged_report):
        """Test the message for identical documents."""
        html_output = HtmlDiffRenderer(inline_styles=False).render(unchanged_report)
        assert "No differences found." in html_output
        assert "<style>" not in html_output


@pytest.mark.unit
class TestMarkdownDiffRenderer:
    """Tests for MarkdownDiffRenderer."""

    def test_tables_and_fenced_diff(self, simple_report):
        """Test stats table, change table and diff block."""
        markdown = MarkdownDiffRenderer().render(simple_report)

        assert markdown.startswith("# Diff Report")
        assert "| 0 | 0 | 1 | 0 | 1 |" in markdown
        assert "| `$.a` | modified | `1` | `2` |" in markdown
        assert "```diff" in markdown

    def test_without_diff_block(self, simple_report):
        """Test include_diff=False."""
        assert "```diff" not in MarkdownDiffRenderer(include_diff=False).render(simple_report)

    def test_no_differences(self, unchanged_report):
        """Test identical documents."""
        markdown = MarkdownDiffRenderer().render(unchanged_report)
        assert "No differences found." in markdown
        assert "```diff" not in markdown

    def test_pipes_escaped(self):
        """Test that pipes inside values do not break the table."""
        markdown = MarkdownDiffRenderer().render(build_report('{"a": "x|y"}', '{"a": "z"}'))
        assert '`"x\\|y"`' in markdown
