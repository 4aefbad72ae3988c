#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/report.py
"""Diff reports combining statistics, structural changes and a line view.

A report is what the renderers consume. In ``json`` mode both inputs are
parsed (JSON, YAML or XML, detected automatically), normalized and compared
structurally; the line view compares their pretty-printed JSON. In ``text``
mode the inputs are compared line by line and the statistics come from
the line operations.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Optional

from structcompare.constants import DEFAULT_CONTEXT_LINES, CompareMode
from structcompare.diff.structural import DiffChange, DiffStats, compare_values
from structcompare.diff.text_diff import DiffResult, Granularity, compare_texts
from structcompare.formats.bridge import parse_document
from structcompare.formats.json_codec import serialize_json
from structcompare.normalize import normalize
from structcompare.options import DiffOptions

logger = logging.getLogger(__name__)


@dataclass
class DiffReport:
    """Everything needed to present one comparison.

    Parameters
    ----------
    mode : {'json', 'text'}
        Comparison mode that produced the report
    stats : DiffStats
        Outcome counts
    line_diff : DiffResult
        Line-level comparison of the (processed) inputs
    changes : list of DiffChange
        Structural changes; empty in text mode
    options : DiffOptions
        Normalization options that were applied
    title : str
        Heading used by document-style renderers
    created_at : datetime
        When the report was built

    """

    mode: CompareMode
    stats: DiffStats
    line_diff: DiffResult
    changes: list[DiffChange] = field(default_factory=list)
    options: DiffOptions = field(default_factory=DiffOptions)
    processed_original: Optional[str] = None
    processed_modified: Optional[str] = None
    title: str = "Diff Report"
    created_at: datetime.datetime = field(default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))

    @property
    def original_label(self) -> str:
        """Label of the original input."""
        return self.line_diff.old_label

    @property
    def modified_label(self) -> str:
        """Label of the modified input."""
        return self.line_diff.new_label


def build_report(
    original: str,
    modified: str,
    *,
    mode: CompareMode = "json",
    options: DiffOptions | None = None,
    original_format: str | None = None,
    modified_format: str | None = None,
    original_label: str = "original",
    modified_label: str = "modified",
    context_lines: int = DEFAULT_CONTEXT_LINES,
    ignore_whitespace: bool = False,
    granularity: Granularity = "line",
    title: str = "Diff Report",
) -> DiffReport:
    """Compare two inputs and build a report.

    Parameters
    ----------
    original, modified : str
        Input texts
    mode : {'json', 'text'}
        Structural or plain-text comparison
    options : DiffOptions, optional
        Normalization for json mode
    original_format, modified_format : str, optional
        Input formats for json mode; detected when omitted

    Returns
    -------
    DiffReport
        The assembled report

    Raises
    ------
    ParsingError
        If json mode input does not parse
    FormatError
        If a format name is unsupported
    NestingDepthError
        If a document is nested too deeply

    """
    options = options or DiffOptions()

    if mode == "text":
        line_diff = compare_texts(
            original,
            modified,
            old_label=original_label,
            new_label=modified_label,
            context_lines=context_lines,
            ignore_whitespace=ignore_whitespace,
            granularity=granularity,
        )
        return DiffReport(mode="text", stats=line_diff.stats, line_diff=line_diff, options=options, title=title)

    original_value = normalize(parse_document(original, original_format), options)
    modified_value = normalize(parse_document(modified, modified_format), options)
    comparison = compare_values(original_value, modified_value, collect_changes=True)

    processed_original = serialize_json(original_value)
    processed_modified = serialize_json(modified_value)
    line_diff = compare_texts(
        processed_original,
        processed_modified,
        old_label=original_label,
        new_label=modified_label,
        context_lines=context_lines,
    )
    logger.debug("Built json report: %s", comparison.stats.to_dict())
    return DiffReport(
        mode="json",
        stats=comparison.stats,
        line_diff=line_diff,
        changes=comparison.changes,
        options=options,
        processed_original=processed_original,
        processed_modified=processed_modified,
        title=title,
    )
