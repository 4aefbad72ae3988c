#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/renderers/unified.py
"""Unified diff and change-list renderer with optional ANSI colors."""

from __future__ import annotations

import json
from typing import Iterable, Iterator, Union

from structcompare.diff.report import DiffReport
from structcompare.diff.structural import ChangeKind, DiffChange
from structcompare.diff.text_diff import DiffResult

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
BOLD = "\033[1m"
RESET = "\033[0m"

_CHANGE_MARKERS = {
    ChangeKind.ADDED: ("+", GREEN),
    ChangeKind.REMOVED: ("-", RED),
    ChangeKind.MODIFIED: ("~", YELLOW),
}


def _short(value: object) -> str:
    return json.dumps(value, ensure_ascii=False)


class UnifiedDiffRenderer:
    """Render unified diffs and structural change lists for the terminal.

    Colors:
    - Red for deletions (lines starting with -)
    - Green for additions (lines starting with +)
    - Yellow for modified values (change lists only)
    - Cyan for hunk headers (lines starting with @@)
    - Bold for file headers (lines starting with --- or +++)

    Parameters
    ----------
    use_color : bool, default = True
        If True, add ANSI color codes to output
    context_lines : int, default = 3
        Number of context lines used when rendering a report

    """

    def __init__(
        self,
        use_color: bool = True,
        context_lines: int = 3,
    ):
        """Initialize the unified diff renderer."""
        self.use_color = use_color
        self.context_lines = context_lines

    def render(self, diff: Union[DiffReport, DiffResult, Iterable[str]]) -> Iterator[str]:
        """Render unified diff lines with optional colors.

        Parameters
        ----------
        diff : DiffReport, DiffResult or iterable of str
            Report, line diff, or raw unified diff lines

        Yields
        ------
        str
            Colorized diff lines (or original lines if color disabled)

        """
        if isinstance(diff, DiffReport):
            lines: Iterable[str] = diff.line_diff.iter_unified_diff(self.context_lines)
        elif isinstance(diff, DiffResult):
            lines = diff.iter_unified_diff(self.context_lines)
        else:
            lines = diff

        if not self.use_color:
            yield from lines
            return

        for line in lines:
            if line.startswith("---") or line.startswith("+++"):
                yield f"{BOLD}{line}{RESET}"
            elif line.startswith("@@"):
                yield f"{CYAN}{line}{RESET}"
            elif line.startswith("+"):
                yield f"{GREEN}{line}{RESET}"
            elif line.startswith("-"):
                yield f"{RED}{line}{RESET}"
            else:
                yield line

    def render_changes(self, changes: Iterable[DiffChange]) -> Iterator[str]:
        """Render structural changes, one per line.

        Yields
        ------
        str
            ``+ $.path: value``, ``- $.path: value`` or ``~ $.path: old -> new``

        """
        for change in changes:
            marker, color = _CHANGE_MARKERS[change.kind]
            if change.kind is ChangeKind.ADDED:
                text = f"{marker} {change.path}: {_short(change.new)}"
            elif change.kind is ChangeKind.REMOVED:
                text = f"{marker} {change.path}: {_short(change.old)}"
            else:
                text = f"{marker} {change.path}: {_short(change.old)} -> {_short(change.new)}"
            yield f"{color}{text}{RESET}" if self.use_color else text


def colorize_diff(diff_lines: Iterable[str], use_color: bool = True) -> Iterator[str]:
    """Colorize unified diff output."""
    renderer = UnifiedDiffRenderer(use_color=use_color)
    yield from renderer.render(diff_lines)
