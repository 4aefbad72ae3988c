#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/text_diff.py
"""Plain-text comparison using difflib.

Text mode compares documents as sequences of lines (or sentences, or
words) rather than as parsed trees. It serves input that is not
structured data, and documents whose layout matters more than their
values.
"""

from __future__ import annotations

import difflib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal, Sequence, Union

from structcompare.constants import DEFAULT_CONTEXT_LINES
from structcompare.diff.structural import DiffStats

Granularity = Literal["line", "sentence", "word"]

OpTag = Literal["replace", "delete", "insert", "equal"]


@dataclass(slots=True)
class DiffOp:
    """One opcode of a token comparison with the tokens it covers.

    ``old_range`` and ``new_range`` are half-open token index ranges.
    """

    tag: OpTag
    old_slice: Sequence[str]
    new_slice: Sequence[str]
    old_range: tuple[int, int]
    new_range: tuple[int, int]


@dataclass
class DiffResult:
    """Tokens of two texts plus what is needed to render their diff.

    Iterating yields unified diff lines. ``iter_operations`` exposes the
    matcher opcodes for renderers that lay out both sides themselves.

    Attributes
    ----------
    old_lines, new_lines : list of str
        Tokens of the original and modified text
    old_label, new_label : str
        Names shown in the ``---``/``+++`` headers
    context_lines : int
        Default context size for unified output
    granularity : {'line', 'sentence', 'word'}
        How the texts were split into tokens

    """

    old_lines: list[str]
    new_lines: list[str]
    old_label: str = "original"
    new_label: str = "modified"
    context_lines: int = DEFAULT_CONTEXT_LINES
    granularity: Granularity = "line"
    _ops: list[DiffOp] | None = field(default=None, init=False, repr=False, compare=False)

    def __iter__(self) -> Iterator[str]:
        return self.iter_unified_diff()

    def iter_unified_diff(self, context_lines: int | None = None) -> Iterator[str]:
        """Yield unified diff lines without line terminators."""
        return difflib.unified_diff(
            self.old_lines,
            self.new_lines,
            fromfile=self.old_label,
            tofile=self.new_label,
            n=self.context_lines if context_lines is None else context_lines,
            lineterm="",
        )

    def _opcodes(self) -> list[DiffOp]:
        if self._ops is None:
            matcher = difflib.SequenceMatcher(None, self.old_lines, self.new_lines, autojunk=False)
            self._ops = [
                DiffOp(tag, self.old_lines[i1:i2], self.new_lines[j1:j2], (i1, i2), (j1, j2))
                for tag, i1, i2, j1, j2 in matcher.get_opcodes()
            ]
        return self._ops

    def iter_operations(self) -> Iterator[DiffOp]:
        """Yield the comparison opcodes in order, computed once."""
        return iter(self._opcodes())

    @property
    def stats(self) -> DiffStats:
        """Token outcome counts, see ``text_diff_stats``."""
        return text_diff_stats(self)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    return re.sub(r"\s+", " ", text).strip()


_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_WORD_SPLIT_RE = re.compile(r"\S+")


def tokenize_text(text: str, granularity: Granularity = "line", ignore_whitespace: bool = False) -> list[str]:
    """Split text into the units compared in text mode.

    Parameters
    ----------
    text : str
        Text to split
    granularity : {'line', 'sentence', 'word'}
        Unit of comparison
    ignore_whitespace : bool
        Normalize whitespace inside each line before comparing

    Raises
    ------
    ValueError
        If the granularity is not supported

    """
    if not text:
        return []

    if granularity == "line":
        lines = text.splitlines()
        if ignore_whitespace:
            return [normalize_whitespace(line) for line in lines]
        return lines

    if granularity == "sentence":
        source = normalize_whitespace(text) if ignore_whitespace else text
        sentences = [segment.strip() for segment in _SENTENCE_SPLIT_RE.split(source) if segment.strip()]
        return sentences or [source.strip()]

    if granularity == "word":
        return _WORD_SPLIT_RE.findall(text)

    raise ValueError(f"Unsupported granularity: {granularity}")


def text_diff_stats(result: DiffResult) -> DiffStats:
    """Classify the tokens of a text comparison.

    Equal tokens are unchanged, inserted tokens added and deleted tokens
    removed. A replaced block counts its paired tokens as modified and the
    excess on either side as added or removed.
    """
    added = removed = modified = unchanged = 0
    for op in result.iter_operations():
        old_count = len(op.old_slice)
        new_count = len(op.new_slice)
        if op.tag == "equal":
            unchanged += old_count
        elif op.tag == "insert":
            added += new_count
        elif op.tag == "delete":
            removed += old_count
        else:
            paired = min(old_count, new_count)
            modified += paired
            added += new_count - paired
            removed += old_count - paired
    return DiffStats(added=added, removed=removed, modified=modified, unchanged=unchanged)


def compare_texts(
    old_text: str,
    new_text: str,
    old_label: str = "original",
    new_label: str = "modified",
    context_lines: int = DEFAULT_CONTEXT_LINES,
    ignore_whitespace: bool = False,
    granularity: Granularity = "line",
) -> DiffResult:
    """Compare two texts and return a diff result.

    Comparing A to B gives the mirror image of comparing B to A, with
    additions and deletions swapped.

    Parameters
    ----------
    old_text : str
        Original text
    new_text : str
        Modified text
    old_label : str, default = "original"
        Label for the original text in diff headers
    new_label : str, default = "modified"
        Label for the modified text in diff headers
    context_lines : int, default = 3
        Number of context lines to show around changes
    ignore_whitespace : bool, default = False
        If True, normalize whitespace before comparison
    granularity : {'line', 'sentence', 'word'}, default = 'line'
        Unit of comparison

    Returns
    -------
    DiffResult
        Diff result encapsulating sequences and render helpers

    """
    return DiffResult(
        tokenize_text(old_text, granularity, ignore_whitespace),
        tokenize_text(new_text, granularity, ignore_whitespace),
        old_label=old_label,
        new_label=new_label,
        context_lines=context_lines,
        granularity=granularity,
    )


def compare_files(
    old_path: Union[str, Path],
    new_path: Union[str, Path],
    old_label: str | None = None,
    new_label: str | None = None,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    ignore_whitespace: bool = False,
    granularity: Granularity = "line",
) -> DiffResult:
    """Compare two UTF-8 text files.

    Labels default to the file paths.
    """
    old_path = Path(old_path)
    new_path = Path(new_path)
    return compare_texts(
        old_path.read_text(encoding="utf-8"),
        new_path.read_text(encoding="utf-8"),
        old_label=str(old_path) if old_label is None else old_label,
        new_label=str(new_path) if new_label is None else new_label,
        context_lines=context_lines,
        ignore_whitespace=ignore_whitespace,
        granularity=granularity,
    )
