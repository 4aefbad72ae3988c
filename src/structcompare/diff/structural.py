#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/diff/structural.py
"""Recursive structural comparison of document values.

The comparison walks two document trees side by side. The first argument
is always the original document and the second the modified one. Every
leaf comparison yields exactly one outcome:

- ``unchanged``: both null, or equal primitives
- ``added``: present only in the modified document
- ``removed``: present only in the original document
- ``modified``: different primitives, or different kinds (a bare kind
  mismatch is one unit and is not decomposed further)

Objects are matched by key over the union of both key sets; arrays are
matched by position. Containers contribute nothing themselves; their
counts are the sum of their children's outcomes.

Examples
--------
>>> compare_values({"name": "John", "age": 30}, {"name": "John", "age": 31}).stats.to_dict()
{'added': 0, 'removed': 0, 'modified': 1, 'unchanged': 1, 'total': 2}

"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from structcompare.constants import DEFAULT_MAX_NESTING_DEPTH
from structcompare.exceptions import NestingDepthError, ParsingError
from structcompare.formats.json_codec import parse_json
from structcompare.options import DiffOptions
from structcompare.normalize import normalize
from structcompare.values import PRIMITIVE_KINDS, Value, ValueKind, check_depth, kind_of

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class ChangeKind(str, Enum):
    """Classification of a single comparison outcome."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffStats:
    """Counts of comparison outcomes.

    ``total`` always equals the sum of the four counters.
    """

    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        """Number of outcomes of any kind."""
        return self.added + self.removed + self.modified + self.unchanged

    @property
    def difference_count(self) -> int:
        """Number of outcomes that are not ``unchanged``."""
        return self.added + self.removed + self.modified

    @property
    def has_changes(self) -> bool:
        """Whether any outcome is a difference."""
        return self.difference_count > 0

    def to_dict(self) -> dict[str, int]:
        """Return the counters including ``total``."""
        return {
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
            "total": self.total,
        }


@dataclass(frozen=True)
class DiffChange:
    """One non-unchanged outcome and where it happened.

    Parameters
    ----------
    path : str
        Location in JSONPath-like notation, e.g. ``$.users[0].name``
    kind : ChangeKind
        Outcome classification
    old : Value
        Value in the original document (``None`` when added)
    new : Value
        Value in the modified document (``None`` when removed)

    """

    path: str
    kind: ChangeKind
    old: Value = None
    new: Value = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        result: dict[str, Any] = {"path": self.path, "kind": self.kind.value}
        if self.kind is not ChangeKind.ADDED:
            result["old"] = self.old
        if self.kind is not ChangeKind.REMOVED:
            result["new"] = self.new
        return result


@dataclass(frozen=True)
class ComparisonResult:
    """Statistics of a comparison plus, when requested, the change list."""

    stats: DiffStats
    changes: list[DiffChange] = field(default_factory=list)


def _child_path(path: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    if _IDENTIFIER_RE.match(key):
        return f"{path}.{key}"
    return f"{path}[{json.dumps(key, ensure_ascii=False)}]"


class StructuralComparator:
    """Recursive comparator accumulating outcome counts.

    An instance holds the counters for one comparison; use
    ``compare_values`` unless you need to drive it directly.

    Parameters
    ----------
    collect_changes : bool, default False
        Record a ``DiffChange`` for every non-unchanged outcome
    max_depth : int
        Nesting bound; deeper documents raise ``NestingDepthError``

    """

    def __init__(self, collect_changes: bool = False, max_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        """Initialize empty counters."""
        self.collect_changes = collect_changes
        self.max_depth = max_depth
        self._counts = {kind: 0 for kind in ChangeKind}
        self._changes: list[DiffChange] = []

    def _record(self, kind: ChangeKind, path: str, old: Value, new: Value) -> None:
        self._counts[kind] += 1
        if self.collect_changes and kind is not ChangeKind.UNCHANGED:
            self._changes.append(DiffChange(path=path, kind=kind, old=old, new=new))

    def compare(self, original: Value, modified: Value, path: str = "$", depth: int = 0) -> None:
        """Compare two values and accumulate their outcomes."""
        check_depth(depth, self.max_depth)
        original_kind = kind_of(original)
        modified_kind = kind_of(modified)

        if original_kind is ValueKind.NULL and modified_kind is ValueKind.NULL:
            self._record(ChangeKind.UNCHANGED, path, original, modified)
            return
        if original_kind is ValueKind.NULL:
            self._record(ChangeKind.ADDED, path, None, modified)
            return
        if modified_kind is ValueKind.NULL:
            self._record(ChangeKind.REMOVED, path, original, None)
            return
        if original_kind is not modified_kind:
            self._record(ChangeKind.MODIFIED, path, original, modified)
            return

        if original_kind in PRIMITIVE_KINDS:
            # NaN != NaN, so a NaN leaf is always modified
            kind = ChangeKind.UNCHANGED if original == modified else ChangeKind.MODIFIED
            self._record(kind, path, original, modified)
            return

        if original_kind is ValueKind.ARRAY:
            self._compare_arrays(original, modified, path, depth)  # type: ignore[arg-type]
        else:
            self._compare_objects(original, modified, path, depth)  # type: ignore[arg-type]

    def _compare_arrays(self, original: list, modified: list, path: str, depth: int) -> None:
        for index in range(max(len(original), len(modified))):
            child_path = _child_path(path, index)
            if index >= len(original):
                self._record(ChangeKind.ADDED, child_path, None, modified[index])
            elif index >= len(modified):
                self._record(ChangeKind.REMOVED, child_path, original[index], None)
            else:
                self.compare(original[index], modified[index], child_path, depth + 1)

    def _compare_objects(self, original: dict, modified: dict, path: str, depth: int) -> None:
        # Union of keys: original order first, then keys new in modified
        keys = list(original) + [k for k in modified if k not in original]
        for key in keys:
            child_path = _child_path(path, key)
            if key not in original:
                self._record(ChangeKind.ADDED, child_path, None, modified[key])
            elif key not in modified:
                self._record(ChangeKind.REMOVED, child_path, original[key], None)
            else:
                self.compare(original[key], modified[key], child_path, depth + 1)

    def result(self) -> ComparisonResult:
        """Return the accumulated statistics and changes."""
        stats = DiffStats(
            added=self._counts[ChangeKind.ADDED],
            removed=self._counts[ChangeKind.REMOVED],
            modified=self._counts[ChangeKind.MODIFIED],
            unchanged=self._counts[ChangeKind.UNCHANGED],
        )
        return ComparisonResult(stats=stats, changes=list(self._changes))


def compare_values(
    original: Value,
    modified: Value,
    collect_changes: bool = False,
    max_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> ComparisonResult:
    """Compare two document values.

    Parameters
    ----------
    original : Value
        The original document
    modified : Value
        The modified document
    collect_changes : bool, default False
        Also return a list of every non-unchanged outcome
    max_depth : int
        Nesting bound

    Returns
    -------
    ComparisonResult
        Outcome counts and, optionally, the change list

    Raises
    ------
    NestingDepthError
        If either document is nested deeper than ``max_depth``

    """
    comparator = StructuralComparator(collect_changes=collect_changes, max_depth=max_depth)
    comparator.compare(original, modified)
    return comparator.result()


def collect_changes(original: Value, modified: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> list[DiffChange]:
    """Return every added, removed and modified outcome with its path."""
    return compare_values(original, modified, collect_changes=True, max_depth=max_depth).changes


def count_value_differences(original: Value, modified: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> int:
    """Return ``added + removed + modified`` for two document values."""
    return compare_values(original, modified, max_depth=max_depth).stats.difference_count


def diff_stats(original_text: str, modified_text: str, options: Optional[DiffOptions] = None) -> DiffStats:
    """Compare two JSON texts and classify every outcome.

    Input that does not parse, or that is nested deeper than the depth
    bound, yields all-zero statistics instead of an error, so editors can
    call this on every keystroke.

    Parameters
    ----------
    original_text : str
        Original JSON text
    modified_text : str
        Modified JSON text
    options : DiffOptions, optional
        Normalization applied to both documents first

    Returns
    -------
    DiffStats
        Outcome counts, all zero when either text is malformed or too deep

    """
    try:
        original = normalize(parse_json(original_text), options)
        modified = normalize(parse_json(modified_text), options)
        return compare_values(original, modified).stats
    except (ParsingError, NestingDepthError) as e:
        logger.debug("Skipping comparison of unusable input: %s", e)
        return DiffStats()


def count_differences(original_text: str, modified_text: str, options: Optional[DiffOptions] = None) -> int:
    """Count the differences between two JSON texts.

    Equal to ``diff_stats(...).difference_count``; malformed or too deeply
    nested input counts as zero differences.
    """
    return diff_stats(original_text, modified_text, options).difference_count
