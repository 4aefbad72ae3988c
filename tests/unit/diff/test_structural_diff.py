#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for diff/structural.py recursive comparison."""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from structcompare.diff.structural import (
    ChangeKind,
    DiffStats,
    StructuralComparator,
    collect_changes,
    compare_values,
    count_differences,
    count_value_differences,
    diff_stats,
)
from structcompare.exceptions import NestingDepthError
from structcompare.options import DiffOptions

json_values = st.recursive(
    st.none() | st.booleans() | st.integers(-100, 100) | st.text(max_size=4),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=3), children, max_size=4),
    max_leaves=15,
)


def _stats(original, modified) -> dict:
    return compare_values(original, modified).stats.to_dict()


@pytest.mark.unit
class TestCompareValues:
    """Tests for compare_values outcome classification."""

    def test_single_modified_value(self):
        """Test one changed value among unchanged ones."""
        stats = compare_values({"name": "John", "age": 30}, {"name": "John", "age": 31}).stats
        assert (stats.added, stats.removed, stats.modified, stats.unchanged) == (0, 0, 1, 1)

    def test_added_key(self):
        """Test a key present only in the modified document."""
        assert _stats({"a": 1}, {"a": 1, "b": 2}) == {
            "added": 1,
            "removed": 0,
            "modified": 0,
            "unchanged": 1,
            "total": 2,
        }

    def test_removed_key(self):
        """Test a key present only in the original document."""
        stats = compare_values({"a": 1, "b": 2}, {"a": 1}).stats
        assert stats.removed == 1
        assert stats.added == 0

    def test_direction_matters(self):
        """Test that swapping arguments swaps added and removed."""
        forward = compare_values([1], [1, 2]).stats
        backward = compare_values([1, 2], [1]).stats
        assert forward.added == backward.removed == 1
        assert forward.removed == backward.added == 0

    def test_null_to_value_is_added(self):
        """Test that null in the original counts as absent."""
        assert compare_values({"a": None}, {"a": 5}).stats.added == 1

    def test_value_to_null_is_removed(self):
        """Test that null in the modified document counts as absent."""
        assert compare_values({"a": 5}, {"a": None}).stats.removed == 1

    def test_both_null_unchanged(self):
        """Test that two nulls are unchanged."""
        assert compare_values(None, None).stats.unchanged == 1

    def test_kind_mismatch_is_one_modification(self):
        """Test that a kind change is a single unit, not decomposed."""
        stats = compare_values({"a": {"x": 1, "y": 2}}, {"a": [1, 2, 3]}).stats
        assert stats.modified == 1
        assert stats.total == 1

    def test_bool_and_number_differ(self):
        """Test that true and 1 are different kinds."""
        assert compare_values(True, 1).stats.modified == 1

    def test_int_and_float_equal(self):
        """Test that 1 and 1.0 compare equal."""
        assert compare_values(1, 1.0).stats.unchanged == 1

    def test_nan_is_modified(self):
        """Test that NaN never equals itself."""
        assert compare_values(float("nan"), float("nan")).stats.modified == 1

    def test_arrays_positional(self):
        """Test that arrays are compared by index."""
        stats = compare_values([1, 2, 3], [3, 2, 1]).stats
        assert (stats.modified, stats.unchanged) == (2, 1)

    def test_empty_containers_contribute_nothing(self):
        """Test that empty containers have no outcomes."""
        assert compare_values({}, {}).stats.total == 0
        assert compare_values([], []).stats.total == 0

    def test_nested_counts_sum_children(self):
        """Test that containers count only their leaves."""
        original = {"user": {"name": "a", "tags": ["x", "y"]}}
        modified = {"user": {"name": "b", "tags": ["x"], "age": 3}}
        assert _stats(original, modified) == {"added": 1, "removed": 1, "modified": 1, "unchanged": 1, "total": 4}

    def test_depth_bound(self):
        """Test that overly deep documents raise NestingDepthError."""
        value: list = [1]
        for _ in range(30):
            value = [value]
        with pytest.raises(NestingDepthError):
            compare_values(value, value, max_depth=10)


@pytest.mark.unit
class TestCollectChanges:
    """Tests for change collection and paths."""

    def test_paths_and_kinds(self):
        """Test that each change carries its path and kind."""
        changes = collect_changes({"a": 1, "list": [1, 2]}, {"a": 2, "list": [1], "new": True})
        assert [(c.path, c.kind) for c in changes] == [
            ("$.a", ChangeKind.MODIFIED),
            ("$.list[1]", ChangeKind.REMOVED),
            ("$.new", ChangeKind.ADDED),
        ]

    def test_odd_keys_are_quoted(self):
        """Test that non-identifier keys use bracket notation."""
        changes = collect_changes({"my key": 1}, {"my key": 2})
        assert changes[0].path == '$["my key"]'

    def test_change_values(self):
        """Test old and new values on a modification."""
        (change,) = collect_changes({"a": "x"}, {"a": "y"})
        assert change.old == "x"
        assert change.new == "y"
        assert change.to_dict() == {"path": "$.a", "kind": "modified", "old": "x", "new": "y"}

    def test_to_dict_omits_missing_side(self):
        """Test that added changes have no old value and removed ones no new value."""
        added, removed = collect_changes({"r": 1}, {"a": 2})[::-1]
        assert "old" not in added.to_dict()
        assert "new" not in removed.to_dict()

    def test_unchanged_not_collected(self):
        """Test that unchanged outcomes are not listed."""
        assert collect_changes({"a": 1}, {"a": 1}) == []

    def test_comparator_without_collection(self):
        """Test that a comparator collects nothing unless asked to."""
        comparator = StructuralComparator()
        comparator.compare({"a": 1}, {"a": 2})
        result = comparator.result()
        assert result.stats.modified == 1
        assert result.changes == []


@pytest.mark.unit
class TestTextHelpers:
    """Tests for the fail-soft text wrappers."""

    def test_count_differences(self):
        """Test counting differences between JSON texts."""
        assert count_differences('{"a": 1, "b": 2}', '{"a": 1, "b": 3, "c": 4}') == 2

    def test_malformed_input_counts_zero(self):
        """Test that malformed input yields no differences."""
        assert count_differences('{"a": ', '{"a": 1}') == 0
        assert diff_stats("not json", "[]") == DiffStats()

    def test_empty_text_counts_zero(self):
        """Test that empty text is treated as malformed."""
        assert diff_stats("", "") == DiffStats()

    def test_too_deeply_nested_counts_zero(self):
        """Test that documents past the depth bound yield no differences."""
        deep = "[" * 300 + "]" * 300
        assert diff_stats(deep, deep) == DiffStats()
        assert count_differences(deep, "[1]") == 0

    def test_too_deeply_nested_with_normalization(self):
        """Test that a depth failure during normalization is also fail-soft."""
        deep = '{"a": ' * 300 + "1" + "}" * 300
        assert diff_stats(deep, "{}", DiffOptions(sort_keys=True, ignore_keys=frozenset({"b"}))) == DiffStats()

    def test_options_applied(self, api_options):
        """Test that normalization options are applied before comparison."""
        original = '{"id": 1, "name": "a", "updatedAt": "x"}'
        modified = '{"name": "a", "id": 2, "updatedAt": "y"}'
        assert count_differences(original, modified) == 2
        assert count_differences(original, modified, api_options) == 0

    def test_ignore_array_order(self):
        """Test that reordered arrays compare equal when array order is ignored."""
        options = DiffOptions(ignore_array_order=True)
        assert count_differences("[3, 1, 2]", "[1, 2, 3]", options) == 0

    def test_stats_properties(self):
        """Test DiffStats derived properties."""
        stats = DiffStats(added=1, removed=2, modified=3, unchanged=4)
        assert stats.total == 10
        assert stats.difference_count == 6
        assert stats.has_changes is True
        assert DiffStats(unchanged=3).has_changes is False


@pytest.mark.unit
@pytest.mark.fuzzing
class TestStructuralProperties:
    """Property-based tests of comparison invariants."""

    @given(json_values)
    def test_self_comparison_has_no_differences(self, value):
        """Test that a document compared with itself has no differences."""
        assert count_value_differences(value, value) == 0

    @given(json_values, json_values)
    def test_swap_mirrors_added_and_removed(self, original, modified):
        """Test that swapping inputs swaps added and removed counts."""
        forward = compare_values(original, modified).stats
        backward = compare_values(modified, original).stats
        assert forward.added == backward.removed
        assert forward.removed == backward.added
        assert forward.modified == backward.modified
        assert forward.unchanged == backward.unchanged

    @given(json_values, json_values)
    def test_count_matches_stats(self, original, modified):
        """Test that count_differences equals added + removed + modified."""
        original_text, modified_text = json.dumps(original), json.dumps(modified)
        stats = diff_stats(original_text, modified_text)
        assert count_differences(original_text, modified_text) == stats.added + stats.removed + stats.modified

    @given(json_values)
    def test_ignored_keys_never_counted(self, value):
        """Test that changing only ignored keys yields no differences."""
        original = {"payload": value, "ts": 1}
        modified = {"payload": value, "ts": 2}
        options = DiffOptions(ignore_keys=frozenset({"ts"}))
        assert count_differences(json.dumps(original), json.dumps(modified), options) == 0
