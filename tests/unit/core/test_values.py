#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the document value model in values.py."""

import datetime
import math

import pytest

from structcompare.exceptions import NestingDepthError
from structcompare.values import (
    ValueKind,
    canonical_json,
    check_depth,
    coerce_value,
    is_container,
    is_nan,
    kind_of,
    type_name,
)


@pytest.mark.unit
class TestKindOf:
    """Tests for kind_of classification."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ValueKind.NULL),
            (True, ValueKind.BOOLEAN),
            (False, ValueKind.BOOLEAN),
            (0, ValueKind.NUMBER),
            (1.5, ValueKind.NUMBER),
            ("", ValueKind.STRING),
            ({}, ValueKind.OBJECT),
            ([], ValueKind.ARRAY),
        ],
    )
    def test_kinds(self, value, expected):
        """Test each value type maps to its kind."""
        assert kind_of(value) is expected

    def test_bool_is_not_number(self):
        """Test that booleans are not classified as numbers."""
        assert kind_of(True) is not ValueKind.NUMBER

    def test_unsupported_type_raises(self):
        """Test that non-document types are rejected."""
        with pytest.raises(TypeError, match="Unsupported"):
            kind_of(object())

    def test_type_name_uses_kind_value(self):
        """Test type_name returns the kind label."""
        assert type_name([1]) == "array"
        assert type_name(None) == "null"

    def test_is_container(self):
        """Test container detection."""
        assert is_container({}) is True
        assert is_container([]) is True
        assert is_container("x") is False

    def test_is_nan(self):
        """Test NaN detection only for floats."""
        assert is_nan(float("nan")) is True
        assert is_nan(1.0) is False
        assert is_nan("nan") is False


@pytest.mark.unit
class TestDepthAndCanonical:
    """Tests for check_depth and canonical_json."""

    def test_check_depth_within_bound(self):
        """Test depth equal to the bound is allowed."""
        check_depth(5, max_depth=5)

    def test_check_depth_exceeded(self):
        """Test depth above the bound raises NestingDepthError."""
        with pytest.raises(NestingDepthError) as exc_info:
            check_depth(6, max_depth=5)
        assert exc_info.value.max_depth == 5

    def test_canonical_json_ignores_key_order(self):
        """Test that key order does not affect canonical text."""
        assert canonical_json({"b": 1, "a": 2}) == canonical_json({"a": 2, "b": 1})
        assert canonical_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_canonical_json_keeps_unicode(self):
        """Test that non-ASCII text is not escaped."""
        assert canonical_json(["é"]) == '["é"]'


@pytest.mark.unit
class TestCoerceValue:
    """Tests for coerce_value conversion of parser output."""

    def test_plain_values_pass_through(self):
        """Test that JSON values are returned as-is."""
        value = {"a": [1, 2.5, "x", None, True]}
        assert coerce_value(value) == value

    def test_dates_become_iso_strings(self):
        """Test date and datetime conversion."""
        assert coerce_value(datetime.date(2024, 1, 2)) == "2024-01-02"
        assert coerce_value(datetime.datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"

    def test_non_string_keys(self):
        """Test that mapping keys are converted to JSON spellings."""
        assert coerce_value({2: "a", True: "b", None: "c"}) == {"2": "a", "true": "b", "null": "c"}

    def test_sets_become_sorted_lists(self):
        """Test that sets are converted into a deterministic list."""
        assert coerce_value({3, 1, 2}) == [1, 2, 3]

    def test_tuples_and_bytes(self):
        """Test tuple and bytes conversion."""
        assert coerce_value((1, b"ab")) == [1, "ab"]

    def test_nan_is_preserved(self):
        """Test that NaN floats survive coercion."""
        assert math.isnan(coerce_value(float("nan")))

    def test_unknown_type_raises(self):
        """Test that unrepresentable objects raise TypeError."""
        with pytest.raises(TypeError):
            coerce_value(object())

    def test_depth_bound(self):
        """Test that deeply nested input raises NestingDepthError."""
        value: list = []
        for _ in range(10):
            value = [value]
        with pytest.raises(NestingDepthError):
            coerce_value(value, max_depth=5)
