#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/normalize.py
"""Pre-comparison normalization of document values.

Three transforms rebuild a document tree without mutating the input:

- ``remove_keys`` prunes ignored key names at every depth
- ``sort_arrays`` puts every array into a canonical order
- ``sort_object_keys`` reorders object keys by code point

``normalize`` applies them in that order, so removed keys never take part
in array ordering. Normalizing twice gives the same result as normalizing
once.
"""

from __future__ import annotations

import json
import logging
import math
from typing import AbstractSet

from structcompare.constants import DEFAULT_JSON_INDENT, DEFAULT_MAX_NESTING_DEPTH
from structcompare.exceptions import ParsingError
from structcompare.formats.json_codec import parse_json
from structcompare.options import DiffOptions
from structcompare.values import Value, ValueKind, canonical_json, check_depth, kind_of

logger = logging.getLogger(__name__)

# Tie-breaking rank for mixed primitive arrays whose string forms collide
_KIND_RANK = {
    ValueKind.NULL: 0,
    ValueKind.BOOLEAN: 1,
    ValueKind.NUMBER: 2,
    ValueKind.STRING: 3,
}


def remove_keys(
    value: Value, keys: AbstractSet[str], max_depth: int = DEFAULT_MAX_NESTING_DEPTH, _depth: int = 0
) -> Value:
    """Return a copy of ``value`` with every key in ``keys`` removed at any depth."""
    check_depth(_depth, max_depth)
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        return {
            k: remove_keys(v, keys, max_depth, _depth + 1)
            for k, v in value.items()  # type: ignore[union-attr]
            if k not in keys
        }
    if kind is ValueKind.ARRAY:
        return [remove_keys(item, keys, max_depth, _depth + 1) for item in value]  # type: ignore[union-attr]
    return value


def sort_object_keys(value: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH, _depth: int = 0) -> Value:
    """Return a copy of ``value`` with object keys in ascending code-point order.

    Arrays keep their element order; object elements inside them are sorted.
    """
    check_depth(_depth, max_depth)
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        return {k: sort_object_keys(value[k], max_depth, _depth + 1) for k in sorted(value)}  # type: ignore[index]
    if kind is ValueKind.ARRAY:
        return [sort_object_keys(item, max_depth, _depth + 1) for item in value]  # type: ignore[union-attr]
    return value


def _primitive_text(value: Value) -> str:
    """String form of a primitive, as used for mixed-type ordering."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _number_key(value: float) -> tuple[int, float]:
    # NaN sorts last so ordering stays total
    if math.isnan(value):
        return (1, 0.0)
    return (0, value)


def _sort_primitives(items: list[Value]) -> list[Value]:
    kinds = {kind_of(item) for item in items}
    if kinds == {ValueKind.NUMBER}:
        return sorted(items, key=_number_key)  # type: ignore[arg-type]
    if kinds == {ValueKind.STRING}:
        return sorted(items)  # type: ignore[type-var]
    return sorted(items, key=lambda item: (_primitive_text(item), _KIND_RANK[kind_of(item)]))


def sort_arrays(value: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH, _depth: int = 0) -> Value:
    """Return a copy of ``value`` with every array in canonical order.

    Nested arrays are sorted first. An array of primitives is sorted
    numerically when all elements are numbers, lexicographically when all
    are strings, and by string form otherwise. Any array holding an object
    or array is sorted by each element's canonical JSON text, which makes
    two arrays holding the same elements in different orders equal.
    """
    check_depth(_depth, max_depth)
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        return {k: sort_arrays(v, max_depth, _depth + 1) for k, v in value.items()}  # type: ignore[union-attr]
    if kind is not ValueKind.ARRAY:
        return value

    items = [sort_arrays(item, max_depth, _depth + 1) for item in value]  # type: ignore[union-attr]
    if not items:
        return items
    if all(kind_of(item) not in (ValueKind.OBJECT, ValueKind.ARRAY) for item in items):
        return _sort_primitives(items)
    return sorted(items, key=canonical_json)


def normalize(value: Value, options: DiffOptions | None = None, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> Value:
    """Apply the configured transforms to a document value.

    Parameters
    ----------
    value : Value
        Parsed document
    options : DiffOptions, optional
        Transforms to apply; defaults leave the value unchanged
    max_depth : int
        Nesting bound

    Returns
    -------
    Value
        A new normalized value; the input is not modified

    Raises
    ------
    NestingDepthError
        If the document is nested deeper than ``max_depth``

    """
    if options is None or options.is_default:
        check_depth(0, max_depth)
        return value

    result = value
    if options.ignore_keys:
        result = remove_keys(result, options.ignore_keys, max_depth)
    if options.ignore_array_order:
        result = sort_arrays(result, max_depth)
    if options.sorts_keys:
        result = sort_object_keys(result, max_depth)
    logger.debug(
        "Normalized document (ignore_keys=%d, sort_arrays=%s, sort_keys=%s)",
        len(options.ignore_keys),
        options.ignore_array_order,
        options.sorts_keys,
    )
    return result


def normalize_text(text: str, options: DiffOptions | None = None, indent: int = DEFAULT_JSON_INDENT) -> str:
    """Normalize JSON text and return it pretty-printed.

    Unparseable input is returned unchanged so that live editors can keep
    showing what the user typed.

    Parameters
    ----------
    text : str
        JSON document text
    options : DiffOptions, optional
        Transforms to apply
    indent : int
        Indentation of the output

    Returns
    -------
    str
        Normalized JSON text, or the input if it does not parse

    """
    try:
        value = parse_json(text)
    except ParsingError:
        return text
    return json.dumps(normalize(value, options), indent=indent, ensure_ascii=False)
