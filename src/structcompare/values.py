#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/values.py
"""Document value model.

A document is held as plain Python JSON values: ``None``, ``bool``, ``int``,
``float``, ``str``, ``list`` and ``dict`` with string keys. ``ValueKind``
names the six cases and ``kind_of`` is the one classifier every tree walk
dispatches on, so the set of cases stays closed.

Notes
-----
``bool`` is a subclass of ``int`` in Python, so ``kind_of`` checks it first.
``int`` and ``float`` share the NUMBER kind.

"""

from __future__ import annotations

import datetime
import json
import math
from enum import Enum
from typing import Any, Union

from structcompare.constants import DEFAULT_MAX_NESTING_DEPTH
from structcompare.exceptions import NestingDepthError

Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]


class ValueKind(str, Enum):
    """Closed set of document value kinds."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


PRIMITIVE_KINDS = frozenset({ValueKind.NULL, ValueKind.BOOLEAN, ValueKind.NUMBER, ValueKind.STRING})


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its ``ValueKind``.

    Parameters
    ----------
    value : Any
        A document value

    Returns
    -------
    ValueKind
        The kind of the value

    Raises
    ------
    TypeError
        If the value is not one of the document value types

    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    raise TypeError(f"Unsupported document value type: {type(value).__name__}")


def is_container(value: Any) -> bool:
    """Return True for objects and arrays."""
    return kind_of(value) in (ValueKind.OBJECT, ValueKind.ARRAY)


def is_nan(value: Any) -> bool:
    """Return True if the value is a float NaN."""
    return isinstance(value, float) and math.isnan(value)


def check_depth(depth: int, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> None:
    """Raise ``NestingDepthError`` when ``depth`` exceeds ``max_depth``."""
    if depth > max_depth:
        raise NestingDepthError(max_depth)


def canonical_json(value: Value) -> str:
    """Serialize a value to compact JSON with sorted keys.

    Two values that are equal as documents serialize to the same text,
    whatever the insertion order of their keys.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _key_text(key: Any) -> str:
    # Mapping keys follow JSON spelling for the scalar cases YAML allows
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (datetime.date, datetime.datetime)):
        return key.isoformat()
    return str(key)


def coerce_value(obj: Any, _depth: int = 0, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> Value:
    """Convert parser output into a document value.

    YAML can produce dates, datetimes, sets, bytes and non-string keys;
    these are mapped onto the document value types.

    Parameters
    ----------
    obj : Any
        Parser output
    max_depth : int
        Nesting bound

    Returns
    -------
    Value
        Plain document value

    Raises
    ------
    TypeError
        If the object cannot be represented as a document value
    NestingDepthError
        If the object is nested beyond ``max_depth``

    """
    check_depth(_depth, max_depth)

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, dict):
        return {_key_text(k): coerce_value(v, _depth + 1, max_depth) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [coerce_value(item, _depth + 1, max_depth) for item in obj]
    if isinstance(obj, (set, frozenset)):
        items = [coerce_value(item, _depth + 1, max_depth) for item in obj]
        return sorted(items, key=canonical_json)
    if isinstance(obj, (datetime.date, datetime.datetime)):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    raise TypeError(f"Cannot represent {type(obj).__name__} as a document value")


def type_name(value: Any) -> str:
    """Return a short type label used in previews and summaries."""
    return kind_of(value).value
