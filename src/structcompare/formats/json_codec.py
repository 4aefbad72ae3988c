#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/formats/json_codec.py
"""Strict JSON parsing and serialization."""

from __future__ import annotations

import json
import logging

from structcompare.constants import DEFAULT_JSON_INDENT
from structcompare.exceptions import ParsingError
from structcompare.values import Value

logger = logging.getLogger(__name__)

TOO_DEEP_MESSAGE = "Document is too deeply nested to parse"


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: str) -> Value:
    """Parse JSON text into a document value.

    ``NaN``, ``Infinity`` and ``-Infinity`` literals are rejected.

    Parameters
    ----------
    text : str
        JSON text

    Returns
    -------
    Value
        Parsed document

    Raises
    ------
    ParsingError
        If the text is not valid JSON; ``position`` carries the character
        offset of the failure when the parser reports one

    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParsingError(str(e), format_name="json", parsing_stage="parse", position=e.pos, original_error=e) from e
    except RecursionError as e:
        raise ParsingError(TOO_DEEP_MESSAGE, format_name="json", parsing_stage="parse", original_error=e) from e
    except ValueError as e:
        raise ParsingError(str(e), format_name="json", parsing_stage="parse", original_error=e) from e


def serialize_json(value: Value, indent: int | None = DEFAULT_JSON_INDENT, sort_keys: bool = False) -> str:
    """Serialize a document value to JSON text.

    Parameters
    ----------
    value : Value
        Document value
    indent : int or None
        Spaces per level; ``None`` produces compact single-line output
    sort_keys : bool
        Emit object keys in sorted order

    Raises
    ------
    ValueError
        If the value holds NaN or an infinity, which JSON cannot represent

    """
    if indent is None:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys, allow_nan=False)
    return json.dumps(value, indent=indent, ensure_ascii=False, sort_keys=sort_keys, allow_nan=False)


def minify_json(value: Value) -> str:
    """Serialize a document value without any whitespace."""
    return serialize_json(value, indent=None)
