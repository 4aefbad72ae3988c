#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/formats/xml_codec.py
"""XML to document value mapping.

Parsing goes through ``defusedxml`` so entity expansion, external entities
and DTD tricks are refused. Serialization builds a standard library
``ElementTree`` and indents it.

Mapping rules
-------------
- ``<a x="1">`` attributes become ``"@_x": "1"`` (always strings)
- repeated child tags become arrays
- leaf text is coerced: ``true``/``false`` to booleans, numeric literals to
  numbers, empty elements to ``""``
- text next to attributes or children is stored under ``"#text"``
- the document becomes ``{root_tag: content}``

"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as XmlTree
from typing import Any

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from structcompare.constants import (
    DEFAULT_MAX_NESTING_DEPTH,
    XML_ATTRIBUTE_PREFIX,
    XML_DECLARATION,
    XML_DEFAULT_ITEM,
    XML_DEFAULT_ROOT,
    XML_INDENT,
    XML_TEXT_KEY,
)
from structcompare.exceptions import ParsingError
from structcompare.values import Value, ValueKind, canonical_json, check_depth, kind_of

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^-?(?:0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?$")
_INVALID_TAG_CHARS = re.compile(r"[^\w.\-]")


def _local_name(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _offset_from_position(text: str, position: tuple[int, int] | None) -> int | None:
    # ParseError reports (line, column) with 1-based lines and 0-based columns
    if not position:
        return None
    line, column = position
    lines = text.split("\n")
    if line < 1 or line > len(lines):
        return None
    return sum(len(lines[i]) + 1 for i in range(line - 1)) + column


def _coerce_text(text: str) -> Value:
    if text == "true":
        return True
    if text == "false":
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        number = float(text)
        if not math.isinf(number):
            return number
    return text


def _element_to_value(element: Any, depth: int, max_depth: int) -> Value:
    check_depth(depth, max_depth)

    attributes = {XML_ATTRIBUTE_PREFIX + _local_name(k): v for k, v in element.attrib.items()}
    children = list(element)
    text_parts = [element.text or ""] + [child.tail or "" for child in children]
    text = "".join(part.strip() for part in text_parts)

    if not attributes and not children:
        return _coerce_text(text)

    result: dict[str, Value] = dict(attributes)
    for child in children:
        tag = _local_name(child.tag)
        child_value = _element_to_value(child, depth + 1, max_depth)
        if tag not in result:
            result[tag] = child_value
        elif isinstance(result[tag], list):
            result[tag].append(child_value)  # type: ignore[union-attr]
        else:
            result[tag] = [result[tag], child_value]
    if text:
        result[XML_TEXT_KEY] = _coerce_text(text)
    return result


def parse_xml(text: str, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> Value:
    """Parse XML text into a document value.

    Parameters
    ----------
    text : str
        XML document text
    max_depth : int
        Nesting bound

    Returns
    -------
    Value
        ``{root_tag: content}``

    Raises
    ------
    ParsingError
        If the text is not well-formed XML or uses forbidden constructs
        such as entity declarations

    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ParsingError(
            f"Invalid XML: {e}",
            format_name="xml",
            position=_offset_from_position(text, getattr(e, "position", None)),
            original_error=e,
        ) from e
    except DefusedXmlException as e:
        raise ParsingError(f"Forbidden XML construct: {e}", format_name="xml", original_error=e) from e

    return {_local_name(root.tag): _element_to_value(root, 1, max_depth)}


def _safe_tag(name: str) -> str:
    tag = _INVALID_TAG_CHARS.sub("_", name)
    if not tag or not (tag[0].isalpha() or tag[0] == "_"):
        tag = "_" + tag
    return tag


def _scalar_text(value: Value) -> str:
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind in (ValueKind.OBJECT, ValueKind.ARRAY):
        return canonical_json(value)
    return str(value)


def _fill(element: XmlTree.Element, content: Value, depth: int, max_depth: int) -> None:
    check_depth(depth, max_depth)
    kind = kind_of(content)
    if kind is ValueKind.OBJECT:
        for key, child in content.items():  # type: ignore[union-attr]
            if key.startswith(XML_ATTRIBUTE_PREFIX):
                element.set(_safe_tag(key[len(XML_ATTRIBUTE_PREFIX) :]), _scalar_text(child))
            elif key == XML_TEXT_KEY:
                element.text = _scalar_text(child)
            else:
                _append(element, key, child, depth, max_depth)
    elif kind is ValueKind.ARRAY:
        for item in content:  # type: ignore[union-attr]
            _append(element, XML_DEFAULT_ITEM, item, depth, max_depth)
    elif kind is not ValueKind.NULL:
        element.text = _scalar_text(content)


def _append(parent: XmlTree.Element, tag: str, content: Value, depth: int, max_depth: int) -> None:
    # Arrays repeat the tag once per element
    items = content if isinstance(content, list) else [content]
    for item in items:
        child = XmlTree.SubElement(parent, _safe_tag(tag))
        _fill(child, item, depth + 1, max_depth)


def serialize_xml(value: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> str:
    """Serialize a document value to indented XML.

    A single-key object whose value is not an array supplies the root tag;
    anything else is wrapped in ``<root>``.

    Parameters
    ----------
    value : Value
        Document value
    max_depth : int
        Nesting bound

    Returns
    -------
    str
        XML text starting with an XML declaration

    """
    root_tag = XML_DEFAULT_ROOT
    content = value
    if isinstance(value, dict) and len(value) == 1:
        ((key, inner),) = value.items()
        if not key.startswith(XML_ATTRIBUTE_PREFIX) and key != XML_TEXT_KEY and not isinstance(inner, list):
            root_tag, content = key, inner

    root = XmlTree.Element(_safe_tag(root_tag))
    _fill(root, content, 1, max_depth)
    XmlTree.indent(root, space=XML_INDENT)
    return XML_DECLARATION + "\n" + XmlTree.tostring(root, encoding="unicode") + "\n"
