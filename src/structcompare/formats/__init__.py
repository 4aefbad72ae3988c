#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/formats/__init__.py
"""Format bridge between JSON, YAML and XML document text."""

from structcompare.formats.bridge import (
    ConversionResult,
    convert,
    detect_format,
    get_mime_type,
    parse_document,
    serialize_document,
    to_json,
)
from structcompare.formats.json_codec import minify_json, parse_json, serialize_json
from structcompare.formats.xml_codec import parse_xml, serialize_xml
from structcompare.formats.yaml_codec import parse_yaml, serialize_yaml

__all__ = [
    "ConversionResult",
    "convert",
    "detect_format",
    "get_mime_type",
    "minify_json",
    "parse_document",
    "parse_json",
    "parse_xml",
    "parse_yaml",
    "serialize_document",
    "serialize_json",
    "serialize_xml",
    "serialize_yaml",
    "to_json",
]
