#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/formats/bridge.py
"""Conversion between JSON, YAML and XML through the document value model.

Every conversion parses the source text into a document value and
serializes that value in the target format, so converting a format to
itself still validates and canonicalizes the text. ``convert`` never
raises; failures come back as a ``ConversionResult`` with ``success`` set
to False.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from structcompare.constants import MIME_TYPES, SUPPORTED_FORMATS, DocumentFormat
from structcompare.exceptions import FormatError, StructCompareError
from structcompare.formats.json_codec import TOO_DEEP_MESSAGE, parse_json, serialize_json
from structcompare.formats.xml_codec import parse_xml, serialize_xml
from structcompare.formats.yaml_codec import parse_yaml, serialize_yaml
from structcompare.values import Value, coerce_value

logger = logging.getLogger(__name__)

_PARSERS: dict[str, Callable[[str], Value]] = {
    "json": parse_json,
    "yaml": parse_yaml,
    "xml": parse_xml,
}

_SERIALIZERS: dict[str, Callable[[Value], str]] = {
    "json": serialize_json,
    "yaml": serialize_yaml,
    "xml": serialize_xml,
}


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a format conversion.

    Parameters
    ----------
    success : bool
        Whether the conversion succeeded
    data : str, optional
        Converted text on success
    error : str, optional
        Parser or serializer message on failure
    detected_format : str, optional
        Source format, whether given or detected

    """

    success: bool
    data: Optional[str] = None
    error: Optional[str] = None
    detected_format: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        result: dict[str, object] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        if self.detected_format is not None:
            result["detectedFormat"] = self.detected_format
        return result


def detect_format(text: str) -> DocumentFormat:
    """Guess the format of document text from its outer characters.

    Text wrapped in angle brackets is XML, text wrapped in matching braces
    or brackets is JSON, and anything else is treated as YAML.

    Parameters
    ----------
    text : str
        Document text

    Returns
    -------
    DocumentFormat
        ``"xml"``, ``"json"`` or ``"yaml"``

    """
    trimmed = text.strip()
    if trimmed.startswith("<") and trimmed.endswith(">"):
        return "xml"
    if (trimmed.startswith("{") and trimmed.endswith("}")) or (trimmed.startswith("[") and trimmed.endswith("]")):
        return "json"
    return "yaml"


def _check_format(format_name: str) -> str:
    name = format_name.lower()
    if name == "yml":
        name = "yaml"
    if name not in SUPPORTED_FORMATS:
        raise FormatError(format_type=format_name, supported_formats=list(SUPPORTED_FORMATS))
    return name


def parse_document(text: str, format_name: str | None = None) -> Value:
    """Parse text in the given (or detected) format into a document value.

    Raises
    ------
    FormatError
        If the format name is not supported
    ParsingError
        If the text does not parse

    """
    name = _check_format(format_name) if format_name else detect_format(text)
    return _PARSERS[name](text)


def serialize_document(value: Value, format_name: str) -> str:
    """Serialize a document value in the given format.

    Raises
    ------
    FormatError
        If the format name is not supported

    """
    return _SERIALIZERS[_check_format(format_name)](value)


def convert(text: str, from_format: str | None = None, to_format: str = "json") -> ConversionResult:
    """Convert document text from one format to another.

    Parameters
    ----------
    text : str
        Source document text
    from_format : str, optional
        Source format; detected with ``detect_format`` when omitted
    to_format : str, default "json"
        Target format

    Returns
    -------
    ConversionResult
        Converted text, or the error message of whichever stage failed

    """
    source = None
    try:
        source = _check_format(from_format) if from_format else detect_format(text)
        target = _check_format(to_format)
        value = coerce_value(_PARSERS[source](text))
        data = _SERIALIZERS[target](value)
    except StructCompareError as e:
        logger.debug("Conversion %s -> %s failed: %s", source or from_format, to_format, e)
        return ConversionResult(success=False, error=str(e), detected_format=source)
    except (TypeError, ValueError) as e:
        logger.debug("Serialization to %s failed: %s", to_format, e)
        return ConversionResult(success=False, error=str(e), detected_format=source)
    except RecursionError:
        logger.debug("Conversion %s -> %s exceeded the recursion limit", source, to_format)
        return ConversionResult(success=False, error=TOO_DEEP_MESSAGE, detected_format=source)
    return ConversionResult(success=True, data=data, detected_format=source)


def to_json(text: str, from_format: str | None = None) -> ConversionResult:
    """Convert text in any supported format to pretty-printed JSON."""
    return convert(text, from_format, "json")


def get_mime_type(format_name: str) -> str:
    """Return the MIME type for a format, defaulting to ``text/plain``."""
    return MIME_TYPES.get(format_name.lower(), "text/plain")
