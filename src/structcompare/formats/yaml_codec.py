#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/formats/yaml_codec.py
"""YAML parsing and serialization via PyYAML."""

from __future__ import annotations

import logging
from typing import Any

import yaml

from structcompare.constants import YAML_INDENT, YAML_LINE_WIDTH
from structcompare.exceptions import ParsingError
from structcompare.values import Value, coerce_value

logger = logging.getLogger(__name__)


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that writes repeated objects out in full instead of as aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        """Never emit anchors or aliases."""
        return True


def parse_yaml(text: str) -> Value:
    """Parse a single YAML document into a document value.

    Dates, non-string keys and other YAML-only types are converted to
    their JSON equivalents.

    Raises
    ------
    ParsingError
        If the text is not valid YAML or holds more than one document

    """
    try:
        data = yaml.safe_load(text)
    except yaml.MarkedYAMLError as e:
        position = e.problem_mark.index if e.problem_mark is not None else None
        raise ParsingError(f"Invalid YAML: {e}", format_name="yaml", position=position, original_error=e) from e
    except yaml.YAMLError as e:
        raise ParsingError(f"Invalid YAML: {e}", format_name="yaml", original_error=e) from e
    except RecursionError as e:
        raise ParsingError("Document is too deeply nested to parse", format_name="yaml", original_error=e) from e

    try:
        return coerce_value(data)
    except TypeError as e:
        raise ParsingError(str(e), format_name="yaml", parsing_stage="coerce", original_error=e) from e


def serialize_yaml(value: Value, sort_keys: bool = False) -> str:
    """Serialize a document value to block-style YAML."""
    return yaml.dump(
        value,
        Dumper=_NoAliasDumper,
        indent=YAML_INDENT,
        width=YAML_LINE_WIDTH,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=sort_keys,
    )
