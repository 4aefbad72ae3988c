#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/schema.py
"""JSON Schema validation with ReDoS screening.

Documents are validated with ``jsonschema``'s Draft 7 validator. Before a
schema is compiled, every regex it carries (``pattern`` values and
``patternProperties`` keys, at any depth) is screened for constructs prone
to catastrophic backtracking. A schema that fails the screen is never
compiled; the result holds one issue with keyword ``"security"``.

Functions
---------
- find_unsafe_patterns: List the schema locations holding risky regexes
- validate_against_schema: Validate a document value against a schema value
- validate_text_against_schema: Same, starting from JSON text
- generate_schema: Infer a Draft 7 schema from an example document
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from structcompare.constants import (
    DANGEROUS_REGEX_PATTERNS,
    DEFAULT_MAX_NESTING_DEPTH,
    MAX_REGEX_PATTERN_LENGTH,
    UNSAFE_SCHEMA_MESSAGE,
)
from structcompare.exceptions import NestingDepthError, ParsingError
from structcompare.formats.json_codec import parse_json
from structcompare.values import Value, ValueKind, check_depth, kind_of

logger = logging.getLogger(__name__)

DRAFT7_URI = "http://json-schema.org/draft-07/schema#"

_DANGEROUS_RES = [re.compile(p) for p in DANGEROUS_REGEX_PATTERNS]


@dataclass(frozen=True)
class SchemaIssue:
    """A single schema validation problem.

    Parameters
    ----------
    path : str
        JSON Pointer to the offending location, ``"/"`` for the root
    message : str
        Human-readable description
    keyword : str
        Schema keyword that failed, or ``"security"``, ``"schema"``, ``"parse"``

    """

    path: str
    message: str
    keyword: str

    def to_dict(self) -> dict[str, str]:
        """Return a JSON-friendly representation."""
        return {"path": self.path, "message": self.message, "keyword": self.keyword}


@dataclass(frozen=True)
class SchemaValidationResult:
    """Outcome of validating a document against a schema."""

    is_valid: bool
    errors: list[SchemaIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase form used in API responses."""
        return {"isValid": self.is_valid, "errors": [issue.to_dict() for issue in self.errors]}


def _pointer(parts: Any) -> str:
    tokens = [str(p).replace("~", "~0").replace("/", "~1") for p in parts]
    if not tokens:
        return "/"
    return "/" + "/".join(tokens)


def _failure(path: str, message: str, keyword: str) -> SchemaValidationResult:
    return SchemaValidationResult(is_valid=False, errors=[SchemaIssue(path=path, message=message, keyword=keyword)])


def is_unsafe_pattern(pattern: str) -> bool:
    """Return True if a regex is too long or contains a risky construct.

    Flagged constructs include nested quantifiers such as ``(a+)+``,
    consecutive quantifiers such as ``a*+`` and quantified backreferences
    such as ``\\1+``. The check is conservative and may reject some
    patterns that would in fact run in linear time.
    """
    if len(pattern) > MAX_REGEX_PATTERN_LENGTH:
        return True
    return any(dangerous.search(pattern) for dangerous in _DANGEROUS_RES)


def find_unsafe_patterns(schema: Any, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> list[str]:
    """Find risky regexes anywhere in a schema.

    Parameters
    ----------
    schema : Any
        Schema value
    max_depth : int
        Nesting bound for the walk

    Returns
    -------
    list[str]
        JSON Pointers of every unsafe ``pattern`` value or
        ``patternProperties`` key; empty when the schema is safe

    """
    found: list[str] = []

    def walk(node: Any, path: list[str], depth: int) -> None:
        check_depth(depth, max_depth)
        if isinstance(node, dict):
            pattern = node.get("pattern")
            if isinstance(pattern, str) and is_unsafe_pattern(pattern):
                found.append(_pointer(path + ["pattern"]))
            pattern_properties = node.get("patternProperties")
            if isinstance(pattern_properties, dict):
                for key in pattern_properties:
                    if is_unsafe_pattern(key):
                        found.append(_pointer(path + ["patternProperties", key]))
            for key, child in node.items():
                walk(child, path + [key], depth + 1)
        elif isinstance(node, list):
            for index, child in enumerate(node):
                walk(child, path + [str(index)], depth + 1)

    walk(schema, [], 0)
    return found


def validate_against_schema(document: Value, schema: Any) -> SchemaValidationResult:
    """Validate a document against a Draft 7 JSON Schema.

    Parameters
    ----------
    document : Value
        Parsed document
    schema : Any
        Parsed schema (an object or a boolean)

    Returns
    -------
    SchemaValidationResult
        ``is_valid`` plus one issue per violation, sorted by path. Unsafe
        schemas yield a single ``security`` issue and invalid schemas a
        single ``schema`` issue.

    """
    if not isinstance(schema, (dict, bool)):
        return _failure("/", "Schema must be a JSON object or boolean", "schema")

    try:
        unsafe = find_unsafe_patterns(schema)
    except NestingDepthError as e:
        return _failure("/", e.message, "schema")
    if unsafe:
        logger.warning("Refusing schema with unsafe regex patterns at %s", ", ".join(unsafe))
        return _failure("/", UNSAFE_SCHEMA_MESSAGE, "security")

    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        return _failure(_pointer(e.absolute_path), f"Invalid schema: {e.message}", "schema")

    validator = Draft7Validator(schema, format_checker=Draft7Validator.FORMAT_CHECKER)
    try:
        raw_errors = list(validator.iter_errors(document))
    except re.error as e:
        return _failure("/", f"Invalid regular expression in schema: {e}", "schema")
    except RecursionError:
        return _failure("/", "Document is too deeply nested to validate", "schema")

    issues = sorted(
        (
            SchemaIssue(path=_pointer(error.absolute_path), message=error.message, keyword=str(error.validator))
            for error in raw_errors
        ),
        key=lambda issue: (issue.path, issue.keyword),
    )
    if issues:
        logger.debug("Schema validation found %d issue(s)", len(issues))
    return SchemaValidationResult(is_valid=not issues, errors=issues)


def validate_text_against_schema(document_text: str, schema_text: str) -> SchemaValidationResult:
    """Validate JSON document text against JSON schema text.

    Unparseable document or schema text yields a single ``parse`` issue.
    """
    try:
        document = parse_json(document_text)
    except ParsingError as e:
        return _failure("/", f"Invalid JSON document: {e.message}", "parse")
    try:
        schema = parse_json(schema_text)
    except ParsingError as e:
        return _failure("/", f"Invalid JSON schema: {e.message}", "parse")
    return validate_against_schema(document, schema)


def generate_schema(value: Value, max_depth: int = DEFAULT_MAX_NESTING_DEPTH, _depth: int = 0) -> dict[str, Any]:
    """Infer a Draft 7 schema describing an example document.

    Objects list every key as a required property, arrays take their item
    schema from the first element, and whole numbers are typed ``integer``.

    Examples
    --------
    >>> generate_schema({"id": 1, "tags": ["a"]})["properties"]["tags"]
    {'type': 'array', 'items': {'type': 'string'}}

    """
    check_depth(_depth, max_depth)
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        members: dict = value  # type: ignore[assignment]
        return {
            "type": "object",
            "properties": {k: generate_schema(v, max_depth, _depth + 1) for k, v in members.items()},
            "required": list(members),
        }
    if kind is ValueKind.ARRAY:
        if not value:
            return {"type": "array", "items": {}}
        return {"type": "array", "items": generate_schema(value[0], max_depth, _depth + 1)}  # type: ignore[index]
    if kind is ValueKind.NUMBER:
        is_whole = isinstance(value, int) or (isinstance(value, float) and value.is_integer())
        return {"type": "integer" if is_whole else "number"}
    return {"type": kind.value}


SCHEMA_TEMPLATES: dict[str, dict[str, Any]] = {
    "basic": {
        "$schema": DRAFT7_URI,
        "type": "object",
        "properties": {},
        "required": [],
    },
    "api_response": {
        "$schema": DRAFT7_URI,
        "type": "object",
        "properties": {
            "status": {"type": "string", "enum": ["success", "error"]},
            "data": {"type": "object"},
            "message": {"type": "string"},
            "timestamp": {"type": "string", "format": "date-time"},
        },
        "required": ["status"],
    },
    "user": {
        "$schema": DRAFT7_URI,
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string", "minLength": 1},
            "email": {"type": "string", "format": "email"},
            "age": {"type": "integer", "minimum": 0},
            "createdAt": {"type": "string", "format": "date-time"},
        },
        "required": ["id", "name", "email"],
    },
    "config": {
        "$schema": DRAFT7_URI,
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "settings": {"type": "object", "additionalProperties": True},
            "features": {"type": "object", "patternProperties": {".*": {"type": "boolean"}}},
        },
        "required": ["version"],
    },
}


def get_schema_template(name: str) -> dict[str, Any]:
    """Return a copy of a named schema template.

    Raises
    ------
    KeyError
        If no template has that name

    """
    return copy.deepcopy(SCHEMA_TEMPLATES[name])
