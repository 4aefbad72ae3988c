#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/constants.py
"""Constants and defaults shared across structcompare modules.

Limits, preset definitions, format names and content types live here so
that the CLI, the HTTP server and the library agree on the same values.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type aliases
# =============================================================================

DocumentFormat = Literal["json", "yaml", "xml"]
CompareMode = Literal["json", "text"]
TextGranularity = Literal["line", "word", "sentence"]
ReportFormat = Literal["summary", "unified", "json", "html", "markdown"]
ColorMode = Literal["auto", "always", "never"]

SUPPORTED_FORMATS: tuple[str, ...] = ("json", "yaml", "xml")

# =============================================================================
# Structural limits
# =============================================================================

DEFAULT_MAX_NESTING_DEPTH = 256  # Deepest object/array nesting accepted by the differ and normalizer
DEFAULT_MAX_INPUT_LENGTH = 10 * 1024 * 1024  # 10 MB, upper bound on a single input text
DEFAULT_MAX_DOCUMENT_MB = 10.0  # Threshold used by is_too_large()

# =============================================================================
# Diff defaults
# =============================================================================

DEFAULT_CONTEXT_LINES = 3
DEFAULT_JSON_INDENT = 2
MAX_JSON_INDENT = 10

# Preset definitions: (ignore_key_order, ignore_array_order, sort_keys, ignore_keys)
DIFF_PRESETS: dict[str, dict[str, object]] = {
    "strict": {
        "ignore_key_order": False,
        "ignore_array_order": False,
        "sort_keys": False,
        "ignore_keys": (),
    },
    "flexible": {
        "ignore_key_order": True,
        "ignore_array_order": True,
        "sort_keys": True,
        "ignore_keys": (),
    },
    "api": {
        "ignore_key_order": True,
        "ignore_array_order": False,
        "sort_keys": False,
        "ignore_keys": ("timestamp", "id", "_id", "createdAt", "updatedAt", "created_at", "updated_at"),
    },
    "config": {
        "ignore_key_order": True,
        "ignore_array_order": False,
        "sort_keys": True,
        "ignore_keys": ("version", "timestamp", "lastModified"),
    },
}

# =============================================================================
# Format bridge
# =============================================================================

YAML_INDENT = 2
YAML_LINE_WIDTH = 120
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
XML_ATTRIBUTE_PREFIX = "@_"
XML_TEXT_KEY = "#text"
XML_DEFAULT_ROOT = "root"
XML_DEFAULT_ITEM = "item"
XML_INDENT = "  "

MIME_TYPES: dict[str, str] = {
    "json": "application/json",
    "yaml": "text/yaml",
    "xml": "application/xml",
}

# =============================================================================
# Schema validation security
# =============================================================================

MAX_REGEX_PATTERN_LENGTH = 500  # Maximum length for schema-supplied regex patterns

# Regex constructs that can cause catastrophic backtracking (ReDoS) when a
# schema's `pattern` is compiled and run against untrusted documents
DANGEROUS_REGEX_PATTERNS = [
    r"\([^)]*[*+][^)]*\)[*+]",  # Nested quantifiers like (a+)+ or (a*)*
    r"\([^)]*[*+][^)]*\)\{[0-9,]+\}",  # Quantified groups with inner quantifiers like (a+){2,}
    r"\(\?[^)]*[*+][^)]*\)[*+]",  # Non-capturing groups with nested quantifiers like (?:a+)+
    r"\([^)]*\|[^)]*\)[*+]{1,2}",  # Alternations in quantified groups like (a|ab)*
    r"(?:\*|\+|\{[^}]*\}){2,}",  # Consecutive quantifiers like a*+ or a{2}{3}
    r"\\[1-9]\d*(?:[*+]|\{[0-9,]+\})",  # Quantified backreferences like \1+ or \2{3,}
]

UNSAFE_SCHEMA_MESSAGE = "Schema contains potentially dangerous regex patterns"

# =============================================================================
# HTTP server
# =============================================================================

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8000
DEFAULT_RATE_LIMIT = 100  # Requests per window per client
DEFAULT_RATE_WINDOW_SECONDS = 60.0
DEFAULT_MAX_BODY_MB = 10.0
API_PREFIX = "/api/v1"

# =============================================================================
# Collaborator shapes
# =============================================================================

HISTORY_PREVIEW_KEYS = 5
SHARE_TOKEN_BYTES = 16

# =============================================================================
# Config file discovery
# =============================================================================

CONFIG_FILE_NAMES: tuple[str, ...] = (
    ".structcompare.toml",
    ".structcompare.yaml",
    ".structcompare.yml",
    ".structcompare.json",
)
