"""structcompare - structural diffing of JSON, YAML and XML documents.

structcompare compares two documents as trees rather than as text. Both
inputs are parsed, optionally normalized (ignored keys removed, arrays
sorted, keys reordered) and then walked together, classifying every
position as added, removed, modified or unchanged.

Key Features
------------
- Recursive structural comparison with per-path change lists
- Normalization presets for API payloads and configuration files
- Fail-soft difference counting for live editors
- JSON syntax validation with line and column positions
- JSON Schema (Draft 7) validation with unsafe-pattern screening
- Conversion between JSON, YAML and XML
- Unified, JSON, HTML and Markdown diff reports
- A small HTTP API and a command-line interface

Examples
--------
Count the differences between two JSON texts:

    >>> from structcompare import count_differences
    >>> count_differences('{"a": 1, "b": 2}', '{"a": 1, "b": 3}')
    1

Ignore volatile keys before comparing:

    >>> from structcompare import DiffOptions, diff_stats
    >>> opts = DiffOptions(ignore_keys=frozenset({"updatedAt"}))
    >>> diff_stats('{"a": 1, "updatedAt": "x"}', '{"a": 1, "updatedAt": "y"}', opts).difference_count
    0

"""

import sys

# Check Python version before any imports
if sys.version_info < (3, 10):
    raise RuntimeError(
        f"structcompare requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from structcompare.diff import (  # noqa: E402
    ChangeKind,
    DiffChange,
    DiffReport,
    DiffStats,
    build_report,
    collect_changes,
    compare_texts,
    compare_values,
    count_differences,
    diff_stats,
)
from structcompare.exceptions import (  # noqa: E402
    FormatError,
    NestingDepthError,
    ParsingError,
    SecurityError,
    StructCompareError,
    ValidationError,
)
from structcompare.formats import convert, detect_format, parse_document, serialize_document  # noqa: E402
from structcompare.normalize import normalize, normalize_text  # noqa: E402
from structcompare.options import DiffOptions, available_presets  # noqa: E402
from structcompare.schema import generate_schema, validate_against_schema  # noqa: E402
from structcompare.validation import ValidationResult, validate  # noqa: E402

__all__ = [
    "__version__",
    "ChangeKind",
    "DiffChange",
    "DiffOptions",
    "DiffReport",
    "DiffStats",
    "FormatError",
    "NestingDepthError",
    "ParsingError",
    "SecurityError",
    "StructCompareError",
    "ValidationError",
    "ValidationResult",
    "available_presets",
    "build_report",
    "collect_changes",
    "compare_texts",
    "compare_values",
    "convert",
    "count_differences",
    "detect_format",
    "diff_stats",
    "generate_schema",
    "normalize",
    "normalize_text",
    "parse_document",
    "serialize_document",
    "validate",
    "validate_against_schema",
]
