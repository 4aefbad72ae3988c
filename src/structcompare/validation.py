#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/validation.py
"""JSON syntax validation with line and column reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from structcompare.exceptions import ParsingError
from structcompare.formats.json_codec import parse_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Result of checking that text is valid JSON.

    Parameters
    ----------
    is_valid : bool
        Whether the text parsed
    error : str, optional
        Parser message when invalid
    line_number : int, optional
        1-based line of the failure, when the parser reports an offset
    column_number : int, optional
        1-based column of the failure

    """

    is_valid: bool
    error: Optional[str] = None
    line_number: Optional[int] = None
    column_number: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase form used in API responses."""
        result: dict[str, Any] = {"isValid": self.is_valid}
        if self.error is not None:
            result["error"] = self.error
        if self.line_number is not None:
            result["lineNumber"] = self.line_number
        if self.column_number is not None:
            result["columnNumber"] = self.column_number
        return result


def position_from_offset(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a 1-based (line, column) pair.

    The line is the number of newlines before ``offset`` plus one; the
    column counts from the start of that line.

    Examples
    --------
    >>> position_from_offset('{\\n  "a": ,\\n}', 9)
    (2, 8)

    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def validate(text: str) -> ValidationResult:
    """Check whether text is valid JSON.

    Empty or whitespace-only text counts as valid. This function never
    raises; every failure is described by the returned result.

    Parameters
    ----------
    text : str
        Candidate JSON text

    Returns
    -------
    ValidationResult
        Validity plus, on failure, the message and position

    """
    if not text or not text.strip():
        return ValidationResult(is_valid=True)

    try:
        parse_json(text)
    except ParsingError as e:
        if e.position is None:
            return ValidationResult(is_valid=False, error=e.message)
        line, column = position_from_offset(text, e.position)
        logger.debug("Invalid JSON at line %d, column %d: %s", line, column, e.message)
        return ValidationResult(is_valid=False, error=e.message, line_number=line, column_number=column)
    return ValidationResult(is_valid=True)
