#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/exceptions.py
"""Custom exceptions for the structcompare library.

Codecs and option parsing raise these exceptions. Boundary functions
(validation, format conversion, the text-level diff helpers and the HTTP
handlers) catch them and turn them into result records instead of letting
them escape.

Exception Hierarchy
-------------------
- StructCompareError (base exception)

  - ValidationError (parameter/option validation)
    - NestingDepthError (document nested beyond the configured bound)

  - ParsingError (malformed JSON/YAML/XML input)

  - FormatError (unsupported/unknown format names)

  - SecurityError (oversized input, unsafe schema patterns)

"""

from typing import Any


class StructCompareError(Exception):
    """Base exception class for all structcompare-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(StructCompareError):
    """Exception raised for invalid parameters, options or request fields.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class NestingDepthError(ValidationError):
    """Exception raised when a document is nested deeper than allowed.

    Parameters
    ----------
    max_depth : int
        The configured nesting bound
    message : str, optional
        Custom error message

    """

    def __init__(self, max_depth: int, message: str | None = None):
        """Initialize the nesting error with the bound that was exceeded."""
        if message is None:
            message = f"Document is too deeply nested (maximum depth is {max_depth})"
        super().__init__(message, parameter_name="max_depth", parameter_value=max_depth)
        self.max_depth = max_depth


class ParsingError(StructCompareError):
    """Exception raised when document text cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing error, usually the underlying parser's message
    format_name : str, optional
        Format that was being parsed ("json", "yaml", "xml")
    parsing_stage : str, optional
        Stage where parsing failed (e.g., "parse", "coerce")
    position : int, optional
        Character offset reported by the parser, when available
    original_error : Exception, optional
        The original parser exception

    """

    def __init__(
        self,
        message: str,
        format_name: str | None = None,
        parsing_stage: str | None = None,
        position: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with format and position details."""
        super().__init__(message, original_error=original_error)
        self.format_name = format_name
        self.parsing_stage = parsing_stage
        self.position = position


class FormatError(StructCompareError):
    """Exception raised for an unknown or unsupported format name.

    Parameters
    ----------
    message : str, optional
        Custom error message
    format_type : str, optional
        The format that was requested
    supported_formats : list[str], optional
        Formats that are supported

    """

    def __init__(
        self,
        message: str | None = None,
        format_type: str | None = None,
        supported_formats: list[str] | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the format error with requested and supported formats."""
        if message is None:
            message = f"Unsupported format: {format_type!r}"
            if supported_formats:
                message += f" (supported: {', '.join(supported_formats)})"
        super().__init__(message, original_error=original_error)
        self.format_type = format_type
        self.supported_formats = supported_formats or []


class SecurityError(StructCompareError):
    """Exception raised for security violations such as oversized input."""

    pass
