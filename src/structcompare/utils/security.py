#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/utils/security.py
"""Input limits and filename sanitization."""

import logging
import re

from structcompare.constants import DEFAULT_MAX_INPUT_LENGTH
from structcompare.exceptions import SecurityError

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 255
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def check_input_size(text: str, max_length: int = DEFAULT_MAX_INPUT_LENGTH) -> str:
    """Return ``text`` unchanged if it is within ``max_length`` characters.

    Raises
    ------
    SecurityError
        If the text is longer than ``max_length``

    """
    if len(text) > max_length:
        raise SecurityError(f"Input exceeds maximum length of {max_length} characters")
    return text


def sanitize_filename(filename: str) -> str:
    """Reduce a user-supplied name to a safe file name.

    Path traversal sequences, separators and null bytes are removed, other
    characters outside ``[A-Za-z0-9._-]`` become underscores, and the
    result is capped at 255 characters while keeping the extension.

    Examples
    --------
    >>> sanitize_filename("../../etc/passwd")
    'etcpasswd'
    >>> sanitize_filename("my diff.json")
    'my_diff.json'

    """
    sanitized = filename.replace("..", "")
    sanitized = re.sub(r"[/\\]", "", sanitized)
    sanitized = sanitized.replace("\0", "")
    sanitized = _UNSAFE_FILENAME_CHARS.sub("_", sanitized)

    if len(sanitized) > MAX_FILENAME_LENGTH:
        dot = sanitized.rfind(".")
        extension = sanitized[dot:] if dot > 0 and len(sanitized) - dot <= 10 else ""
        sanitized = sanitized[: MAX_FILENAME_LENGTH - len(extension)] + extension

    return sanitized or "download"
