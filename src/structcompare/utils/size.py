#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/utils/size.py
"""Byte-size estimation for document text."""

from __future__ import annotations

from structcompare.constants import DEFAULT_MAX_DOCUMENT_MB


def byte_size(text: str) -> int:
    """Return the UTF-8 encoded size of ``text`` in bytes."""
    return len(text.encode("utf-8"))


def size_kb(text: str) -> float:
    """Return the UTF-8 size of ``text`` in kilobytes, rounded to 2 decimals.

    Examples
    --------
    >>> size_kb("x" * 1536)
    1.5

    """
    return round(byte_size(text) / 1024, 2)


def is_too_large(text: str, max_mb: float = DEFAULT_MAX_DOCUMENT_MB) -> bool:
    """Return True if ``text`` is larger than ``max_mb`` megabytes."""
    return size_kb(text) > max_mb * 1024


def format_file_size(size_bytes: int) -> str:
    """Format a byte count in human-readable form.

    Parameters
    ----------
    size_bytes : int
        Size in bytes

    Returns
    -------
    str
        e.g. ``"512.0 B"``, ``"1.5 KB"``

    """
    size: float = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
