#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/collaborators.py
"""Record shapes exchanged with storage collaborators.

Two stores sit outside this package: a row store that keeps shareable
diffs addressed by a share token, and a per-user history list. Only the
shapes of their records live here, together with helpers that turn a
record back into texts the differ can compare.
"""

from __future__ import annotations

import datetime
import json
import secrets
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping, Optional
from urllib.parse import quote

from structcompare.constants import HISTORY_PREVIEW_KEYS, SHARE_TOKEN_BYTES
from structcompare.diff.structural import DiffStats, diff_stats
from structcompare.diff.text_diff import compare_texts
from structcompare.exceptions import ParsingError, ValidationError
from structcompare.formats.json_codec import parse_json
from structcompare.utils.security import sanitize_filename
from structcompare.utils.size import is_too_large, size_kb
from structcompare.values import type_name

DiffType = Literal["json", "text"]


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def generate_share_token() -> str:
    """Return a new URL-safe share token."""
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


def build_share_url(base_url: str, share_token: str) -> str:
    """Return the public link of a stored diff.

    Examples
    --------
    >>> build_share_url("https://example.com/", "abc")
    'https://example.com/share/abc'

    """
    return f"{base_url.rstrip('/')}/share/{quote(share_token, safe='')}"


@dataclass
class SavedDiff:
    """A diff as stored by the persistence collaborator.

    JSON diffs keep their documents in ``original_json``/``modified_json``
    (either parsed values or JSON text); text diffs use ``original_text``/
    ``modified_text``.
    """

    diff_type: DiffType
    original_json: Any = None
    modified_json: Any = None
    original_text: Optional[str] = None
    modified_text: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    is_public: bool = False
    tags: list[str] = field(default_factory=list)
    share_token: str = field(default_factory=generate_share_token)
    view_count: int = 0
    id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject unknown diff types."""
        if self.diff_type not in ("json", "text"):
            raise ValidationError(
                f"diff_type must be 'json' or 'text', got {self.diff_type!r}",
                parameter_name="diff_type",
                parameter_value=self.diff_type,
            )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SavedDiff":
        """Build a record from a storage row, ignoring unknown columns."""
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in row.items() if k in known})

    def to_row(self) -> dict[str, Any]:
        """Return the record as a storage row."""
        return asdict(self)

    def _content(self, json_value: Any, text_value: Optional[str]) -> str:
        if self.diff_type == "json":
            if isinstance(json_value, str):
                return json_value
            return json.dumps(json_value, indent=2, ensure_ascii=False)
        return text_value or ""

    def get_original_content(self) -> str:
        """Return the original document as text."""
        return self._content(self.original_json, self.original_text)

    def get_modified_content(self) -> str:
        """Return the modified document as text."""
        return self._content(self.modified_json, self.modified_text)

    def export_filename(self) -> str:
        """Return a safe download name derived from the title."""
        stem = sanitize_filename(self.title) if self.title else self.share_token
        return f"{self.diff_type}-diff-{stem}.json"

    def compute_stats(self) -> DiffStats:
        """Compare the stored documents using the record's diff type."""
        original = self.get_original_content()
        modified = self.get_modified_content()
        if self.diff_type == "json":
            return diff_stats(original, modified)
        return compare_texts(original, modified).stats


def extract_preview_keys(text: str, max_keys: int = HISTORY_PREVIEW_KEYS) -> list[str]:
    """Summarize a JSON document for history previews.

    Objects give their first ``max_keys`` keys, arrays give ``Array[n]`` and
    other values give their type name. Unparseable text gives an empty list.
    """
    try:
        value = parse_json(text)
    except ParsingError:
        return []
    if isinstance(value, dict):
        return list(value)[:max_keys]
    if isinstance(value, list):
        return [f"Array[{len(value)}]"]
    return [type_name(value)]


@dataclass
class HistoryEntry:
    """One comparison remembered in a user's local history."""

    id: str
    original: str
    modified: str
    name: str
    created_at: str
    updated_at: str
    original_size: float
    modified_size: float
    stats: DiffStats
    preview: dict[str, list[str]]
    is_pinned: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase form kept by the history store."""
        return {
            "id": self.id,
            "original": self.original,
            "modified": self.modified,
            "name": self.name,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "originalSize": self.original_size,
            "modifiedSize": self.modified_size,
            "stats": self.stats.to_dict(),
            "preview": self.preview,
            "isPinned": self.is_pinned,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        """Build an entry from its camelCase form."""
        stats = data.get("stats") or {}
        return cls(
            id=data["id"],
            original=data["original"],
            modified=data["modified"],
            name=data["name"],
            created_at=data["createdAt"],
            updated_at=data.get("updatedAt", data["createdAt"]),
            original_size=data.get("originalSize", size_kb(data["original"])),
            modified_size=data.get("modifiedSize", size_kb(data["modified"])),
            stats=DiffStats(
                added=stats.get("added", 0),
                removed=stats.get("removed", 0),
                modified=stats.get("modified", 0),
                unchanged=stats.get("unchanged", 0),
            ),
            preview=dict(data.get("preview") or {"originalKeys": [], "modifiedKeys": []}),
            is_pinned=bool(data.get("isPinned", False)),
        )


def build_history_entry(
    original: str,
    modified: str,
    name: str | None = None,
    now: datetime.datetime | None = None,
) -> HistoryEntry:
    """Create a history entry for a comparison.

    Parameters
    ----------
    original, modified : str
        JSON texts that were compared
    name : str, optional
        Display name; defaults to the creation time, e.g. ``"Jan 16, 2:13 AM"``
    now : datetime, optional
        Creation time; defaults to the current UTC time

    Raises
    ------
    ValidationError
        If either document is too large to keep in history

    """
    for label, text in (("original", original), ("modified", modified)):
        if is_too_large(text):
            raise ValidationError(
                f"The {label} document is too large to keep in history ({size_kb(text)} KB)",
                parameter_name=label,
            )
    now = now or _now()
    timestamp = now.isoformat()
    if name is None:
        hour = now.hour % 12 or 12
        name = f"{now.strftime('%b')} {now.day}, {hour}:{now.minute:02d} {'AM' if now.hour < 12 else 'PM'}"
    return HistoryEntry(
        id=uuid.uuid4().hex,
        original=original,
        modified=modified,
        name=name,
        created_at=timestamp,
        updated_at=timestamp,
        original_size=size_kb(original),
        modified_size=size_kb(modified),
        stats=diff_stats(original, modified),
        preview={
            "originalKeys": extract_preview_keys(original),
            "modifiedKeys": extract_preview_keys(modified),
        },
    )
