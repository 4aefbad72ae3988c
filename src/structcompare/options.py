#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/options.py
"""Diff options and presets.

``DiffOptions`` is an immutable configuration record describing which
differences should be normalized away before two documents are compared.
Instances are frozen; use ``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from structcompare.constants import DIFF_PRESETS
from structcompare.exceptions import ValidationError

# camelCase names accepted over HTTP, mapped to field names
_CAMEL_TO_FIELD = {
    "ignoreKeyOrder": "ignore_key_order",
    "ignoreArrayOrder": "ignore_array_order",
    "ignoreKeys": "ignore_keys",
    "sortKeys": "sort_keys",
}
_FIELD_TO_CAMEL = {v: k for k, v in _CAMEL_TO_FIELD.items()}


def parse_ignore_keys(value: str | Iterable[str] | None) -> frozenset[str]:
    """Parse an ignore-keys specification.

    Parameters
    ----------
    value : str, iterable of str, or None
        Either a comma-separated string (``"id, timestamp"``) or an iterable
        of key names. Blank entries are dropped and names are stripped.

    Returns
    -------
    frozenset[str]
        The set of key names

    Raises
    ------
    ValidationError
        If the iterable contains non-string entries

    Examples
    --------
    >>> sorted(parse_ignore_keys("id, timestamp,,"))
    ['id', 'timestamp']

    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    else:
        items = value

    keys = set()
    for item in items:
        if not isinstance(item, str):
            raise ValidationError(
                f"ignore_keys entries must be strings, got {type(item).__name__}",
                parameter_name="ignore_keys",
                parameter_value=item,
            )
        stripped = item.strip()
        if stripped:
            keys.add(stripped)
    return frozenset(keys)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class DiffOptions(CloneFrozenMixin):
    """Normalization options applied to both documents before comparison.

    Parameters
    ----------
    ignore_key_order : bool, default False
        Normalize object key order away. The differ already matches keys by
        name, so this only changes the textual form of processed documents.
    ignore_array_order : bool, default False
        Sort arrays into a canonical order so that arrays holding the same
        elements compare equal.
    ignore_keys : frozenset[str], default empty
        Key names removed from objects at every depth.
    sort_keys : bool, default False
        Reorder object keys alphabetically in the processed documents.

    """

    ignore_key_order: bool = field(
        default=False,
        metadata={"help": "Ignore the order of object keys", "cli_name": "ignore-key-order"},
    )
    ignore_array_order: bool = field(
        default=False,
        metadata={"help": "Ignore the order of array elements", "cli_name": "ignore-array-order"},
    )
    ignore_keys: frozenset[str] = field(
        default_factory=frozenset,
        metadata={"help": "Comma-separated key names to ignore at any depth", "cli_name": "ignore-keys"},
    )
    sort_keys: bool = field(
        default=False,
        metadata={"help": "Sort object keys alphabetically", "cli_name": "sort-keys"},
    )

    def __post_init__(self) -> None:
        """Validate flag types and freeze ignore_keys."""
        for name in ("ignore_key_order", "ignore_array_order", "sort_keys"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValidationError(
                    f"{_FIELD_TO_CAMEL[name]} must be a boolean, got {type(value).__name__}",
                    parameter_name=name,
                    parameter_value=value,
                )
        if not isinstance(self.ignore_keys, frozenset):
            object.__setattr__(self, "ignore_keys", parse_ignore_keys(self.ignore_keys))

    @property
    def sorts_keys(self) -> bool:
        """Whether normalization reorders object keys."""
        return self.sort_keys or self.ignore_key_order

    @property
    def is_default(self) -> bool:
        """Whether normalization with these options is the identity."""
        return not (self.sorts_keys or self.ignore_array_order or self.ignore_keys)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DiffOptions":
        """Build options from a mapping with camelCase or snake_case keys.

        Parameters
        ----------
        data : Mapping or None
            Option values, e.g. the ``options`` object of an HTTP request

        Returns
        -------
        DiffOptions
            Parsed options

        Raises
        ------
        ValidationError
            If the mapping is not a mapping, has unknown keys, or has values
            of the wrong type

        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValidationError(
                "options must be an object", parameter_name="options", parameter_value=data
            )

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_TO_FIELD.get(key, key)
            if name not in known:
                raise ValidationError(f"Unknown option: {key}", parameter_name=key, parameter_value=value)
            if name == "ignore_keys":
                if value is not None and not isinstance(value, (str, list, tuple, set, frozenset)):
                    raise ValidationError(
                        "ignoreKeys must be a list of strings or a comma-separated string",
                        parameter_name="ignore_keys",
                        parameter_value=value,
                    )
                value = parse_ignore_keys(value)
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "DiffOptions":
        """Build options from a named preset.

        Parameters
        ----------
        name : str
            One of ``strict``, ``flexible``, ``api``, ``config``
        **overrides : Any
            Field values that replace the preset's values

        Raises
        ------
        ValidationError
            If the preset name is unknown

        """
        try:
            preset = DIFF_PRESETS[name]
        except KeyError:
            raise ValidationError(
                f"Unknown preset: {name!r} (available: {', '.join(DIFF_PRESETS)})",
                parameter_name="preset",
                parameter_value=name,
            ) from None
        values = dict(preset)
        values["ignore_keys"] = frozenset(preset["ignore_keys"])  # type: ignore[arg-type]
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase form used in API responses."""
        return {
            "ignoreKeyOrder": self.ignore_key_order,
            "ignoreArrayOrder": self.ignore_array_order,
            "ignoreKeys": sorted(self.ignore_keys),
            "sortKeys": self.sort_keys,
        }


def available_presets() -> list[str]:
    """Return the preset names in definition order."""
    return list(DIFF_PRESETS)
