#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/cli/config.py
"""Configuration file discovery and loading for the structcompare CLI.

A configuration file supplies default diff options. It may hold a
``preset`` name and any ``DiffOptions`` field in snake_case or camelCase::

    # .structcompare.toml
    preset = "api"
    ignore_keys = ["etag"]
    ignore_array_order = true

Files are searched from the working directory upward, stopping at the
user's home directory (or the filesystem root when the working directory
is outside the home directory).
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from structcompare.constants import CONFIG_FILE_NAMES
from structcompare.exceptions import ValidationError
from structcompare.options import DiffOptions

PYPROJECT_SECTION = "structcompare"


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.structcompare]`` table of a pyproject.toml, or ``{}``.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file is not valid TOML or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading {pyproject_path}: {e}") from e

    section = data.get("tool", {}).get(PYPROJECT_SECTION, {})
    if not isinstance(section, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}"
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None, stop_dir: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest configuration file above ``start_dir``.

    Each directory is checked for the dedicated config files in order
    (``.toml``, ``.yaml``, ``.yml``, ``.json``) and then for a pyproject.toml
    carrying a ``[tool.structcompare]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        First directory searched; defaults to the working directory
    stop_dir : Path, optional
        Last directory searched; defaults to the user's home directory

    Returns
    -------
    Path or None
        First configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()
    stop = (stop_dir or Path.home()).resolve()

    while True:
        for filename in CONFIG_FILE_NAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate

        pyproject = current / "pyproject.toml"
        if pyproject.is_file():
            try:
                if _load_pyproject_section(pyproject):
                    return pyproject
            except argparse.ArgumentTypeError:
                # Unreadable pyproject files are skipped during discovery
                pass

        parent = current.parent
        if current == stop or parent == current:
            return None
        current = parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration mapping from a TOML, YAML, JSON or pyproject.toml file.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file is missing, unreadable, or does not hold a mapping

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")

    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(config_path)

    ext = config_path.suffix.lower()
    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Invalid config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"Config file {config_path} must contain a mapping, got {type(config).__name__}"
        )
    return config


def options_from_config(config: Dict[str, Any]) -> DiffOptions:
    """Build diff options from a configuration mapping.

    Raises
    ------
    ValidationError
        If the preset is unknown or an option is invalid

    """
    config = dict(config)
    preset = config.pop("preset", None)
    if preset is None:
        return DiffOptions.from_dict(config)
    if not isinstance(preset, str):
        raise ValidationError("preset must be a string", parameter_name="preset", parameter_value=preset)
    overrides = DiffOptions.from_dict(config)
    base = DiffOptions.from_preset(preset)
    explicit = {
        name: getattr(overrides, name)
        for name in ("ignore_key_order", "ignore_array_order", "sort_keys")
        if any(key in config for key in (name, _camel(name)))
    }
    if "ignore_keys" in config or "ignoreKeys" in config:
        explicit["ignore_keys"] = base.ignore_keys | overrides.ignore_keys
    return base.create_updated(**explicit) if explicit else base


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def load_cli_config(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """Return the mapping from ``explicit_path`` or from the discovered file."""
    if explicit_path:
        return load_config_file(explicit_path)
    found = find_config_in_parents()
    return load_config_file(found) if found else {}
