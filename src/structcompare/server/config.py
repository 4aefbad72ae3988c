#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/server/config.py
"""Configuration for the HTTP API server.

Settings come from ``STRUCTCOMPARE_*`` environment variables; command line
arguments take precedence over the environment. Configuration is fixed
at startup.

Classes
-------
- ServerConfig: Server address, limits and logging settings

"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from structcompare.constants import (
    DEFAULT_MAX_BODY_MB,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_RATE_LIMIT,
    DEFAULT_RATE_WINDOW_SECONDS,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
)
from structcompare.options import CloneFrozenMixin

logger = logging.getLogger(__name__)

ENV_PREFIX = "STRUCTCOMPARE_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig(CloneFrozenMixin):
    """HTTP server configuration.

    Attributes
    ----------
    host : str
        Interface to bind (default: 127.0.0.1)
    port : int
        TCP port; 0 picks a free port (default: 8000)
    rate_limit : int
        Requests allowed per client per window (default: 100)
    rate_window : float
        Rate-limit window in seconds (default: 60)
    max_body_mb : float
        Largest accepted request body in megabytes (default: 10)
    max_depth : int
        Deepest document nesting accepted (default: 256)
    log_level : str
        Logging level (DEBUG|INFO|WARNING|ERROR|CRITICAL)
    log_file : str, optional
        File receiving a copy of the log

    """

    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_SERVER_PORT
    rate_limit: int = DEFAULT_RATE_LIMIT
    rate_window: float = DEFAULT_RATE_WINDOW_SECONDS
    max_body_mb: float = DEFAULT_MAX_BODY_MB
    max_depth: int = DEFAULT_MAX_NESTING_DEPTH
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def max_body_bytes(self) -> int:
        """Largest accepted request body in bytes."""
        return int(self.max_body_mb * 1024 * 1024)

    def validate(self) -> None:
        """Validate configuration ranges.

        Raises
        ------
        ValueError
            If a setting is out of range

        """
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}. Must be between 0 and 65535")
        if self.rate_limit < 1:
            raise ValueError(f"Invalid rate limit: {self.rate_limit}. Must be at least 1")
        if self.rate_window <= 0:
            raise ValueError(f"Invalid rate window: {self.rate_window}. Must be positive")
        if self.max_body_mb <= 0:
            raise ValueError(f"Invalid maximum body size: {self.max_body_mb}. Must be positive")
        if self.max_depth < 1:
            raise ValueError(f"Invalid maximum depth: {self.max_depth}. Must be at least 1")
        _validate_log_level(self.log_level)


def _validate_log_level(value: str | None, default: str = "INFO") -> str:
    """Validate and normalize a log level string.

    Raises
    ------
    ValueError
        If value is not a valid log level

    """
    if value is None:
        return default

    normalized = value.upper().strip()
    if normalized not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value!r}. Must be one of: {', '.join(VALID_LOG_LEVELS)}")
    return normalized


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def load_config_from_env() -> ServerConfig:
    """Load configuration from environment variables.

    Raises
    ------
    ValueError
        If a variable holds an unparseable value

    """
    return ServerConfig(
        host=os.getenv(ENV_PREFIX + "HOST") or DEFAULT_SERVER_HOST,
        port=_env_int("PORT", DEFAULT_SERVER_PORT),
        rate_limit=_env_int("RATE_LIMIT", DEFAULT_RATE_LIMIT),
        rate_window=_env_float("RATE_WINDOW", DEFAULT_RATE_WINDOW_SECONDS),
        max_body_mb=_env_float("MAX_BODY_MB", DEFAULT_MAX_BODY_MB),
        max_depth=_env_int("MAX_DEPTH", DEFAULT_MAX_NESTING_DEPTH),
        log_level=_validate_log_level(os.getenv(ENV_PREFIX + "LOG_LEVEL"), default="INFO"),
        log_file=os.getenv(ENV_PREFIX + "LOG_FILE") or None,
    )


def create_argument_parser(prog: str = "structcompare serve") -> argparse.ArgumentParser:
    """Create the argument parser for the ``serve`` command."""
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Serve the structcompare diff, validate and format API over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  STRUCTCOMPARE_HOST           Interface to bind (default: 127.0.0.1)
  STRUCTCOMPARE_PORT           TCP port (default: 8000)
  STRUCTCOMPARE_RATE_LIMIT     Requests per client per window (default: 100)
  STRUCTCOMPARE_RATE_WINDOW    Rate-limit window in seconds (default: 60)
  STRUCTCOMPARE_MAX_BODY_MB    Largest request body in MB (default: 10)
  STRUCTCOMPARE_MAX_DEPTH      Deepest accepted document nesting (default: 256)
  STRUCTCOMPARE_LOG_LEVEL      Logging level (default: INFO)
  STRUCTCOMPARE_LOG_FILE       Copy log output to this file

Examples:
  structcompare serve --port 8080
  curl -X POST localhost:8080/api/v1/diff -d '{"original": {"a": 1}, "modified": {"a": 2}}'
        """,
    )
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="TCP port (0 picks a free port)")
    parser.add_argument("--rate-limit", type=int, dest="rate_limit", help="Requests per client per window")
    parser.add_argument("--rate-window", type=float, dest="rate_window", help="Rate-limit window in seconds")
    parser.add_argument("--max-body-mb", type=float, dest="max_body_mb", help="Largest request body in MB")
    parser.add_argument("--max-depth", type=int, dest="max_depth", help="Deepest accepted document nesting")
    parser.add_argument("--log-level", type=str, dest="log_level", help="Logging level (case-insensitive)")
    parser.add_argument("--log-file", type=str, dest="log_file", help="Copy log output to this file")
    return parser


def load_config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Load configuration from parsed arguments, using the environment as fallback.

    Raises
    ------
    ValueError
        If the resulting configuration is invalid

    """
    config = load_config_from_env()
    overrides = {
        name: getattr(args, name)
        for name in ("host", "port", "rate_limit", "rate_window", "max_body_mb", "max_depth", "log_file")
        if getattr(args, name, None) is not None
    }
    if getattr(args, "log_level", None) is not None:
        overrides["log_level"] = _validate_log_level(args.log_level)
    if overrides:
        config = config.create_updated(**overrides)
    config.validate()
    return config


def load_config(argv: Sequence[str] | None = None) -> ServerConfig:
    """Parse ``argv`` and return the validated configuration."""
    parser = create_argument_parser()
    return load_config_from_args(parser.parse_args(argv))
