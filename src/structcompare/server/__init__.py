#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/server/__init__.py
"""HTTP API for diffing, validating and formatting JSON documents."""

from structcompare.server.api import ApiResponse, DiffApi, error_response, success_response
from structcompare.server.config import ServerConfig, load_config, load_config_from_args, load_config_from_env
from structcompare.server.http import client_key, create_handler, create_server, run_server

__all__ = [
    "ApiResponse",
    "DiffApi",
    "ServerConfig",
    "client_key",
    "create_handler",
    "create_server",
    "error_response",
    "load_config",
    "load_config_from_args",
    "load_config_from_env",
    "run_server",
    "success_response",
]
