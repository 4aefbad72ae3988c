#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/server/api.py
"""Transport-independent handlers for the HTTP API.

Each handler takes the decoded JSON request body and returns an
``ApiResponse`` holding the status code and the response envelope:

- success: ``{"success": true, "data": {...}}``
- failure: ``{"success": false, "error": "...", "details": "..."}``

Missing or invalid fields give 400; anything unexpected gives 500 with
the exception message as ``details`` and no traceback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from structcompare import __version__
from structcompare.constants import (
    API_PREFIX,
    DEFAULT_JSON_INDENT,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_RATE_LIMIT,
    DEFAULT_RATE_WINDOW_SECONDS,
    MAX_JSON_INDENT,
)
from structcompare.diff.structural import compare_values
from structcompare.exceptions import NestingDepthError, ValidationError
from structcompare.formats.json_codec import serialize_json
from structcompare.normalize import normalize
from structcompare.options import DiffOptions
from structcompare.schema import validate_against_schema
from structcompare.utils.size import byte_size
from structcompare.validation import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Status code, JSON payload and extra headers of a response."""

    status: int
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


def success_response(data: Any, status: int = 200) -> ApiResponse:
    """Wrap ``data`` in a success envelope."""
    return ApiResponse(status, {"success": True, "data": data})


def error_response(
    status: int, error: str, details: Optional[str] = None, headers: Optional[dict[str, str]] = None
) -> ApiResponse:
    """Build a failure envelope."""
    payload: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        payload["details"] = details
    return ApiResponse(status, payload, headers or {})


class DiffApi:
    """Handlers for the diff, validate and format endpoints.

    Parameters
    ----------
    max_depth : int
        Deepest document nesting accepted
    rate_limit : int
        Advertised in the endpoint description
    rate_window : float
        Advertised in the endpoint description

    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_NESTING_DEPTH,
        rate_limit: int = DEFAULT_RATE_LIMIT,
        rate_window: float = DEFAULT_RATE_WINDOW_SECONDS,
    ):
        """Initialize the handlers."""
        self.max_depth = max_depth
        self.rate_limit = rate_limit
        self.rate_window = rate_window
        self._post_routes: dict[str, Callable[[Any], ApiResponse]] = {
            "/diff": self.handle_diff,
            "/validate": self.handle_validate,
            "/format": self.handle_format,
        }

    @staticmethod
    def normalize_path(path: str) -> str:
        """Strip the query string, trailing slash and ``/api/v1`` prefix."""
        path = path.split("?", 1)[0].rstrip("/") or "/"
        if path == API_PREFIX or path.startswith(API_PREFIX + "/"):
            path = path[len(API_PREFIX) :] or "/"
        return path

    def handle_get(self, path: str) -> ApiResponse:
        """Handle a GET request; only the endpoint description is served."""
        if self.normalize_path(path) in ("/", "/diff"):
            return ApiResponse(200, self.describe())
        return error_response(404, "Not found")

    def handle_post(self, path: str, body: Any) -> ApiResponse:
        """Route a POST request to its handler.

        Handlers run inside a catch-all so that an unexpected error becomes
        a 500 envelope rather than a dropped connection.
        """
        handler = self._post_routes.get(self.normalize_path(path))
        if handler is None:
            return error_response(404, "Not found")
        if not isinstance(body, dict):
            return error_response(400, "Request body must be a JSON object")
        try:
            return handler(body)
        except Exception as e:
            logger.exception("Unhandled error in %s", path)
            return error_response(500, "Internal server error", str(e))

    def handle_diff(self, body: dict[str, Any]) -> ApiResponse:
        """Compare ``original`` with ``modified`` after optional normalization."""
        original = body.get("original")
        modified = body.get("modified")
        if original is None or modified is None:
            return error_response(400, 'Both "original" and "modified" fields are required')

        raw_options = body.get("options")
        try:
            options = DiffOptions.from_dict(raw_options)
        except ValidationError as e:
            return error_response(400, "Invalid options", e.message)

        for name, value in (("original", original), ("modified", modified)):
            try:
                result = validate(serialize_json(value, indent=None))
            except ValueError as e:
                return error_response(400, f"Invalid {name} JSON", str(e))
            if not result.is_valid:
                return error_response(400, f"Invalid {name} JSON", result.error)

        try:
            processed_original = normalize(original, options, self.max_depth)
            processed_modified = normalize(modified, options, self.max_depth)
            stats = compare_values(processed_original, processed_modified, max_depth=self.max_depth).stats
        except NestingDepthError as e:
            return error_response(400, "Document is too deeply nested", e.message)

        return success_response(
            {
                "differenceCount": stats.difference_count,
                "isValid": True,
                "processedOriginal": processed_original,
                "processedModified": processed_modified,
                "appliedOptions": raw_options if raw_options is not None else {},
                "stats": stats.to_dict(),
            }
        )

    def handle_validate(self, body: dict[str, Any]) -> ApiResponse:
        """Validate ``json`` against ``schema``."""
        document = body.get("json")
        schema = body.get("schema")
        if document is None or schema is None:
            return error_response(400, 'Both "json" and "schema" fields are required')

        result = validate_against_schema(document, schema)
        return success_response(result.to_dict())

    def handle_format(self, body: dict[str, Any]) -> ApiResponse:
        """Pretty-print or minify ``json``."""
        document = body.get("json")
        if document is None:
            return error_response(400, 'Field "json" is required')

        tab_size = body.get("tabSize", DEFAULT_JSON_INDENT)
        if isinstance(tab_size, bool) or not isinstance(tab_size, int) or not 0 <= tab_size <= MAX_JSON_INDENT:
            return error_response(400, f'"tabSize" must be an integer between 0 and {MAX_JSON_INDENT}')
        minify = body.get("minify", False)
        sort_keys = body.get("sortKeys", False)
        if not isinstance(minify, bool) or not isinstance(sort_keys, bool):
            return error_response(400, '"minify" and "sortKeys" must be booleans')

        formatted = serialize_json(document, indent=None if minify else tab_size, sort_keys=sort_keys)
        return success_response({"formatted": formatted, "size": byte_size(formatted)})

    def describe(self) -> dict[str, Any]:
        """Return a description of the API for GET requests."""
        window = int(self.rate_window) if float(self.rate_window).is_integer() else self.rate_window
        return {
            "name": "structcompare API",
            "version": __version__,
            "endpoints": {
                f"POST {API_PREFIX}/diff": {
                    "description": "Compare two JSON documents",
                    "body": {
                        "original": "any (required) - The original document",
                        "modified": "any (required) - The modified document",
                        "options": {
                            "ignoreKeyOrder": "boolean - Normalize key order away",
                            "ignoreArrayOrder": "boolean - Sort arrays before comparison",
                            "sortKeys": "boolean - Alphabetically sort all keys",
                            "ignoreKeys": "string[] - Keys to ignore at any depth",
                        },
                    },
                    "response": {
                        "differenceCount": "number",
                        "isValid": "boolean",
                        "processedOriginal": "any",
                        "processedModified": "any",
                        "appliedOptions": "object",
                        "stats": "object",
                    },
                },
                f"POST {API_PREFIX}/validate": {
                    "description": "Validate a document against a JSON Schema (Draft 07)",
                    "body": {
                        "json": "any (required) - Document to validate",
                        "schema": "object (required) - JSON Schema",
                    },
                },
                f"POST {API_PREFIX}/format": {
                    "description": "Pretty-print or minify a document",
                    "body": {
                        "json": "any (required) - Document to format",
                        "tabSize": f"number - Indentation 0-{MAX_JSON_INDENT} (default: {DEFAULT_JSON_INDENT})",
                        "minify": "boolean - Emit compact output",
                        "sortKeys": "boolean - Sort object keys",
                    },
                },
            },
            "rateLimit": f"{self.rate_limit} requests per {window} seconds",
            "authentication": "None",
        }
