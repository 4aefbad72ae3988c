#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/server/http.py
"""HTTP transport for the diff API.

Wraps ``DiffApi`` in a ``http.server`` request handler. The transport owns
body size checks, JSON decoding of the request, rate limiting and response
encoding; everything else is delegated to the API object.

Warning
-------
This server is intended for local and development use. It has no
authentication and no TLS.
"""

from __future__ import annotations

import errno
import json
import logging
import math
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional

from structcompare.formats.json_codec import TOO_DEEP_MESSAGE
from structcompare.logging_utils import configure_logging
from structcompare.ratelimit import RateLimiter
from structcompare.server.api import ApiResponse, DiffApi, error_response
from structcompare.server.config import ServerConfig

logger = logging.getLogger(__name__)

_DRAIN_LIMIT = 1024 * 1024


def client_key(headers: Any, peer_address: str) -> str:
    """Identify a client by its first ``X-Forwarded-For`` entry or peer address.

    Examples
    --------
    >>> client_key({"X-Forwarded-For": "10.0.0.1, 10.0.0.2"}, "127.0.0.1")
    '10.0.0.1'
    >>> client_key({}, "127.0.0.1")
    '127.0.0.1'

    """
    forwarded = headers.get("X-Forwarded-For") or ""
    first = forwarded.split(",", 1)[0].strip()
    return first or peer_address or "unknown"


def create_handler(
    api: DiffApi, limiter: RateLimiter, max_body_bytes: int
) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class bound to ``api`` and ``limiter``."""

    class DiffRequestHandler(BaseHTTPRequestHandler):
        server_version = "structcompare"

        def do_GET(self) -> None:
            if self._rate_limited():
                return
            self._send(api.handle_get(self.path))

        def do_POST(self) -> None:
            if self._rate_limited():
                return

            try:
                content_length = int(self.headers.get("Content-Length", 0))
            except ValueError:
                self._send(error_response(400, "Invalid Content-Length header"))
                return

            if content_length > max_body_bytes:
                # Discard up to 1 MB of the unread body before replying
                self.rfile.read(min(content_length, _DRAIN_LIMIT))
                self.close_connection = True
                self._send(
                    error_response(
                        413,
                        "Payload too large",
                        f"Request body exceeds {max_body_bytes} bytes",
                    )
                )
                return

            raw = self.rfile.read(content_length) if content_length > 0 else b""
            try:
                body = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                self._send(error_response(400, "Invalid JSON in request body", str(e)))
                return
            except RecursionError:
                self._send(error_response(400, "Invalid JSON in request body", TOO_DEEP_MESSAGE))
                return

            try:
                response = api.handle_post(self.path, body)
            except Exception as e:
                logger.exception("Unhandled error for POST %s", self.path)
                response = error_response(500, "Internal server error", str(e))
            self._send(response)

        def _rate_limited(self) -> bool:
            decision = limiter.check(client_key(self.headers, self.client_address[0]))
            if decision.allowed:
                return False
            retry_after = str(max(1, math.ceil(decision.reset_after)))
            self._send(
                error_response(
                    429,
                    "Too many requests",
                    f"Rate limit of {limiter.limit} requests exceeded; retry after {retry_after} seconds",
                    headers={"Retry-After": retry_after},
                )
            )
            return True

        def _send(self, response: ApiResponse) -> None:
            payload = json.dumps(response.payload, ensure_ascii=False).encode("utf-8")
            self.send_response(response.status)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            for name, value in response.headers.items():
                self.send_header(name, value)
            self.end_headers()
            self.wfile.write(payload)

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

    return DiffRequestHandler


def create_server(
    config: ServerConfig,
    api: Optional[DiffApi] = None,
    limiter: Optional[RateLimiter] = None,
) -> ThreadingHTTPServer:
    """Bind a threaded HTTP server for ``config``.

    Parameters
    ----------
    config : ServerConfig
        Address, limits and depth bound
    api : DiffApi, optional
        Handlers to serve; built from ``config`` when omitted
    limiter : RateLimiter, optional
        Rate limiter owned by this server; built from ``config`` when omitted

    Raises
    ------
    OSError
        If the address cannot be bound

    """
    api = api or DiffApi(max_depth=config.max_depth, rate_limit=config.rate_limit, rate_window=config.rate_window)
    limiter = limiter or RateLimiter(config.rate_limit, config.rate_window)
    handler = create_handler(api, limiter, config.max_body_bytes)
    return ThreadingHTTPServer((config.host, config.port), handler)


def run_server(config: ServerConfig) -> int:
    """Serve until interrupted and return a process exit code."""
    from structcompare.cli.builder import EXIT_ERROR, EXIT_SUCCESS

    configure_logging(config.log_level, log_file=config.log_file)

    try:
        httpd = create_server(config)
    except OSError as e:
        if e.errno == errno.EADDRINUSE or "Address already in use" in str(e):
            logger.error("Port %s is already in use", config.port)
        else:
            logger.error("Could not start server: %s", e)
        return EXIT_ERROR

    with httpd:
        host, port = httpd.server_address[:2]
        logger.info("Serving structcompare API at http://%s:%s/api/v1/diff", host, port)
        logger.warning("This server is for DEVELOPMENT USE ONLY. Do not expose it to untrusted networks.")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down server...")
    return EXIT_SUCCESS
