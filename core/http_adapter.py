"""Bridge between Vercel's BaseHTTPRequestHandler runtime and the pure handlers."""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler
from typing import Any, Callable
from urllib.parse import parse_qs, urlsplit

from core.models import Request
from core.responses import text_response

logger = logging.getLogger(__name__)

HandlerFn = Callable[[Request], dict[str, Any]]


def parse_query(path: str) -> dict[str, str]:
    query = parse_qs(urlsplit(path).query, keep_blank_values=True)
    return {key: values[0] for key, values in query.items() if values}


def encode_body(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


def make_handler(fn: HandlerFn) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class that routes every method through ``fn``."""

    class _Handler(BaseHTTPRequestHandler):
        def _read_body(self) -> bytes:
            length = int(self.headers.get("Content-Length") or 0)
            if length < 0:
                raise ValueError(f"negative Content-Length: {length}")
            return self.rfile.read(length) if length > 0 else b""

        def _respond(self) -> dict[str, Any]:
            try:
                raw_body = self._read_body()
            except ValueError:
                logger.warning("Invalid Content-Length: %r", self.headers.get("Content-Length"))
                return text_response(400, "Invalid Content-Length")
            try:
                request = Request(
                    method=self.command,
                    headers=dict(self.headers.items()),
                    body=raw_body,
                    query=parse_query(self.path),
                )
                return fn(request)
            except Exception:
                logger.exception("Unhandled error in %s %s", self.command, self.path)
                return text_response(500, "Server error")

        def _dispatch(self) -> None:
            response = self._respond()
            payload = encode_body(response.get("body"))

            self.send_response(response.get("statusCode", 200))
            for name, value in response.get("headers", {}).items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if payload and self.command != "HEAD":
                self.wfile.write(payload)

        do_GET = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_PATCH = _dispatch
        do_DELETE = _dispatch
        do_HEAD = _dispatch
        do_OPTIONS = _dispatch

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

    return _Handler
