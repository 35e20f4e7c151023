"""Error taxonomy for the edit and thumb handlers.

Each error carries the HTTP status and a stable tag so the handler boundary
can convert it into a response without inspecting the message.
"""

from __future__ import annotations

from typing import Any


class AgapeError(Exception):
    status: int = 500
    tag: str = "server_error"

    def __init__(self, message: str = "", status: int | None = None, details: Any = None) -> None:
        super().__init__(message or self.tag)
        if status is not None:
            self.status = status
        self.details = details

    @property
    def message(self) -> str:
        return str(self)


class MissingCredential(AgapeError):
    status = 500
    tag = "missing_fal_key"


class MethodNotAllowed(AgapeError):
    status = 405
    tag = "method_not_allowed"


class BadRequest(AgapeError):
    status = 400
    tag = "bad_request"


class UpstreamError(AgapeError):
    status = 502
    tag = "fal_error"


class UpstreamTimeout(UpstreamError):
    status = 502
    tag = "fal_timeout"


class NoImageReturned(UpstreamError):
    status = 502
    tag = "no_image_returned"


class ForbiddenHost(AgapeError):
    status = 403
    tag = "forbidden_host"


class UpstreamFetchFailed(AgapeError):
    status = 502
    tag = "upstream_fetch_failed"
