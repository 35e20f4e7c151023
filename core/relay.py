"""Same-origin image relay for generated images.

The host allow-list is the only thing keeping this endpoint from being an
open proxy, so the check runs before any outbound request.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
from PIL import UnidentifiedImageError

from core.config import RELAY_MAX_WIDTH, RELAY_TIMEOUT_S
from core.errors import (
    AgapeError,
    BadRequest,
    ForbiddenHost,
    MethodNotAllowed,
    UpstreamFetchFailed,
)
from core.models import Request
from core.postprocess import WEBP_CONTENT_TYPE, optimize_image
from core.responses import empty_response, image_response, text_response
from core.sanitize import normalize_bool

logger = logging.getLogger(__name__)

ALLOWED_HOSTS: frozenset[str] = frozenset({
    "fal.media",
    "v3.fal.media",
    "v3b.fal.media",
    "storage.googleapis.com",
})

DEFAULT_CONTENT_TYPE = "image/png"


def is_allowed_host(hostname: str | None) -> bool:
    """Exact match or subdomain of an allow-listed host."""
    if not hostname:
        return False
    host = hostname.lower().rstrip(".")
    return any(host == allowed or host.endswith("." + allowed) for allowed in ALLOWED_HOSTS)


def validate_src(src: Any) -> str:
    if not isinstance(src, str) or not src.strip():
        raise BadRequest("Missing src")
    src = src.strip()
    try:
        parts = urlsplit(src)
        hostname = parts.hostname
    except ValueError as e:
        raise BadRequest("Invalid src") from e
    if parts.scheme not in ("http", "https") or not hostname:
        raise BadRequest("Invalid src")
    if not is_allowed_host(hostname):
        logger.warning("Rejected relay for host=%s", hostname)
        raise ForbiddenHost("Host not allowed")
    return src


def fetch(src: str, client: httpx.Client | None = None, timeout: float = RELAY_TIMEOUT_S) -> httpx.Response:
    try:
        if client is not None:
            resp = client.get(src, follow_redirects=True, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as http:
                resp = http.get(src)
    except httpx.HTTPError as e:
        logger.error("Relay fetch failed for %s: %s", src, e)
        raise UpstreamFetchFailed("Upstream failed") from e

    if not resp.is_success:
        logger.error("Relay upstream status=%d for %s", resp.status_code, src)
        raise UpstreamFetchFailed("Upstream failed")
    return resp


def verbatim_response(url: str, content: bytes, content_type: str) -> dict[str, Any]:
    """Relay original bytes, but only when upstream labels them as an image."""
    if not content_type.strip().lower().startswith("image/"):
        logger.warning("Refusing to relay %s with content type %s", url, content_type)
        raise UpstreamFetchFailed("Upstream is not an image")
    return image_response(content, content_type)


def relay(
    src: Any,
    raw: bool = False,
    max_width: int = RELAY_MAX_WIDTH,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Validate, fetch and (unless ``raw``) optimize the image at ``src``."""
    url = validate_src(src)
    resp = fetch(url, client=client)
    content = resp.content
    content_type = resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE

    if raw:
        return verbatim_response(url, content, content_type)

    try:
        optimized = optimize_image(content, max_width=max_width)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Could not optimize %s, relaying original bytes: %s", url, e)
        return verbatim_response(url, content, content_type)
    return image_response(optimized, WEBP_CONTENT_TYPE)


def handle_thumb(request: Request, client: httpx.Client | None = None) -> dict[str, Any]:
    """GET /api/agape/thumb?src=<url>[&raw=1]"""
    try:
        if request.method == "OPTIONS":
            return empty_response(204)
        if request.method != "GET":
            raise MethodNotAllowed("Method not allowed")
        raw = normalize_bool(request.query.get("raw"), False).value
        return relay(request.query.get("src"), raw=raw, client=client)
    except AgapeError as e:
        return text_response(e.status, e.message)
    except Exception:
        logger.exception("Relay error")
        return text_response(500, "Server error")
