"""Response shaping: proxy links, markdown and Lambda-style response dicts."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from core.config import THUMB_PATH
from core.errors import AgapeError
from core.models import GenerationRequest, UpstreamImageResult

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}

IMMUTABLE_CACHE = "public, max-age=31536000, immutable"


def _first(value: str) -> str:
    # Proxies may append comma-separated values; the client-facing one is first.
    return value.split(",")[0].strip()


def request_origin(headers: dict[str, str]) -> str:
    """Derive scheme://host for the inbound request, honoring forwarding headers."""
    lowered = {k.lower(): v for k, v in (headers or {}).items()}
    proto = _first(lowered.get("x-forwarded-proto", "")) or "https"
    host = (
        _first(lowered.get("x-forwarded-host", ""))
        or _first(lowered.get("host", ""))
        or "localhost"
    )
    return f"{proto}://{host}"


def build_proxy_url(origin: str, image_url: str) -> str:
    return f"{origin.rstrip('/')}{THUMB_PATH}?src={quote(image_url, safe='')}"


def markdown_link_target(url: str) -> str:
    """Wrap a URL so spaces and parentheses cannot break a markdown link."""
    return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"


def shape_success(
    result: UpstreamImageResult,
    request: GenerationRequest,
    headers: dict[str, str],
) -> dict[str, Any]:
    proxy_url = build_proxy_url(request_origin(headers), result.url)
    return {
        "ok": True,
        "image_url": result.url,
        "image_proxy_url": proxy_url,
        "render_markdown": f"![Agape {request.sku.value} - {request.mode.value}]({proxy_url})",
        "download_markdown": f"[Descargar imagen]({markdown_link_target(result.url)})",
        **request.echo(),
        "ignored": dict(request.ignored),
    }


def json_response(status: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def text_response(status: int, text: str) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {**CORS_HEADERS, "Content-Type": "text/plain; charset=utf-8"},
        "body": text,
    }


def empty_response(status: int = 204) -> dict[str, Any]:
    return {"statusCode": status, "headers": dict(CORS_HEADERS), "body": ""}


def error_response(error: AgapeError) -> dict[str, Any]:
    body: dict[str, Any] = {"ok": False, "error": error.tag, "message": error.message}
    if error.details is not None:
        body["status"] = error.status
        body["details"] = error.details
    return json_response(error.status, body)


def image_response(content: bytes, content_type: str) -> dict[str, Any]:
    return {
        "statusCode": 200,
        "headers": {
            **CORS_HEADERS,
            "Content-Type": content_type,
            "Cache-Control": IMMUTABLE_CACHE,
            "Content-Disposition": "inline",
            "X-Content-Type-Options": "nosniff",
        },
        "body": content,
    }
