"""Vercel serverless entrypoint for the service index.

Lists the available routes and whether the fal credential is configured,
without ever exposing its value.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.config import THUMB_PATH, fal_key
from core.http_adapter import make_handler
from core.models import Request
from core.responses import empty_response, json_response

logging.basicConfig(level=logging.INFO)

EDIT_PATH = "/api/agape/edit"


def handle_index(request: Request, env: dict[str, str] | None = None) -> dict:
    if request.method == "OPTIONS":
        return empty_response(204)
    if request.method not in ("GET", "HEAD"):
        return json_response(405, {"ok": False, "error": "method_not_allowed", "message": "Method not allowed"})

    body = {
        "ok": True,
        "project": "agape-nb-proxy",
        "routes": {
            "edit": {"path": EDIT_PATH, "methods": ["POST", "OPTIONS"]},
            "thumb": {"path": THUMB_PATH, "methods": ["GET", "OPTIONS"], "query": ["src", "raw"]},
        },
        "fal_key_configured": bool(fal_key(env)),
    }
    return json_response(200, body)


handler = make_handler(handle_index)
