"""Runtime configuration: credentials and fixed service constants."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

FAL_ENDPOINT = "https://fal.run/fal-ai/nano-banana-pro/edit"
FAL_KEY_ENV = "FAL_KEY"
FAL_TIMEOUT_S = 90.0

THUMB_PATH = "/api/agape/thumb"
RELAY_TIMEOUT_S = 30.0
RELAY_MAX_WIDTH = 1080
RELAY_WEBP_QUALITY = 82


def resolve_api_key(explicit: str | None, *env_names: str) -> str:
    """Return the explicit key if set, otherwise the first non-empty env var."""
    if explicit and explicit.strip():
        return explicit.strip()
    for name in env_names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def fal_key(env: dict[str, str] | None = None) -> str:
    if env is not None:
        return (env.get(FAL_KEY_ENV) or "").strip()
    return resolve_api_key(None, FAL_KEY_ENV)
