"""Edit pipeline: sanitize, resolve asset, build prompt, dispatch to fal, shape response."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.assets import resolve_asset
from core.config import fal_key
from core.errors import AgapeError, MethodNotAllowed, MissingCredential
from core.models import GenerationRequest, Request, UpstreamImageResult
from core.prompt_builder import build_prompt
from core.providers import FalEditProvider
from core.responses import empty_response, error_response, json_response, shape_success
from core.sanitize import sanitize_request

logger = logging.getLogger(__name__)


def generate(
    request: GenerationRequest,
    provider: FalEditProvider,
) -> UpstreamImageResult:
    """Run one generation for an already sanitized request."""
    asset_url = resolve_asset(request.sku, request.tapa)
    prompt = build_prompt(request)

    logger.info(
        "Generating mode=%s sku=%s tapa=%s reference=%s",
        request.mode.value, request.sku.value, request.tapa, request.has_reference,
    )

    return provider.edit(
        prompt,
        asset_url,
        reference_url=request.reference_image_url,
        aspect_ratio=request.aspect_ratio,
        resolution=request.resolution.value,
        output_format=request.output_format.value,
        safety_tolerance=request.safety_tolerance,
    )


def handle_edit(
    request: Request,
    env: dict[str, str] | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """POST /api/agape/edit

    ``env`` overrides the process environment for the credential lookup and
    ``client`` overrides the outbound HTTP client; both exist for tests.
    """
    try:
        if request.method == "OPTIONS":
            return empty_response(204)
        if request.method != "POST":
            raise MethodNotAllowed("Method not allowed")

        api_key = fal_key(env)
        if not api_key:
            raise MissingCredential("Missing FAL_KEY in environment")

        generation = sanitize_request(request.body)
        provider = FalEditProvider(api_key=api_key, client=client)
        result = generate(generation, provider)

        return json_response(200, shape_success(result, generation, request.headers))

    except AgapeError as e:
        logger.warning("Edit failed: %s (%s)", e.tag, e.message)
        return error_response(e)
    except Exception as e:
        logger.exception("Edit error")
        return json_response(500, {"ok": False, "error": "server_error", "message": str(e)})
