"""fal.ai image editing provider."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import FAL_ENDPOINT, FAL_KEY_ENV, FAL_TIMEOUT_S, resolve_api_key
from core.errors import MissingCredential, NoImageReturned, UpstreamError, UpstreamTimeout
from core.models import UpstreamImageResult

logger = logging.getLogger(__name__)


def build_image_urls(asset_url: str, reference_url: str | None = None) -> list[str]:
    """Reference first when present; the model treats the first image as primary."""
    if reference_url:
        return [reference_url, asset_url]
    return [asset_url]


def decode_body(text: str) -> Any:
    """Decode a JSON body, keeping unparseable text as a diagnostic payload."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return {"raw": text}


def extract_image_url(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    images = data.get("images")
    if isinstance(images, list) and images and isinstance(images[0], dict):
        url = images[0].get("url")
        if isinstance(url, str) and url.strip():
            return url.strip()
    image = data.get("image")
    if isinstance(image, dict):
        url = image.get("url")
        if isinstance(url, str) and url.strip():
            return url.strip()
    return None


class FalEditProvider:
    """Single-attempt client for the fal nano-banana-pro edit endpoint."""

    provider_name = "fal"

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str = FAL_ENDPOINT,
        timeout: float = FAL_TIMEOUT_S,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = resolve_api_key(api_key, FAL_KEY_ENV)
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client
        if not self.api_key:
            raise MissingCredential(f"Missing {FAL_KEY_ENV} in environment")

    def build_body(
        self,
        prompt: str,
        asset_url: str,
        reference_url: str | None = None,
        aspect_ratio: str = "9:16",
        resolution: str = "1K",
        output_format: str = "png",
        safety_tolerance: str = "4",
    ) -> dict[str, Any]:
        # No sync_mode: inline data URIs make the response too large.
        return {
            "prompt": prompt,
            "image_urls": build_image_urls(asset_url, reference_url),
            "num_images": 1,
            "aspect_ratio": aspect_ratio,
            "resolution": resolution,
            "output_format": output_format,
            "safety_tolerance": str(safety_tolerance),
        }

    def edit(
        self,
        prompt: str,
        asset_url: str,
        reference_url: str | None = None,
        aspect_ratio: str = "9:16",
        resolution: str = "1K",
        output_format: str = "png",
        safety_tolerance: str = "4",
    ) -> UpstreamImageResult:
        body = self.build_body(
            prompt, asset_url, reference_url,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
            output_format=output_format,
            safety_tolerance=safety_tolerance,
        )
        headers = {
            "Authorization": f"Key {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.info(
            "Dispatching to fal (images=%d, aspect=%s, resolution=%s)",
            len(body["image_urls"]), aspect_ratio, resolution,
        )

        try:
            if self._client is not None:
                resp = self._client.post(self.endpoint, json=body, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as http:
                    resp = http.post(self.endpoint, json=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("fal request timed out after %.0fs", self.timeout)
            raise UpstreamTimeout(f"fal request timed out after {self.timeout:.0f}s") from e
        except httpx.HTTPError as e:
            logger.error("fal request failed: %s", e)
            raise UpstreamError(f"fal request failed: {e}") from e

        data = decode_body(resp.text)
        logger.info("fal responded status=%d", resp.status_code)

        if not resp.is_success:
            raise UpstreamError(
                f"fal returned status {resp.status_code}",
                status=resp.status_code,
                details=data,
            )

        url = extract_image_url(data)
        if not url:
            raise NoImageReturned("fal returned no image url", details=data)

        return UpstreamImageResult(url=url, raw=data)
