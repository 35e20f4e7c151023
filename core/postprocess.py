"""Post-processing for relayed images: downscale and re-encode as WEBP."""

from __future__ import annotations

import io
import logging

from PIL import Image

from core.config import RELAY_MAX_WIDTH, RELAY_WEBP_QUALITY

logger = logging.getLogger(__name__)

WEBP_CONTENT_TYPE = "image/webp"


def resize_to_max_width(image: Image.Image, max_width: int = RELAY_MAX_WIDTH) -> Image.Image:
    """Scale an image down to ``max_width`` keeping aspect ratio. Never upscales."""
    src_w, src_h = image.size
    if src_w <= max_width:
        return image
    new_h = max(1, round(src_h * (max_width / src_w)))
    return image.resize((max_width, new_h), Image.LANCZOS)


def encode_webp(image: Image.Image, quality: int = RELAY_WEBP_QUALITY) -> bytes:
    if image.mode not in ("RGB", "RGBA"):
        has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")
    buf = io.BytesIO()
    image.save(buf, format="WEBP", quality=quality, method=4)
    return buf.getvalue()


def optimize_image(
    content: bytes,
    max_width: int = RELAY_MAX_WIDTH,
    quality: int = RELAY_WEBP_QUALITY,
) -> bytes:
    """Decode, downscale and re-encode image bytes.

    Raises ``PIL.UnidentifiedImageError`` (an ``OSError``) when the bytes are
    not a decodable image.
    """
    with Image.open(io.BytesIO(content)) as image:
        image.load()
        src_size = image.size
        processed = resize_to_max_width(image, max_width)
        encoded = encode_webp(processed, quality)

    logger.info(
        "Optimized image %dx%d -> %dx%d (%d -> %d bytes)",
        src_size[0], src_size[1], processed.width, processed.height, len(content), len(encoded),
    )
    return encoded
