"""Input sanitizer: turns any inbound payload into a fully defaulted GenerationRequest.

Sanitization is total. Malformed or unrecognized values never raise; they
resolve to the field default and the reason is kept in ``request.ignored``.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, TypeVar

from core.models import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_MODE,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_RESOLUTION,
    DEFAULT_SAFETY_TOLERANCE,
    DEFAULT_SKU,
    SAFETY_TOLERANCES,
    SCENE_MAX_CHARS,
    GenerationRequest,
    Mode,
    Normalized,
    OutputFormat,
    Resolution,
    Sku,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

TRUE_TOKENS = frozenset({"true", "1", "yes", "y"})
FALSE_TOKENS = frozenset({"false", "0", "no", "n"})

# First key present wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "tapa": ("tapa", "has_cap", "hasCap"),
    "aspect_ratio": ("aspect_ratio", "aspectRatio"),
    "reference_image_url": ("reference_image_url", "reference_url", "referenceImageUrl"),
    "output_format": ("output_format", "outputFormat"),
    "safety_tolerance": ("safety_tolerance", "safetyTolerance"),
}


def parse_payload(payload: Any) -> dict[str, Any]:
    """Collapse dict, JSON string or bytes bodies into a single dict."""
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            return {}
    if isinstance(payload, str):
        if not payload.strip():
            return {}
        try:
            decoded = json.loads(payload)
        except (ValueError, RecursionError):
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def clean_str(value: Any) -> str | None:
    """Trimmed string, or None for non-strings and empty strings."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_enum(
    value: Any,
    enum_cls: type[E],
    default: E,
    lowercase: bool = True,
) -> Normalized[E]:
    if value is None:
        return Normalized(default)
    text = clean_str(value)
    if text is None:
        return Normalized(default, "not a non-empty string")
    if lowercase:
        text = text.lower()
    try:
        return Normalized(enum_cls(text))
    except ValueError:
        return Normalized(default, f"unknown value {text!r}")


def normalize_choice(value: Any, choices: tuple[str, ...], default: str) -> Normalized[str]:
    if value is None:
        return Normalized(default)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    text = clean_str(value)
    if text is None:
        return Normalized(default, "not a non-empty string")
    if text not in choices:
        return Normalized(default, f"unknown value {text!r}")
    return Normalized(text)


def normalize_bool(value: Any, default: bool) -> Normalized[bool]:
    if value is None:
        return Normalized(default)
    if isinstance(value, bool):
        return Normalized(value)
    if isinstance(value, (int, float)):
        return Normalized(value != 0)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_TOKENS:
            return Normalized(True)
        if token in FALSE_TOKENS:
            return Normalized(False)
    return Normalized(default, f"not a boolean: {value!r}")


def normalize_scene(value: Any) -> Normalized[str]:
    if value is None:
        return Normalized("")
    text = clean_str(value)
    if text is None:
        if isinstance(value, str):
            return Normalized("")
        return Normalized("", "not a string")
    if len(text) > SCENE_MAX_CHARS:
        return Normalized(text[:SCENE_MAX_CHARS].rstrip(), f"truncated to {SCENE_MAX_CHARS} chars")
    return Normalized(text)


def normalize_reference_url(value: Any) -> Normalized[str | None]:
    if value is None:
        return Normalized(None)
    text = clean_str(value)
    if text is None:
        if isinstance(value, str):
            return Normalized(None)
        return Normalized(None, "not a string")
    if not text.lower().startswith(("http://", "https://")):
        return Normalized(None, "not an absolute http(s) url")
    return Normalized(text)


def _field(data: dict[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES.get(name, (name,)):
        if key in data:
            return data[key]
    return None


def sanitize_request(payload: Any) -> GenerationRequest:
    """Build a GenerationRequest from an arbitrary payload without raising."""
    data = parse_payload(payload)

    fields: dict[str, Normalized[Any]] = {
        "mode": normalize_enum(_field(data, "mode"), Mode, DEFAULT_MODE),
        "scene": normalize_scene(_field(data, "scene")),
        "sku": normalize_enum(_field(data, "sku"), Sku, DEFAULT_SKU),
        "tapa": normalize_bool(_field(data, "tapa"), True),
        "aspect_ratio": normalize_choice(
            _field(data, "aspect_ratio"), ASPECT_RATIOS, DEFAULT_ASPECT_RATIO
        ),
        "resolution": normalize_enum(
            _field(data, "resolution"), Resolution, DEFAULT_RESOLUTION, lowercase=False
        ),
        "reference_image_url": normalize_reference_url(_field(data, "reference_image_url")),
        "output_format": normalize_enum(
            _field(data, "output_format"), OutputFormat, DEFAULT_OUTPUT_FORMAT
        ),
        "safety_tolerance": normalize_choice(
            _field(data, "safety_tolerance"), SAFETY_TOLERANCES, DEFAULT_SAFETY_TOLERANCE
        ),
    }

    ignored = {name: n.ignored for name, n in fields.items() if n.ignored}
    values = {name: n.value for name, n in fields.items()}

    # There is no capless asset for the small bottle.
    if values["sku"] is Sku.BOTTLE_335ML and not values["tapa"]:
        values["tapa"] = True
        ignored["tapa"] = "forced true for 335ml"

    if ignored:
        logger.debug("Sanitizer fallbacks: %s", ignored)

    return GenerationRequest(ignored=ignored, **values)
