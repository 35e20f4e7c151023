"""Prompt builder that converts a sanitized request into a generation prompt."""

from __future__ import annotations

import logging

from core.models import DEFAULT_MODE, GenerationRequest
from prompts.templates import (
    COMPOSITION,
    COMPOSITION_WITH_REFERENCE,
    DEFAULT_SCENE,
    DEFAULT_SCENE_WITH_REFERENCE,
    LABEL_ILLUSTRATION_INTEGRITY,
    LABEL_PRESERVATION,
    MODE_STYLES,
    PRODUCT_HIERARCHY,
    PRODUCT_PRESERVATION,
    REFERENCE_DOMINANCE,
    SCENE_TEMPLATE,
    STYLE_TEMPLATE,
)

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


def mode_style(mode: str) -> str:
    return MODE_STYLES.get(str(mode).lower(), MODE_STYLES[DEFAULT_MODE.value])


def scene_directive(request: GenerationRequest) -> str:
    if request.scene:
        scene = request.scene.rstrip(".")
    elif request.has_reference:
        scene = DEFAULT_SCENE_WITH_REFERENCE
    else:
        scene = DEFAULT_SCENE
    return SCENE_TEMPLATE.substitute(scene=scene)


def prompt_blocks(request: GenerationRequest) -> list[str]:
    """Ordered prompt sections. Later sections weigh more downstream."""
    blocks = [
        STYLE_TEMPLATE.substitute(style=mode_style(request.mode.value)),
        scene_directive(request),
        PRODUCT_PRESERVATION,
        LABEL_PRESERVATION,
        LABEL_ILLUSTRATION_INTEGRITY,
        PRODUCT_HIERARCHY,
        COMPOSITION_WITH_REFERENCE if request.has_reference else COMPOSITION,
    ]
    if request.has_reference:
        blocks.append(REFERENCE_DOMINANCE)
    return blocks


def build_prompt(request: GenerationRequest) -> str:
    """Build the full prompt for a request. Pure and deterministic."""
    prompt = BLOCK_SEPARATOR.join(prompt_blocks(request))
    logger.debug(
        "Built prompt mode=%s sku=%s reference=%s (%d chars)",
        request.mode.value, request.sku.value, request.has_reference, len(prompt),
    )
    return prompt
