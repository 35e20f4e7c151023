"""Prompt templates and rule blocks for bottle product photography."""

from __future__ import annotations

from string import Template
from types import MappingProxyType

# --- Mode style sentences ---

MODE_STYLES = MappingProxyType({
    "naturaleza": (
        "documentary tropical nature, real Costa Rica, natural daylight, "
        "authentic textures, no dramatization"
    ),
    "spot": (
        "clean commercial spot look, controlled lighting, premium but realistic, "
        "simple composition"
    ),
    "corporativo": (
        "corporate minimal look, clean background, sober premium lighting, "
        "institutional style"
    ),
    "caribe": (
        "fresh Caribbean natural look, bright but real light, turquoise ocean bokeh, "
        "no resort glam exaggeration"
    ),
    "publicitario": (
        "advertising hero product composition, poster-like framing, product dominant, "
        "realistic"
    ),
})

STYLE_TEMPLATE = Template("Style: $style.")

# --- Scene directive ---

SCENE_TEMPLATE = Template("Scene direction:\n$scene.")

DEFAULT_SCENE = "real Costa Rica environment, tasteful composition, natural light"

DEFAULT_SCENE_WITH_REFERENCE = (
    "recreate the environment, camera position and lighting of the first reference image, "
    "placing the bottle naturally inside that scene"
)

# --- Rule blocks ---

PRODUCT_PRESERVATION = """\
Product preservation:
Do not modify bottle geometry, proportions or silhouette. Preserve the product exactly.
Do not warp the bottle. Do not change the cap. Realistic scale relative to the scene.
Photorealistic commercial beverage photography. Natural optical physics.
Realistic plastic refraction and reflections. Real condensation droplets.
Authentic daylight behavior. No HDR exaggeration. No volumetric rays. No 3D render look.
No volcano eruption, no lava, no catastrophes."""

LABEL_PRESERVATION = """\
Label preservation:
Keep the label exactly as in the product image: same text, same typography, same colors.
Do not invent logos. Do not alter typography. Do not translate or rewrite label text.
The label must stay readable and facing the camera."""

LABEL_ILLUSTRATION_INTEGRITY = """\
Label illustration integrity:
The illustration printed on the label is part of the product artwork.
Do not redraw, extend, animate or bring label illustrations into the scene.
Do not let scene elements overlap or replace the label artwork."""

PRODUCT_HIERARCHY = """\
Product hierarchy:
The bottle is the only branded item in frame. No external brands, logos or readable text
anywhere else in the image. No competing products, cups or packaging."""

COMPOSITION = """\
Composition:
hero product, centered or rule-of-thirds placement, readable label, correct proportions.
Real camera feel, realistic depth of field, natural bokeh, subtle color grading."""

COMPOSITION_WITH_REFERENCE = """\
Composition:
keep the framing of the reference image; do not recenter the scene around the bottle.
Preserve the asymmetry, horizon line and negative space of the reference.
Place the bottle where a real object would sit in that frame, label readable, correct proportions."""

REFERENCE_DOMINANCE = """\
Reference dominance:
The first image is a camera and lighting reference. Match its camera angle, camera distance,
lens perspective, framing and lighting direction exactly.
Never copy identifying content from the reference: no faces, no people, no logos,
no text, no brand marks.
The second image is the product; it must appear exactly as provided."""
