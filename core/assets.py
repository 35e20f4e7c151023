"""Fixed catalog of bottle asset images."""

from __future__ import annotations

from types import MappingProxyType

from core.models import Sku

ASSETS = MappingProxyType({
    "bottle_with_cap_600ml": "https://sendmelab.com/itag/gpts/bottle_with_cap.png",
    "bottle_without_cap_600ml": "https://sendmelab.com/itag/gpts/bottle_without_cap.png",
    "bottle_small_335ml": "https://sendmelab.com/itag/gpts/Bottle-Small.png",
})


def resolve_asset(sku: Sku | str, tapa: bool) -> str:
    """Return the asset URL for a SKU; the 335ml bottle ignores ``tapa``."""
    if Sku(sku) is Sku.BOTTLE_335ML:
        return ASSETS["bottle_small_335ml"]
    return ASSETS["bottle_with_cap_600ml"] if tapa else ASSETS["bottle_without_cap_600ml"]
