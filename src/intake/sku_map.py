"""SKU catalog mapping checkout line items to tier, add-ons and fulfillment mode."""

import json
import os
from dataclasses import dataclass

from intake.intake import FulfillmentType, Tier


@dataclass(frozen=True)
class SkuMapping:
    tier: Tier | None = None
    add_ons: frozenset[str] = frozenset()
    fulfillment_type: FulfillmentType | None = None


DEFAULT_SKU_MAP: dict[str, SkuMapping] = {
    "blueprint-mini": SkuMapping(tier=Tier.MINI),
    "blueprint-lite": SkuMapping(tier=Tier.LITE),
    "blueprint-full": SkuMapping(tier=Tier.FULL),
    "blueprint-full-magnets": SkuMapping(
        tier=Tier.FULL,
        add_ons=frozenset({"extra-icons"}),
        fulfillment_type=FulfillmentType.PHYSICAL,
    ),
    "magnet-kit-cricut": SkuMapping(
        tier=Tier.LITE,
        add_ons=frozenset({"cricut-cut-file"}),
        fulfillment_type=FulfillmentType.CRICUT_READY,
    ),
    "child-addendum": SkuMapping(add_ons=frozenset({"child-addendum"})),
}


def _mapping_from_dict(data: dict) -> SkuMapping:
    tier = data.get("tier")
    fulfillment_type = data.get("fulfillment_type") or data.get("fulfillmentType")
    return SkuMapping(
        tier=Tier(tier) if tier else None,
        add_ons=frozenset(data.get("add_ons") or data.get("addOns") or ()),
        fulfillment_type=FulfillmentType(fulfillment_type) if fulfillment_type else None,
    )


def load_sku_map() -> dict[str, SkuMapping]:
    """Return the default SKU map overlaid with FULFILLMENT_SKU_MAP (a JSON object), if set."""
    sku_map = dict(DEFAULT_SKU_MAP)
    raw = os.environ.get("FULFILLMENT_SKU_MAP")
    if raw:
        for key, data in json.loads(raw).items():
            sku_map[key] = _mapping_from_dict(data)
    return sku_map
