"""
Pricing — variant tiers and effective unit prices.

    from storefront import pricing as P

    tier = P.tier_at(2)                          # 500g, x2.5
    unit = P.resolve_unit_price(20000, tier)     # 50000
    total = P.resolve_total(unit, 3)             # 150000
    offer = P.offer_for(product, tier)           # ready for CartLedger.add()
"""

from storefront.pricing._types import (
    VariantTier,
    WEIGHT_TIERS,
    DEFAULT_TIER_INDEX,
    tier_at,
    tier_by_label,
)
from storefront.pricing._resolve import (
    resolve_unit_price,
    resolve_total,
    format_price,
)
from storefront.pricing._offer import (
    COMPOSITE_SEPARATOR,
    composite_id,
    offer_for,
)

__all__ = (
    "VariantTier",
    "WEIGHT_TIERS",
    "DEFAULT_TIER_INDEX",
    "tier_at",
    "tier_by_label",
    "resolve_unit_price",
    "resolve_total",
    "format_price",
    "COMPOSITE_SEPARATOR",
    "composite_id",
    "offer_for",
)
