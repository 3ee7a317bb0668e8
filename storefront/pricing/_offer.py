"""
Offer building — product page → cart.
"""

from __future__ import annotations

from storefront.cart._types import CartOffer
from storefront.client._types import CanonicalProduct
from storefront.pricing._resolve import resolve_unit_price
from storefront.pricing._types import VariantTier

COMPOSITE_SEPARATOR = "-"


def composite_id(slug: str, tier: VariantTier) -> str:
    return f"{slug}{COMPOSITE_SEPARATOR}{tier.label}"


def offer_for(product: CanonicalProduct, tier: VariantTier) -> CartOffer:
    """
    Build the cart offer for a product at a tier.

    The unit price is captured as a snapshot and the canonical product id
    travels with the line, so checkout does not have to re-parse the
    composite id.
    """
    return CartOffer(
        composite_id=composite_id(product.slug, tier),
        title=f"{product.title} ({tier.label})",
        unit_price_cents=resolve_unit_price(product.price_cents, tier),
        image_ref=product.images[0] if product.images else None,
        product_id=product.id,
    )


__all__ = ("COMPOSITE_SEPARATOR", "composite_id", "offer_for")
