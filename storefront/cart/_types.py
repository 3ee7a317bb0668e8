"""
Cart types.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront._types import CompositeId, ProductId


@dataclass(frozen=True, slots=True)
class CartOffer:
    """What a product page hands to the cart: one purchasable unit."""

    composite_id: CompositeId
    title: str
    unit_price_cents: int
    image_ref: str | None = None
    product_id: ProductId | None = None


@dataclass(frozen=True, slots=True)
class CartLineItem:
    """
    One ledger line.

    Invariant: quantity >= 1. The unit price is a snapshot taken at
    add-to-cart time and never recomputed.
    """

    composite_id: CompositeId
    title: str
    unit_price_cents: int
    quantity: int
    image_ref: str | None = None
    product_id: ProductId | None = None

    @property
    def total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    @classmethod
    def from_offer(cls, offer: CartOffer, quantity: int) -> CartLineItem:
        return cls(
            composite_id=offer.composite_id,
            title=offer.title,
            unit_price_cents=offer.unit_price_cents,
            quantity=quantity,
            image_ref=offer.image_ref,
            product_id=offer.product_id,
        )


__all__ = ("CartOffer", "CartLineItem")
