"""
storefront — order & payment lifecycle for a shop client.

    from storefront import pricing as P     # Variant tiers, unit prices
    from storefront import cart as K        # Cart ledger
    from storefront import storage as S     # Durable cross-tab state
    from storefront import reconcile as R   # Cart lines → catalog products
    from storefront import checkout as Co   # Order/payment state machine
"""

from storefront import pricing
from storefront import cart
from storefront import storage
from storefront import client
from storefront import policy
from storefront import reconcile
from storefront import checkout
from storefront._types import (
    CompositeId,
    Slug,
    ProductId,
    OrderId,
    PaymentId,
)

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "cart",
    "storage",
    "client",
    "policy",
    "reconcile",
    "checkout",
    "CompositeId",
    "Slug",
    "ProductId",
    "OrderId",
    "PaymentId",
)
