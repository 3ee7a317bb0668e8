"""
Core types for storefront.

Identifier aliases shared by the cart, client and checkout layers.
"""

from __future__ import annotations

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type CompositeId = str
"""Cart line identifier: catalog slug, optionally joined with a variant label."""

type Slug = str
"""Catalog slug."""

type ProductId = int
"""Canonical catalog product id."""

type OrderId = int
"""Server-assigned order id."""

type PaymentId = str
"""Provider-assigned payment id."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CompositeId",
    "Slug",
    "ProductId",
    "OrderId",
    "PaymentId",
)
