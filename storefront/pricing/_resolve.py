"""
Price resolution — pure functions, no I/O.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from storefront.pricing._types import VariantTier


def resolve_unit_price(base_price_cents: int, tier: VariantTier) -> int:
    """
    Effective unit price for a tier, rounded half-up to whole cents.

    Example:
        resolve_unit_price(20000, tier_at(2))  # 50000
    """
    if base_price_cents < 0:
        raise ValueError(f"negative base price: {base_price_cents}")
    scaled = Decimal(base_price_cents) * tier.multiplier
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def resolve_total(unit_price_cents: int, quantity: int) -> int:
    """Line total: unit price times quantity."""
    return unit_price_cents * quantity


_SYMBOLS = {"RUB": "₽", "USD": "$", "EUR": "€"}


def format_price(cents: int, currency: str = "RUB") -> str:
    """Render minor units for display, e.g. `1 250.50 ₽`."""
    units, rest = divmod(abs(cents), 100)
    sign = "-" if cents < 0 else ""
    whole = f"{units:,}".replace(",", " ")
    symbol = _SYMBOLS.get(currency, currency)
    return f"{sign}{whole}.{rest:02d} {symbol}"


__all__ = ("resolve_unit_price", "resolve_total", "format_price")
