"""
Pricing types — the fixed variant tier table.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

# ═══════════════════════════════════════════════════════════════════════════════
# VariantTier — closed choice of purchasable unit
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariantTier:
    """
    One purchasable unit of a product and its price multiplier.

    The catalog price is quoted for the default tier (200g); other tiers
    scale it by `multiplier`.
    """

    label: str
    multiplier: Decimal


WEIGHT_TIERS: tuple[VariantTier, ...] = (
    VariantTier("100g", Decimal("0.5")),
    VariantTier("200g", Decimal("1")),
    VariantTier("500g", Decimal("2.5")),
    VariantTier("1kg", Decimal("5")),
)

DEFAULT_TIER_INDEX = 1


def tier_at(index: int) -> VariantTier:
    """
    Select a tier from the fixed table.

    An out-of-range index is a caller defect and raises IndexError.
    """
    if not 0 <= index < len(WEIGHT_TIERS):
        raise IndexError(f"tier index {index} out of range 0..{len(WEIGHT_TIERS) - 1}")
    return WEIGHT_TIERS[index]


def tier_by_label(label: str) -> VariantTier:
    """Look a tier up by its label (case-insensitive)."""
    for tier in WEIGHT_TIERS:
        if tier.label.lower() == label.lower():
            return tier
    raise KeyError(f"unknown tier: {label}")


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "VariantTier",
    "WEIGHT_TIERS",
    "DEFAULT_TIER_INDEX",
    "tier_at",
    "tier_by_label",
)
