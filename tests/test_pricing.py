"""
Tests for pricing.

Tests:
- Tier table and selection
- Unit price rounding
- Offers built from catalog products
- Display formatting
"""
from decimal import Decimal

import pytest

from storefront import pricing as P
from storefront.client import CanonicalProduct


class TestTiers:
    def test_table(self):
        assert [t.label for t in P.WEIGHT_TIERS] == ["100g", "200g", "500g", "1kg"]
        assert [t.multiplier for t in P.WEIGHT_TIERS] == [
            Decimal("0.5"), Decimal("1"), Decimal("2.5"), Decimal("5"),
        ]

    def test_default_tier_is_base_price(self):
        assert P.tier_at(P.DEFAULT_TIER_INDEX).multiplier == 1

    @pytest.mark.parametrize("index", [-1, 4, 100])
    def test_out_of_range_index_is_a_defect(self, index):
        with pytest.raises(IndexError):
            P.tier_at(index)

    def test_lookup_by_label(self):
        assert P.tier_by_label("1KG") is P.WEIGHT_TIERS[3]
        with pytest.raises(KeyError):
            P.tier_by_label("2kg")


class TestResolve:
    def test_documented_example(self):
        """20000 at x2.5 is 50000; three of them is 150000."""
        unit = P.resolve_unit_price(20000, P.tier_at(2))
        assert unit == 50000
        assert P.resolve_total(unit, 3) == 150000

    def test_rounds_half_up(self):
        assert P.resolve_unit_price(101, P.tier_at(0)) == 51
        assert P.resolve_unit_price(99, P.tier_at(0)) == 50
        assert P.resolve_unit_price(1, P.tier_at(0)) == 1

    def test_zero_price(self):
        assert P.resolve_unit_price(0, P.tier_at(3)) == 0

    def test_negative_base_rejected(self):
        with pytest.raises(ValueError):
            P.resolve_unit_price(-1, P.tier_at(1))


class TestOffer:
    def test_offer_carries_product_id_and_composite_id(self):
        product = CanonicalProduct(id=2, slug="aged-gouda", title="Aged Gouda", price_cents=20000,
                                   images=("/a.jpg", "/b.jpg"))

        offer = P.offer_for(product, P.tier_at(2))

        assert offer.composite_id == "aged-gouda-500g"
        assert offer.title == "Aged Gouda (500g)"
        assert offer.unit_price_cents == 50000
        assert offer.image_ref == "/a.jpg"
        assert offer.product_id == 2

    def test_offer_without_images(self):
        product = CanonicalProduct(id=1, slug="comte", title="Comté", price_cents=30000)
        assert P.offer_for(product, P.tier_at(1)).image_ref is None


class TestFormat:
    def test_format_rub(self):
        assert P.format_price(125050) == "1 250.50 ₽"

    def test_format_other_currency(self):
        assert P.format_price(5, "USD") == "0.05 $"
        assert P.format_price(100, "GBP") == "1.00 GBP"
