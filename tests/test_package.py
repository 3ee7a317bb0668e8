"""
Tests for the top-level package surface.

Tests:
- Every exported name resolves
- Shared types are the identifier aliases
"""
import storefront
from storefront import _types


class TestExports:
    def test_every_name_resolves(self):
        for name in storefront.__all__:
            assert getattr(storefront, name) is not None

    def test_shared_types_are_identifiers(self):
        assert set(_types.__all__) == {"CompositeId", "Slug", "ProductId", "OrderId", "PaymentId"}
        assert set(storefront.__all__) >= set(_types.__all__)
