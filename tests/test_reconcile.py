"""
Tests for product reconciliation.

Tests:
- Candidate slug generation
- Prefix stripping against the catalog
- Stored product ids skip the catalog
- All-or-nothing result, concurrent lookups
- Lookup errors end the walk for that line
"""
import asyncio

import pytest
from combinators import lift as L
from kungfu import Error, Ok

from storefront.cart import CartLineItem
from storefront.client import CanonicalProduct, ServiceError, ServiceErrorKind
from storefront.policy import Policy, Retry
from storefront.reconcile import Reconciler, candidate_slugs


def line(composite_id: str, product_id: int | None = None) -> CartLineItem:
    return CartLineItem(composite_id, composite_id, 1000, 1, product_id=product_id)


class FakeCatalog:
    """Slug lookups with call recording, optional failures and latency."""

    def __init__(self, slugs: dict[str, int], failing: set[str] = frozenset(), delay: float = 0.0):
        self.slugs = slugs
        self.failing = failing
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def product_by_slug(self, slug):
        async def impl():
            self.calls.append(slug)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await asyncio.sleep(self.delay)
                if slug in self.failing:
                    raise RuntimeError("catalog down")
                if slug not in self.slugs:
                    return None
                return CanonicalProduct(id=self.slugs[slug], slug=slug, title=slug, price_cents=1000)
            finally:
                self.in_flight -= 1

        return L.catching_async(impl, on_error=lambda e: ServiceError(ServiceErrorKind.STATUS, str(e)))


NO_RETRY = Policy(retry=Retry(times=0))


class TestCandidates:
    def test_longest_first(self):
        assert candidate_slugs("aged-gouda-200g") == ["aged-gouda-200g", "aged-gouda", "aged"]

    def test_no_separator(self):
        assert candidate_slugs("comte") == ["comte"]

    def test_empty_segments_skipped(self):
        assert candidate_slugs("-200g") == ["-200g"]

    def test_custom_separator(self):
        assert candidate_slugs("brie_100g", "_") == ["brie_100g", "brie"]


class TestAgainstCatalog:
    async def test_prefix_stripping_resolves(self, client):
        match await Reconciler(client).reconcile([line("comte-200g")]):
            case Ok((resolved,)):
                assert resolved.product_id == 1
                assert resolved.via == "slug"
                assert resolved.slug == "comte"
            case other:
                pytest.fail(f"unexpected {other}")

    async def test_hyphenated_slug_resolves(self, client):
        match await Reconciler(client).reconcile([line("aged-gouda-1kg")]):
            case Ok((resolved,)):
                assert resolved.product_id == 2
            case other:
                pytest.fail(f"unexpected {other}")

    async def test_unknown_fails_for_every_candidate(self, client):
        match await Reconciler(client).reconcile([line("unknown-slug-200g")]):
            case Error(err):
                (miss,) = err.misses
                assert miss.tried == ("unknown-slug-200g", "unknown-slug", "unknown")
                assert err.unresolved == ("unknown-slug-200g",)
                assert "refresh" in err.message
            case other:
                pytest.fail(f"unexpected {other}")


class TestReconciler:
    async def test_stops_at_first_hit(self):
        catalog = FakeCatalog({"aged-gouda": 2, "aged": 99})

        await Reconciler(catalog, NO_RETRY).reconcile([line("aged-gouda-200g")])

        assert catalog.calls == ["aged-gouda-200g", "aged-gouda"]

    async def test_stored_product_id_skips_lookup(self):
        catalog = FakeCatalog({})

        match await Reconciler(catalog, NO_RETRY).reconcile([line("comte-200g", product_id=1)]):
            case Ok((resolved,)):
                assert resolved.product_id == 1
                assert resolved.via == "stored"
        assert catalog.calls == []

    async def test_lookup_error_stops_the_prefix_walk(self):
        catalog = FakeCatalog({"comte": 1}, failing={"comte-200g"})

        match await Reconciler(catalog, NO_RETRY).reconcile([line("comte-200g")]):
            case Error(err):
                (miss,) = err.misses
                assert miss.tried == ("comte-200g",)
                assert len(miss.lookup_errors) == 1
                assert miss.lookup_errors[0].message == "catalog down"
            case other:
                pytest.fail(f"unexpected {other}")
        assert catalog.calls == ["comte-200g"]

    async def test_error_after_a_clean_miss_keeps_what_was_tried(self):
        catalog = FakeCatalog({"brie": 4}, failing={"brie-soft"})

        match await Reconciler(catalog, NO_RETRY).reconcile([line("brie-soft-200g")]):
            case Error(err):
                (miss,) = err.misses
                assert miss.tried == ("brie-soft-200g", "brie-soft")
            case other:
                pytest.fail(f"unexpected {other}")
        assert "brie" not in catalog.calls

    async def test_one_miss_fails_all(self):
        catalog = FakeCatalog({"comte": 1})

        match await Reconciler(catalog, NO_RETRY).reconcile([line("comte-200g"), line("ghost-100g")]):
            case Error(err):
                assert err.unresolved == ("ghost-100g",)
            case other:
                pytest.fail(f"unexpected {other}")

    async def test_lines_resolve_concurrently_in_order(self):
        catalog = FakeCatalog({"a": 1, "b": 2, "c": 3}, delay=0.01)

        match await Reconciler(catalog, NO_RETRY).reconcile([line("a-1kg"), line("b-1kg"), line("c-1kg")]):
            case Ok(resolved):
                assert [r.product_id for r in resolved] == [1, 2, 3]
            case other:
                pytest.fail(f"unexpected {other}")
        assert catalog.max_in_flight == 3

    async def test_empty(self):
        match await Reconciler(FakeCatalog({})).reconcile([]):
            case Ok(resolved):
                assert resolved == ()
            case other:
                pytest.fail(f"unexpected {other}")
