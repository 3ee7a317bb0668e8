"""
Reconciliation types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from kungfu import LazyCoroResult

from storefront._types import CompositeId, ProductId, Slug
from storefront.cart import CartLineItem
from storefront.client import CanonicalProduct, ServiceError


class CatalogLookup(Protocol):
    """What the reconciler needs from the catalog. StorefrontClient fits."""

    def product_by_slug(self, slug: Slug) -> LazyCoroResult[CanonicalProduct | None, ServiceError]: ...


@dataclass(frozen=True, slots=True)
class ReconciledLine:
    """A cart line bound to its canonical product id."""

    line: CartLineItem
    product_id: ProductId
    via: Literal["stored", "slug"]
    slug: Slug | None = None


@dataclass(frozen=True, slots=True)
class LineMiss:
    """A cart line no candidate slug resolved."""

    composite_id: CompositeId
    tried: tuple[Slug, ...]
    lookup_errors: tuple[ServiceError, ...] = ()


@dataclass(frozen=True, slots=True)
class ReconciliationError:
    """At least one line could not be matched; nothing may be submitted."""

    misses: tuple[LineMiss, ...]

    @property
    def unresolved(self) -> tuple[CompositeId, ...]:
        return tuple(miss.composite_id for miss in self.misses)

    @property
    def message(self) -> str:
        ids = ", ".join(self.unresolved)
        return f"Product not found for item(s): {ids}. Please refresh the page and try again."


__all__ = (
    "CatalogLookup",
    "ReconciledLine",
    "LineMiss",
    "ReconciliationError",
)
