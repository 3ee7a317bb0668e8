"""
Product reconciliation — cart lines → canonical product ids.

All lines are looked up concurrently and joined on the full set: a single
miss fails the whole attempt. A lookup error ends the walk for that line;
shorter prefixes are not tried. The error is kept on the LineMiss for
diagnostics.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from combinators import parallel as C_parallel, lift as L
from kungfu import Result, Ok, Error, LazyCoroResult

from storefront.cart import CartLineItem
from storefront.client import CanonicalProduct, ServiceError
from storefront.policy import Policy, guarded, service_timeout
from storefront.reconcile._candidates import candidate_slugs
from storefront.reconcile._types import (
    CatalogLookup,
    LineMiss,
    ReconciledLine,
    ReconciliationError,
)

logger = structlog.get_logger(__name__)


class Reconciler:
    """
    Example:
        reconciler = Reconciler(client, Policy.from_settings(settings))
        match await reconciler.reconcile(ledger.items()):
            case Ok(lines): ...       # one ReconciledLine per cart line, same order
            case Error(err): err.unresolved
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        policy: Policy = Policy(),
        separator: str = "-",
    ) -> None:
        self._catalog = catalog
        self._policy = policy
        self._separator = separator

    def _lookup(self, slug: str) -> LazyCoroResult[CanonicalProduct | None, ServiceError]:
        return guarded(
            lambda: self._catalog.product_by_slug(slug),
            self._policy,
            on_timeout=service_timeout,
            name="product_by_slug",
        )

    async def resolve_line(self, line: CartLineItem) -> Result[ReconciledLine, LineMiss]:
        """Stored product id first; otherwise candidate slugs, longest first."""
        if line.product_id is not None:
            return Ok(ReconciledLine(line=line, product_id=line.product_id, via="stored"))

        candidates = candidate_slugs(line.composite_id, self._separator)
        tried: list[str] = []
        errors: list[ServiceError] = []

        for slug in candidates:
            tried.append(slug)
            match await self._lookup(slug):
                case Ok(None):
                    continue
                case Ok(product):
                    return Ok(ReconciledLine(
                        line=line,
                        product_id=product.id,
                        via="slug",
                        slug=product.slug,
                    ))
                case Error(err):
                    logger.warning(
                        "Catalog lookup failed, line unresolved",
                        composite_id=line.composite_id,
                        slug=slug,
                        error=err.message,
                    )
                    errors.append(err)
                    break

        logger.info("No catalog product for cart line", composite_id=line.composite_id, tried=tried)
        return Error(LineMiss(
            composite_id=line.composite_id,
            tried=tuple(tried),
            lookup_errors=tuple(errors),
        ))

    async def reconcile(
        self,
        lines: Sequence[CartLineItem],
    ) -> Result[tuple[ReconciledLine, ...], ReconciliationError]:
        if not lines:
            return Ok(())

        def make_op(line: CartLineItem) -> LazyCoroResult[Result[ReconciledLine, LineMiss], str]:
            return L.catching_async(lambda: self.resolve_line(line), on_error=str)

        match await C_parallel(*[make_op(line) for line in lines]):
            case Error(reason):
                # resolve_line does not raise; this is a bug surfacing, report every line
                logger.error("Reconciliation crashed", reason=reason)
                return Error(ReconciliationError(tuple(
                    LineMiss(composite_id=line.composite_id, tried=()) for line in lines
                )))
            case Ok(results):
                resolved: list[ReconciledLine] = []
                misses: list[LineMiss] = []
                for result in results:
                    match result:
                        case Ok(reconciled):
                            resolved.append(reconciled)
                        case Error(miss):
                            misses.append(miss)

                if misses:
                    return Error(ReconciliationError(tuple(misses)))
                return Ok(tuple(resolved))


__all__ = ("Reconciler",)
