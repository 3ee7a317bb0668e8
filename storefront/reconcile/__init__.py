"""
Reconcile — map cart lines back to catalog products at checkout.

    from storefront import reconcile as R

    R.candidate_slugs("comte-200g")    # ["comte-200g", "comte"]
    match await R.Reconciler(client).reconcile(ledger.items()):
        case Ok(lines): ...
        case Error(err): print(err.message)
"""

from storefront.reconcile._candidates import candidate_slugs
from storefront.reconcile._types import (
    CatalogLookup,
    ReconciledLine,
    LineMiss,
    ReconciliationError,
)
from storefront.reconcile._reconcile import Reconciler

__all__ = (
    "candidate_slugs",
    "CatalogLookup",
    "ReconciledLine",
    "LineMiss",
    "ReconciliationError",
    "Reconciler",
)
