"""
Checkout — the order/payment lifecycle.

    from storefront import checkout as Co

    orchestrator = Co.CheckoutOrchestrator(ledger, reconciler, client, correlation, settings)
    match await orchestrator.submit(Co.ShippingForm(...)):
        case Ok(outcome): outcome.state, outcome.redirect_url
        case Error(err): err.kind, err.message

    # on the confirmation page, possibly in another process
    tracker = Co.PaymentTracker(client, correlation)
    match await tracker.resume():
        case Ok(tracked): tracked.status
"""

from storefront.checkout._states import (
    CheckoutState,
    TRANSITIONS,
    IllegalTransition,
    check_transition,
)
from storefront.checkout._errors import CheckoutErrorKind, CheckoutError, CheckoutErrors
from storefront.checkout._shipping import EMAIL_PATTERN, ShippingForm
from storefront.checkout._orchestrator import (
    confirmation_url,
    mock_gateway_url,
    CheckoutOutcome,
    CheckoutOrchestrator,
)
from storefront.checkout._tracker import TrackedPayment, PaymentTracker

__all__ = (
    "CheckoutState",
    "TRANSITIONS",
    "IllegalTransition",
    "check_transition",
    "CheckoutErrorKind",
    "CheckoutError",
    "CheckoutErrors",
    "EMAIL_PATTERN",
    "ShippingForm",
    "confirmation_url",
    "mock_gateway_url",
    "CheckoutOutcome",
    "CheckoutOrchestrator",
    "TrackedPayment",
    "PaymentTracker",
)
