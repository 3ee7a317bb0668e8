"""
Checkout orchestrator — cart → reconciled order → payment.

States and legal moves live in `_states.TRANSITIONS`; every state change
goes through `_move()`, which raises IllegalTransition for anything else.

Ordering:
    order created  →  ledger cleared + order pointer stored  →  payment attempt

Nothing after order creation can undo it. A failed payment creation ends
in DEFERRED_PAYMENT: the order is confirmed and payment is left for later.
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from collections.abc import Iterator
from dataclasses import dataclass

import structlog
from kungfu import Result, Ok, Error

from storefront._types import PaymentId
from storefront.cart import CartLedger
from storefront.checkout._errors import CheckoutError, CheckoutErrors
from storefront.checkout._shipping import ShippingForm
from storefront.checkout._states import CheckoutState, check_transition
from storefront.client import (
    Order,
    OrderLine,
    OrderRequest,
    PaymentStatus,
    PaymentTicket,
    StorefrontClient,
)
from storefront.config import Settings
from storefront.policy import Policy, guarded, retry_unreached, service_timeout
from storefront.reconcile import Reconciler
from storefront.storage import CheckoutLease, CorrelationRecord

logger = structlog.get_logger(__name__)

S = CheckoutState


def confirmation_url(order_id: int) -> str:
    return f"/checkout/success?order_id={order_id}"


def mock_gateway_url(payment_id: str) -> str:
    return f"/mock-checkout/{payment_id}"


@dataclass(frozen=True, slots=True)
class CheckoutOutcome:
    """
    Where the flow stands after an action, and where to send the shopper.

    `warning` carries the degraded failure (payment creation, status poll)
    that was deliberately not returned as an error.
    """

    state: CheckoutState
    order: Order | None = None
    payment: PaymentTicket | None = None
    payment_status: PaymentStatus | None = None
    redirect_url: str | None = None
    notice: str | None = None
    duplicate: bool = False
    warning: CheckoutError | None = None


class CheckoutOrchestrator:
    """
    One checkout per instance (one per tab).

    Example:
        orchestrator = CheckoutOrchestrator(ledger, reconciler, client, correlation, settings)
        match await orchestrator.submit(form):
            case Ok(outcome) if outcome.duplicate: ...    # already in flight
            case Ok(outcome): goto(outcome.redirect_url)
            case Error(err): show(err.message)
    """

    def __init__(
        self,
        ledger: CartLedger,
        reconciler: Reconciler,
        client: StorefrontClient,
        correlation: CorrelationRecord,
        settings: Settings,
        lease: CheckoutLease | None = None,
    ) -> None:
        self._ledger = ledger
        self._reconciler = reconciler
        self._client = client
        self._correlation = correlation
        self._settings = settings
        self._lease = lease
        self._owner = uuid.uuid4().hex

        self._policy = Policy.from_settings(settings)
        # A retried POST /orders must never reach the server twice.
        self._order_policy = Policy.from_settings(settings, retry_on=retry_unreached)

        self._state = S.IDLE
        self._order: Order | None = None
        self._payment: PaymentTicket | None = None
        self._payment_status: PaymentStatus | None = None
        self._redirect_url: str | None = None
        self._notice: str | None = None
        self._warning: CheckoutError | None = None
        # Name of the payment call awaiting the service, if any.
        self._payment_call: str | None = None

    # ═══════════════════════════════════════════════════════════════════════════
    # State
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def order(self) -> Order | None:
        return self._order

    @property
    def payment(self) -> PaymentTicket | None:
        return self._payment

    @property
    def payment_status(self) -> PaymentStatus | None:
        return self._payment_status

    def _move(self, target: CheckoutState) -> None:
        check_transition(self._state, target)
        logger.debug("Checkout transition", source=self._state.value, target=target.value)
        self._state = target

    @contextlib.contextmanager
    def _payment_call_scope(self, name: str) -> Iterator[None]:
        self._payment_call = name
        try:
            yield
        finally:
            self._payment_call = None

    def _payment_call_busy(self, name: str) -> bool:
        """True when another payment call is still awaiting the service."""
        if self._payment_call is None:
            return False
        logger.info("Payment call already in flight", call=name, in_flight=self._payment_call)
        return True

    def _outcome(self, duplicate: bool = False) -> CheckoutOutcome:
        return CheckoutOutcome(
            state=self._state,
            order=self._order,
            payment=self._payment,
            payment_status=self._payment_status,
            redirect_url=self._redirect_url,
            notice=self._notice,
            duplicate=duplicate,
            warning=self._warning,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Submission
    # ═══════════════════════════════════════════════════════════════════════════

    async def submit(self, form: ShippingForm) -> Result[CheckoutOutcome, CheckoutError]:
        """
        Validate, reconcile, create the order, then try to create its payment.

        Everything up to the RECONCILING transition is synchronous, so a
        second call made while the first is suspended sees the new state
        and returns a duplicate outcome without side effects.
        """
        if not self._state.accepts_submission:
            logger.info("Duplicate checkout submission ignored", state=self._state.value)
            return Ok(self._outcome(duplicate=True))

        match form.validate():
            case Error(err):
                return Error(err)
            case Ok(cleaned):
                form = cleaned

        if self._ledger.is_empty():
            return Error(CheckoutErrors.empty_cart())

        self._move(S.RECONCILING)
        self._notice = None
        self._warning = None

        if not await self._acquire_lease():
            self._move(S.IDLE)
            self._notice = "Checkout is already in progress in another window."
            return Ok(self._outcome(duplicate=True))

        try:
            match await self._place_order(form):
                case Error(err):
                    return Error(err)
                case Ok(order):
                    pass
        finally:
            await self._release_lease()

        return Ok(await self._create_payment(order))

    async def _place_order(self, form: ShippingForm) -> Result[Order, CheckoutError]:
        snapshot = self._ledger.items()

        match await self._reconciler.reconcile(snapshot):
            case Error(miss):
                self._move(S.ERROR)
                logger.warning("Checkout blocked by unresolved cart lines", unresolved=miss.unresolved)
                return Error(CheckoutErrors.reconciliation(miss.message, miss))
            case Ok(resolved):
                pass

        self._move(S.SUBMITTING)
        request = OrderRequest(
            items=tuple(
                OrderLine(
                    product_id=r.product_id,
                    quantity=r.line.quantity,
                    price_cents=r.line.unit_price_cents,
                )
                for r in resolved
            ),
            shipping_address=form.to_wire(),
        )

        create = guarded(
            lambda: self._client.create_order(request),
            self._order_policy,
            on_timeout=service_timeout,
            name="create_order",
        )
        match await create:
            case Error(err):
                self._move(S.ERROR)
                logger.warning("Order creation failed", error=err.message, kind=err.kind.value)
                return Error(CheckoutErrors.order_creation(err))
            case Ok(order):
                pass

        self._move(S.ORDER_CREATED)
        self._order = order
        await self._ledger.clear()
        match await self._correlation.remember_order(order.id):
            case Error(e):
                logger.warning("Order pointer not stored", order_id=order.id, error=e.message)
        return Ok(order)

    # ═══════════════════════════════════════════════════════════════════════════
    # Payment
    # ═══════════════════════════════════════════════════════════════════════════

    async def _create_payment(self, order: Order) -> CheckoutOutcome:
        self._move(S.CREATING_PAYMENT)
        self._warning = None

        create = guarded(
            lambda: self._client.create_payment(order.id),
            self._policy,
            on_timeout=service_timeout,
            name="create_payment",
        )
        match await create:
            case Error(err):
                self._move(S.DEFERRED_PAYMENT)
                self._warning = CheckoutErrors.payment_creation(err)
                self._notice = f"Order #{order.id} is confirmed. Payment could not be started; you can pay later."
                self._redirect_url = confirmation_url(order.id)
                logger.warning("Payment creation failed, payment deferred", order_id=order.id, error=err.message)
                return self._outcome()
            case Ok(ticket):
                pass

        self._payment = ticket
        self._payment_status = PaymentStatus.PENDING
        match await self._correlation.remember_payment(ticket.payment_id):
            case Error(e):
                logger.warning("Payment pointer not stored", payment_id=ticket.payment_id, error=e.message)

        self._move(S.PAYMENT_PENDING)
        self._notice = None
        if ticket.payment_url:
            self._redirect_url = ticket.payment_url
        elif self._settings.mock_gateway:
            self._redirect_url = mock_gateway_url(ticket.payment_id)
        else:
            self._redirect_url = confirmation_url(order.id)

        logger.info("Payment created", order_id=order.id, payment_id=ticket.payment_id)
        return self._outcome()

    async def retry_payment(self) -> Result[CheckoutOutcome, CheckoutError]:
        """New payment for the same order. Never resubmits the order."""
        if self._payment_call_busy("retry_payment"):
            return Ok(self._outcome(duplicate=True))
        if self._state not in (S.PAYMENT_FAILED, S.PAYMENT_CANCELED) or self._order is None:
            return Error(CheckoutErrors.invalid_state(
                f"Payment can only be retried after it failed or was canceled (now {self._state.value})"
            ))
        self._payment = None
        self._payment_status = None
        with self._payment_call_scope("retry_payment"):
            return Ok(await self._create_payment(self._order))

    async def refresh_payment(self) -> Result[CheckoutOutcome, CheckoutError]:
        """
        Poll the payment. A failed poll is not an error: status becomes UNKNOWN.

        Only one payment call runs at a time; an overlapping refresh or
        completion gets a duplicate outcome and sends nothing.
        """
        if self._payment_call_busy("refresh_payment"):
            return Ok(self._outcome(duplicate=True))
        if self._state is not S.PAYMENT_PENDING or self._payment is None:
            return Error(CheckoutErrors.invalid_state(f"No pending payment (now {self._state.value})"))

        with self._payment_call_scope("refresh_payment"):
            return await self._poll_payment(self._payment.payment_id)

    async def _poll_payment(self, payment_id: PaymentId) -> Result[CheckoutOutcome, CheckoutError]:
        poll = guarded(
            lambda: self._client.payment_status(payment_id),
            self._policy,
            on_timeout=service_timeout,
            name="payment_status",
        )
        match await poll:
            case Error(err):
                logger.warning("Payment status poll failed", payment_id=payment_id, error=err.message)
                self._move(S.PAYMENT_PENDING)
                self._payment_status = PaymentStatus.UNKNOWN
                self._warning = CheckoutErrors.payment_status(err)
                return Ok(self._outcome())
            case Ok(report):
                pass

        self._payment_status = report.status
        self._warning = None
        match report.status:
            case PaymentStatus.SUCCEEDED:
                self._move(S.PAYMENT_SUCCEEDED)
                self._redirect_url = confirmation_url(self._require_order().id)
            case PaymentStatus.FAILED:
                self._move(S.PAYMENT_FAILED)
                self._notice = "Payment failed. You can try paying again."
            case PaymentStatus.CANCELED:
                self._move(S.PAYMENT_CANCELED)
                self._notice = "Payment was canceled. You can try paying again."
            case PaymentStatus.PENDING | PaymentStatus.UNKNOWN:
                self._move(S.PAYMENT_PENDING)
        return Ok(self._outcome())

    async def complete_payment(self) -> Result[CheckoutOutcome, CheckoutError]:
        """
        Simulated gateway "pay" button.

        On success waits `confirmation_delay` before pointing at the
        confirmation view, so the shopper sees the payment acknowledged.
        """
        if self._payment_call_busy("complete_payment"):
            return Ok(self._outcome(duplicate=True))
        if self._state is not S.PAYMENT_PENDING or self._payment is None:
            return Error(CheckoutErrors.invalid_state(f"No pending payment (now {self._state.value})"))

        with self._payment_call_scope("complete_payment"):
            return await self._complete_payment(self._payment.payment_id)

    async def _complete_payment(self, payment_id: PaymentId) -> Result[CheckoutOutcome, CheckoutError]:
        complete = guarded(
            lambda: self._client.complete_mock_payment(payment_id),
            self._policy,
            on_timeout=service_timeout,
            name="complete_mock_payment",
        )
        match await complete:
            case Error(err):
                logger.warning("Payment completion failed", payment_id=payment_id, error=err.message)
                return Error(CheckoutErrors.payment_completion(err))
            case Ok(completion):
                pass

        self._move(S.PAYMENT_SUCCEEDED)
        self._payment_status = PaymentStatus.SUCCEEDED
        self._notice = "Payment received."
        logger.info("Payment completed", payment_id=payment_id, order_id=completion.order_id)

        await asyncio.sleep(self._settings.confirmation_delay)
        self._redirect_url = confirmation_url(completion.order_id or self._require_order().id)
        return Ok(self._outcome())

    def _require_order(self) -> Order:
        if self._order is None:
            raise RuntimeError(f"no order in state {self._state.value}")
        return self._order

    # ═══════════════════════════════════════════════════════════════════════════
    # Cross-tab lease
    # ═══════════════════════════════════════════════════════════════════════════

    async def _acquire_lease(self) -> bool:
        if self._lease is None:
            return True
        match await self._lease.acquire(self._owner):
            case Ok(held):
                return held
            case Error(e):
                # Storage down: fall back to the unlocked behaviour.
                logger.warning("Checkout lease unavailable, continuing without it", error=e.message)
                return True

    async def _release_lease(self) -> None:
        if self._lease is None:
            return
        match await self._lease.release(self._owner):
            case Error(e):
                logger.warning("Checkout lease not released", error=e.message)


__all__ = (
    "confirmation_url",
    "mock_gateway_url",
    "CheckoutOutcome",
    "CheckoutOrchestrator",
)
