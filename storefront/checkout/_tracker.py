"""
Payment tracker — what a later page (confirmation, simulated gateway)
uses to pick up the order/payment pair from the correlation record.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from kungfu import Result, Ok, Error

from storefront._types import OrderId, PaymentId
from storefront.checkout._errors import CheckoutError, CheckoutErrors
from storefront.client import Order, PaymentStatus, StorefrontClient
from storefront.policy import Policy, guarded, service_timeout
from storefront.storage import CorrelationRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TrackedPayment:
    order: Order
    payment_id: PaymentId | None
    status: PaymentStatus


class PaymentTracker:
    def __init__(
        self,
        client: StorefrontClient,
        correlation: CorrelationRecord,
        policy: Policy = Policy(),
    ) -> None:
        self._client = client
        self._correlation = correlation
        self._policy = policy

    async def _stored_order_id(self) -> OrderId | None:
        match await self._correlation.order_id():
            case Ok(order_id):
                return order_id
            case Error(e):
                logger.warning("Order pointer unreadable", error=e.message)
                return None

    async def _stored_payment_id(self) -> PaymentId | None:
        match await self._correlation.payment_id():
            case Ok(payment_id):
                return payment_id
            case Error(e):
                logger.warning("Payment pointer unreadable", error=e.message)
                return None

    async def resume(self, order_id: OrderId | None = None) -> Result[TrackedPayment, CheckoutError]:
        """
        Load the order and the last known status of its payment.

        The order's own payment id wins over the stored pointer, which may
        belong to an older order. No payment at all reads as PENDING; a
        failed poll reads as UNKNOWN.
        """
        if order_id is None:
            order_id = await self._stored_order_id()
        if order_id is None:
            return Error(CheckoutErrors.invalid_state("No order to track"))

        load = guarded(
            lambda: self._client.get_order(order_id),
            self._policy,
            on_timeout=service_timeout,
            name="get_order",
        )
        match await load:
            case Error(err):
                return Error(CheckoutErrors.order_lookup(order_id, err))
            case Ok(order):
                pass

        payment_id = order.payment_id or await self._stored_payment_id()
        if payment_id is None:
            return Ok(TrackedPayment(order=order, payment_id=None, status=PaymentStatus.PENDING))

        poll = guarded(
            lambda: self._client.payment_status(payment_id),
            self._policy,
            on_timeout=service_timeout,
            name="payment_status",
        )
        match await poll:
            case Ok(report):
                status = report.status
            case Error(err):
                logger.warning("Payment status poll failed", payment_id=payment_id, error=err.message)
                status = PaymentStatus.UNKNOWN

        return Ok(TrackedPayment(order=order, payment_id=payment_id, status=status))

    async def complete(self, payment_id: PaymentId | None = None) -> Result[OrderId, CheckoutError]:
        """Simulated gateway "pay"; returns the order id to confirm."""
        if payment_id is None:
            payment_id = await self._stored_payment_id()
        if payment_id is None:
            return Error(CheckoutErrors.invalid_state("No payment to complete"))

        complete = guarded(
            lambda: self._client.complete_mock_payment(payment_id),
            self._policy,
            on_timeout=service_timeout,
            name="complete_mock_payment",
        )
        match await complete:
            case Error(err):
                return Error(CheckoutErrors.payment_completion(err))
            case Ok(completion):
                pass

        order_id = completion.order_id or await self._stored_order_id()
        if order_id is None:
            return Error(CheckoutErrors.invalid_state("Payment completed but its order is unknown"))
        logger.info("Payment completed", payment_id=payment_id, order_id=order_id)
        return Ok(order_id)


__all__ = ("TrackedPayment", "PaymentTracker")
