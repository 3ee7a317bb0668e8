"""
Fake storefront service — catalog, orders and a mock payment provider.

In-memory, single process. Fault counters make the next N calls of a
kind fail with a 500, for exercising the client's failure paths.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from storefront.client import CanonicalProduct, Order, OrderLine


class BackendError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class PaymentRecord:
    payment_id: str
    order_id: int
    amount_cents: int
    currency: str
    status: str = "awaiting_payment"

    @property
    def amount_value(self) -> str:
        return str((Decimal(self.amount_cents) / 100).quantize(Decimal("0.01")))


@dataclass
class FakeBackend:
    products: dict[str, CanonicalProduct] = field(default_factory=dict[str, CanonicalProduct])
    orders: dict[int, Order] = field(default_factory=dict[int, Order])
    payments: dict[str, PaymentRecord] = field(default_factory=dict[str, PaymentRecord])
    gateway_url: str | None = None

    fail_orders: int = 0
    fail_payments: int = 0
    fail_status: int = 0

    _order_ids: itertools.count[int] = field(default_factory=lambda: itertools.count(1))
    _payment_seq: itertools.count[int] = field(default_factory=lambda: itertools.count(1))

    def seed(self) -> FakeBackend:
        self.products = {
            p.slug: p
            for p in (
                CanonicalProduct(1, "comte", "Comté AOP 24 months", 30000, tags=("cheese", "cow"),
                                 region_code="FR", images=("/img/comte.jpg",), quantity=50),
                CanonicalProduct(2, "aged-gouda", "Aged Gouda", 20000, tags=("cheese",),
                                 region_code="NL", images=("/img/gouda.jpg",), quantity=30),
                CanonicalProduct(3, "jamon-iberico", "Jamón Ibérico de Bellota", 90000, tags=("meat",),
                                 region_code="ES", images=("/img/jamon.jpg",), quantity=10),
                CanonicalProduct(4, "truffle-honey", "Truffle Honey", 12550, tags=("sweet",),
                                 region_code="IT", quantity=0, in_stock=False),
            )
        }
        return self

    @staticmethod
    def _take(counter: int) -> tuple[bool, int]:
        return (True, counter - 1) if counter > 0 else (False, 0)

    # ═══════════════════════════════════════════════════════════════════════════
    # Catalog
    # ═══════════════════════════════════════════════════════════════════════════

    def list_products(self) -> list[CanonicalProduct]:
        return list(self.products.values())

    def product(self, slug: str) -> CanonicalProduct:
        product = self.products.get(slug)
        if product is None:
            raise BackendError(404, "Product not found")
        return product

    def _product_by_id(self, product_id: int) -> CanonicalProduct | None:
        return next((p for p in self.products.values() if p.id == product_id), None)

    # ═══════════════════════════════════════════════════════════════════════════
    # Orders
    # ═══════════════════════════════════════════════════════════════════════════

    def create_order(self, items: list[OrderLine], shipping_address: dict[str, str]) -> Order:
        failing, self.fail_orders = self._take(self.fail_orders)
        if failing:
            raise BackendError(500, "Failed to create order")
        if not items:
            raise BackendError(400, "Order has no items")

        for item in items:
            product = self._product_by_id(item.product_id)
            if product is None:
                raise BackendError(400, "product not found")
            if not product.in_stock or (product.quantity or 0) < item.quantity:
                raise BackendError(400, "product out of stock or insufficient quantity")

        order = Order(
            id=next(self._order_ids),
            items=tuple(items),
            amount_cents=sum(item.price_cents * item.quantity for item in items),
            status="pending",
            shipping_address=dict(shipping_address),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.orders[order.id] = order
        return order

    def order(self, order_id: int) -> Order:
        order = self.orders.get(order_id)
        if order is None:
            raise BackendError(404, "Order not found")
        return order

    # ═══════════════════════════════════════════════════════════════════════════
    # Payments (mock provider)
    # ═══════════════════════════════════════════════════════════════════════════

    def create_payment(self, order_id: int) -> PaymentRecord:
        if order_id <= 0:
            raise BackendError(400, "Order ID is required")
        order = self.order(order_id)
        failing, self.fail_payments = self._take(self.fail_payments)
        if failing:
            raise BackendError(500, "Failed to create payment: provider unavailable")

        payment = PaymentRecord(
            payment_id=f"mock_{order.id}_{next(self._payment_seq)}",
            order_id=order.id,
            amount_cents=order.amount_cents,
            currency=order.currency,
        )
        self.payments[payment.payment_id] = payment
        self.orders[order.id] = replace(order, payment_id=payment.payment_id)
        return payment

    def payment_url(self, payment: PaymentRecord) -> str:
        return f"{self.gateway_url}/{payment.payment_id}" if self.gateway_url else ""

    def payment(self, payment_id: str) -> PaymentRecord:
        failing, self.fail_status = self._take(self.fail_status)
        if failing:
            raise BackendError(500, "Failed to get payment status")
        payment = self.payments.get(payment_id)
        if payment is None:
            raise BackendError(404, "Payment not found")
        return payment

    def set_payment_status(self, payment_id: str, status: str) -> None:
        self.payments[payment_id].status = status

    def complete_payment(self, payment_id: str) -> PaymentRecord:
        payment = self.payments.get(payment_id)
        if payment is None:
            raise BackendError(404, "Payment not found")
        order = self.order(payment.order_id)

        payment.status = "paid"
        self.orders[order.id] = replace(order, status="paid")
        for item in order.items:
            product = self._product_by_id(item.product_id)
            if product is not None and product.quantity is not None:
                self.products[product.slug] = replace(
                    product, quantity=max(product.quantity - item.quantity, 0)
                )
        return payment


__all__ = ("BackendError", "PaymentRecord", "FakeBackend")
