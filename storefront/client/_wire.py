"""
Response models — what the service sends back, validated with pydantic.

Each model maps to its domain dataclass with `to_domain()`. A body that
fails validation raises ValidationError, which the client reports as a
DECODE ServiceError.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from storefront._types import PaymentId
from storefront.client._types import (
    CanonicalProduct,
    MockCompletion,
    Order,
    OrderLine,
    PaymentReport,
    PaymentStatus,
    PaymentTicket,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


class ProductIn(BaseModel):
    id: int
    slug: str
    title: str
    price_cents: int
    currency: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    region_code: str | None = None
    images: list[str] | None = None
    in_stock: bool = True
    quantity: int | None = None

    def to_domain(self) -> CanonicalProduct:
        return CanonicalProduct(
            id=self.id,
            slug=self.slug,
            title=self.title,
            price_cents=self.price_cents,
            currency=self.currency or "RUB",
            description=self.description,
            tags=tuple(self.tags or ()),
            region_code=self.region_code,
            images=tuple(self.images or ()),
            in_stock=self.in_stock,
            quantity=self.quantity,
        )


class ProductPageIn(BaseModel):
    items: list[ProductIn] | None = None

    def to_domain(self) -> list[CanonicalProduct]:
        return [item.to_domain() for item in self.items or ()]


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderLineIn(BaseModel):
    product_id: int
    quantity: int
    price_cents: int

    def to_domain(self) -> OrderLine:
        return OrderLine(self.product_id, self.quantity, self.price_cents)


class OrderIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: int
    items: list[OrderLineIn] | None = None
    amount_cents: int
    status: str = "pending"
    shipping_address: dict[str, Any] | None = None
    created_at: str | None = None
    currency: str | None = None
    payment_id: str | None = None

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            items=tuple(item.to_domain() for item in self.items or ()),
            amount_cents=self.amount_cents,
            status=self.status,
            shipping_address=self.shipping_address or {},
            created_at=self.created_at,
            currency=self.currency or "RUB",
            payment_id=self.payment_id or None,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Payments
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentTicketIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    payment_id: str
    payment_url: str | None = None
    # Older service builds name it checkout_url.
    checkout_url: str | None = None

    def to_domain(self) -> PaymentTicket:
        return PaymentTicket(self.payment_id, self.payment_url or self.checkout_url or None)


class AmountIn(BaseModel):
    value: Decimal | None = None
    currency: str | None = None


class PaymentStatusIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str | None = None
    status: str | None = None
    amount: AmountIn | None = None

    def to_domain(self, payment_id: PaymentId) -> PaymentReport:
        raw = self.status or ""
        amount = self.amount or AmountIn()
        return PaymentReport(
            payment_id=self.id or payment_id,
            status=PaymentStatus.parse(raw),
            raw_status=raw,
            amount=amount.value,
            currency=amount.currency,
        )


class MockCompletionIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    payment_id: str = ""
    order_id: int | None = None
    message: str = ""

    def to_domain(self) -> MockCompletion:
        return MockCompletion(self.payment_id, self.order_id or None, self.message)


__all__ = (
    "ProductIn",
    "ProductPageIn",
    "OrderLineIn",
    "OrderIn",
    "PaymentTicketIn",
    "AmountIn",
    "PaymentStatusIn",
    "MockCompletionIn",
)
