"""
Wire models for the dev service.

Request models translate to domain values with `to_domain()`; response
models are built with `from_domain()`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from storefront.client import CanonicalProduct, Order, OrderLine
from storefront.devserver._backend import PaymentRecord


class ProductOut(BaseModel):
    id: int
    slug: str
    title: str
    description: str | None = None
    price_cents: int
    currency: str
    tags: list[str]
    region_code: str | None = None
    images: list[str]
    in_stock: bool
    quantity: int | None = None

    @classmethod
    def from_domain(cls, product: CanonicalProduct) -> ProductOut:
        return cls(
            id=product.id,
            slug=product.slug,
            title=product.title,
            description=product.description,
            price_cents=product.price_cents,
            currency=product.currency,
            tags=list(product.tags),
            region_code=product.region_code,
            images=list(product.images),
            in_stock=product.in_stock,
            quantity=product.quantity,
        )


class ProductPage(BaseModel):
    items: list[ProductOut]
    total: int
    page: int = 1
    page_size: int

    @classmethod
    def from_domain(cls, products: list[CanonicalProduct]) -> ProductPage:
        return cls(
            items=[ProductOut.from_domain(p) for p in products],
            total=len(products),
            page_size=max(len(products), 20),
        )


class OrderItemIO(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)
    price_cents: int = Field(ge=0)

    def to_domain(self) -> OrderLine:
        return OrderLine(self.product_id, self.quantity, self.price_cents)


class CreateOrderIn(BaseModel):
    items: list[OrderItemIO]
    shipping_address: dict[str, str]

    def to_domain(self) -> tuple[list[OrderLine], dict[str, str]]:
        return [item.to_domain() for item in self.items], self.shipping_address


class OrderOut(BaseModel):
    id: int
    user_id: int | None = None
    items: list[OrderItemIO]
    amount_cents: int
    currency: str
    status: str
    payment_id: str | None = None
    shipping_address: dict[str, str]
    created_at: str | None = None

    @classmethod
    def from_domain(cls, order: Order) -> OrderOut:
        return cls(
            id=order.id,
            items=[
                OrderItemIO(product_id=i.product_id, quantity=i.quantity, price_cents=i.price_cents)
                for i in order.items
            ],
            amount_cents=order.amount_cents,
            currency=order.currency,
            status=order.status,
            payment_id=order.payment_id,
            shipping_address=dict(order.shipping_address),
            created_at=order.created_at,
        )


class CreatePaymentIn(BaseModel):
    order_id: int


class PaymentCreatedOut(BaseModel):
    payment_id: str
    payment_url: str


class AmountOut(BaseModel):
    value: str
    currency: str


class PaymentStatusOut(BaseModel):
    id: str
    status: str
    amount: AmountOut
    metadata: dict[str, int]

    @classmethod
    def from_domain(cls, payment: PaymentRecord) -> PaymentStatusOut:
        return cls(
            id=payment.payment_id,
            status=payment.status,
            amount=AmountOut(value=payment.amount_value, currency=payment.currency),
            metadata={"order_id": payment.order_id},
        )


class MockCompleteIn(BaseModel):
    payment_id: str


class MockCompleteOut(BaseModel):
    message: str = "Payment completed successfully"
    payment_id: str
    order_id: int


__all__ = (
    "ProductOut",
    "ProductPage",
    "OrderItemIO",
    "CreateOrderIn",
    "OrderOut",
    "CreatePaymentIn",
    "PaymentCreatedOut",
    "AmountOut",
    "PaymentStatusOut",
    "MockCompleteIn",
    "MockCompleteOut",
)
