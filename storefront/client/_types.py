"""
Client types — service DTOs and service errors.

Responses are validated by the pydantic models in `_wire` and mapped onto
these dataclasses; requests are written with `to_wire()`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from storefront._types import OrderId, PaymentId, ProductId, Slug


# ═══════════════════════════════════════════════════════════════════════════════
# Service Error
# ═══════════════════════════════════════════════════════════════════════════════


class ServiceErrorKind(Enum):
    CONNECT = "connect"
    TIMEOUT = "timeout"
    STATUS = "status"
    DECODE = "decode"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class ServiceError:
    """
    Failed call to the storefront service.

    Note: CONNECT means the request never reached the server, so it is
    the only kind that is safe to retry for non-idempotent calls.
    """

    kind: ServiceErrorKind
    message: str
    status_code: int | None = None

    @property
    def transient(self) -> bool:
        return self.kind in (ServiceErrorKind.CONNECT, ServiceErrorKind.TIMEOUT)

    @property
    def unreached(self) -> bool:
        return self.kind is ServiceErrorKind.CONNECT


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CanonicalProduct:
    """Catalog record. Owned by the catalog service; read-only here."""

    id: ProductId
    slug: Slug
    title: str
    price_cents: int
    currency: str = "RUB"
    description: str | None = None
    tags: tuple[str, ...] = ()
    region_code: str | None = None
    images: tuple[str, ...] = ()
    in_stock: bool = True
    quantity: int | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    product_id: ProductId
    quantity: int
    price_cents: int

    def to_wire(self) -> dict[str, int]:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price_cents": self.price_cents,
        }


@dataclass(frozen=True, slots=True)
class OrderRequest:
    """Body of POST /orders."""

    items: tuple[OrderLine, ...]
    shipping_address: Mapping[str, str]

    def to_wire(self) -> dict[str, Any]:
        return {
            "items": [line.to_wire() for line in self.items],
            "shipping_address": dict(self.shipping_address),
        }


@dataclass(frozen=True, slots=True)
class Order:
    """Server-created order. Status belongs to the server."""

    id: OrderId
    items: tuple[OrderLine, ...]
    amount_cents: int
    status: str
    shipping_address: Mapping[str, Any] = field(default_factory=dict)
    created_at: str | None = None
    currency: str = "RUB"
    payment_id: PaymentId | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Payments
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> PaymentStatus:
        """Map a provider status string; unrecognised values become UNKNOWN."""
        return _STATUS_ALIASES.get((raw or "").strip().lower(), cls.UNKNOWN)


_STATUS_ALIASES = {
    "succeeded": PaymentStatus.SUCCEEDED,
    "paid": PaymentStatus.SUCCEEDED,
    "pending": PaymentStatus.PENDING,
    "awaiting_payment": PaymentStatus.PENDING,
    "waiting_for_capture": PaymentStatus.PENDING,
    "canceled": PaymentStatus.CANCELED,
    "failed": PaymentStatus.FAILED,
}


@dataclass(frozen=True, slots=True)
class PaymentTicket:
    """Result of POST /payments/create."""

    payment_id: PaymentId
    payment_url: str | None = None


@dataclass(frozen=True, slots=True)
class PaymentReport:
    """Result of GET /payments/status/:id."""

    payment_id: PaymentId
    status: PaymentStatus
    raw_status: str
    amount: Decimal | None = None
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class MockCompletion:
    """Result of POST /payments/mock/complete."""

    payment_id: PaymentId
    order_id: OrderId | None
    message: str = ""


__all__ = (
    "ServiceErrorKind",
    "ServiceError",
    "CanonicalProduct",
    "OrderLine",
    "OrderRequest",
    "Order",
    "PaymentStatus",
    "PaymentTicket",
    "PaymentReport",
    "MockCompletion",
)
