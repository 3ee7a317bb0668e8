"""
Storefront service client — catalog, orders, payments over httpx.

Every method returns a LazyCoroResult[T, ServiceError]; nothing is sent
until it is awaited. Exceptions from httpx and from JSON decoding are
lifted into ServiceError via catching_async. Response bodies are validated
with the pydantic models in `_wire`; a body that does not fit is a DECODE
error.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError
from combinators import lift as L
from kungfu import LazyCoroResult

from storefront._types import OrderId, PaymentId, Slug
from storefront.client._types import (
    CanonicalProduct,
    MockCompletion,
    Order,
    OrderRequest,
    PaymentReport,
    PaymentTicket,
    ServiceError,
    ServiceErrorKind,
)
from storefront.client._wire import (
    MockCompletionIn,
    OrderIn,
    PaymentStatusIn,
    PaymentTicketIn,
    ProductIn,
    ProductPageIn,
)

logger = structlog.get_logger(__name__)

API_PREFIX = "/api"


def to_service_error(exc: Exception) -> ServiceError:
    """Classify an exception raised while talking to the service."""
    match exc:
        case httpx.TimeoutException():
            return ServiceError(ServiceErrorKind.TIMEOUT, str(exc) or "timed out")
        case httpx.ConnectError():
            return ServiceError(ServiceErrorKind.CONNECT, str(exc) or "connection failed")
        case httpx.HTTPStatusError(response=response):
            kind = ServiceErrorKind.NOT_FOUND if response.status_code == 404 else ServiceErrorKind.STATUS
            return ServiceError(kind, _error_message(response), response.status_code)
        case httpx.HTTPError():
            return ServiceError(ServiceErrorKind.CONNECT, str(exc) or type(exc).__name__)
        case ValidationError():
            message = f"unexpected response: {exc.error_count()} invalid field(s)"
            return ServiceError(ServiceErrorKind.DECODE, message)
        case _:
            return ServiceError(ServiceErrorKind.DECODE, f"{type(exc).__name__}: {exc}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


class StorefrontClient:
    """
    Thin typed wrapper over the service's JSON API.

    Example:
        async with httpx.AsyncClient(base_url=settings.api_base_url) as http:
            client = StorefrontClient(http)
            match await client.product_by_slug("comte"):
                case Ok(None): ...        # not in catalog
                case Ok(product): ...
                case Error(err): ...
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _get_json(self, path: str) -> Any:
        response = await self._http.get(API_PREFIX + path)
        response.raise_for_status()
        return response.json()

    async def _post_json(self, path: str, body: dict[str, Any]) -> Any:
        response = await self._http.post(API_PREFIX + path, json=body)
        response.raise_for_status()
        return response.json()

    # ═══════════════════════════════════════════════════════════════════════════
    # Catalog
    # ═══════════════════════════════════════════════════════════════════════════

    def list_products(self) -> LazyCoroResult[list[CanonicalProduct], ServiceError]:
        async def impl() -> list[CanonicalProduct]:
            body = await self._get_json("/products")
            return ProductPageIn.model_validate(body).to_domain()

        return L.catching_async(impl, on_error=to_service_error)

    def product_by_slug(self, slug: Slug) -> LazyCoroResult[CanonicalProduct | None, ServiceError]:
        """Ok(None) when the catalog has no such slug."""

        async def impl() -> CanonicalProduct | None:
            response = await self._http.get(f"{API_PREFIX}/products/{quote(slug, safe='')}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return ProductIn.model_validate(response.json()).to_domain()

        return L.catching_async(impl, on_error=to_service_error)

    # ═══════════════════════════════════════════════════════════════════════════
    # Orders
    # ═══════════════════════════════════════════════════════════════════════════

    def create_order(self, request: OrderRequest) -> LazyCoroResult[Order, ServiceError]:
        async def impl() -> Order:
            body = await self._post_json("/orders", request.to_wire())
            order = OrderIn.model_validate(body).to_domain()
            logger.info("Order created", order_id=order.id, amount_cents=order.amount_cents)
            return order

        return L.catching_async(impl, on_error=to_service_error)

    def get_order(self, order_id: OrderId) -> LazyCoroResult[Order, ServiceError]:
        async def impl() -> Order:
            return OrderIn.model_validate(await self._get_json(f"/orders/{order_id}")).to_domain()

        return L.catching_async(impl, on_error=to_service_error)

    # ═══════════════════════════════════════════════════════════════════════════
    # Payments
    # ═══════════════════════════════════════════════════════════════════════════

    def create_payment(self, order_id: OrderId) -> LazyCoroResult[PaymentTicket, ServiceError]:
        async def impl() -> PaymentTicket:
            body = await self._post_json("/payments/create", {"order_id": order_id})
            return PaymentTicketIn.model_validate(body).to_domain()

        return L.catching_async(impl, on_error=to_service_error)

    def payment_status(self, payment_id: PaymentId) -> LazyCoroResult[PaymentReport, ServiceError]:
        async def impl() -> PaymentReport:
            body = await self._get_json(f"/payments/status/{quote(payment_id, safe='')}")
            return PaymentStatusIn.model_validate(body).to_domain(payment_id)

        return L.catching_async(impl, on_error=to_service_error)

    def complete_mock_payment(self, payment_id: PaymentId) -> LazyCoroResult[MockCompletion, ServiceError]:
        """Simulated gateway "pay" action. Development service only."""

        async def impl() -> MockCompletion:
            body = await self._post_json("/payments/mock/complete", {"payment_id": payment_id})
            return MockCompletionIn.model_validate(body).to_domain()

        return L.catching_async(impl, on_error=to_service_error)


__all__ = ("API_PREFIX", "to_service_error", "StorefrontClient")
