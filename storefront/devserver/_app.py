"""
FastAPI app over a FakeBackend, mounted under /api like the real service.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.devserver._backend import BackendError, FakeBackend
from storefront.devserver._schemas import (
    CreateOrderIn,
    CreatePaymentIn,
    MockCompleteIn,
    MockCompleteOut,
    OrderOut,
    PaymentCreatedOut,
    PaymentStatusOut,
    ProductOut,
    ProductPage,
)

logger = structlog.get_logger(__name__)


def create_app(backend: FakeBackend | None = None) -> FastAPI:
    backend = backend if backend is not None else FakeBackend().seed()
    app = FastAPI(title="storefront dev service")
    app.state.backend = backend
    api = APIRouter(prefix="/api")

    @app.exception_handler(BackendError)
    async def backend_error(_: Request, exc: BackendError) -> JSONResponse:
        logger.info("Dev service error", status_code=exc.status_code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @api.get("/products")
    async def list_products() -> ProductPage:
        return ProductPage.from_domain(backend.list_products())

    @api.get("/products/{slug}")
    async def get_product(slug: str) -> ProductOut:
        return ProductOut.from_domain(backend.product(slug))

    @api.post("/orders", status_code=201)
    async def create_order(body: CreateOrderIn) -> OrderOut:
        items, address = body.to_domain()
        order = backend.create_order(items, address)
        logger.info("Dev service order created", order_id=order.id)
        return OrderOut.from_domain(order)

    @api.get("/orders/{order_id}")
    async def get_order(order_id: int) -> OrderOut:
        return OrderOut.from_domain(backend.order(order_id))

    @api.post("/payments/create")
    async def create_payment(body: CreatePaymentIn) -> PaymentCreatedOut:
        payment = backend.create_payment(body.order_id)
        return PaymentCreatedOut(payment_id=payment.payment_id, payment_url=backend.payment_url(payment))

    @api.get("/payments/status/{payment_id}")
    async def payment_status(payment_id: str) -> PaymentStatusOut:
        return PaymentStatusOut.from_domain(backend.payment(payment_id))

    @api.post("/payments/mock/complete")
    async def mock_complete(body: MockCompleteIn) -> MockCompleteOut:
        payment = backend.complete_payment(body.payment_id)
        return MockCompleteOut(payment_id=payment.payment_id, order_id=payment.order_id)

    app.include_router(api)
    return app


__all__ = ("create_app",)
