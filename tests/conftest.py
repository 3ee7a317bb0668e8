"""Shared fixtures: dev service over ASGI, in-memory storage, fast settings."""
from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from storefront.cart import CartLedger, CartOffer
from storefront.checkout import CheckoutOrchestrator, ShippingForm
from storefront.client import StorefrontClient
from storefront.config import Settings
from storefront.devserver import FakeBackend, create_app
from storefront.policy import Policy
from storefront.reconcile import Reconciler
from storefront.storage import CheckoutLease, CorrelationRecord, MemoryStorage


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url="http://storefront.test",
        storage_url="sqlite+aiosqlite:///:memory:",
        request_timeout=5.0,
        retry_times=1,
        retry_delay=0.0,
        confirmation_delay=0.0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend().seed()


@pytest.fixture
async def http(backend: FakeBackend, settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=create_app(backend))
    async with httpx.AsyncClient(transport=transport, base_url=settings.api_base_url) as client:
        yield client


@pytest.fixture
def client(http: httpx.AsyncClient) -> StorefrontClient:
    return StorefrontClient(http)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def ledger(storage: MemoryStorage) -> CartLedger:
    return await CartLedger.load(storage)


@pytest.fixture
def correlation(storage: MemoryStorage) -> CorrelationRecord:
    return CorrelationRecord(storage)


@pytest.fixture
def form() -> ShippingForm:
    return ShippingForm(
        first_name="Anna",
        last_name="Petrova",
        email="anna@example.com",
        phone="+7 900 000 00 00",
        address="Tverskaya 1",
        city="Moscow",
        postal_code="125009",
    )


@pytest.fixture
def make_orchestrator(
    ledger: CartLedger,
    client: StorefrontClient,
    correlation: CorrelationRecord,
    settings: Settings,
    storage: MemoryStorage,
) -> Callable[..., CheckoutOrchestrator]:
    def make(
        *,
        ledger_: CartLedger | None = None,
        settings_: Settings | None = None,
        with_lease: bool = False,
    ) -> CheckoutOrchestrator:
        s = settings_ or settings
        return CheckoutOrchestrator(
            ledger_ or ledger,
            Reconciler(client, Policy.from_settings(s)),
            client,
            correlation,
            s,
            lease=CheckoutLease(storage) if with_lease else None,
        )

    return make


@pytest.fixture
def legacy_offer() -> Callable[..., CartOffer]:
    """A line as older clients stored it: no product id, only the composite id."""

    def make(composite_id: str, price: int = 30000) -> CartOffer:
        return CartOffer(composite_id=composite_id, title=composite_id, unit_price_cents=price)

    return make
