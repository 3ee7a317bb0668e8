"""
Tests for picking a checkout back up on a later page.

Tests:
- Resume from the stored order pointer
- Missing order, missing payment, failed poll
- Completion and its order id fallback
"""
import httpx
import pytest
from kungfu import Error, Ok

from storefront import pricing as P
from storefront.checkout import CheckoutErrorKind, PaymentTracker
from storefront.client import PaymentStatus, StorefrontClient
from storefront.policy import Policy, Retry


def unwrap(result):
    match result:
        case Ok(value):
            return value
        case Error(err):
            pytest.fail(f"expected Ok, got Error({err!r})")


def unwrap_error(result):
    match result:
        case Error(err):
            return err
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")


@pytest.fixture
def tracker(client, correlation) -> PaymentTracker:
    return PaymentTracker(client, correlation, Policy(retry=Retry(times=0)))


async def place(ledger, client, make_orchestrator, form):
    product = unwrap(await client.product_by_slug("comte"))
    await ledger.add(P.offer_for(product, P.tier_at(1)), 2)
    return unwrap(await make_orchestrator().submit(form))


class TestResume:
    async def test_from_stored_pointer(self, tracker, ledger, client, make_orchestrator, form):
        outcome = await place(ledger, client, make_orchestrator, form)

        tracked = unwrap(await tracker.resume())

        assert tracked.order.id == outcome.order.id
        assert tracked.order.amount_cents == 60000
        assert tracked.payment_id == outcome.payment.payment_id
        assert tracked.status is PaymentStatus.PENDING

    async def test_explicit_order_id(self, tracker, ledger, client, make_orchestrator, form):
        outcome = await place(ledger, client, make_orchestrator, form)

        tracked = unwrap(await tracker.resume(outcome.order.id))

        assert tracked.order.id == outcome.order.id

    async def test_nothing_stored(self, tracker):
        err = unwrap_error(await tracker.resume())
        assert err.kind is CheckoutErrorKind.INVALID_STATE

    async def test_unknown_order(self, tracker):
        err = unwrap_error(await tracker.resume(999))
        assert err.kind is CheckoutErrorKind.ORDER_LOOKUP
        assert "999" in err.message

    async def test_deferred_order_reads_pending(self, tracker, backend, ledger, client,
                                                make_orchestrator, form):
        backend.fail_payments = 1
        await place(ledger, client, make_orchestrator, form)

        tracked = unwrap(await tracker.resume())

        assert tracked.payment_id is None
        assert tracked.status is PaymentStatus.PENDING

    async def test_failed_poll_reads_unknown(self, tracker, backend, ledger, client,
                                             make_orchestrator, form):
        await place(ledger, client, make_orchestrator, form)
        backend.fail_status = 1

        tracked = unwrap(await tracker.resume())

        assert tracked.status is PaymentStatus.UNKNOWN

    async def test_order_payment_beats_stale_pointer(self, tracker, correlation, ledger, client,
                                                     make_orchestrator, form):
        outcome = await place(ledger, client, make_orchestrator, form)
        unwrap(await correlation.remember_payment("mock_0_0"))

        tracked = unwrap(await tracker.resume())

        assert tracked.payment_id == outcome.payment.payment_id


class TestComplete:
    async def test_complete_then_resume(self, tracker, backend, ledger, client, make_orchestrator,
                                        form):
        outcome = await place(ledger, client, make_orchestrator, form)

        order_id = unwrap(await tracker.complete())

        assert order_id == outcome.order.id
        assert backend.orders[order_id].status == "paid"
        tracked = unwrap(await tracker.resume())
        assert tracked.status is PaymentStatus.SUCCEEDED

    async def test_nothing_to_complete(self, tracker):
        err = unwrap_error(await tracker.complete())
        assert err.kind is CheckoutErrorKind.INVALID_STATE

    async def test_unknown_payment(self, tracker):
        err = unwrap_error(await tracker.complete("mock_9_9"))
        assert err.kind is CheckoutErrorKind.PAYMENT_COMPLETION

    async def test_order_id_falls_back_to_pointer(self, correlation):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/payments/mock/complete"
            return httpx.Response(200, json={"success": True, "payment_id": "mock_7_1", "message": "ok"})

        unwrap(await correlation.remember_order(7))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as http:
            tracker = PaymentTracker(StorefrontClient(http), correlation)
            assert unwrap(await tracker.complete("mock_7_1")) == 7
