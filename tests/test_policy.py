"""
Tests for call policy: bounded retry and overall timeout.

Tests:
- Retry budget and predicates
- Overall timeout mapped to a service timeout
- Each attempt over HTTP sends a fresh request
"""
import asyncio

import httpx

import pytest
from kungfu import Error, LazyCoroResult, Ok

from storefront.client import ServiceError, ServiceErrorKind, StorefrontClient
from storefront.config import Settings
from storefront.policy import (
    Policy,
    Retry,
    Timeout,
    guarded,
    retry_transient,
    retry_unreached,
    service_timeout,
)

CONNECT = ServiceError(ServiceErrorKind.CONNECT, "refused")
TIMEOUT = ServiceError(ServiceErrorKind.TIMEOUT, "slow")
STATUS = ServiceError(ServiceErrorKind.STATUS, "boom", 500)


class Flaky:
    """Returns the queued results in order, then Ok("done")."""

    def __init__(self, *results, delay: float = 0.0):
        self.results = list(results)
        self.delay = delay
        self.calls = 0

    def __call__(self) -> LazyCoroResult[str, ServiceError]:
        async def run():
            self.calls += 1
            await asyncio.sleep(self.delay)
            return self.results.pop(0) if self.results else Ok("done")

        return LazyCoroResult(run)


class TestRetry:
    async def test_retries_transient_once(self):
        call = Flaky(Error(CONNECT))
        match await guarded(call, Policy(retry=Retry(times=1, delay=0)), service_timeout):
            case Ok(value):
                assert value == "done"
            case other:
                pytest.fail(f"unexpected {other}")
        assert call.calls == 2

    async def test_gives_up_after_budget(self):
        call = Flaky(Error(CONNECT), Error(CONNECT), Error(CONNECT))
        match await guarded(call, Policy(retry=Retry(times=1, delay=0)), service_timeout):
            case Error(err):
                assert err is CONNECT
            case other:
                pytest.fail(f"unexpected {other}")
        assert call.calls == 2

    async def test_non_retryable_error_returns_immediately(self):
        call = Flaky(Error(STATUS))
        match await guarded(call, Policy(retry=Retry(times=3, delay=0)), service_timeout):
            case Error(err):
                assert err is STATUS
        assert call.calls == 1

    async def test_unreached_only_policy_does_not_retry_timeouts(self):
        call = Flaky(Error(TIMEOUT))
        policy = Policy(retry=Retry(times=1, delay=0, retry_on=retry_unreached))
        await guarded(call, policy, service_timeout)
        assert call.calls == 1

    def test_predicates(self):
        assert retry_transient(CONNECT) and retry_transient(TIMEOUT)
        assert not retry_transient(STATUS)
        assert retry_unreached(CONNECT) and not retry_unreached(TIMEOUT)
        assert not retry_transient("not a service error")


class TestTimeout:
    async def test_overall_budget(self):
        call = Flaky(delay=1.0)
        policy = Policy(retry=Retry(times=0), timeout=Timeout(total=0.01))

        match await guarded(call, policy, service_timeout):
            case Error(err):
                assert err.kind is ServiceErrorKind.TIMEOUT
            case other:
                pytest.fail(f"unexpected {other}")

    async def test_lazy_until_awaited(self):
        call = Flaky()
        guarded(call, Policy(), service_timeout)
        assert call.calls == 0


class TestFromSettings:
    def test_budget_covers_all_attempts(self):
        policy = Policy.from_settings(Settings(request_timeout=10, retry_times=1, retry_delay=0.5))
        assert policy.retry.times == 1
        assert policy.timeout.total == 20.5
        assert policy.retry.retry_on is retry_transient


class TestOverHttp:
    async def test_each_attempt_sends_a_fresh_request(self):
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            if len(paths) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={
                "id": 7, "slug": "comte", "title": "Comte", "price_cents": 30000,
            })

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as http:
            client = StorefrontClient(http)
            policy = Policy(retry=Retry(times=2, delay=0), timeout=Timeout(total=5))

            match await guarded(lambda: client.product_by_slug("comte"), policy, service_timeout):
                case Ok(product):
                    assert product.id == 7
                case other:
                    pytest.fail(f"unexpected {other}")

        assert paths == ["/api/products/comte", "/api/products/comte"]

    async def test_timeout_spans_retries(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as http:
            client = StorefrontClient(http)
            policy = Policy(retry=Retry(times=1000, delay=0.01), timeout=Timeout(total=0.05))

            match await guarded(lambda: client.product_by_slug("comte"), policy, service_timeout):
                case Error(err):
                    assert err.kind is ServiceErrorKind.TIMEOUT
                case other:
                    pytest.fail(f"unexpected {other}")
