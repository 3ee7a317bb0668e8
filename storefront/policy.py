"""
Call policy — overall timeout plus a bounded retry around a lazy call.

Retry and timeout are applied via `combinators.flow(...).retry(...).timeout(...)`.
A LazyCoroResult re-runs its coroutine on every await, so each retry sends
a fresh request.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import structlog
from combinators import RetryPolicy, TimeoutError as FlowTimeout, flow
from kungfu import Error, LazyCoroResult, Result

from storefront.client import ServiceError, ServiceErrorKind
from storefront.config import Settings

logger = structlog.get_logger(__name__)


class RetryOn(Protocol):
    def __call__(self, err: object) -> bool: ...


def retry_transient(err: object) -> bool:
    """Connect failures and timeouts."""
    return isinstance(err, ServiceError) and err.transient


def retry_unreached(err: object) -> bool:
    """Only failures where the request never reached the server."""
    return isinstance(err, ServiceError) and err.unreached


@dataclass(frozen=True, slots=True)
class Retry:
    """Extra attempts after the first. Applied via combinators.flow().retry(...)."""
    times: int = 1
    delay: float = 0.2
    retry_on: RetryOn = retry_transient


@dataclass(frozen=True, slots=True)
class Timeout:
    """Budget in seconds for all attempts together. None means unbounded."""
    total: float | None = None


@dataclass(frozen=True, slots=True)
class Policy:
    retry: Retry = Retry()
    timeout: Timeout = Timeout()

    @classmethod
    def from_settings(cls, settings: Settings, retry_on: RetryOn = retry_transient) -> Policy:
        attempts = settings.retry_times + 1
        total = settings.request_timeout * attempts + settings.retry_delay * settings.retry_times
        return cls(
            retry=Retry(times=settings.retry_times, delay=settings.retry_delay, retry_on=retry_on),
            timeout=Timeout(total=total),
        )


def service_timeout() -> ServiceError:
    return ServiceError(ServiceErrorKind.TIMEOUT, "call exceeded its time budget")


def guarded[T, E](
    make: Callable[[], LazyCoroResult[T, E]],
    policy: Policy,
    on_timeout: Callable[[], E],
    name: str = "call",
) -> LazyCoroResult[T, E]:
    """
    Run `make()` under `policy`.

    Example:
        create = guarded(
            lambda: client.create_order(request),
            Policy.from_settings(settings, retry_on=retry_unreached),
            on_timeout=service_timeout,
            name="create_order",
        )
        match await create:
            case Ok(order): ...
            case Error(err): ...
    """

    def should_retry(err: E) -> bool:
        if not policy.retry.retry_on(err):
            return False
        logger.info("Retrying call", call=name, error=err)
        return True

    pipeline = flow(make())
    if policy.retry.times > 0:
        pipeline = pipeline.retry(policy=RetryPolicy.fixed(
            times=policy.retry.times + 1,
            delay_seconds=policy.retry.delay,
            retry_on=should_retry,
        ))
    if policy.timeout.total is not None:
        pipeline = pipeline.timeout(seconds=policy.timeout.total)
    compiled = pipeline.compile()

    async def _run() -> Result[T, E]:
        match await compiled:
            case Error(FlowTimeout()):
                logger.warning("Call timed out", call=name, budget=policy.timeout.total)
                return Error(on_timeout())
            case result:
                return result

    return LazyCoroResult(_run)


__all__ = (
    "RetryOn",
    "retry_transient",
    "retry_unreached",
    "Retry",
    "Timeout",
    "Policy",
    "service_timeout",
    "guarded",
)
