"""
Correlation record — order/payment pointers for later pages.

Written once when each entity is created, read any number of times.
Nothing invalidates them; a newer order simply overwrites the pointer.
"""

from __future__ import annotations

import structlog
from kungfu import Result, Ok, Error

from storefront.storage._keys import ORDER_ID_KEY, PAYMENT_ID_KEY
from storefront.storage._types import Storage, StorageError

logger = structlog.get_logger(__name__)


class CorrelationRecord:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def remember_order(self, order_id: int) -> Result[None, StorageError]:
        return await self._storage.set(ORDER_ID_KEY, str(order_id))

    async def remember_payment(self, payment_id: str) -> Result[None, StorageError]:
        return await self._storage.set(PAYMENT_ID_KEY, payment_id)

    async def order_id(self) -> Result[int | None, StorageError]:
        match await self._storage.get(ORDER_ID_KEY):
            case Ok(None):
                return Ok(None)
            case Ok(raw):
                try:
                    return Ok(int(raw))
                except ValueError:
                    logger.warning("Ignoring malformed order pointer", raw=raw)
                    return Ok(None)
            case Error(e):
                return Error(e)

    async def payment_id(self) -> Result[str | None, StorageError]:
        match await self._storage.get(PAYMENT_ID_KEY):
            case Ok(raw):
                return Ok(raw or None)
            case Error(e):
                return Error(e)


__all__ = ("CorrelationRecord",)
