"""
Checkout lease — optional single-writer lock across tabs.

A tab holds the lease while it reconciles and submits; another tab's
submission in that window is turned away. The ttl bounds how long a
crashed tab can block everyone else.
"""

from __future__ import annotations

from datetime import timedelta

import structlog
from kungfu import Result, Ok, Error

from storefront.storage._keys import LEASE_KEY
from storefront.storage._types import Storage, StorageError

logger = structlog.get_logger(__name__)

DEFAULT_LEASE_TTL = timedelta(seconds=30)


class CheckoutLease:
    def __init__(self, storage: Storage, key: str = LEASE_KEY) -> None:
        self._storage = storage
        self._key = key

    async def acquire(
        self,
        owner: str,
        ttl: timedelta = DEFAULT_LEASE_TTL,
    ) -> Result[bool, StorageError]:
        """Ok(True) if `owner` now holds the lease."""
        result = await self._storage.set_if_absent(self._key, owner, ttl)
        match result:
            case Ok(False):
                logger.info("Checkout lease held elsewhere", owner=owner)
        return result

    async def release(self, owner: str) -> Result[bool, StorageError]:
        """Release only if `owner` is still the holder."""
        match await self._storage.get(self._key):
            case Ok(holder) if holder == owner:
                return await self._storage.delete(self._key)
            case Ok(_):
                return Ok(False)
            case Error(e):
                return Error(e)


__all__ = ("DEFAULT_LEASE_TTL", "CheckoutLease")
