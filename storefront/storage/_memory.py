"""
In-memory storage — single process, tests.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta

from kungfu import Result, Ok

from storefront.storage._types import StorageError


@dataclass
class _Entry:
    value: str
    expires_at: datetime | None = None

    def expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryStorage:
    """
    In-memory storage.

    Note: shared only by objects holding the same instance; nothing
    survives a restart.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is not None and entry.expired(datetime.now()):
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Result[str | None, StorageError]:
        async with self._lock:
            entry = self._live(key)
            return Ok(entry.value if entry else None)

    async def set(self, key: str, value: str) -> Result[None, StorageError]:
        async with self._lock:
            self._entries[key] = _Entry(value)
            return Ok(None)

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl: timedelta | None = None,
    ) -> Result[bool, StorageError]:
        async with self._lock:
            if self._live(key) is not None:
                return Ok(False)
            expires_at = datetime.now() + ttl if ttl else None
            self._entries[key] = _Entry(value, expires_at)
            return Ok(True)

    async def delete(self, key: str) -> Result[bool, StorageError]:
        async with self._lock:
            return Ok(self._entries.pop(key, None) is not None)


__all__ = ("MemoryStorage",)
