"""
Storage protocol — durable key/value state shared by every tab.

All methods return Result; backends never raise for I/O failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from kungfu import Result


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StorageError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Storage(Protocol):
    """
    String key → string value storage.

    Note: values are opaque strings (JSON where structured), the way
    browser localStorage holds them.
    """

    async def get(self, key: str) -> Result[str | None, StorageError]:
        """Get value. Returns Ok(None) if missing or expired."""
        ...

    async def set(self, key: str, value: str) -> Result[None, StorageError]:
        """Write value, replacing any previous one."""
        ...

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl: timedelta | None = None,
    ) -> Result[bool, StorageError]:
        """
        Atomically write value only if the key is free.

        Returns Ok(True) if written, Ok(False) if a live value exists.
        An expired value counts as free.
        """
        ...

    async def delete(self, key: str) -> Result[bool, StorageError]:
        """Delete value. Returns Ok(True) if it existed."""
        ...


__all__ = ("StorageError", "Storage")
