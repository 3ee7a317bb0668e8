"""
SQLAlchemy storage — durable key/value rows in a `kv_entries` table.

Usage:
    session_factory, engine = await create_storage_database(
        "sqlite+aiosqlite:///storefront.db"
    )
    storage = SQLAlchemyStorage(session_factory)

Every process pointed at the same database sees the same cart and
correlation pointers.
"""

from datetime import datetime, timedelta
from typing import Any, cast

from sqlalchemy import select, delete, String, DateTime, Text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from storefront.storage._types import StorageError


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════

class Base(DeclarativeBase):
    pass


class KVEntry(Base):
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


async def create_storage_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create tables and return (session_factory, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


# ═══════════════════════════════════════════════════════════════════════════════
# Storage
# ═══════════════════════════════════════════════════════════════════════════════

class SQLAlchemyStorage:
    """
    Storage backed by an async SQLAlchemy session factory.

    Note: set_if_absent clears an expired row first, then relies on
    INSERT ... ON CONFLICT DO NOTHING for the compare-and-set.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> Result[str | None, StorageError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(KVEntry, key)
                if row is None:
                    return Ok(None)
                if row.expires_at and datetime.now() > row.expires_at:
                    return Ok(None)
                return Ok(row.value)

        except Exception as e:
            return Error(StorageError(f"Failed to get {key}: {e}", e))

    async def set(self, key: str, value: str) -> Result[None, StorageError]:
        try:
            async with self._session_factory() as session:
                stmt = sqlite_insert(KVEntry).values(key=key, value=value, expires_at=None)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[KVEntry.key],
                    set_={"value": value, "expires_at": None},
                )
                await session.execute(stmt)
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StorageError(f"Failed to set {key}: {e}", e))

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl: timedelta | None = None,
    ) -> Result[bool, StorageError]:
        try:
            async with self._session_factory() as session:
                now = datetime.now()
                await session.execute(
                    delete(KVEntry).where(
                        KVEntry.key == key,
                        KVEntry.expires_at.is_not(None),
                        KVEntry.expires_at < now,
                    )
                )
                stmt = sqlite_insert(KVEntry).values(
                    key=key,
                    value=value,
                    expires_at=now + ttl if ttl else None,
                ).on_conflict_do_nothing(index_elements=[KVEntry.key])
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount > 0)

        except Exception as e:
            return Error(StorageError(f"Failed to set {key}: {e}", e))

    async def delete(self, key: str) -> Result[bool, StorageError]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(KVEntry).where(KVEntry.key == key))
                row = result.scalar_one_or_none()
                if row is None:
                    return Ok(False)

                await session.delete(row)
                await session.commit()
                return Ok(True)

        except Exception as e:
            return Error(StorageError(f"Failed to delete {key}: {e}", e))


__all__ = (
    "KVEntry",
    "create_storage_database",
    "SQLAlchemyStorage",
)
