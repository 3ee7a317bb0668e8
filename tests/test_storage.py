"""
Tests for storage backends, the correlation record and the checkout lease.

Both backends run the same contract tests; SQLite uses an in-memory
database through aiosqlite.
"""
from collections.abc import AsyncIterator
from datetime import timedelta
import asyncio

import pytest
from kungfu import Error, Ok

from storefront.storage import (
    CheckoutLease,
    CorrelationRecord,
    MemoryStorage,
    ORDER_ID_KEY,
    SQLAlchemyStorage,
    Storage,
    create_storage_database,
)


def unwrap(result):
    match result:
        case Ok(value):
            return value
        case Error(err):
            pytest.fail(f"expected Ok, got Error({err!r})")


@pytest.fixture(params=["memory", "sqlite"])
async def backend_storage(request) -> AsyncIterator[Storage]:
    if request.param == "memory":
        yield MemoryStorage()
        return
    session_factory, engine = await create_storage_database("sqlite+aiosqlite:///:memory:")
    try:
        yield SQLAlchemyStorage(session_factory)
    finally:
        await engine.dispose()


class TestStorageContract:
    async def test_get_missing(self, backend_storage):
        assert unwrap(await backend_storage.get("missing")) is None

    async def test_set_overwrites(self, backend_storage):
        await backend_storage.set("k", "one")
        await backend_storage.set("k", "two")
        assert unwrap(await backend_storage.get("k")) == "two"

    async def test_delete(self, backend_storage):
        await backend_storage.set("k", "v")
        assert unwrap(await backend_storage.delete("k")) is True
        assert unwrap(await backend_storage.delete("k")) is False
        assert unwrap(await backend_storage.get("k")) is None

    async def test_set_if_absent_is_first_writer_wins(self, backend_storage):
        assert unwrap(await backend_storage.set_if_absent("lock", "a")) is True
        assert unwrap(await backend_storage.set_if_absent("lock", "b")) is False
        assert unwrap(await backend_storage.get("lock")) == "a"

    async def test_expired_value_counts_as_free(self, backend_storage):
        await backend_storage.set_if_absent("lock", "a", ttl=timedelta(milliseconds=10))
        await asyncio.sleep(0.05)

        assert unwrap(await backend_storage.get("lock")) is None
        assert unwrap(await backend_storage.set_if_absent("lock", "b", ttl=timedelta(seconds=30))) is True
        assert unwrap(await backend_storage.get("lock")) == "b"

    async def test_set_clears_expiry(self, backend_storage):
        await backend_storage.set_if_absent("k", "a", ttl=timedelta(milliseconds=10))
        await backend_storage.set("k", "b")
        await asyncio.sleep(0.05)
        assert unwrap(await backend_storage.get("k")) == "b"


class TestSharedDatabase:
    async def test_two_storages_on_one_database_share_state(self, tmp_path):
        """Two "tabs" pointing at the same file see each other's writes."""
        url = f"sqlite+aiosqlite:///{tmp_path / 'shared.db'}"
        factory_a, engine_a = await create_storage_database(url)
        factory_b, engine_b = await create_storage_database(url)
        try:
            tab_a, tab_b = SQLAlchemyStorage(factory_a), SQLAlchemyStorage(factory_b)
            await CorrelationRecord(tab_a).remember_order(42)
            assert unwrap(await CorrelationRecord(tab_b).order_id()) == 42
        finally:
            await engine_a.dispose()
            await engine_b.dispose()


class TestCorrelationRecord:
    async def test_pointers_round_trip(self, storage):
        record = CorrelationRecord(storage)
        assert unwrap(await record.order_id()) is None
        assert unwrap(await record.payment_id()) is None

        await record.remember_order(7)
        await record.remember_payment("mock_7_1")

        assert unwrap(await record.order_id()) == 7
        assert unwrap(await record.payment_id()) == "mock_7_1"

    async def test_newer_order_overwrites(self, storage):
        record = CorrelationRecord(storage)
        await record.remember_order(1)
        await record.remember_order(2)
        assert unwrap(await record.order_id()) == 2

    async def test_malformed_pointer_reads_as_none(self, storage):
        await storage.set(ORDER_ID_KEY, "abc")
        assert unwrap(await CorrelationRecord(storage).order_id()) is None


class TestCheckoutLease:
    async def test_single_holder(self, backend_storage):
        lease = CheckoutLease(backend_storage)

        assert unwrap(await lease.acquire("tab-a")) is True
        assert unwrap(await lease.acquire("tab-b")) is False

    async def test_only_holder_releases(self, backend_storage):
        lease = CheckoutLease(backend_storage)
        await lease.acquire("tab-a")

        assert unwrap(await lease.release("tab-b")) is False
        assert unwrap(await lease.acquire("tab-b")) is False
        assert unwrap(await lease.release("tab-a")) is True
        assert unwrap(await lease.acquire("tab-b")) is True

    async def test_crashed_holder_expires(self, storage):
        lease = CheckoutLease(storage)
        await lease.acquire("tab-a", ttl=timedelta(milliseconds=10))
        await asyncio.sleep(0.05)
        assert unwrap(await lease.acquire("tab-b")) is True
