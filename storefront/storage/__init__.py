"""
Storage — durable state shared across pages and tabs.

    from storefront import storage as S

    session_factory, engine = await S.create_storage_database(url)
    store = S.SQLAlchemyStorage(session_factory)     # or S.MemoryStorage()

    correlation = S.CorrelationRecord(store)
    await correlation.remember_order(42)

    lease = S.CheckoutLease(store)
    match await lease.acquire("tab-1"):
        case Ok(True): ...
"""

from storefront.storage._types import StorageError, Storage
from storefront.storage._memory import MemoryStorage
from storefront.storage._sqlalchemy import (
    KVEntry,
    create_storage_database,
    SQLAlchemyStorage,
)
from storefront.storage._keys import CART_KEY, ORDER_ID_KEY, PAYMENT_ID_KEY, LEASE_KEY
from storefront.storage._correlation import CorrelationRecord
from storefront.storage._lease import DEFAULT_LEASE_TTL, CheckoutLease

__all__ = (
    "StorageError",
    "Storage",
    "MemoryStorage",
    "KVEntry",
    "create_storage_database",
    "SQLAlchemyStorage",
    "CART_KEY",
    "ORDER_ID_KEY",
    "PAYMENT_ID_KEY",
    "LEASE_KEY",
    "CorrelationRecord",
    "DEFAULT_LEASE_TTL",
    "CheckoutLease",
)
