"""
Cart ledger — explicitly owned cart state with write-through persistence.

Mutations apply in memory first, then persist the full snapshot. A storage
failure is logged and does not undo the mutation: the in-memory ledger
stays authoritative for this session.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from dataclasses import replace

import structlog
from kungfu import Ok, Error

from storefront._types import CompositeId
from storefront.cart._snapshot import encode_snapshot, decode_snapshot
from storefront.cart._types import CartOffer, CartLineItem
from storefront.storage import CART_KEY, Storage

logger = structlog.get_logger(__name__)


class CartLedger:
    """
    Cart lines keyed by composite id, in insertion order.

    Invariants:
        - at most one line per composite id
        - every line has quantity >= 1; decrementing a line at 1 or setting
          a quantity of 0 removes it

    Example:
        ledger = await CartLedger.load(storage)
        await ledger.add(P.offer_for(product, P.tier_at(1)), quantity=2)
        ledger.count()        # 2
        ledger.total_cents()  # 2 * unit price
    """

    def __init__(self, storage: Storage, key: str = CART_KEY) -> None:
        self._storage = storage
        self._key = key
        self._lines: dict[CompositeId, CartLineItem] = {}
        self._write_lock = asyncio.Lock()

    @classmethod
    async def load(cls, storage: Storage, key: str = CART_KEY) -> CartLedger:
        """Rehydrate from storage; an unreadable snapshot yields an empty cart."""
        ledger = cls(storage, key)

        match await storage.get(key):
            case Ok(None):
                pass
            case Ok(raw):
                match decode_snapshot(raw):
                    case Ok(items):
                        ledger._lines = {item.composite_id: item for item in items}
                        logger.debug("Cart rehydrated", lines=len(items))
                    case Error(e):
                        logger.warning("Discarding unreadable cart snapshot", reason=e.message)
            case Error(e):
                logger.warning("Cart storage unavailable, starting empty", error=e.message)

        return ledger

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def add(self, offer: CartOffer, quantity: int = 1) -> None:
        """Insert a line, or merge into the existing one with the same id."""
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")

        existing = self._lines.get(offer.composite_id)
        if existing is None:
            self._lines[offer.composite_id] = CartLineItem.from_offer(offer, quantity)
        else:
            self._lines[offer.composite_id] = replace(
                existing, quantity=existing.quantity + quantity
            )
        await self._persist()

    async def remove(self, composite_id: CompositeId) -> None:
        if self._lines.pop(composite_id, None) is not None:
            await self._persist()

    async def increment(self, composite_id: CompositeId) -> None:
        line = self._lines.get(composite_id)
        if line is None:
            return
        self._lines[composite_id] = replace(line, quantity=line.quantity + 1)
        await self._persist()

    async def decrement(self, composite_id: CompositeId) -> None:
        line = self._lines.get(composite_id)
        if line is None:
            return
        if line.quantity <= 1:
            del self._lines[composite_id]
        else:
            self._lines[composite_id] = replace(line, quantity=line.quantity - 1)
        await self._persist()

    async def set_quantity(self, composite_id: CompositeId, quantity: int) -> None:
        """Overwrite a line's quantity; zero or less removes the line."""
        line = self._lines.get(composite_id)
        if line is None:
            return
        if quantity <= 0:
            del self._lines[composite_id]
        else:
            self._lines[composite_id] = replace(line, quantity=quantity)
        await self._persist()

    async def clear(self) -> None:
        self._lines.clear()
        await self._persist()

    # ═══════════════════════════════════════════════════════════════════════════
    # Queries
    # ═══════════════════════════════════════════════════════════════════════════

    def items(self) -> list[CartLineItem]:
        return list(self._lines.values())

    def get(self, composite_id: CompositeId) -> CartLineItem | None:
        return self._lines.get(composite_id)

    def count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def total_cents(self) -> int:
        return sum(line.total_cents for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(self.items())

    # ═══════════════════════════════════════════════════════════════════════════
    # Persistence
    # ═══════════════════════════════════════════════════════════════════════════

    async def _persist(self) -> None:
        # Snapshot is taken under the lock so the last write carries the latest state.
        async with self._write_lock:
            raw = encode_snapshot(self.items())
            match await self._storage.set(self._key, raw):
                case Error(e):
                    logger.warning("Cart snapshot not persisted", error=e.message)


__all__ = ("CartLedger",)
