"""
Cart — ledger of line items persisted across sessions.

    from storefront import cart as K

    ledger = await K.CartLedger.load(storage)
    await ledger.add(offer, quantity=2)
    await ledger.decrement(offer.composite_id)  # at quantity 1 removes the line
"""

from storefront.cart._types import CartOffer, CartLineItem
from storefront.cart._snapshot import (
    SNAPSHOT_VERSION,
    SnapshotError,
    encode_snapshot,
    decode_snapshot,
)
from storefront.cart._ledger import CartLedger

__all__ = (
    "CartOffer",
    "CartLineItem",
    "SNAPSHOT_VERSION",
    "SnapshotError",
    "encode_snapshot",
    "decode_snapshot",
    "CartLedger",
)
