"""
Cart snapshot codec — versioned JSON.

Current shape:
    {"version": 1, "items": [{"id": "comte-200g", "title": ..., "price": 30000,
                              "quantity": 2, "image": ..., "productId": 7}]}

Older clients wrote the bare item list without a version and without
productId; that shape still loads. Anything else is rejected with
SnapshotError so the caller can discard it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error

from storefront.cart._types import CartLineItem

SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class SnapshotError:
    message: str


def encode_snapshot(items: list[CartLineItem]) -> str:
    return json.dumps(
        {
            "version": SNAPSHOT_VERSION,
            "items": [_encode_item(item) for item in items],
        },
        ensure_ascii=False,
    )


def decode_snapshot(raw: str) -> Result[list[CartLineItem], SnapshotError]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        return Error(SnapshotError(f"not JSON: {e}"))

    match payload:
        case list() as entries:
            pass
        case {"version": int(version), "items": list() as entries}:
            if version != SNAPSHOT_VERSION:
                return Error(SnapshotError(f"unsupported version {version}"))
        case _:
            return Error(SnapshotError("unrecognised snapshot shape"))

    items: list[CartLineItem] = []
    seen: set[str] = set()
    for entry in entries:
        match _decode_item(entry):
            case Ok(item):
                if item.composite_id in seen:
                    return Error(SnapshotError(f"duplicate line {item.composite_id}"))
                seen.add(item.composite_id)
                items.append(item)
            case Error(e):
                return Error(e)
    return Ok(items)


def _encode_item(item: CartLineItem) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": item.composite_id,
        "title": item.title,
        "price": item.unit_price_cents,
        "quantity": item.quantity,
    }
    if item.image_ref is not None:
        entry["image"] = item.image_ref
    if item.product_id is not None:
        entry["productId"] = item.product_id
    return entry


def _decode_item(entry: object) -> Result[CartLineItem, SnapshotError]:
    match entry:
        case {"id": str(cid), "title": str(title), "price": int(price), "quantity": int(qty)}:
            if qty < 1 or price < 0:
                return Error(SnapshotError(f"bad quantity or price for {cid}"))
            image = entry.get("image")
            product_id = entry.get("productId")
            return Ok(CartLineItem(
                composite_id=cid,
                title=title,
                unit_price_cents=price,
                quantity=qty,
                image_ref=image if isinstance(image, str) else None,
                product_id=product_id if isinstance(product_id, int) else None,
            ))
        case _:
            return Error(SnapshotError(f"malformed line: {entry!r}"))


__all__ = ("SNAPSHOT_VERSION", "SnapshotError", "encode_snapshot", "decode_snapshot")
