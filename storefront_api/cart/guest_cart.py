"""
Guest cart stored in a browser cookie.

The cookie holds a URL-encoded JSON list of line items keyed the way the
storefront client writes them::

    [{"ID": 3, "Quantity": 2, "Size": "M", "AddedOn": "2024-05-01T10:00:00+00:00"}]

Optional customization keys are ``isCustomized``, ``customizationText`` and
``customPrice``. ``ID`` is a number or a document-id string and is kept as
given. Plain lines are identified by ``(ID, Size)``; a customized line also
by its customization text, so it never folds into a plain line.

All mutations are pure: they take the current list and return a new one,
leaving the caller to write it back to the cookie.
"""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional
from urllib.parse import quote, unquote

from storefront_api.store.cart_models import CartLineInfo, ItemRef

logger = logging.getLogger(__name__)

GuestKey = tuple[str, Optional[str], bool, Optional[str]]


def make_key(
    item_id: ItemRef,
    size: str | None,
    is_customized: bool = False,
    customization_text: str | None = None,
) -> GuestKey:
    return (str(item_id), size, is_customized, customization_text if is_customized else None)


def key_of(line: CartLineInfo) -> GuestKey:
    return make_key(line.item_id, line.size, line.is_customized, line.customization_text)


def to_wire(line: CartLineInfo) -> dict[str, Any]:
    data: dict[str, Any] = {
        "ID": line.item_id,
        "Quantity": line.quantity,
    }
    if line.size is not None:
        data["Size"] = line.size
    if line.added_on is not None:
        data["AddedOn"] = line.added_on.isoformat()
    if line.is_customized:
        data["isCustomized"] = True
        data["customizationText"] = line.customization_text
        data["customPrice"] = line.custom_price
    return data


def from_wire(data: Any) -> CartLineInfo | None:
    if not isinstance(data, dict):
        return None
    item_id = data.get("ID")
    if isinstance(item_id, bool) or not isinstance(item_id, (int, str)) or item_id == "":
        return None
    try:
        quantity = int(data.get("Quantity") or 0)
    except (TypeError, ValueError):
        return None
    if quantity <= 0:
        return None
    added_on = None
    raw_added = data.get("AddedOn")
    if isinstance(raw_added, str):
        try:
            added_on = datetime.fromisoformat(raw_added)
        except ValueError:
            added_on = None
    custom_price = data.get("customPrice")
    try:
        custom_price = float(custom_price) if custom_price is not None else None
    except (TypeError, ValueError):
        custom_price = None
    size = data.get("Size")
    return CartLineInfo(
        item_id=item_id,
        quantity=quantity,
        size=str(size) if size is not None else None,
        is_customized=bool(data.get("isCustomized")),
        customization_text=data.get("customizationText"),
        custom_price=custom_price,
        added_on=added_on,
    )


def loads(raw: str | None) -> list[CartLineInfo]:
    """Parse a cookie value; anything unreadable is an empty cart."""
    if not raw:
        return []
    try:
        parsed = json.loads(unquote(raw))
    except ValueError:
        logger.debug("ignoring malformed guest cart cookie")
        return []
    if not isinstance(parsed, list):
        return []
    lines = []
    for entry in parsed:
        line = from_wire(entry)
        if line is not None:
            lines.append(line)
    return lines


def dumps(lines: Iterable[CartLineInfo]) -> str:
    payload = json.dumps([to_wire(line) for line in lines], separators=(",", ":"))
    return quote(payload, safe="")


def add(lines: list[CartLineInfo], info: CartLineInfo) -> list[CartLineInfo]:
    """Add ``info``, summing into the line with the same key if there is one.

    Plain units never merge into a customized line or the other way round.
    """
    if info.quantity <= 0:
        raise ValueError("quantity must be > 0")
    key = key_of(info)
    result: list[CartLineInfo] = []
    merged = False
    for line in lines:
        if not merged and key_of(line) == key:
            line = replace(line, quantity=line.quantity + info.quantity)
            merged = True
        result.append(line)
    if not merged:
        result.append(replace(info, added_on=info.added_on or datetime.now(timezone.utc)))
    return result


def change_quantity(lines: list[CartLineInfo], key: GuestKey, delta: int) -> list[CartLineInfo] | None:
    """Shift the quantity of ``key`` by ``delta``; None if the key is absent."""
    if key not in {key_of(line) for line in lines}:
        return None
    result = []
    for line in lines:
        if key_of(line) == key:
            new_qty = max(0, line.quantity + delta)
            if new_qty == 0:
                continue
            line = replace(line, quantity=new_qty)
        result.append(line)
    return result


def remove(lines: list[CartLineInfo], key: GuestKey) -> list[CartLineInfo] | None:
    result = [line for line in lines if key_of(line) != key]
    if len(result) == len(lines):
        return None
    return result


def change_size(lines: list[CartLineInfo], key: GuestKey, size: str) -> list[CartLineInfo] | None:
    """Move ``key`` to ``size``.

    If the cart already holds the target key the two lines are folded into
    the existing one, so keys stay unique.
    """
    moving = next((line for line in lines if key_of(line) == key), None)
    if moving is None:
        return None
    if moving.size == size:
        return list(lines)
    rest = [line for line in lines if key_of(line) != key]
    return add(rest, replace(moving, size=size))
