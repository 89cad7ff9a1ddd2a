"""
One cart abstraction for guests and signed-in customers.

Guests keep their cart in the ``guest_cart`` cookie (see ``guest_cart``),
customers in the ``cart_lines`` table. ``CartService`` hides the difference:
routes call the same methods and, for guests, write ``service.guest_lines``
back to the cookie afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from storefront_api.cart import guest_cart
from storefront_api.store import cart_queries, catalog_queries
from storefront_api.store.cart_models import (
    CartLineInfo,
    CartView,
    ItemRef,
    PricedCartLine,
)
from storefront_api.store.catalog_models import CatalogItemEntity

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CartUpdateError(Exception):
    """The remote cart store rejected or failed a read or mutation."""


class LineSelectorError(ValueError):
    pass


@dataclass(slots=True)
class LineSelector:
    line_id: int | None = None
    item_id: ItemRef | None = None
    size: str | None = None
    is_customized: bool = False
    customization_text: str | None = None

    @property
    def guest_key(self) -> guest_cart.GuestKey:
        if self.item_id is None:
            raise LineSelectorError("guest cart lines are selected by item_id and size")
        return guest_cart.make_key(self.item_id, self.size, self.is_customized, self.customization_text)

    @property
    def remote_id(self) -> int:
        if self.line_id is None:
            raise LineSelectorError("cart lines are selected by line_id when signed in")
        return self.line_id


def _lookup(catalog: Mapping[int, CatalogItemEntity], line: CartLineInfo) -> CatalogItemEntity | None:
    cid = catalog_queries.catalog_id(line.item_id)
    return catalog.get(cid) if cid is not None else None


def line_total(line: CartLineInfo, item: CatalogItemEntity | None) -> float:
    if item is None:
        return 0.0
    return (item.info.price + line.surcharge) * line.quantity


def cart_total(lines: Iterable[CartLineInfo], catalog: Mapping[int, CatalogItemEntity]) -> float:
    """Sum of (price + customization surcharge) * quantity.

    Lines whose catalog item is missing or deleted contribute 0.
    """
    return sum(line_total(line, _lookup(catalog, line)) for line in lines)


def price_lines(
    owner_email: str | None,
    lines: list[tuple[int | None, CartLineInfo]],
) -> CartView:
    catalog = catalog_queries.get_by_ids(info.item_id for _, info in lines)
    priced = []
    for line_id, info in lines:
        item = _lookup(catalog, info)
        priced.append(
            PricedCartLine(
                id=line_id,
                info=info,
                description=item.info.description if item is not None else None,
                category=item.info.category if item is not None else None,
                image=item.info.images[0] if item is not None and item.info.images else None,
                unit_price=(item.info.price + info.surcharge) if item is not None else 0.0,
                line_total=line_total(info, item),
                available=item is not None,
            )
        )
    return CartView(
        owner_email=owner_email,
        lines=priced,
        item_count=sum(info.quantity for _, info in lines),
        total=cart_total((info for _, info in lines), catalog),
    )


class CartService:
    def __init__(self, owner_email: str | None, guest_lines: list[CartLineInfo] | None = None):
        self.owner_email = owner_email
        self.guest_lines: list[CartLineInfo] = list(guest_lines or [])

    @property
    def is_guest(self) -> bool:
        return self.owner_email is None

    def _remote(self, action: str, fn: Callable[..., T], *args) -> T:
        try:
            return fn(self.owner_email, *args)
        except SQLAlchemyError as e:
            logger.exception("%s failed for %s", action, self.owner_email)
            raise CartUpdateError(f"{action} failed") from e

    def lines(self) -> list[tuple[int | None, CartLineInfo]]:
        if self.is_guest:
            return [(None, line) for line in self.guest_lines]
        entities = self._remote("cart read", cart_queries.list_for_owner)
        return [(e.id, e.info) for e in entities]

    def view(self) -> CartView:
        return price_lines(self.owner_email, self.lines())

    def add(self, info: CartLineInfo) -> CartView:
        if self.is_guest:
            self.guest_lines = guest_cart.add(self.guest_lines, info)
        else:
            self._remote("cart add", cart_queries.add_line, info)
        return self.view()

    def change_quantity(self, selector: LineSelector, delta: int) -> CartView | None:
        if self.is_guest:
            updated = guest_cart.change_quantity(self.guest_lines, selector.guest_key, delta)
            if updated is None:
                return None
            self.guest_lines = updated
        elif self._remote("cart quantity", cart_queries.change_quantity, selector.remote_id, delta) is None:
            return None
        return self.view()

    def change_size(self, selector: LineSelector, size: str) -> CartView | None:
        if self.is_guest:
            updated = guest_cart.change_size(self.guest_lines, selector.guest_key, size)
            if updated is None:
                return None
            self.guest_lines = updated
        elif self._remote("cart size", cart_queries.set_size, selector.remote_id, size) is None:
            return None
        return self.view()

    def remove(self, selector: LineSelector) -> CartView | None:
        if self.is_guest:
            updated = guest_cart.remove(self.guest_lines, selector.guest_key)
            if updated is None:
                return None
            self.guest_lines = updated
        elif not self._remote("cart remove", cart_queries.remove, selector.remote_id):
            return None
        return self.view()

    def clear(self) -> CartView:
        if self.is_guest:
            self.guest_lines = []
        else:
            self._remote("cart clear", cart_queries.clear)
        return self.view()

    def merge_guest(self, guest_lines: Iterable[CartLineInfo]) -> CartView:
        """Fold a guest cookie cart into the signed-in owner's cart.

        Guest lines are added the way ``add`` adds them, all in one
        transaction: either every line lands or the remote cart is unchanged.
        """
        if self.is_guest:
            raise CartUpdateError("merging requires a signed-in customer")
        merged = self._remote("cart merge", cart_queries.add_lines, list(guest_lines))
        logger.info("merged %d guest cart lines into cart of %s", len(merged), self.owner_email)
        return self.view()
