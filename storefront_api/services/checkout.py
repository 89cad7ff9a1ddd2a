from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from storefront_api.cart.reconciliation import CartService
from storefront_api.store import catalog_queries, order_queries
from storefront_api.store.cart_models import CartView
from storefront_api.store.order_models import (
    CustomerInfo,
    OrderEntity,
    OrderInfo,
    OrderLineInfo,
    OrderStatus,
)

logger = logging.getLogger(__name__)


class EmptyCartError(ValueError):
    pass


class OrderPlacementError(Exception):
    """The order could not be stored; the cart is left as it was."""


def snapshot(view: CartView, customer: CustomerInfo) -> OrderInfo:
    """Freeze the priced cart into order lines.

    Lines whose catalog item is gone are left out of the order.
    """
    lines = [
        OrderLineInfo(
            item_id=catalog_queries.catalog_id(line.info.item_id),
            description=line.description or f"item-{line.info.item_id}",
            unit_price=line.unit_price - line.info.surcharge,
            quantity=line.info.quantity,
            category=line.category,
            image=line.image,
            size=line.info.size,
            custom_price=line.info.surcharge,
            customization_text=line.info.customization_text,
        )
        for line in view.lines
        if line.available
    ]
    if not lines:
        raise EmptyCartError("Cart is empty")
    return OrderInfo(
        customer=customer,
        lines=lines,
        total=sum(line.line_total for line in lines),
        status=OrderStatus.PLACED,
    )


def place_order(service: CartService, customer: CustomerInfo) -> OrderEntity:
    info = snapshot(service.view(), customer)
    try:
        order = order_queries.add(info, clear_cart_of=service.owner_email)
    except SQLAlchemyError as e:
        logger.exception("storing order failed for %s", customer.email)
        raise OrderPlacementError("Failed to place order") from e
    if service.is_guest:
        service.clear()
    logger.info("order %s placed by %s, total %.2f", order.id, customer.email, order.info.total)
    return order
