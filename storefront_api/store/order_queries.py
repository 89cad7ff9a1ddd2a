from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from storefront_api.db import SessionLocal
from storefront_api.store import cart_queries
from storefront_api.store.order_models import (
    CustomerInfo,
    OrderEntity,
    OrderInfo,
    OrderLineInfo,
    OrderStatus,
)
from storefront_api.store.orm import OrderLineOrm, OrderOrm


def _to_entity(orm: OrderOrm) -> OrderEntity:
    return OrderEntity(
        id=orm.id,
        info=OrderInfo(
            customer=CustomerInfo(
                email=orm.owner_email,
                name=orm.customer_name,
                phone=orm.customer_phone,
                address=orm.customer_address,
            ),
            lines=[
                OrderLineInfo(
                    item_id=line.item_id,
                    description=line.description,
                    unit_price=float(line.unit_price),
                    quantity=line.quantity,
                    category=line.category,
                    image=line.image,
                    size=line.size,
                    custom_price=float(line.custom_price or 0),
                    customization_text=line.customization_text,
                )
                for line in orm.lines
            ],
            total=float(orm.total),
            status=OrderStatus(orm.status),
            created_at=orm.created_at,
        ),
    )


def add(info: OrderInfo, clear_cart_of: str | None = None) -> OrderEntity:
    """Store the order.

    With ``clear_cart_of`` that owner's cart lines are deleted in the same
    transaction.
    """
    with SessionLocal.begin() as session:
        orm = OrderOrm(
            owner_email=info.customer.email,
            customer_name=info.customer.name,
            customer_phone=info.customer.phone,
            customer_address=info.customer.address,
            total=Decimal(str(round(info.total, 2))),
            status=info.status.value,
            created_at=info.created_at or datetime.now(timezone.utc),
            lines=[
                OrderLineOrm(
                    item_id=line.item_id,
                    description=line.description,
                    category=line.category,
                    image=line.image,
                    unit_price=Decimal(str(line.unit_price)),
                    custom_price=Decimal(str(line.custom_price)),
                    customization_text=line.customization_text,
                    size=line.size,
                    quantity=line.quantity,
                )
                for line in info.lines
            ],
        )
        session.add(orm)
        if clear_cart_of is not None:
            cart_queries.clear_in(session, clear_cart_of)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def get_one(id: int) -> OrderEntity | None:
    with SessionLocal() as session:
        orm = session.execute(
            select(OrderOrm).options(selectinload(OrderOrm.lines)).where(OrderOrm.id == id)
        ).scalar_one_or_none()
        return _to_entity(orm) if orm is not None else None


def get_many(
    offset: int = 0,
    limit: int = 50,
    owner_email: str | None = None,
    status: OrderStatus | None = None,
) -> list[OrderEntity]:
    with SessionLocal() as session:
        stmt = select(OrderOrm).options(selectinload(OrderOrm.lines))
        if owner_email is not None:
            stmt = stmt.where(OrderOrm.owner_email == owner_email)
        if status is not None:
            stmt = stmt.where(OrderOrm.status == status.value)
        stmt = stmt.order_by(OrderOrm.created_at.desc(), OrderOrm.id.desc()).offset(offset).limit(limit)
        return [_to_entity(orm) for orm in session.execute(stmt).scalars().all()]


def set_status(id: int, status: OrderStatus) -> OrderEntity | None:
    with SessionLocal.begin() as session:
        orm = session.execute(
            select(OrderOrm).options(selectinload(OrderOrm.lines)).where(OrderOrm.id == id)
        ).scalar_one_or_none()
        if orm is None:
            return None
        orm.status = status.value
        session.flush()
        return _to_entity(orm)
