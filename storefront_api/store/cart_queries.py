from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.orm import Session

from storefront_api.db import SessionLocal
from storefront_api.store.cart_models import CartLineEntity, CartLineInfo, item_ref
from storefront_api.store.orm import CartLineOrm


def _to_entity(orm: CartLineOrm) -> CartLineEntity:
    return CartLineEntity(
        id=orm.id,
        owner_email=orm.owner_email,
        info=CartLineInfo(
            item_id=item_ref(orm.item_id),
            quantity=orm.quantity,
            size=orm.size,
            is_customized=bool(orm.is_customized),
            customization_text=orm.customization_text,
            custom_price=float(orm.custom_price) if orm.custom_price is not None else None,
            added_on=orm.added_on,
        ),
    )


def _owned(session: Session, owner_email: str, line_id: int) -> CartLineOrm | None:
    orm = session.get(CartLineOrm, line_id)
    if orm is None or orm.owner_email != owner_email:
        return None
    return orm


def list_for_owner(owner_email: str) -> list[CartLineEntity]:
    with SessionLocal() as session:
        rows = session.execute(
            select(CartLineOrm)
            .where(CartLineOrm.owner_email == owner_email)
            .order_by(CartLineOrm.added_on, CartLineOrm.id)
        ).scalars().all()
        return [_to_entity(orm) for orm in rows]


def _matching_line(session: Session, owner_email: str, info: CartLineInfo) -> CartLineOrm | None:
    stmt = (
        select(CartLineOrm)
        .where(CartLineOrm.owner_email == owner_email)
        .where(CartLineOrm.item_id == str(info.item_id))
        .where(CartLineOrm.size.is_(None) if info.size is None else CartLineOrm.size == info.size)
        .where(CartLineOrm.is_customized.is_(info.is_customized))
    )
    if info.is_customized:
        stmt = stmt.where(
            CartLineOrm.customization_text.is_(None)
            if info.customization_text is None
            else CartLineOrm.customization_text == info.customization_text
        )
    return session.execute(stmt.order_by(CartLineOrm.id).limit(1)).scalar_one_or_none()


def _add_line(session: Session, owner_email: str, info: CartLineInfo) -> CartLineOrm:
    if info.quantity <= 0:
        raise ValueError("quantity must be > 0")
    existing = _matching_line(session, owner_email, info)
    if existing is not None:
        existing.quantity += info.quantity
        existing.added_on = datetime.now(timezone.utc)
        orm = existing
    else:
        orm = CartLineOrm(
            owner_email=owner_email,
            item_id=str(info.item_id),
            quantity=info.quantity,
            size=info.size,
            is_customized=info.is_customized,
            customization_text=info.customization_text,
            custom_price=Decimal(str(info.custom_price)) if info.custom_price is not None else None,
            added_on=info.added_on or datetime.now(timezone.utc),
        )
        session.add(orm)
    session.flush()
    return orm


def add_line(owner_email: str, info: CartLineInfo) -> CartLineEntity:
    """Add ``info`` to the owner's cart.

    A line with the same item, size and customization as an existing line
    increments that line instead of creating a record; plain and customized
    units are never mixed.
    """
    with SessionLocal.begin() as session:
        return _to_entity(_add_line(session, owner_email, info))


def add_lines(owner_email: str, lines: Iterable[CartLineInfo]) -> list[CartLineEntity]:
    """``add_line`` for several lines in one transaction: all or nothing."""
    with SessionLocal.begin() as session:
        return [_to_entity(_add_line(session, owner_email, info)) for info in lines]


def clear_in(session: Session, owner_email: str) -> int:
    result = session.execute(
        sa_delete(CartLineOrm).where(CartLineOrm.owner_email == owner_email)
    )
    return result.rowcount or 0


def change_quantity(owner_email: str, line_id: int, delta: int) -> CartLineEntity | None:
    """Shift a line's quantity by ``delta``, floored at 0.

    A line reaching 0 is deleted; the returned entity then reports
    quantity 0. Returns None when the line does not belong to the owner.
    """
    with SessionLocal.begin() as session:
        orm = _owned(session, owner_email, line_id)
        if orm is None:
            return None
        new_qty = max(0, orm.quantity + delta)
        entity = _to_entity(orm)
        entity.info.quantity = new_qty
        if new_qty == 0:
            session.delete(orm)
        else:
            orm.quantity = new_qty
        return entity


def set_size(owner_email: str, line_id: int, size: str) -> CartLineEntity | None:
    with SessionLocal.begin() as session:
        orm = _owned(session, owner_email, line_id)
        if orm is None:
            return None
        orm.size = size
        session.flush()
        return _to_entity(orm)


def remove(owner_email: str, line_id: int) -> bool:
    with SessionLocal.begin() as session:
        orm = _owned(session, owner_email, line_id)
        if orm is None:
            return False
        session.delete(orm)
        return True


def clear(owner_email: str) -> int:
    with SessionLocal.begin() as session:
        return clear_in(session, owner_email)
