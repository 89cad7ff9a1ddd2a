from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from storefront_api.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogItemOrm(Base):
    __tablename__ = "catalog_items"
    id = Column(Integer, primary_key=True)
    description = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    material = Column(String(255), nullable=True)
    images = Column(JSON, nullable=False, default=lambda: [])
    deleted = Column(Boolean, nullable=False, default=False)


class CartLineOrm(Base):
    __tablename__ = "cart_lines"
    id = Column(Integer, primary_key=True)
    owner_email = Column(String(320), nullable=False, index=True)
    # no FK: a line may outlive its catalog item and then prices at 0;
    # guest carts merged in may also carry non-numeric ids
    item_id = Column(String(64), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String(8), nullable=True)
    is_customized = Column(Boolean, nullable=False, default=False)
    customization_text = Column(String(255), nullable=True)
    custom_price = Column(Numeric(12, 2), nullable=True)
    added_on = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class OrderOrm(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    owner_email = Column(String(320), nullable=False, index=True)
    customer_name = Column(String(255), nullable=True)
    customer_phone = Column(String(64), nullable=True)
    customer_address = Column(Text, nullable=True)
    total = Column(Numeric(12, 2), nullable=False)
    status = Column(String(32), nullable=False, default="placed")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    lines = relationship(
        "OrderLineOrm",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineOrm.id",
    )


class OrderLineOrm(Base):
    __tablename__ = "order_lines"
    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(Integer, nullable=False)
    description = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    image = Column(String(1024), nullable=True)
    unit_price = Column(Numeric(12, 2), nullable=False)
    custom_price = Column(Numeric(12, 2), nullable=False, default=0)
    customization_text = Column(String(255), nullable=True)
    size = Column(String(8), nullable=True)
    quantity = Column(Integer, nullable=False)

    order = relationship("OrderOrm", back_populates="lines")


class UserRoleOrm(Base):
    __tablename__ = "user_roles"
    email = Column(String(320), primary_key=True)
    role = Column(String(32), nullable=False, default="customer")
