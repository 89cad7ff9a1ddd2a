from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront_api.store.order_models import (
    CustomerInfo,
    OrderEntity,
    OrderInfo,
    OrderLineInfo,
    OrderStatus,
)


class ContactRequest(BaseModel):
    name: str | None = None
    subject: str | None = None
    email: str | None = None
    message: str | None = None

    def missing_fields(self) -> bool:
        return not all(
            (v or "").strip() for v in (self.name, self.subject, self.email, self.message)
        )


class InvoiceCustomer(BaseModel):
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    address: str | None = None


class InvoiceLine(BaseModel):
    item_id: int = 0
    description: str = "Item"
    quantity: int = 1
    unit_price: float = 0.0
    custom_price: float = 0.0
    size: str | None = None


class InvoiceOrder(BaseModel):
    id: int | str | None = None
    customer: InvoiceCustomer = Field(default_factory=InvoiceCustomer)
    items: List[InvoiceLine] = Field(default_factory=list)
    total: float | None = None
    status: OrderStatus = OrderStatus.COMPLETED
    created_at: datetime | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("status", mode="before")
    @classmethod
    def _lenient_status(cls, v):
        return v if v in {s.value for s in OrderStatus} else OrderStatus.COMPLETED

    def as_order_entity(self, order_id: int | str | None) -> OrderEntity:
        lines = [
            OrderLineInfo(
                item_id=it.item_id,
                description=it.description,
                unit_price=it.unit_price,
                quantity=it.quantity,
                size=it.size,
                custom_price=it.custom_price,
            )
            for it in self.items
        ]
        info = OrderInfo(
            customer=CustomerInfo(
                email=self.customer.email or "",
                name=self.customer.name,
                phone=self.customer.phone,
                address=self.customer.address,
            ),
            lines=lines,
            total=self.total if self.total is not None else sum(l.line_total for l in lines),
            status=self.status,
            created_at=self.created_at,
        )
        return OrderEntity(id=order_id if order_id is not None else self.id or 0, info=info)


class SendInvoiceRequest(BaseModel):
    order: InvoiceOrder | None = None
    orderId: int | str | None = None
    sendTo: str | None = None


class FaqItem(BaseModel):
    q: str
    a: str
