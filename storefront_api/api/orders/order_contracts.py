from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from storefront_api.store.order_models import (
    CustomerInfo,
    OrderEntity,
    OrderLineInfo,
    OrderStatus,
)


class CustomerModel(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    name: str | None = None
    phone: str | None = None
    address: str | None = None

    def as_customer_info(self, email: str) -> CustomerInfo:
        return CustomerInfo(email=email, name=self.name, phone=self.phone, address=self.address)


class OrderLineResponse(BaseModel):
    item_id: int
    description: str
    category: str | None
    image: str | None
    size: str | None
    quantity: int
    unit_price: float
    custom_price: float
    customization_text: str | None
    line_total: float

    @staticmethod
    def from_line_info(line: OrderLineInfo) -> OrderLineResponse:
        return OrderLineResponse(
            item_id=line.item_id,
            description=line.description,
            category=line.category,
            image=line.image,
            size=line.size,
            quantity=line.quantity,
            unit_price=line.unit_price,
            custom_price=line.custom_price,
            customization_text=line.customization_text,
            line_total=line.line_total,
        )


class OrderResponse(BaseModel):
    id: int
    customer: CustomerModel
    items: List[OrderLineResponse]
    total: float
    status: OrderStatus
    created_at: datetime | None

    @staticmethod
    def from_entity(entity: OrderEntity) -> OrderResponse:
        customer = entity.info.customer
        return OrderResponse(
            id=entity.id,
            customer=CustomerModel(
                email=customer.email,
                name=customer.name,
                phone=customer.phone,
                address=customer.address,
            ),
            items=[OrderLineResponse.from_line_info(line) for line in entity.info.lines],
            total=entity.info.total,
            status=entity.info.status,
            created_at=entity.info.created_at,
        )


class CheckoutRequest(BaseModel):
    customer: CustomerModel = Field(default_factory=CustomerModel)

    model_config = ConfigDict(extra="forbid")


class OrderStatusRequest(BaseModel):
    status: OrderStatus

    model_config = ConfigDict(extra="forbid")
