from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List


class OrderStatus(str, Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out for delivery"
    COMPLETED = "completed"


@dataclass(slots=True)
class CustomerInfo:
    email: str
    name: str | None = None
    phone: str | None = None
    address: str | None = None


@dataclass(slots=True)
class OrderLineInfo:
    item_id: int
    description: str
    unit_price: float
    quantity: int
    category: str | None = None
    image: str | None = None
    size: str | None = None
    custom_price: float = 0.0
    customization_text: str | None = None

    @property
    def line_total(self) -> float:
        return (self.unit_price + self.custom_price) * self.quantity


@dataclass(slots=True)
class OrderInfo:
    customer: CustomerInfo
    lines: List[OrderLineInfo] = field(default_factory=list)
    total: float = 0.0
    status: OrderStatus = OrderStatus.PLACED
    created_at: datetime | None = None


@dataclass(slots=True)
class OrderEntity:
    id: int
    info: OrderInfo
