from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Union

# Catalog ids are integers, but the storefront client writes cookie ids as
# either numbers or document-id strings; cart lines carry whichever it sent.
ItemRef = Union[int, str]


def item_ref(value: str) -> ItemRef:
    """Read back an item reference stored as text."""
    return int(value) if value.isdigit() else value


@dataclass(slots=True)
class CartLineInfo:
    item_id: ItemRef
    quantity: int
    size: str | None = None
    is_customized: bool = False
    customization_text: str | None = None
    custom_price: float | None = None
    added_on: datetime | None = None

    @property
    def surcharge(self) -> float:
        if self.is_customized and self.custom_price:
            return float(self.custom_price)
        return 0.0


@dataclass(slots=True)
class CartLineEntity:
    id: int
    owner_email: str
    info: CartLineInfo


@dataclass(slots=True)
class PricedCartLine:
    id: int | None
    info: CartLineInfo
    description: str | None
    category: str | None
    image: str | None
    unit_price: float
    line_total: float
    available: bool


@dataclass(slots=True)
class CartView:
    owner_email: str | None
    lines: List[PricedCartLine] = field(default_factory=list)
    item_count: int = 0
    total: float = 0.0
