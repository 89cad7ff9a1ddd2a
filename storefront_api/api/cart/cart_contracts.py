from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveInt

from storefront_api.cart.reconciliation import LineSelector
from storefront_api.store.cart_models import CartLineInfo, CartView, PricedCartLine
from storefront_api.store.catalog_models import DEFAULT_SIZE, SIZES

Size = Literal[SIZES]


class CartLineResponse(BaseModel):
    id: int | None
    item_id: int | str
    quantity: int
    size: str | None
    is_customized: bool
    customization_text: str | None
    custom_price: float | None
    added_on: datetime | None
    description: str | None
    category: str | None
    image: str | None
    unit_price: float
    line_total: float
    available: bool

    @staticmethod
    def from_priced_line(line: PricedCartLine) -> CartLineResponse:
        return CartLineResponse(
            id=line.id,
            item_id=line.info.item_id,
            quantity=line.info.quantity,
            size=line.info.size,
            is_customized=line.info.is_customized,
            customization_text=line.info.customization_text,
            custom_price=line.info.custom_price,
            added_on=line.info.added_on,
            description=line.description,
            category=line.category,
            image=line.image,
            unit_price=line.unit_price,
            line_total=line.line_total,
            available=line.available,
        )


class CartResponse(BaseModel):
    owner: str | None
    items: List[CartLineResponse]
    item_count: int
    total: float

    @staticmethod
    def from_view(view: CartView) -> CartResponse:
        return CartResponse(
            owner=view.owner_email,
            items=[CartLineResponse.from_priced_line(line) for line in view.lines],
            item_count=view.item_count,
            total=view.total,
        )


class AddCartLineRequest(BaseModel):
    item_id: int | str
    quantity: PositiveInt = 1
    size: Size | None = DEFAULT_SIZE
    is_customized: bool = False
    customization_text: str | None = Field(default=None, max_length=255)
    custom_price: NonNegativeFloat | None = None

    model_config = ConfigDict(extra="forbid")

    def as_cart_line_info(self) -> CartLineInfo:
        return CartLineInfo(
            item_id=self.item_id,
            quantity=self.quantity,
            size=self.size,
            is_customized=self.is_customized,
            customization_text=self.customization_text if self.is_customized else None,
            custom_price=self.custom_price if self.is_customized else None,
        )


class LineSelectorRequest(BaseModel):
    line_id: int | None = None
    item_id: int | str | None = None
    size: str | None = None
    is_customized: bool = False
    customization_text: str | None = None

    model_config = ConfigDict(extra="forbid")

    def as_selector(self) -> LineSelector:
        return LineSelector(
            line_id=self.line_id,
            item_id=self.item_id,
            size=self.size,
            is_customized=self.is_customized,
            customization_text=self.customization_text,
        )


class ChangeQuantityRequest(LineSelectorRequest):
    delta: int


class ChangeSizeRequest(LineSelectorRequest):
    new_size: Size
