from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat

from storefront_api.store.catalog_models import (
    CatalogItemEntity,
    CatalogItemInfo,
    PatchCatalogItemInfo,
)


class CatalogItemResponse(BaseModel):
    id: int
    description: str
    category: str
    price: float
    material: str | None
    images: List[str]
    deleted: bool

    @staticmethod
    def from_entity(entity: CatalogItemEntity) -> CatalogItemResponse:
        return CatalogItemResponse(
            id=entity.id,
            description=entity.info.description,
            category=entity.info.category,
            price=entity.info.price,
            material=entity.info.material,
            images=entity.info.images,
            deleted=entity.info.deleted,
        )


class CatalogItemRequest(BaseModel):
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price: NonNegativeFloat
    material: str | None = None
    images: List[str] = Field(default_factory=list, max_length=3)
    deleted: bool = False

    def as_catalog_item_info(self) -> CatalogItemInfo:
        return CatalogItemInfo(
            description=self.description,
            category=self.category,
            price=self.price,
            material=self.material,
            images=list(self.images),
            deleted=self.deleted,
        )


class PatchCatalogItemRequest(BaseModel):
    description: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    price: NonNegativeFloat | None = None
    material: str | None = None
    images: List[str] | None = Field(default=None, max_length=3)

    model_config = ConfigDict(extra="forbid")

    def as_patch_catalog_item_info(self) -> PatchCatalogItemInfo:
        return PatchCatalogItemInfo(
            description=self.description,
            category=self.category,
            price=self.price,
            material=self.material,
            images=self.images,
        )
