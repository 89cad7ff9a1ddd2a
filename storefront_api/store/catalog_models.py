from dataclasses import dataclass, field
from typing import List

SIZES = ("S", "M", "L", "XL")
DEFAULT_SIZE = "S"
DEFAULT_CATEGORIES = ("Football", "Basketball", "Anime", "Korean")


@dataclass(slots=True)
class CatalogItemInfo:
    description: str
    category: str
    price: float
    material: str | None = None
    images: List[str] = field(default_factory=list)
    deleted: bool = False


@dataclass(slots=True)
class CatalogItemEntity:
    id: int
    info: CatalogItemInfo


@dataclass(slots=True)
class PatchCatalogItemInfo:
    description: str | None = None
    category: str | None = None
    price: float | None = None
    material: str | None = None
    images: List[str] | None = None
