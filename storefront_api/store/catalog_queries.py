from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Iterable

from sqlalchemy import func, select, update as sa_update

from storefront_api.config import settings
from storefront_api.db import SessionLocal
from storefront_api.store.catalog_models import (
    DEFAULT_CATEGORIES,
    CatalogItemEntity,
    CatalogItemInfo,
    PatchCatalogItemInfo,
)
from storefront_api.store.orm import CatalogItemOrm

logger = logging.getLogger(__name__)

SORT_RELEVANCE = "relevance"
SORT_PRICE_ASC = "price-asc"
SORT_PRICE_DESC = "price-desc"


def _to_entity(orm: CatalogItemOrm) -> CatalogItemEntity:
    return CatalogItemEntity(
        id=orm.id,
        info=CatalogItemInfo(
            description=orm.description,
            category=orm.category,
            price=float(orm.price),
            material=orm.material,
            images=list(orm.images or []),
            deleted=bool(orm.deleted),
        ),
    )


def _apply(orm: CatalogItemOrm, info: CatalogItemInfo) -> None:
    orm.description = info.description
    orm.category = info.category
    orm.price = Decimal(str(info.price))
    orm.material = info.material
    orm.images = list(info.images)[:3]
    orm.deleted = info.deleted


def add(info: CatalogItemInfo) -> CatalogItemEntity:
    with SessionLocal.begin() as session:
        orm = CatalogItemOrm()
        _apply(orm, info)
        session.add(orm)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def delete(id: int) -> None:
    # soft delete: carts referencing the item keep their lines
    with SessionLocal.begin() as session:
        session.execute(
            sa_update(CatalogItemOrm).where(CatalogItemOrm.id == id).values(deleted=True)
        )


def get_one(id: int) -> CatalogItemEntity | None:
    with SessionLocal() as session:
        orm = session.get(CatalogItemOrm, id)
        if orm is None or orm.deleted:
            return None
        return _to_entity(orm)


def get_by_description(description: str) -> CatalogItemEntity | None:
    with SessionLocal() as session:
        orm = session.execute(
            select(CatalogItemOrm)
            .where(CatalogItemOrm.description == description)
            .where(CatalogItemOrm.deleted.is_(False))
            .order_by(CatalogItemOrm.id)
            .limit(1)
        ).scalar_one_or_none()
        return _to_entity(orm) if orm is not None else None


def get_many(
    offset: int = 0,
    limit: int = 10,
    category: str | None = None,
    search: str | None = None,
    sort: str = SORT_RELEVANCE,
    min_price: float | None = None,
    max_price: float | None = None,
    show_deleted: bool = False,
) -> Iterable[CatalogItemEntity]:
    with SessionLocal() as session:
        stmt = select(CatalogItemOrm)
        if not show_deleted:
            stmt = stmt.where(CatalogItemOrm.deleted.is_(False))
        if category:
            stmt = stmt.where(CatalogItemOrm.category == category)
        if search:
            stmt = stmt.where(func.lower(CatalogItemOrm.description).contains(search.lower()))
        if min_price is not None:
            stmt = stmt.where(CatalogItemOrm.price >= Decimal(str(min_price)))
        if max_price is not None:
            stmt = stmt.where(CatalogItemOrm.price <= Decimal(str(max_price)))
        if sort == SORT_PRICE_ASC:
            stmt = stmt.order_by(CatalogItemOrm.price.asc(), CatalogItemOrm.id)
        elif sort == SORT_PRICE_DESC:
            stmt = stmt.order_by(CatalogItemOrm.price.desc(), CatalogItemOrm.id)
        else:
            stmt = stmt.order_by(CatalogItemOrm.id)
        stmt = stmt.offset(offset).limit(limit)
        for orm in session.execute(stmt).scalars().all():
            yield _to_entity(orm)


def catalog_id(ref: int | str) -> int | None:
    """Catalog id behind a cart item reference; None if it cannot name one."""
    if isinstance(ref, int):
        return ref
    ref = ref.strip()
    return int(ref) if ref.isdigit() else None


def get_by_ids(ids: Iterable[int | str], chunk_size: int | None = None) -> dict[int, CatalogItemEntity]:
    """Look up live catalog items by id.

    The hosted store caps ``IN`` filters, so ids are queried in chunks of at
    most ``chunk_size`` (``CATALOG_LOOKUP_CHUNK`` by default). Missing and
    deleted items are simply absent from the result, as are references that are
    not catalog ids (see ``catalog_id``).
    """
    size = chunk_size or settings.catalog_lookup_chunk
    unique = list(dict.fromkeys(cid for cid in map(catalog_id, ids) if cid is not None))
    found: dict[int, CatalogItemEntity] = {}
    if not unique:
        return found
    with SessionLocal() as session:
        for start in range(0, len(unique), size):
            chunk = unique[start:start + size]
            rows = session.execute(
                select(CatalogItemOrm)
                .where(CatalogItemOrm.id.in_(chunk))
                .where(CatalogItemOrm.deleted.is_(False))
            ).scalars().all()
            for orm in rows:
                found[orm.id] = _to_entity(orm)
    logger.debug("catalog lookup: %d ids, %d found", len(unique), len(found))
    return found


def get_related(id: int, limit: int = 4) -> list[CatalogItemEntity]:
    item = get_one(id)
    if item is None:
        return []
    with SessionLocal() as session:
        rows = session.execute(
            select(CatalogItemOrm)
            .where(CatalogItemOrm.category == item.info.category)
            .where(CatalogItemOrm.description != item.info.description)
            .where(CatalogItemOrm.deleted.is_(False))
        ).scalars().all()
        others = [_to_entity(orm) for orm in rows]
    random.shuffle(others)
    return others[:limit]


def get_categories() -> list[str]:
    with SessionLocal() as session:
        present = session.execute(
            select(CatalogItemOrm.category)
            .where(CatalogItemOrm.deleted.is_(False))
            .distinct()
            .order_by(CatalogItemOrm.category)
        ).scalars().all()
    return list(dict.fromkeys([*DEFAULT_CATEGORIES, *present]))


def count() -> int:
    with SessionLocal() as session:
        return session.execute(select(func.count(CatalogItemOrm.id))).scalar_one()


def update(id: int, info: CatalogItemInfo) -> CatalogItemEntity | None:
    with SessionLocal.begin() as session:
        orm = session.get(CatalogItemOrm, id)
        if orm is None or orm.deleted:
            return None
        _apply(orm, info)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def upsert(id: int, info: CatalogItemInfo) -> CatalogItemEntity:
    with SessionLocal.begin() as session:
        orm = session.get(CatalogItemOrm, id)
        if orm is None:
            orm = CatalogItemOrm(id=id)
            session.add(orm)
        _apply(orm, info)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def patch(id: int, patch_info: PatchCatalogItemInfo) -> CatalogItemEntity | None:
    with SessionLocal.begin() as session:
        orm = session.get(CatalogItemOrm, id)
        if orm is None or orm.deleted:
            return None
        if patch_info.description is not None:
            orm.description = patch_info.description
        if patch_info.category is not None:
            orm.category = patch_info.category
        if patch_info.price is not None:
            orm.price = Decimal(str(patch_info.price))
        if patch_info.material is not None:
            orm.material = patch_info.material
        if patch_info.images is not None:
            orm.images = list(patch_info.images)[:3]
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


DEMO_CATALOG = [
    CatalogItemInfo("Argentina Home Jersey 2024", "Football", 1299.0, "Polyester"),
    CatalogItemInfo("Real Madrid Away Jersey", "Football", 1199.0, "Polyester"),
    CatalogItemInfo("Lakers Icon Edition Jersey", "Basketball", 1499.0, "Mesh"),
    CatalogItemInfo("Bulls Retro Jersey", "Basketball", 1399.0, "Mesh"),
    CatalogItemInfo("Straw Hat Pirates Oversized Tee", "Anime", 899.0, "Cotton"),
    CatalogItemInfo("Seoul Streetwear Hoodie", "Korean", 1799.0, "Cotton blend"),
]


def seed_if_empty() -> int:
    if count() > 0:
        return 0
    for info in DEMO_CATALOG:
        add(info)
    logger.info("seeded %d catalog items", len(DEMO_CATALOG))
    return len(DEMO_CATALOG)
