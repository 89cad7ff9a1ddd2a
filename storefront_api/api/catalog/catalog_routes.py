from http import HTTPStatus
from typing import Annotated, Literal

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import NonNegativeFloat, NonNegativeInt, PositiveInt

from storefront_api.api.deps import AdminUser
from storefront_api.store import catalog_queries as store

from .catalog_contracts import (
    CatalogItemRequest,
    CatalogItemResponse,
    PatchCatalogItemRequest,
)

catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@catalog_router.get("/")
async def get_catalog_list(
    offset: Annotated[NonNegativeInt, Query()] = 0,
    limit: Annotated[PositiveInt, Query(le=200)] = 50,
    category: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
    sort: Annotated[Literal["relevance", "price-asc", "price-desc"], Query()] = "relevance",
    min_price: Annotated[NonNegativeFloat | None, Query()] = None,
    max_price: Annotated[NonNegativeFloat | None, Query()] = None,
) -> list[CatalogItemResponse]:
    return [
        CatalogItemResponse.from_entity(e)
        for e in store.get_many(
            offset=offset,
            limit=limit,
            category=category,
            search=search,
            sort=sort,
            min_price=min_price,
            max_price=max_price,
        )
    ]


@catalog_router.get("/categories")
async def get_categories() -> list[str]:
    return store.get_categories()


@catalog_router.get(
    "/by-description/{description}",
    responses={
        HTTPStatus.NOT_FOUND: {"description": "No live catalog item has this description"},
    },
)
async def get_catalog_item_by_description(description: str) -> CatalogItemResponse:
    entity = store.get_by_description(description)
    if entity is None:
        raise HTTPException(HTTPStatus.NOT_FOUND, "Product not found")
    return CatalogItemResponse.from_entity(entity)


@catalog_router.get(
    "/{id}",
    responses={
        HTTPStatus.OK: {"description": "Successfully returned requested catalog item"},
        HTTPStatus.NOT_FOUND: {"description": "Failed to return requested catalog item as one was not found"},
    },
)
async def get_catalog_item_by_id(id: int) -> CatalogItemResponse:
    entity = store.get_one(id)
    if not entity:
        raise HTTPException(HTTPStatus.NOT_FOUND, f"Request resource /catalog/{id} was not found")
    return CatalogItemResponse.from_entity(entity)


@catalog_router.get("/{id}/related")
async def get_related_items(
    id: int,
    limit: Annotated[PositiveInt, Query(le=20)] = 4,
) -> list[CatalogItemResponse]:
    return [CatalogItemResponse.from_entity(e) for e in store.get_related(id, limit=limit)]


@catalog_router.post(
    "/",
    status_code=HTTPStatus.CREATED,
)
async def post_catalog_item(
    info: CatalogItemRequest,
    response: Response,
    _admin: AdminUser,
) -> CatalogItemResponse:
    entity = store.add(info.as_catalog_item_info())
    response.headers["location"] = f"/catalog/{entity.id}"
    return CatalogItemResponse.from_entity(entity)


@catalog_router.patch(
    "/{id}",
    responses={
        HTTPStatus.OK: {"description": "Successfully patched catalog item"},
        HTTPStatus.NOT_MODIFIED: {"description": "Failed to modify catalog item as one was not found"},
    },
)
async def patch_catalog_item(
    id: int,
    info: PatchCatalogItemRequest,
    _admin: AdminUser,
) -> CatalogItemResponse:
    entity = store.patch(id, info.as_patch_catalog_item_info())
    if entity is None:
        raise HTTPException(HTTPStatus.NOT_MODIFIED, f"Requested resource /catalog/{id} was not found")
    return CatalogItemResponse.from_entity(entity)


@catalog_router.put(
    "/{id}",
    responses={
        HTTPStatus.OK: {"description": "Successfully updated or upserted catalog item"},
        HTTPStatus.NOT_MODIFIED: {"description": "Failed to modify catalog item as one was not found"},
    },
)
async def put_catalog_item(
    id: int,
    info: CatalogItemRequest,
    _admin: AdminUser,
    upsert: Annotated[bool, Query()] = False,
) -> CatalogItemResponse:
    entity = (
        store.upsert(id, info.as_catalog_item_info())
        if upsert
        else store.update(id, info.as_catalog_item_info())
    )
    if entity is None:
        raise HTTPException(HTTPStatus.NOT_MODIFIED, f"Requested resource /catalog/{id} was not found")
    return CatalogItemResponse.from_entity(entity)


@catalog_router.delete("/{id}")
async def delete_catalog_item(id: int, _admin: AdminUser) -> Response:
    store.delete(id)
    return Response("")
