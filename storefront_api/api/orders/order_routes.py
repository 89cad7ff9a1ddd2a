from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, Response
from pydantic import NonNegativeInt, PositiveInt

from storefront_api.api.cart.cart_routes import cart_service, clear_guest_cookie
from storefront_api.api.deps import AdminUser, CurrentUser, SignedInUser
from storefront_api.cart.reconciliation import CartUpdateError
from storefront_api.services.checkout import EmptyCartError, OrderPlacementError, place_order
from storefront_api.store import order_queries as store
from storefront_api.store import user_queries
from storefront_api.store.order_models import OrderStatus

from .order_contracts import CheckoutRequest, OrderResponse, OrderStatusRequest

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post(
    "/checkout",
    status_code=HTTPStatus.CREATED,
    responses={
        HTTPStatus.BAD_REQUEST: {"description": "Cart is empty or guest email is missing"},
    },
)
async def checkout(
    body: CheckoutRequest,
    request: Request,
    response: Response,
    user: CurrentUser,
) -> OrderResponse:
    email = user or (body.customer.email or "").strip().lower()
    if not email:
        raise HTTPException(HTTPStatus.BAD_REQUEST, "Customer email is required for guest checkout")

    service = cart_service(request, user)
    try:
        order = place_order(service, body.customer.as_customer_info(email))
    except EmptyCartError as e:
        raise HTTPException(HTTPStatus.BAD_REQUEST, str(e))
    except CartUpdateError:
        raise HTTPException(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to update cart")
    except OrderPlacementError as e:
        raise HTTPException(HTTPStatus.INTERNAL_SERVER_ERROR, str(e))

    if service.is_guest:
        clear_guest_cookie(response)
    response.headers["location"] = f"/orders/{order.id}"
    return OrderResponse.from_entity(order)


@order_router.get("/")
async def get_order_list(
    _admin: AdminUser,
    offset: Annotated[NonNegativeInt, Query()] = 0,
    limit: Annotated[PositiveInt, Query(le=200)] = 50,
    status: Annotated[OrderStatus | None, Query()] = None,
) -> list[OrderResponse]:
    return [
        OrderResponse.from_entity(e)
        for e in store.get_many(offset=offset, limit=limit, status=status)
    ]


@order_router.get("/mine")
async def get_my_orders(
    user: SignedInUser,
    offset: Annotated[NonNegativeInt, Query()] = 0,
    limit: Annotated[PositiveInt, Query(le=200)] = 50,
) -> list[OrderResponse]:
    return [
        OrderResponse.from_entity(e)
        for e in store.get_many(offset=offset, limit=limit, owner_email=user)
    ]


@order_router.get(
    "/{id}",
    responses={
        HTTPStatus.NOT_FOUND: {"description": "Failed to return requested order as one was not found"},
    },
)
async def get_order_by_id(id: int, user: SignedInUser) -> OrderResponse:
    entity = store.get_one(id)
    # other customers' orders look missing
    if entity is None or (entity.info.customer.email != user and not user_queries.is_admin(user)):
        raise HTTPException(HTTPStatus.NOT_FOUND, f"Request resource /orders/{id} was not found")
    return OrderResponse.from_entity(entity)


@order_router.patch(
    "/{id}/status",
    responses={
        HTTPStatus.NOT_FOUND: {"description": "Failed to update order as one was not found"},
    },
)
async def patch_order_status(id: int, info: OrderStatusRequest, _admin: AdminUser) -> OrderResponse:
    entity = store.set_status(id, info.status)
    if entity is None:
        raise HTTPException(HTTPStatus.NOT_FOUND, f"Requested resource /orders/{id} was not found")
    return OrderResponse.from_entity(entity)
