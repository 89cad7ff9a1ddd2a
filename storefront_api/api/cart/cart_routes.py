from http import HTTPStatus

from fastapi import APIRouter, HTTPException, Request, Response

from storefront_api import config
from storefront_api.api.deps import CurrentUser, SignedInUser
from storefront_api.cart import guest_cart
from storefront_api.cart.reconciliation import (
    CartService,
    CartUpdateError,
    LineSelectorError,
)
from storefront_api.store import catalog_queries
from storefront_api.store.cart_models import CartView

from .cart_contracts import (
    AddCartLineRequest,
    CartResponse,
    ChangeQuantityRequest,
    ChangeSizeRequest,
    LineSelectorRequest,
)

cart_router = APIRouter(prefix="/cart", tags=["cart"])


def read_guest_cookie(request: Request):
    return guest_cart.loads(request.cookies.get(config.settings.guest_cart_cookie))


def write_guest_cookie(response: Response, service: CartService) -> None:
    settings = config.settings
    response.set_cookie(
        settings.guest_cart_cookie,
        guest_cart.dumps(service.guest_lines),
        max_age=settings.guest_cart_days * 24 * 60 * 60,
        path="/",
        samesite="lax",
    )


def clear_guest_cookie(response: Response) -> None:
    response.delete_cookie(config.settings.guest_cart_cookie, path="/")


def cart_service(request: Request, user: str | None) -> CartService:
    return CartService(user, read_guest_cookie(request) if user is None else None)


def _respond(service: CartService, view: CartView | None, response: Response) -> CartResponse:
    if view is None:
        raise HTTPException(HTTPStatus.NOT_FOUND, "Cart line was not found")
    if service.is_guest:
        write_guest_cookie(response, service)
    return CartResponse.from_view(view)


def _run(action, *args):
    try:
        return action(*args)
    except LineSelectorError as e:
        raise HTTPException(HTTPStatus.BAD_REQUEST, str(e))
    except CartUpdateError:
        raise HTTPException(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to update cart")


@cart_router.get("/")
async def get_cart(request: Request, user: CurrentUser) -> CartResponse:
    service = cart_service(request, user)
    return CartResponse.from_view(_run(service.view))


@cart_router.post("/lines")
async def add_cart_line(
    info: AddCartLineRequest,
    request: Request,
    response: Response,
    user: CurrentUser,
) -> CartResponse:
    catalog_id = catalog_queries.catalog_id(info.item_id)
    if catalog_id is None or catalog_queries.get_one(catalog_id) is None:
        raise HTTPException(HTTPStatus.NOT_FOUND, f"Catalog item {info.item_id} was not found")
    service = cart_service(request, user)
    view = _run(service.add, info.as_cart_line_info())
    return _respond(service, view, response)


@cart_router.post(
    "/lines/quantity",
    responses={HTTPStatus.NOT_FOUND: {"description": "Selected cart line was not found"}},
)
async def change_cart_line_quantity(
    info: ChangeQuantityRequest,
    request: Request,
    response: Response,
    user: CurrentUser,
) -> CartResponse:
    service = cart_service(request, user)
    view = _run(service.change_quantity, info.as_selector(), info.delta)
    return _respond(service, view, response)


@cart_router.post(
    "/lines/size",
    responses={HTTPStatus.NOT_FOUND: {"description": "Selected cart line was not found"}},
)
async def change_cart_line_size(
    info: ChangeSizeRequest,
    request: Request,
    response: Response,
    user: CurrentUser,
) -> CartResponse:
    service = cart_service(request, user)
    view = _run(service.change_size, info.as_selector(), info.new_size)
    return _respond(service, view, response)


@cart_router.post(
    "/lines/remove",
    responses={HTTPStatus.NOT_FOUND: {"description": "Selected cart line was not found"}},
)
async def remove_cart_line(
    info: LineSelectorRequest,
    request: Request,
    response: Response,
    user: CurrentUser,
) -> CartResponse:
    service = cart_service(request, user)
    view = _run(service.remove, info.as_selector())
    return _respond(service, view, response)


@cart_router.delete("/")
async def clear_cart(request: Request, response: Response, user: CurrentUser) -> CartResponse:
    service = cart_service(request, user)
    view = _run(service.clear)
    if service.is_guest:
        clear_guest_cookie(response)
        return CartResponse.from_view(view)
    return _respond(service, view, response)


@cart_router.post("/merge")
async def merge_guest_cart(request: Request, response: Response, user: SignedInUser) -> CartResponse:
    """Move the guest cookie cart into the signed-in customer's cart.

    Called by the client right after sign-in. The cookie is cleared once
    every guest line has been written.
    """
    guest_lines = read_guest_cookie(request)
    service = CartService(user)
    view = _run(service.merge_guest, guest_lines)
    clear_guest_cookie(response)
    return CartResponse.from_view(view)
