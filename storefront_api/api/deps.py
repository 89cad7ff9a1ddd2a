from __future__ import annotations

from http import HTTPStatus
from typing import Annotated

from fastapi import Depends, Header, HTTPException

from storefront_api.store import user_queries

USER_HEADER = "X-User-Email"


def current_user(
    x_user_email: Annotated[str | None, Header(alias=USER_HEADER)] = None,
) -> str | None:
    """Signed-in customer's email, as asserted by the auth gateway; None for guests."""
    if x_user_email is None or not x_user_email.strip():
        return None
    return x_user_email.strip().lower()


def require_user(user: Annotated[str | None, Depends(current_user)]) -> str:
    if user is None:
        raise HTTPException(HTTPStatus.UNAUTHORIZED, "Sign in required")
    return user


def require_admin(user: Annotated[str, Depends(require_user)]) -> str:
    if not user_queries.is_admin(user):
        raise HTTPException(HTTPStatus.FORBIDDEN, "Admin role required")
    return user


CurrentUser = Annotated[str | None, Depends(current_user)]
SignedInUser = Annotated[str, Depends(require_user)]
AdminUser = Annotated[str, Depends(require_admin)]
