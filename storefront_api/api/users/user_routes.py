from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from storefront_api.api.deps import AdminUser, CurrentUser
from storefront_api.store import user_queries

user_router = APIRouter(tags=["users"])


class MeResponse(BaseModel):
    email: str | None
    is_admin: bool


class RoleRequest(BaseModel):
    role: Literal[user_queries.ROLE_ADMIN, user_queries.ROLE_CUSTOMER]

    model_config = ConfigDict(extra="forbid")


class RoleResponse(BaseModel):
    email: str
    role: str


@user_router.get("/me")
async def get_me(user: CurrentUser) -> MeResponse:
    return MeResponse(email=user, is_admin=user_queries.is_admin(user))


@user_router.put("/users/{email}/role")
async def put_user_role(email: str, info: RoleRequest, _admin: AdminUser) -> RoleResponse:
    role = user_queries.set_role(email, info.role)
    return RoleResponse(email=email.lower(), role=role)
