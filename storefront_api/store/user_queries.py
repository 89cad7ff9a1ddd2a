from __future__ import annotations

from sqlalchemy import select

from storefront_api.db import SessionLocal
from storefront_api.store.orm import UserRoleOrm

ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"


def get_role(email: str) -> str | None:
    with SessionLocal() as session:
        return session.execute(
            select(UserRoleOrm.role).where(UserRoleOrm.email == email.lower())
        ).scalar_one_or_none()


def is_admin(email: str | None) -> bool:
    if not email:
        return False
    return get_role(email) == ROLE_ADMIN


def set_role(email: str, role: str) -> str:
    with SessionLocal.begin() as session:
        orm = session.get(UserRoleOrm, email.lower())
        if orm is None:
            session.add(UserRoleOrm(email=email.lower(), role=role))
        else:
            orm.role = role
    return role
