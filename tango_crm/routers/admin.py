"""Admin-only endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tango_crm.core.security import AccessClaims, Authorizer, require_roles
from tango_crm.domain.users import list_demo_users


router = APIRouter(prefix="/admin", tags=["admin"])


class AdminUserRow(BaseModel):
    id: str
    email: str
    name: str
    roles: list[str]
    niches: list[str]


class AdminUsersResponse(BaseModel):
    users: list[AdminUserRow]
    total: int
    admin_users: list[str]


@router.get("/users", response_model=AdminUsersResponse)
def get_users(
    _: AccessClaims = Depends(require_roles(Authorizer.ADMIN_ROLE)),
) -> AdminUsersResponse:
    """List every user with their roles and niche subscriptions."""
    users = [
        AdminUserRow(id=u.id, email=u.email, name=u.name, roles=u.roles, niches=u.niches)
        for u in list_demo_users()
    ]
    return AdminUsersResponse(
        users=users,
        total=len(users),
        admin_users=[u.id for u in users if Authorizer.ADMIN_ROLE in u.roles],
    )
