"""Authentication endpoints used by the frontend application."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from tango_crm.core.config import get_settings
from tango_crm.core.errors import Unauthorized
from tango_crm.core.logging import auth_logger
from tango_crm.core.security import (
    AccessClaims,
    create_access_token,
    get_current_session,
    verify_password,
)
from tango_crm.domain.users import DemoUser, get_demo_user_by_email, get_demo_user_by_id


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: str
    roles: list[str]
    niches: list[str]


class LoginResponse(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int
    user: UserOut


def _to_user_out(user: DemoUser) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        roles=user.roles,
        niches=user.niches,
    )


def _ensure_credentials(email: str, password: str) -> DemoUser:
    user = get_demo_user_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        auth_logger.warning("Login rejected", email=email)
        raise Unauthorized("Invalid credentials.")
    return user


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest) -> LoginResponse:
    user = _ensure_credentials(payload.email, payload.password)

    access_token = create_access_token(
        user_id=user.id,
        roles=user.roles,
        niches=user.niches,
    )
    auth_logger.info("Login succeeded", user_id=user.id)

    return LoginResponse(
        access_token=access_token,
        expires_in=get_settings().ACCESS_TOKEN_MINUTES * 60,
        user=_to_user_out(user),
    )


@router.get("/me", response_model=UserOut)
def me(session: AccessClaims = Depends(get_current_session)) -> UserOut:
    user = get_demo_user_by_id(session.sub)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return _to_user_out(user)
