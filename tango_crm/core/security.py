from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Literal, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, Field, ValidationError
from tango_crm.core.config import get_settings
from tango_crm.core.errors import Forbidden, Unauthorized
from tango_crm.core.logging import auth_logger

# -----------------------------------------------------------------------------
# 1) Password hashing
# -----------------------------------------------------------------------------

_pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(plain: str) -> str:
    return _pwd_ctx.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_ctx.verify(plain, hashed)

# -----------------------------------------------------------------------------
# 2) Token claims
# -----------------------------------------------------------------------------

tokenType = Literal["access"]

class BaseClaims(BaseModel):
    sub: str
    type: tokenType
    exp: int

class AccessClaims(BaseClaims):
    roles: List[str] = Field(default_factory=list)
    niches: List[str] = Field(default_factory=list)

# -----------------------------------------------------------------------------
# 3) JWT encode/decode
# -----------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)

def _exp_in(minutes: int) -> int:
    return int((_utcnow() + timedelta(minutes=minutes)).timestamp())

def _encode(payload: Dict[str, Any], secret: str) -> str:
    return jwt.encode(payload, secret, algorithm=get_settings().JWT_ALGORITHM)

def _decode(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[get_settings().JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token.")

def create_access_token(*, user_id: str, roles: List[str], niches: List[str]) -> str:
    settings = get_settings()
    claims = AccessClaims(
        sub=user_id,
        type="access",
        exp=_exp_in(settings.ACCESS_TOKEN_MINUTES),
        roles=roles,
        niches=niches,
    )
    return _encode(claims.model_dump(), settings.JWT_SECRET)

def decode_access_token(token: str) -> AccessClaims:
    data = _decode(token, get_settings().JWT_SECRET)
    try:
        return AccessClaims(**data)
    except ValidationError:
        raise Unauthorized("Invalid access token.")

# -----------------------------------------------------------------------------
# 4) Authorization
# -----------------------------------------------------------------------------

class Authorizer:
    """
    Role checks over an authenticated session.

    Works on the normalized `AccessClaims`, so callers never look at how a
    token vendor lays out its claims.
    """

    ADMIN_ROLE = "admin"

    def has_role(self, session: AccessClaims, role: str) -> bool:
        return role.lower() in {r.lower() for r in session.roles or []}

    def has_any_role(self, session: AccessClaims, roles: List[str]) -> bool:
        return any(self.has_role(session, role) for role in roles)

    def is_admin(self, session: AccessClaims) -> bool:
        return self.has_role(session, self.ADMIN_ROLE)

    def can_access_niche(self, session: AccessClaims, niche: str) -> bool:
        """Admins see every niche; everyone else only the niches they subscribe to."""
        return self.is_admin(session) or niche in (session.niches or [])

# -----------------------------------------------------------------------------
# 5) FastAPI dependencies
# -----------------------------------------------------------------------------

def get_authorizer(request: Request) -> Authorizer:
    return request.app.state.authorizer

def get_current_session(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AccessClaims:
    if creds is None or not creds.credentials:
        raise Unauthorized("Missing bearer token.")
    return decode_access_token(creds.credentials)

def require_roles(*allowed_roles: str):
    def _dep(
        session: AccessClaims = Depends(get_current_session),
        authorizer: Authorizer = Depends(get_authorizer),
    ) -> AccessClaims:
        if not authorizer.has_any_role(session, list(allowed_roles)):
            auth_logger.warning("Role check failed", user_id=session.sub, required=",".join(allowed_roles))
            raise Forbidden("Permission denied.")
        return session
    return _dep

def ensure_niche_access(session: AccessClaims, niche: str, authorizer: Authorizer) -> None:
    if not authorizer.can_access_niche(session, niche):
        raise Forbidden(f"No subscription for niche: {niche}")
