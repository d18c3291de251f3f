from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from tango_crm.core.security import hash_password


@dataclass(frozen=True)
class DemoUser:
    """In-memory user directory entry; stands in for the hosted auth provider."""

    id: str
    email: str
    name: str
    password_hash: str
    roles: List[str]
    niches: List[str]


_DEMO_USERS: List[DemoUser] = [
    DemoUser(
        id="user-steven",
        email="admin@tangocrm.com",
        name="Steven Vitoratos",
        password_hash=hash_password("tango-admin"),
        roles=["admin"],
        niches=["creator", "coach", "podcaster", "freelancer"],
    ),
    DemoUser(
        id="user-ana",
        email="ana@tangocrm.com",
        name="Ana Ribeiro",
        password_hash=hash_password("creator123"),
        roles=["user"],
        niches=["creator"],
    ),
    DemoUser(
        id="user-marcus",
        email="marcus@tangocrm.com",
        name="Marcus Hale",
        password_hash=hash_password("coach123"),
        roles=["user"],
        niches=["coach", "podcaster"],
    ),
]

_BY_EMAIL: Dict[str, DemoUser] = {user.email.lower(): user for user in _DEMO_USERS}
_BY_ID: Dict[str, DemoUser] = {user.id: user for user in _DEMO_USERS}


def get_demo_user_by_email(email: str) -> Optional[DemoUser]:
    return _BY_EMAIL.get(email.lower())


def get_demo_user_by_id(user_id: str) -> Optional[DemoUser]:
    return _BY_ID.get(user_id)


def list_demo_users() -> Iterable[DemoUser]:
    return tuple(_DEMO_USERS)
