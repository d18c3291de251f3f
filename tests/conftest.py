"""
Shared fixtures.

Settings are read from the environment on first use, so the variables are
set before anything from tango_crm is imported.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-thirty-two-chars")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tango_crm.core.application import create_application
from tango_crm.core.security import create_access_token
from tango_crm.domain.models import Niche, RevenueEntry, RevenueStatus
from tango_crm.infra.db import Database
from tango_crm.repositories.revenue_repository import RevenueRepository

FROZEN_NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def repository(database):
    return RevenueRepository(database)


@pytest.fixture
def add_entry(repository):
    """Store an entry with sensible defaults; returns the stored entry."""
    counter = {"n": 0}

    def _add(amount, date, niche=Niche.CREATOR, user_id="user-ana", status=RevenueStatus.RECEIVED):
        counter["n"] += 1
        return repository.add(
            RevenueEntry(
                id=f"entry-{counter['n']}",
                user_id=user_id,
                amount=Decimal(str(amount)),
                niche=niche,
                date=date,
                status=status,
            )
        )

    return _add


@pytest.fixture
def app(database):
    return create_application(database=database, clock=lambda: FROZEN_NOW)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def bearer(user_id="user-ana", roles=("user",), niches=("creator",)) -> dict:
    token = create_access_token(user_id=user_id, roles=list(roles), niches=list(niches))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def creator_headers():
    return bearer()


@pytest.fixture
def admin_headers():
    return bearer(
        user_id="user-steven",
        roles=("admin",),
        niches=("creator", "coach", "podcaster", "freelancer"),
    )
