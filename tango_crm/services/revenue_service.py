"""Revenue logging business logic."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from tango_crm.core.errors import InvalidArgument
from tango_crm.core.logging import app_logger
from tango_crm.domain.models import Niche, RevenueEntry, RevenueStatus
from tango_crm.repositories.protocols import RevenueRepositoryProtocol
from tango_crm.services.revenue_growth_service import Clock, utc_now


class RevenueService:
    """Service for logging and listing revenue entries."""

    def __init__(self, repository: RevenueRepositoryProtocol, *, clock: Clock = utc_now):
        self.repository = repository
        self.clock = clock

    def log_revenue(
        self,
        user_id: str,
        niche: Niche,
        amount: Decimal,
        date: Optional[datetime] = None,
        status: RevenueStatus = RevenueStatus.PENDING,
        currency: str = "USD",
        source: str = "Unknown",
        description: Optional[str] = None,
    ) -> RevenueEntry:
        """Store a new entry; *date* defaults to now."""
        now = self.clock()
        entry = RevenueEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            amount=amount,
            niche=niche,
            date=date or now,
            status=status,
            currency=currency.upper(),
            source=source,
            description=description,
            created_at=now,
        )
        stored = self.repository.add(entry)
        app_logger.info("Revenue logged", user_id=user_id, niche=niche.value, entry_id=stored.id)
        return stored

    def list_revenue(
        self,
        user_id: str,
        niche: Optional[Niche] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[RevenueEntry]:
        if start is not None and end is not None and start >= end:
            raise InvalidArgument("start must be before end")
        return self.repository.list_entries(user_id, niche=niche, start=start, end=end)
