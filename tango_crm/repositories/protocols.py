"""Repository protocol definitions used by domain services."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from tango_crm.domain.models import Niche, PeriodWindow, RevenueEntry


class RevenueRepositoryProtocol(Protocol):
    """Contract for revenue data access."""

    def add(self, entry: RevenueEntry) -> RevenueEntry: ...

    def list_entries(
        self,
        user_id: str,
        niche: Optional[Niche] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[RevenueEntry]: ...

    def sum_for_window(self, user_id: str, niche: Niche, window: PeriodWindow) -> Decimal: ...
