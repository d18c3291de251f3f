"""
Revenue repository.
All access to stored revenue entries goes through here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import func, select

from tango_crm.core.logging import db_logger
from tango_crm.domain.models import Niche, PeriodWindow, RevenueEntry, RevenueStatus
from tango_crm.domain.periods import as_utc
from tango_crm.infra.db import Database, revenue_entries


def _from_storage(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; everything is stored in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _row_to_entry(row: Mapping[str, Any]) -> RevenueEntry:
    return RevenueEntry(
        id=row["id"],
        user_id=row["user_id"],
        amount=Decimal(str(row["amount"])),
        niche=Niche(row["niche"]),
        date=_from_storage(row["date"]),
        status=RevenueStatus(row["status"]),
        currency=row["currency"],
        source=row["source"],
        description=row["description"],
        created_at=_from_storage(row["created_at"]),
    )


class RevenueRepository:
    """
    Revenue data access backed by the `revenue_entries` table.

    Windows are half-open: an entry dated exactly at `window.end` belongs to
    the next window.
    """

    def __init__(self, db: Database):
        self.db = db

    def add(self, entry: RevenueEntry) -> RevenueEntry:
        created_at = entry.created_at or datetime.now(tz=timezone.utc)
        stmt = revenue_entries.insert().values(
            id=entry.id,
            user_id=entry.user_id,
            amount=entry.amount,
            currency=entry.currency,
            source=entry.source,
            status=entry.status.value,
            niche=entry.niche.value,
            description=entry.description,
            date=as_utc(entry.date),
            created_at=as_utc(created_at),
        )
        with self.db.begin() as conn:
            conn.execute(stmt)
        db_logger.debug("Revenue entry stored", entry_id=entry.id, user_id=entry.user_id)
        entry.date = as_utc(entry.date)
        entry.created_at = as_utc(created_at)
        return entry

    def list_entries(
        self,
        user_id: str,
        niche: Optional[Niche] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[RevenueEntry]:
        """
        List a user's entries, newest first.

        Args:
            user_id: Owner of the entries
            niche: Restrict to one niche
            start: Inclusive lower bound on the entry date
            end: Exclusive upper bound on the entry date
        """
        t = revenue_entries
        stmt = select(t).where(t.c.user_id == user_id)
        if niche is not None:
            stmt = stmt.where(t.c.niche == niche.value)
        if start is not None:
            stmt = stmt.where(t.c.date >= as_utc(start))
        if end is not None:
            stmt = stmt.where(t.c.date < as_utc(end))
        stmt = stmt.order_by(t.c.date.desc(), t.c.id)
        return [_row_to_entry(row) for row in self.db.fetch_all(stmt)]

    def sum_for_window(self, user_id: str, niche: Niche, window: PeriodWindow) -> Decimal:
        """
        Sum of entry amounts for the user/niche dated within `[window.start, window.end)`.

        Cancelled entries never count towards a period total.
        """
        t = revenue_entries
        stmt = select(func.coalesce(func.sum(t.c.amount), 0)).where(
            t.c.user_id == user_id,
            t.c.niche == niche.value,
            t.c.date >= as_utc(window.start),
            t.c.date < as_utc(window.end),
            t.c.status != RevenueStatus.CANCELLED.value,
        )
        total = self.db.scalar(stmt)
        return Decimal(str(total)) if total is not None else Decimal("0")
