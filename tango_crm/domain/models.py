"""
Domain models.
Plain business concepts, independent of HTTP and storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional


class Niche(str, Enum):
    """Business vertical a user subscribes to; scopes revenue data."""

    CREATOR = "creator"
    COACH = "coach"
    PODCASTER = "podcaster"
    FREELANCER = "freelancer"


class PeriodType(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Word used in growth messages ("compared to previous month")."""
        return "period" if self is PeriodType.CUSTOM else self.value


class RevenueStatus(str, Enum):
    PENDING = "pending"
    RECEIVED = "received"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass
class RevenueEntry:
    """A single logged revenue amount, owned by the user who logged it."""

    id: str
    user_id: str
    amount: Decimal
    niche: Niche
    date: datetime
    status: RevenueStatus = RevenueStatus.PENDING
    currency: str = "USD"
    source: str = "Unknown"
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PeriodWindow:
    """Half-open time range `[start, end)`."""

    start: datetime
    end: datetime

    @property
    def duration(self):
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def last_day(self) -> date:
        """Calendar day of the last instant inside the window."""
        return (self.end - timedelta(microseconds=1)).date()


@dataclass(frozen=True)
class PeriodPair:
    current: PeriodWindow
    previous: PeriodWindow


@dataclass
class GrowthRateResult:
    """Growth between two period totals, with the windows that produced them."""

    period_type: PeriodType
    current_period_total: Decimal
    previous_period_total: Decimal
    growth_rate_percent: Decimal
    absolute_change: Decimal
    is_positive_growth: bool
    message: str
    period_window: PeriodWindow
    comparison_window: PeriodWindow
