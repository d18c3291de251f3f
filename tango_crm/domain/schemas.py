"""
Pydantic schemas for the HTTP surface and exports.

JSON uses camelCase keys (the browser client's convention); Python code uses
snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tango_crm.domain.models import GrowthRateResult, Niche, PeriodWindow, RevenueEntry, RevenueStatus
from tango_crm.domain.periods import as_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WindowOut(CamelModel):
    start: datetime
    end: datetime

    @classmethod
    def from_window(cls, window: PeriodWindow) -> "WindowOut":
        return cls(start=window.start, end=window.end)


class GrowthRateOut(CamelModel):
    period_type: str
    current_period_total: float
    previous_period_total: float
    growth_rate_percent: float
    absolute_change: float
    is_positive_growth: bool
    message: str
    period_window: WindowOut
    comparison_window: WindowOut

    @classmethod
    def from_result(cls, result: GrowthRateResult) -> "GrowthRateOut":
        return cls(
            period_type=result.period_type.value,
            current_period_total=float(result.current_period_total),
            previous_period_total=float(result.previous_period_total),
            growth_rate_percent=float(result.growth_rate_percent),
            absolute_change=float(result.absolute_change),
            is_positive_growth=result.is_positive_growth,
            message=result.message,
            period_window=WindowOut.from_window(result.period_window),
            comparison_window=WindowOut.from_window(result.comparison_window),
        )


class GrowthOut(GrowthRateOut):
    """Growth for the requested period, plus the trend series when asked for."""

    trend_analysis: Optional[list[GrowthRateOut]] = None


class CustomGrowthIn(CamelModel):
    """Body of `POST /growth`: two explicit windows to compare."""

    model_config = ConfigDict(extra="forbid")

    current_start_date: datetime
    current_end_date: datetime
    previous_start_date: datetime
    previous_end_date: datetime
    niche: Niche = Niche.CREATOR
    precision: Optional[int] = Field(default=None, ge=0, le=10)

    @field_validator(
        "current_start_date", "current_end_date", "previous_start_date", "previous_end_date"
    )
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class RevenueIn(CamelModel):
    """Body of `POST /revenue`."""

    amount: Decimal = Field(max_digits=14, decimal_places=2)
    niche: Niche = Niche.CREATOR
    date: Optional[datetime] = None
    status: RevenueStatus = RevenueStatus.PENDING
    currency: str = Field(default="USD", min_length=3, max_length=3)
    source: str = Field(default="Unknown", min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("date")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None


class RevenueOut(CamelModel):
    id: str
    user_id: str
    amount: float
    niche: Niche
    date: datetime
    status: RevenueStatus
    currency: str
    source: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry: RevenueEntry) -> "RevenueOut":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            amount=float(entry.amount),
            niche=entry.niche,
            date=entry.date,
            status=entry.status,
            currency=entry.currency,
            source=entry.source,
            description=entry.description,
            created_at=entry.created_at,
        )
