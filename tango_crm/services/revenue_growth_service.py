"""Revenue growth business logic: period growth, custom comparisons and trends."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from tango_crm.core.errors import InvalidArgument
from tango_crm.core.logging import growth_logger
from tango_crm.domain.models import GrowthRateResult, Niche, PeriodPair, PeriodType, PeriodWindow
from tango_crm.domain.periods import (
    as_utc,
    calendar_window,
    parse_period_type,
    resolve_period,
    validate_window,
)
from tango_crm.domain.schemas import GrowthRateOut
from tango_crm.repositories.protocols import RevenueRepositoryProtocol
from tango_crm.services.growth_calculator import build_result, validate_precision

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class RevenueGrowthService:
    """
    Computes revenue growth for a user's niche.

    Every call reads fresh totals from the repository; nothing is cached
    between calls.
    """

    def __init__(
        self,
        repository: RevenueRepositoryProtocol,
        *,
        clock: Clock = utc_now,
        default_precision: int = 2,
        max_trend_periods: int = 24,
        strict_custom_windows: bool = True,
    ):
        self.repository = repository
        self.clock = clock
        self.default_precision = default_precision
        self.max_trend_periods = max_trend_periods
        self.strict_custom_windows = strict_custom_windows

    def _compare(
        self,
        user_id: str,
        niche: Niche,
        period_type: PeriodType,
        windows: PeriodPair,
        precision: Optional[int],
    ) -> GrowthRateResult:
        precision = validate_precision(self.default_precision if precision is None else precision)
        current_total = self.repository.sum_for_window(user_id, niche, windows.current)
        previous_total = self.repository.sum_for_window(user_id, niche, windows.previous)
        return build_result(period_type, current_total, previous_total, windows, precision)

    def calculate_growth(
        self,
        user_id: str,
        niche: Niche,
        period_type: str | PeriodType,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        precision: Optional[int] = None,
    ) -> GrowthRateResult:
        """Growth of the current period (or custom range) over the one before it."""
        period_type = parse_period_type(period_type)
        windows = resolve_period(period_type, self.clock(), start_date, end_date)
        result = self._compare(user_id, niche, period_type, windows, precision)
        growth_logger.info(
            "Growth calculated",
            user_id=user_id,
            niche=niche.value,
            period_type=period_type.value,
            growth_rate=str(result.growth_rate_percent),
        )
        return result

    def calculate_custom_period_growth(
        self,
        user_id: str,
        niche: Niche,
        current_start: datetime,
        current_end: datetime,
        previous_start: datetime,
        previous_end: datetime,
        precision: Optional[int] = None,
    ) -> GrowthRateResult:
        """
        Compare two caller-chosen windows.

        Each window must be non-empty. With strict validation enabled the
        comparison window must also end no later than the current one starts.
        """
        current = validate_window(PeriodWindow(as_utc(current_start), as_utc(current_end)), "current")
        previous = validate_window(PeriodWindow(as_utc(previous_start), as_utc(previous_end)), "previous")
        if self.strict_custom_windows and previous.end > current.start:
            raise InvalidArgument("The previous window must end before the current window starts")

        return self._compare(user_id, niche, PeriodType.CUSTOM, PeriodPair(current, previous), precision)

    def calculate_trend_analysis(
        self,
        user_id: str,
        niche: Niche,
        period_type: str | PeriodType,
        periods: int,
        precision: Optional[int] = None,
    ) -> list[GrowthRateResult]:
        """
        Growth for *periods* consecutive calendar periods, most recent first.

        Entry 0 is the period containing now compared with the one before it,
        entry 1 steps one period further back, and so on.
        """
        period_type = parse_period_type(period_type)
        if period_type is PeriodType.CUSTOM:
            raise InvalidArgument("Trend analysis requires a month, quarter or year period type")
        if not 1 <= periods <= self.max_trend_periods:
            raise InvalidArgument(f"trendPeriods must be between 1 and {self.max_trend_periods}")

        now = self.clock()
        results = []
        for offset in range(periods):
            windows = PeriodPair(
                current=calendar_window(period_type, now, offset),
                previous=calendar_window(period_type, now, offset + 1),
            )
            results.append(self._compare(user_id, niche, period_type, windows, precision))
        return results


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------

CSV_HEADERS = [
    "Period Type",
    "Growth Rate (%)",
    "Absolute Change",
    "Current Period",
    "Previous Period",
    "Is Positive Growth",
    "Message",
    "Start Date",
    "End Date",
]


def export_to_csv(results: Iterable[GrowthRateResult]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for result in results:
        writer.writerow([
            result.period_type.value,
            result.growth_rate_percent,
            result.absolute_change,
            result.current_period_total,
            result.previous_period_total,
            str(result.is_positive_growth).lower(),
            result.message,
            result.period_window.start.date().isoformat(),
            result.period_window.last_day.isoformat(),
        ])
    return buffer.getvalue()


def export_to_json(results: Iterable[GrowthRateResult]) -> str:
    return json.dumps(
        [GrowthRateOut.from_result(r).model_dump(mode="json", by_alias=True) for r in results],
        indent=2,
    )
