"""
Period resolution.

Turns a period type (plus explicit dates for custom ranges) into the current
window and the comparison window it is measured against. All windows are
half-open `[start, end)` and expressed in UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from tango_crm.core.errors import InvalidArgument
from tango_crm.domain.models import PeriodPair, PeriodType, PeriodWindow


_MONTHS_PER_PERIOD = {
    PeriodType.MONTH: 1,
    PeriodType.QUARTER: 3,
    PeriodType.YEAR: 12,
}


def as_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise InvalidArgument(f"Date out of range: {value.isoformat()}") from None


def parse_period_type(value: str | PeriodType) -> PeriodType:
    try:
        return PeriodType(value)
    except ValueError:
        raise InvalidArgument(f"Invalid period type: {value}") from None


def _month_start(month_index: int) -> datetime:
    """First instant of the month counted as `year * 12 + (month - 1)`."""
    year, month0 = divmod(month_index, 12)
    return datetime(year, month0 + 1, 1, tzinfo=timezone.utc)


def calendar_window(period_type: PeriodType, now: datetime, offset: int = 0) -> PeriodWindow:
    """
    Calendar period `offset` steps before the one containing *now*.

    `offset=0` is the month/quarter/year containing *now*, `offset=1` the one
    right before it, and so on.
    """
    if period_type not in _MONTHS_PER_PERIOD:
        raise InvalidArgument(f"Calendar window not defined for period type: {period_type.value}")

    now = as_utc(now)
    step = _MONTHS_PER_PERIOD[period_type]
    month_index = now.year * 12 + (now.month - 1)
    # Align down to the first month of the enclosing quarter/year.
    aligned = month_index - (month_index % step)
    start_index = aligned - offset * step
    return PeriodWindow(
        start=_month_start(start_index),
        end=_month_start(start_index + step),
    )


def preceding_window(window: PeriodWindow) -> PeriodWindow:
    """Equal-length window ending exactly where *window* starts."""
    return PeriodWindow(start=window.start - window.duration, end=window.start)


def validate_window(window: PeriodWindow, label: str = "period") -> PeriodWindow:
    if window.start >= window.end:
        raise InvalidArgument(f"Start date must be before end date for the {label} window")
    return window


def resolve_period(
    period_type: str | PeriodType,
    now: datetime,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> PeriodPair:
    """
    Resolve the current and comparison windows for *period_type*.

    For calendar types the current window contains *now*. For `custom` the
    caller's `[start_date, end_date)` is the current window and the comparison
    window is the equal-length range immediately before it.
    """
    period_type = parse_period_type(period_type)

    if period_type is PeriodType.CUSTOM:
        if start_date is None or end_date is None:
            raise InvalidArgument("startDate and endDate are required for custom periods")
        current = validate_window(PeriodWindow(as_utc(start_date), as_utc(end_date)), "current")
        try:
            previous = preceding_window(current)
        except OverflowError:
            # The comparison window would start before year 1.
            raise InvalidArgument("Custom range too large") from None
        return PeriodPair(current=current, previous=previous)

    return PeriodPair(
        current=calendar_window(period_type, now, 0),
        previous=calendar_window(period_type, now, 1),
    )
