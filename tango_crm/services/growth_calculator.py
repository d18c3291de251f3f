"""
Growth rate arithmetic.

Pure functions over already aggregated totals; nothing here touches storage.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from tango_crm.core.errors import InvalidArgument
from tango_crm.domain.models import GrowthRateResult, PeriodPair, PeriodType

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONEY_PLACES = 2
MAX_PRECISION = 10

# Reported when there was no revenue before and there is some now.
NEW_REVENUE_GROWTH_RATE = HUNDRED


def quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def validate_precision(precision: int) -> int:
    if not 0 <= precision <= MAX_PRECISION:
        raise InvalidArgument(f"precision must be between 0 and {MAX_PRECISION}")
    return precision


def calculate_growth_rate(current_total: Decimal, previous_total: Decimal, precision: int = 2) -> Decimal:
    """
    Percentage change from *previous_total* to *current_total*.

    With a zero previous total the ratio is undefined, so:
      - current == 0 -> 0
      - current > 0  -> 100 (new revenue, capped)
      - current < 0  -> 0

    The change is measured against the magnitude of *previous_total*, so a
    move up from a net negative period (refunds) still reads as growth.
    """
    validate_precision(precision)
    current_total = Decimal(current_total)
    previous_total = Decimal(previous_total)

    if previous_total == ZERO:
        rate = NEW_REVENUE_GROWTH_RATE if current_total > ZERO else ZERO
        return quantize(rate, precision)

    rate = (current_total - previous_total) / abs(previous_total) * HUNDRED
    return quantize(rate, precision)


def format_growth_message(
    growth_rate: Decimal,
    current_total: Decimal,
    previous_total: Decimal,
    period_type: PeriodType,
) -> str:
    label = period_type.label
    if previous_total == ZERO:
        if current_total == ZERO:
            return "No revenue data available for both periods"
        if current_total > ZERO:
            return f"New revenue generated (no previous {label} data)"
        return f"No previous {label} revenue to compare against"

    if growth_rate == ZERO:
        return f"No change compared to previous {label}"

    direction = "growth" if growth_rate > ZERO else "decline"
    return f"{quantize(abs(growth_rate), MONEY_PLACES)}% {direction} compared to previous {label}"


def build_result(
    period_type: PeriodType,
    current_total: Decimal,
    previous_total: Decimal,
    windows: PeriodPair,
    precision: int = 2,
) -> GrowthRateResult:
    """Assemble the full growth result for two aggregated totals."""
    growth_rate = calculate_growth_rate(current_total, previous_total, precision)

    if previous_total == ZERO:
        is_positive = current_total > ZERO
    else:
        is_positive = growth_rate >= ZERO

    return GrowthRateResult(
        period_type=period_type,
        current_period_total=quantize(Decimal(current_total), MONEY_PLACES),
        previous_period_total=quantize(Decimal(previous_total), MONEY_PLACES),
        growth_rate_percent=growth_rate,
        absolute_change=quantize(Decimal(current_total) - Decimal(previous_total), MONEY_PLACES),
        is_positive_growth=is_positive,
        message=format_growth_message(growth_rate, current_total, previous_total, period_type),
        period_window=windows.current,
        comparison_window=windows.previous,
    )
