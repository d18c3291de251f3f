"""
Growth rate arithmetic over already aggregated totals.

Covers the plain formula, rounding, the zero-previous policy and the
messages/flags attached to a result.
"""
from decimal import Decimal

import pytest

from tango_crm.core.errors import InvalidArgument
from tango_crm.domain.models import PeriodPair, PeriodType, PeriodWindow
from tango_crm.services.growth_calculator import (
    build_result,
    calculate_growth_rate,
    quantize,
)
from tests.conftest import utc

D = Decimal

WINDOWS = PeriodPair(
    current=PeriodWindow(utc(2024, 1, 1), utc(2024, 2, 1)),
    previous=PeriodWindow(utc(2023, 12, 1), utc(2024, 1, 1)),
)


class TestGrowthRate:

    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            ("100", "50", "100.00"),
            ("50", "100", "-50.00"),
            ("150", "150", "0.00"),
            ("110", "100", "10.00"),
            ("0", "80", "-100.00"),
        ],
    )
    def test_formula(self, current, previous, expected):
        assert calculate_growth_rate(D(current), D(previous)) == D(expected)

    def test_matches_rounded_ratio(self):
        for current in range(0, 400, 7):
            for previous in range(1, 300, 13):
                expected = quantize((D(current) - previous) / previous * 100, 2)
                assert calculate_growth_rate(D(current), D(previous)) == expected

    def test_precision(self):
        assert calculate_growth_rate(D("1"), D("3"), precision=4) == D("-66.6667")
        assert calculate_growth_rate(D("1"), D("3"), precision=0) == D("-67")

    def test_rounds_half_up(self):
        # 1.005% growth
        assert calculate_growth_rate(D("201.01"), D("200"), precision=2) == D("0.51")
        assert calculate_growth_rate(D("100.125"), D("100"), precision=2) == D("0.13")

    def test_both_zero_is_zero(self):
        assert calculate_growth_rate(D("0"), D("0")) == D("0")

    def test_new_revenue_is_capped_at_100(self):
        assert calculate_growth_rate(D("500"), D("0")) == D("100")

    def test_negative_current_without_previous_is_zero(self):
        assert calculate_growth_rate(D("-20"), D("0")) == D("0")

    def test_negative_previous_uses_its_magnitude(self):
        assert calculate_growth_rate(D("100"), D("-50")) == D("300.00")
        assert calculate_growth_rate(D("-100"), D("-50")) == D("-100.00")

    @pytest.mark.parametrize("precision", [-1, 11])
    def test_precision_out_of_range(self, precision):
        with pytest.raises(InvalidArgument):
            calculate_growth_rate(D("1"), D("1"), precision=precision)


class TestBuildResult:

    def test_carries_totals_and_windows(self):
        result = build_result(PeriodType.MONTH, D("100"), D("50"), WINDOWS)
        assert result.current_period_total == D("100.00")
        assert result.previous_period_total == D("50.00")
        assert result.absolute_change == D("50.00")
        assert result.growth_rate_percent == D("100.00")
        assert result.period_window == WINDOWS.current
        assert result.comparison_window == WINDOWS.previous
        assert result.is_positive_growth is True
        assert result.message == "100.00% growth compared to previous month"

    def test_decline_message(self):
        result = build_result(PeriodType.QUARTER, D("75"), D("100"), WINDOWS)
        assert result.is_positive_growth is False
        assert result.message == "25.00% decline compared to previous quarter"

    def test_no_change(self):
        result = build_result(PeriodType.YEAR, D("10"), D("10"), WINDOWS)
        assert result.is_positive_growth is True
        assert result.message == "No change compared to previous year"

    def test_no_data(self):
        result = build_result(PeriodType.MONTH, D("0"), D("0"), WINDOWS)
        assert result.growth_rate_percent == D("0")
        assert result.is_positive_growth is False
        assert result.message == "No revenue data available for both periods"

    def test_new_revenue(self):
        result = build_result(PeriodType.CUSTOM, D("500"), D("0"), WINDOWS)
        assert result.growth_rate_percent == D("100.00")
        assert result.absolute_change == D("500.00")
        assert result.is_positive_growth is True
        assert result.message == "New revenue generated (no previous period data)"

    def test_recovery_from_net_refunds_is_growth(self):
        result = build_result(PeriodType.MONTH, D("100"), D("-50"), WINDOWS)
        assert result.growth_rate_percent == D("300.00")
        assert result.is_positive_growth is True
        assert result.message == "300.00% growth compared to previous month"
