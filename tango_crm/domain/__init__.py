"""
Domain models, independent of infrastructure.
"""

from .models import (
    GrowthRateResult,
    Niche,
    PeriodPair,
    PeriodType,
    PeriodWindow,
    RevenueEntry,
    RevenueStatus,
)

__all__ = [
    "GrowthRateResult",
    "Niche",
    "PeriodPair",
    "PeriodType",
    "PeriodWindow",
    "RevenueEntry",
    "RevenueStatus",
]
