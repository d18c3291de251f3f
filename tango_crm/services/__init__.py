"""
Domain services, kept separate from the routers.
"""

from .growth_calculator import build_result, calculate_growth_rate  # noqa: F401
from .revenue_growth_service import (  # noqa: F401
    RevenueGrowthService,
    export_to_csv,
    export_to_json,
)
from .revenue_service import RevenueService  # noqa: F401

__all__ = [
    "build_result",
    "calculate_growth_rate",
    "export_to_csv",
    "export_to_json",
    "RevenueGrowthService",
    "RevenueService",
]
