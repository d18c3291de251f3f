"""
Data access repositories.
"""

from .revenue_repository import RevenueRepository

__all__ = [
    "RevenueRepository",
]
