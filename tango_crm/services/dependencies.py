"""FastAPI dependency providers for the service layer."""

from fastapi import Depends, Request

from tango_crm.core.config import get_settings
from tango_crm.infra.db import Database
from tango_crm.repositories.revenue_repository import RevenueRepository
from tango_crm.services.revenue_growth_service import Clock, RevenueGrowthService
from tango_crm.services.revenue_service import RevenueService


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_revenue_repository(db: Database = Depends(get_database)) -> RevenueRepository:
    return RevenueRepository(db)


def get_revenue_growth_service(
    repository: RevenueRepository = Depends(get_revenue_repository),
    clock: Clock = Depends(get_clock),
) -> RevenueGrowthService:
    settings = get_settings()
    return RevenueGrowthService(
        repository,
        clock=clock,
        default_precision=settings.DEFAULT_PRECISION,
        max_trend_periods=settings.MAX_TREND_PERIODS,
        strict_custom_windows=settings.STRICT_CUSTOM_WINDOWS,
    )


def get_revenue_service(
    repository: RevenueRepository = Depends(get_revenue_repository),
    clock: Clock = Depends(get_clock),
) -> RevenueService:
    return RevenueService(repository, clock=clock)
