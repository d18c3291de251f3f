"""Revenue growth endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from tango_crm.core.cache import conditional_json, window_scope
from tango_crm.core.errors import InvalidArgument
from tango_crm.core.security import AccessClaims, Authorizer, ensure_niche_access, get_authorizer, get_current_session
from tango_crm.domain.models import Niche
from tango_crm.domain.schemas import CustomGrowthIn, GrowthOut, GrowthRateOut
from tango_crm.routers.params import parse_iso8601
from tango_crm.services.dependencies import get_revenue_growth_service
from tango_crm.services.revenue_growth_service import RevenueGrowthService, export_to_csv, export_to_json


router = APIRouter(prefix="/growth", tags=["growth"])


@router.get("", responses={200: {"model": GrowthOut}})
def get_growth(
    request: Request,
    period_type: Optional[str] = Query(None, alias="periodType", description="month | quarter | year | custom"),
    niche: Niche = Query(Niche.CREATOR),
    start_date: Optional[str] = Query(None, alias="startDate", description="ISO8601, custom periods only"),
    end_date: Optional[str] = Query(None, alias="endDate", description="ISO8601, custom periods only"),
    precision: Optional[int] = Query(None, ge=0, le=10),
    trend_periods: int = Query(0, ge=0, alias="trendPeriods"),
    session: AccessClaims = Depends(get_current_session),
    authorizer: Authorizer = Depends(get_authorizer),
    service: RevenueGrowthService = Depends(get_revenue_growth_service),
) -> Response:
    """Growth of the current period over the previous one, optionally with a trend series."""
    if not period_type:
        raise InvalidArgument("periodType is required")
    ensure_niche_access(session, niche.value, authorizer)

    result = service.calculate_growth(
        session.sub,
        niche,
        period_type,
        start_date=parse_iso8601(start_date, "startDate"),
        end_date=parse_iso8601(end_date, "endDate"),
        precision=precision,
    )
    payload = GrowthOut.from_result(result)
    scope = [session.sub, *window_scope(result.period_window, result.comparison_window)]

    if trend_periods > 0:
        trend = service.calculate_trend_analysis(
            session.sub, niche, period_type, trend_periods, precision=precision
        )
        payload.trend_analysis = [GrowthRateOut.from_result(r) for r in trend]

    return conditional_json(
        request, payload.model_dump(mode="json", by_alias=True, exclude_none=True), scope
    )


@router.post("", response_model=GrowthRateOut)
def post_custom_growth(
    body: CustomGrowthIn,
    session: AccessClaims = Depends(get_current_session),
    authorizer: Authorizer = Depends(get_authorizer),
    service: RevenueGrowthService = Depends(get_revenue_growth_service),
) -> GrowthRateOut:
    """Compare two explicit windows chosen by the caller."""
    ensure_niche_access(session, body.niche.value, authorizer)
    result = service.calculate_custom_period_growth(
        session.sub,
        body.niche,
        body.current_start_date,
        body.current_end_date,
        body.previous_start_date,
        body.previous_end_date,
        precision=body.precision,
    )
    return GrowthRateOut.from_result(result)


@router.get("/export")
def export_growth(
    period_type: str = Query("month", alias="periodType"),
    niche: Niche = Query(Niche.CREATOR),
    trend_periods: int = Query(12, ge=1, alias="trendPeriods"),
    precision: Optional[int] = Query(None, ge=0, le=10),
    fmt: Literal["csv", "json"] = Query("csv", alias="format"),
    session: AccessClaims = Depends(get_current_session),
    authorizer: Authorizer = Depends(get_authorizer),
    service: RevenueGrowthService = Depends(get_revenue_growth_service),
) -> Response:
    """Download the trend series as CSV or JSON."""
    ensure_niche_access(session, niche.value, authorizer)
    results = service.calculate_trend_analysis(
        session.sub, niche, period_type, trend_periods, precision=precision
    )

    filename = f"revenue-growth-{niche.value}-{period_type}.{fmt}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if fmt == "csv":
        return Response(export_to_csv(results), media_type="text/csv", headers=headers)
    return Response(export_to_json(results), media_type="application/json", headers=headers)
