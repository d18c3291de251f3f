"""Revenue logging endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response

from tango_crm.core.cache import conditional_json
from tango_crm.core.security import AccessClaims, Authorizer, ensure_niche_access, get_authorizer, get_current_session
from tango_crm.domain.models import Niche
from tango_crm.domain.schemas import RevenueIn, RevenueOut
from tango_crm.routers.params import parse_iso8601
from tango_crm.services.dependencies import get_revenue_service
from tango_crm.services.revenue_service import RevenueService


router = APIRouter(prefix="/revenue", tags=["revenue"])


@router.post("", response_model=RevenueOut, status_code=status.HTTP_201_CREATED)
def create_revenue(
    body: RevenueIn,
    session: AccessClaims = Depends(get_current_session),
    authorizer: Authorizer = Depends(get_authorizer),
    service: RevenueService = Depends(get_revenue_service),
) -> RevenueOut:
    """Log a revenue entry for the caller."""
    ensure_niche_access(session, body.niche.value, authorizer)
    entry = service.log_revenue(
        session.sub,
        body.niche,
        body.amount,
        date=body.date,
        status=body.status,
        currency=body.currency,
        source=body.source,
        description=body.description,
    )
    return RevenueOut.from_entry(entry)


@router.get("", responses={200: {"model": list[RevenueOut]}})
def list_revenue(
    request: Request,
    niche: Optional[Niche] = Query(None),
    start: Optional[str] = Query(None, description="Inclusive ISO8601 lower bound"),
    end: Optional[str] = Query(None, description="Exclusive ISO8601 upper bound"),
    session: AccessClaims = Depends(get_current_session),
    authorizer: Authorizer = Depends(get_authorizer),
    service: RevenueService = Depends(get_revenue_service),
) -> Response:
    """List the caller's revenue entries, newest first."""
    if niche is not None:
        ensure_niche_access(session, niche.value, authorizer)
    entries = service.list_revenue(
        session.sub,
        niche=niche,
        start=parse_iso8601(start, "start"),
        end=parse_iso8601(end, "end"),
    )
    payload = [RevenueOut.from_entry(e).model_dump(mode="json", by_alias=True) for e in entries]
    return conditional_json(request, payload, [session.sub])
