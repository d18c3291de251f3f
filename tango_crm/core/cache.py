"""
Conditional GET for per-user report payloads.

Growth figures move with the clock as well as with stored revenue, so
clients must always revalidate. The validator covers the caller's identity
and the resolved windows alongside the body: two users (or two "current
months") with identical totals never share an ETag.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from tango_crm.domain.models import PeriodWindow

REVALIDATE = "private, no-cache"


def window_scope(*windows: PeriodWindow) -> list[str]:
    return [f"{w.start.isoformat()}/{w.end.isoformat()}" for w in windows]


def report_etag(payload: Any, scope: Iterable[str] = ()) -> str:
    digest = hashlib.sha256()
    for part in scope:
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    digest.update(json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8"))
    return f'"{digest.hexdigest()[:32]}"'


def if_none_match(header: Optional[str], etag: str) -> bool:
    """True when the If-None-Match header names *etag* (weak comparison)."""
    if not header:
        return False
    if header.strip() == "*":
        return True
    candidates = (c.strip() for c in header.split(","))
    return etag in {c[2:] if c.startswith("W/") else c for c in candidates}


def conditional_json(request: Request, payload: Any, scope: Iterable[str] = ()) -> Response:
    etag = report_etag(payload, scope)
    headers = {"ETag": etag, "Cache-Control": REVALIDATE, "Vary": "Authorization"}
    if if_none_match(request.headers.get("If-None-Match"), etag):
        return Response(status_code=304, headers=headers)
    return JSONResponse(content=payload, headers=headers)
