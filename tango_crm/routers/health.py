from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tango_crm.core.logging import db_logger
from tango_crm.infra.db import Database
from tango_crm.services.dependencies import get_database

router = APIRouter(tags=["health"])

@router.get("/healthz")
def healthz():
    return {"status": "ok"}

@router.get("/readyz")
def readyz(db: Database = Depends(get_database)):
    try:
        return {"status": "ready", "database": db.health_check()}
    except Exception as exc:
        db_logger.error("Readiness check failed", exc=exc)
        return JSONResponse(status_code=503, content={"status": "not ready"})
