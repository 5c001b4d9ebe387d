import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from redeemhub.db import get_db
from redeemhub.services.stats_service import StatsService

log = logging.getLogger("redeemhub.api")

router = APIRouter()


@router.get("/health", tags=["health"])
def health(db: Session = Depends(get_db)):
    try:
        return StatsService(db).health()
    except Exception as e:
        log.exception("health check failed")
        return JSONResponse(status_code=500, content={"status": "unhealthy", "error": str(e)})
