import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from redeemhub.db import get_db, reset_db
from redeemhub.services.catalog_service import CatalogService
from redeemhub.services.stats_service import StatsService

log = logging.getLogger("redeemhub.api")

router = APIRouter(prefix="/api", tags=["admin"])


@router.get("/stats", summary="Aggregate counters")
def stats(db: Session = Depends(get_db)):
    return StatsService(db).stats()


@router.post("/reset-database", summary="Drop and recreate all tables (testing only)")
def reset_database():
    reset_db()
    return {"success": True, "message": "Database reset successfully"}


@router.post("/admin/reconcile-stock", summary="Recompute stock from account statuses")
def reconcile_stock(db: Session = Depends(get_db)):
    changed = CatalogService(db).reconcile_stock()
    return {"success": True, "updated": {str(k): v for k, v in changed.items()}}
