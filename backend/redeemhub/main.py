import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from redeemhub.api.health import router as health_router
from redeemhub.api.routes_accounts import router as accounts_router
from redeemhub.api.routes_admin import router as admin_router
from redeemhub.api.routes_auth import router as auth_router
from redeemhub.api.routes_codes import router as codes_router
from redeemhub.api.routes_messages import router as messages_router
from redeemhub.api.routes_products import router as products_router
from redeemhub.config import settings
from redeemhub.db import SessionLocal, init_db
from redeemhub.db.seed import seed_sample_accounts_job
from redeemhub.exceptions import RedeemError
from redeemhub.logging_config import configure_logging
from redeemhub.services.catalog_service import CatalogService

log = logging.getLogger("redeemhub.main")


def reconcile_job():
    db = SessionLocal()
    try:
        CatalogService(db).reconcile_stock()
    except Exception:
        log.exception("stock reconciliation failed")
    finally:
        db.close()


def seeds_accounts_inline(seeded: bool) -> bool:
    """Sample accounts go in during startup when there is no scheduler or no delay."""
    if not seeded:
        return False
    return not settings.SCHEDULER_ENABLED or settings.SEED_ACCOUNTS_DELAY_SECONDS <= 0


def build_scheduler(seeded: bool) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    if seeded and settings.SEED_ACCOUNTS_DELAY_SECONDS > 0:
        # accounts go in shortly after the sample products
        run_at = datetime.now() + timedelta(seconds=settings.SEED_ACCOUNTS_DELAY_SECONDS)
        scheduler.add_job(seed_sample_accounts_job, "date", run_date=run_at, id="seed_accounts")
    if settings.STOCK_RECONCILE_INTERVAL_SECONDS > 0:
        scheduler.add_job(
            reconcile_job,
            "interval",
            seconds=settings.STOCK_RECONCILE_INTERVAL_SECONDS,
            id="reconcile_stock",
        )
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    seeded = init_db(reset=False, seed=settings.SEED_SAMPLE_DATA)
    log.info("Database: %s", settings.database_url)

    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = build_scheduler(seeded)
        scheduler.start()
    if seeds_accounts_inline(seeded):
        seed_sample_accounts_job()

    try:
        yield
    finally:
        if scheduler:
            scheduler.shutdown(wait=False)


app = FastAPI(title="RedeemHub - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RedeemError)
async def redeem_error(request: Request, exc: RedeemError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = f"{where}: {first.get('msg')}" if where else str(first.get("msg", "Invalid request"))
    return JSONResponse(status_code=422, content={"error": msg})


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(auth_router)

app.include_router(products_router)

app.include_router(accounts_router)

app.include_router(codes_router)

app.include_router(messages_router)

app.include_router(admin_router)
