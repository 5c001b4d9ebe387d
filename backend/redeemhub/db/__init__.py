import importlib
import logging
from typing import List

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from redeemhub.config import settings

log = logging.getLogger("redeemhub.db")

DATABASE_URL = settings.database_url
_is_sqlite = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    connect_args=(
        {"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS}
        if _is_sqlite
        else {}
    ),
)

if _is_sqlite:
    # pysqlite emits its own BEGIN lazily and breaks SAVEPOINT; hand
    # transaction control to SQLAlchemy instead.
    # Every transaction takes the write lock at BEGIN IMMEDIATE and waits up
    # to SQLITE_BUSY_TIMEOUT_SECONDS for it.
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


SessionLocal = sessionmaker(
    bind=engine, autoflush=False, expire_on_commit=False
)
Base = declarative_base()

MODEL_MODULES = [
    "redeemhub.models.product",
    "redeemhub.models.account",
    "redeemhub.models.product_code",
    "redeemhub.models.message",
]


def _import_models() -> None:
    for mod in MODEL_MODULES:
        try:
            importlib.import_module(mod)
        except Exception:
            log.exception("model import failed: %s", mod)


def create_tables() -> List[str]:
    """
    Create every known table that does not exist yet, one at a time.

    A failure on one table is logged and the rest are still attempted, so the
    service keeps running with whatever subset was created. Returns the names
    of the tables that failed.
    """
    failed = []
    for table in Base.metadata.sorted_tables:
        try:
            table.create(bind=engine, checkfirst=True)
        except SQLAlchemyError:
            log.exception("could not create table %s", table.name)
            failed.append(table.name)
    return failed


def init_db(reset: bool = False, seed: bool = True) -> bool:
    """
    Initialize the schema and, on first run, the sample products.

    Returns True when sample products were inserted by this call; the caller
    is then responsible for seeding the sample accounts (see db.seed).
    """
    _import_models()

    if reset:
        log.info("Resetting database...")
        Base.metadata.drop_all(bind=engine)

    failed = create_tables()
    if failed:
        log.error("init_db: tables not created: %s", failed)
    else:
        log.info("Database initialized.")

    if not seed:
        return False

    from redeemhub.db.seed import seed_sample_products

    s = SessionLocal()
    try:
        return seed_sample_products(s)
    except SQLAlchemyError:
        log.exception("init_db: seeding sample products failed")
        return False
    finally:
        s.close()


def reset_db() -> None:
    """Drop and recreate all tables unconditionally. No seeding."""
    _import_models()
    Base.metadata.drop_all(bind=engine)
    failed = create_tables()
    if failed:
        log.error("reset_db: tables not recreated: %s", failed)
    log.warning("Database reset")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
