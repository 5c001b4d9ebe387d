from fastapi.testclient import TestClient
from sqlalchemy import inspect

from redeemhub.db import engine, init_db, reset_db
from redeemhub.db.seed import SAMPLE_PRODUCTS, seed_sample_accounts
from redeemhub.config import settings
from redeemhub.main import app, build_scheduler, seeds_accounts_inline
from redeemhub.services.catalog_service import CatalogService
from redeemhub.services.stats_service import StatsService


def test_tables_exist():
    names = set(inspect(engine).get_table_names())
    assert {"products", "accounts", "product_codes", "messages"} <= names


def test_first_run_seeds_products_once(db):
    assert init_db(seed=True) is True
    assert init_db(seed=True) is False
    products = CatalogService(db).list_products()
    assert sorted(p["product_code"] for p in products) == sorted(p[0] for p in SAMPLE_PRODUCTS)


def test_sample_accounts_keep_seeded_stock(db):
    init_db(seed=True)
    assert seed_sample_accounts(db) == 6
    by_code = {p["product_code"]: p for p in CatalogService(db).list_products()}
    assert by_code["NETFLIX001"]["stock"] == 10
    assert by_code["NETFLIX001"]["available_accounts"] == 3
    assert by_code["SPOTIFY001"]["available_accounts"] == 2
    assert by_code["DISCORD001"]["available_accounts"] == 0


def test_reset_db_drops_everything(db):
    init_db(seed=True)
    reset_db()
    assert StatsService(db).stats()["products"] == 0
    assert set(inspect(engine).get_table_names()) >= {"products", "messages"}


def test_scheduler_gets_seed_job_only_on_first_run():
    assert [j.id for j in build_scheduler(seeded=True).get_jobs()] == ["seed_accounts"]
    assert build_scheduler(seeded=False).get_jobs() == []


def test_zero_delay_seeds_accounts_inline(monkeypatch):
    monkeypatch.setattr(settings, "SEED_ACCOUNTS_DELAY_SECONDS", 0)
    assert build_scheduler(seeded=True).get_jobs() == []
    assert seeds_accounts_inline(True) is True
    assert seeds_accounts_inline(False) is False


def test_startup_with_scheduler_and_zero_delay_has_accounts_immediately(monkeypatch):
    monkeypatch.setattr(settings, "SEED_SAMPLE_DATA", True)
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", True)
    monkeypatch.setattr(settings, "SEED_ACCOUNTS_DELAY_SECONDS", 0)

    with TestClient(app) as client:
        stats = client.get("/api/stats").json()

    assert stats["products"] == len(SAMPLE_PRODUCTS)
    assert stats["totalAccounts"] == 6


def test_delayed_seeding_leaves_accounts_to_the_scheduler(monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", True)
    monkeypatch.setattr(settings, "SEED_ACCOUNTS_DELAY_SECONDS", 1.0)
    assert seeds_accounts_inline(True) is False
