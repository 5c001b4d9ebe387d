#!/usr/bin/env python3
"""
Seed products and their accounts from a JSON file.

Expected shape (a list, or an object with an "items" list):

    [
      {"product_code": "NETFLIX001", "name": "Netflix Premium", "logo": "fas fa-film",
       "accounts": [{"email": "a@example.com", "password": "pw", "login_via": "Email"}]}
    ]

Existing products (matched by product_code) are reused and only get the
accounts appended. Stock follows the inserted account count.

Usage:
    python scripts/seed_catalog.py --file catalog.json
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from redeemhub.db import SessionLocal, init_db
from redeemhub.exceptions import RedeemError
from redeemhub.logging_config import configure_logging
from redeemhub.repositories.product_repo import ProductRepository
from redeemhub.services.catalog_service import CatalogService
from redeemhub.utils.transactions import smart_transaction


def _entries(data):
    if isinstance(data, dict):
        data = data.get("items", [])
    return data if isinstance(data, list) else []


def seed_from_file(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")

    init_db(seed=False)
    db = SessionLocal()
    svc = CatalogService(db)
    totals = {"products": 0, "accounts": 0, "failed": 0}
    try:
        for entry in _entries(data):
            code = entry.get("product_code")
            if not code or not entry.get("name"):
                print("skipping entry without product_code/name:", entry)
                continue
            with smart_transaction(db):
                product = ProductRepository(db).get_by_code(code)
            if not product:
                product = svc.create_product(
                    code,
                    entry["name"],
                    description=entry.get("description"),
                    logo=entry.get("logo"),
                    stock=0,
                )
                totals["products"] += 1
            result = svc.bulk_create_accounts(product.id, entry.get("accounts") or [])
            totals["accounts"] += result["added"]
            totals["failed"] += result["failed"]
    finally:
        db.close()
    return totals


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", required=True, help="Path to catalog JSON")
    args = parser.parse_args()
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)
    configure_logging()
    try:
        print("Seeded:", seed_from_file(args.file))
    except RedeemError as e:
        print("Seeding failed:", e.message)
        sys.exit(1)
