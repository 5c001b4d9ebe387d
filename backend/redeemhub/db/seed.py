"""
Sample data inserted on first run (empty products table).

Products are seeded by init_db(); accounts follow after a short delay, keyed
by product code, and never touch stock (the sample stock values are explicit).
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from redeemhub.db import SessionLocal
from redeemhub.repositories.account_repo import AccountRepository
from redeemhub.repositories.product_repo import ProductRepository
from redeemhub.utils.transactions import smart_transaction

log = logging.getLogger("redeemhub.seed")

SAMPLE_PRODUCTS = [
    # product_code, name, description, logo, stock
    ("NETFLIX001", "Netflix Premium", "Akun Netflix Premium 4K UHD, 4 screen", "fas fa-film", 10),
    ("SPOTIFY001", "Spotify Premium", "Akun Spotify Premium Family", "fab fa-spotify", 8),
    ("YOUTUBE001", "YouTube Premium", "YouTube Premium Family", "fab fa-youtube", 5),
    ("DISCORD001", "Discord Nitro", "Discord Nitro 1 Tahun", "fab fa-discord", 3),
    ("STEAM001", "Steam Wallet", "Steam Wallet Code $10", "fab fa-steam", 15),
]

SAMPLE_ACCOUNTS = {
    # product_code -> [(email, password, login_via, notes)]
    "NETFLIX001": [
        ("netflix1@example.com", "netflix123", "Email", "Sample account 1"),
        ("netflix2@example.com", "netflix456", "Email", "Sample account 2"),
        ("netflix3@example.com", "netflix789", "Email", "Sample account 3"),
    ],
    "SPOTIFY001": [
        ("spotify1@example.com", "spotify123", "Email", "Sample account"),
        ("spotify2@example.com", "spotify456", "Email", "Sample account"),
    ],
    "YOUTUBE001": [
        ("youtube1@example.com", "youtube123", "Email", "Sample account"),
    ],
}


def seed_sample_products(db: Session) -> bool:
    """Insert SAMPLE_PRODUCTS if the products table is empty. True if anything was inserted."""
    repo = ProductRepository(db)
    with smart_transaction(db):
        if repo.count() > 0:
            return False
        log.info("Initializing database with sample data...")
        for code, name, description, logo, stock in SAMPLE_PRODUCTS:
            repo.create(code, name, description=description, logo=logo, stock=stock)
    return True


def seed_sample_accounts(db: Session) -> int:
    """Attach SAMPLE_ACCOUNTS to their products. Returns the number of accounts inserted."""
    products = ProductRepository(db)
    accounts = AccountRepository(db)
    created = 0
    with smart_transaction(db):
        for code, entries in SAMPLE_ACCOUNTS.items():
            product = products.get_by_code(code)
            if not product:
                log.warning("sample product %s missing; skipping its accounts", code)
                continue
            for email, password, login_via, notes in entries:
                accounts.create(product.id, email, password, login_via=login_via, notes=notes)
                created += 1
    log.info("Sample data initialization completed (%d accounts)", created)
    return created


def seed_sample_accounts_job() -> None:
    """Scheduler entry point: own session, errors logged rather than raised."""
    db = SessionLocal()
    try:
        seed_sample_accounts(db)
    except SQLAlchemyError:
        log.exception("seeding sample accounts failed")
    finally:
        db.close()
