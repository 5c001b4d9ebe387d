from datetime import datetime, timezone
from typing import Dict

from sqlalchemy import text
from sqlalchemy.orm import Session

from redeemhub.models.account import STATUS_AVAILABLE
from redeemhub.repositories.account_repo import AccountRepository
from redeemhub.repositories.code_repo import CodeRepository
from redeemhub.repositories.product_repo import ProductRepository
from redeemhub.utils.transactions import smart_transaction


class StatsService:
    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.accounts = AccountRepository(db)
        self.codes = CodeRepository(db)

    def stats(self) -> Dict[str, int]:
        with smart_transaction(self.db):
            return {
                "products": self.products.count(),
                "totalAccounts": self.accounts.count(),
                "availableAccounts": self.accounts.count(status=STATUS_AVAILABLE),
                "totalCodes": self.codes.count(),
                "usedCodes": self.codes.count(used=True),
            }

    def health(self) -> Dict:
        """Probe the database and report table sizes. Storage errors propagate."""
        with smart_transaction(self.db):
            self.db.execute(text("SELECT 1"))
            counts = {
                "products": self.products.count(),
                "accounts": self.accounts.count(),
                "codes": self.codes.count(),
            }
        return {
            "status": "healthy",
            "database": "connected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "stats": counts,
        }
