import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from redeemhub.exceptions import DuplicateError, NotFoundError
from redeemhub.models.account import STATUS_USED, Account
from redeemhub.models.product import Product
from redeemhub.repositories.account_repo import AccountRepository
from redeemhub.repositories.code_repo import CodeRepository
from redeemhub.repositories.product_repo import ProductRepository
from redeemhub.utils.transactions import savepoint, smart_transaction

log = logging.getLogger("redeemhub.catalog")


def parse_account_lines(text: str) -> Tuple[List[Tuple[str, str, str]], int]:
    """
    Parse "email|password|loginVia" records, one per line.

    Blank lines are ignored. Lines with fewer than two fields, or with an
    empty email or password, are counted as failed. Returns (records, failed).
    """
    records = []
    failed = 0
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        parts = [p.strip() for p in line.split("|")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            failed += 1
            continue
        login_via = parts[2] if len(parts) > 2 and parts[2] else "Email"
        records.append((parts[0], parts[1], login_via))
    return records, failed


def _product_dict(product: Product, available: int) -> dict:
    d = product.to_dict()
    d["available_accounts"] = available
    return d


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.accounts = AccountRepository(db)
        self.codes = CodeRepository(db)

    # -- products ---------------------------------------------------------

    def list_products(self) -> List[dict]:
        with smart_transaction(self.db):
            rows = self.products.list_with_availability()
        return [_product_dict(p, n) for p, n in rows]

    def get_product(self, product_id: int) -> dict:
        with smart_transaction(self.db):
            row = self.products.get_with_availability(product_id)
        if not row:
            raise NotFoundError("Product not found")
        return _product_dict(*row)

    def create_product(
        self,
        product_code: str,
        name: str,
        description: Optional[str] = None,
        logo: Optional[str] = None,
        stock: Optional[int] = 0,
    ) -> Product:
        try:
            with smart_transaction(self.db):
                if self.products.get_by_code(product_code):
                    raise DuplicateError("product_code", product_code)
                p = self.products.create(
                    product_code, name, description=description, logo=logo, stock=stock
                )
        except IntegrityError as e:
            # lost a race with a concurrent insert of the same code
            raise DuplicateError("product_code", product_code) from e
        log.info("created product %s (id=%s)", p.product_code, p.id)
        return p

    def update_product(
        self,
        product_id: int,
        name: str,
        description: Optional[str],
        logo: Optional[str],
        stock: int,
    ) -> None:
        with smart_transaction(self.db):
            if not self.products.update(product_id, name, description, logo, stock):
                raise NotFoundError("Product not found")

    def delete_product(self, product_id: int) -> None:
        """Delete the product together with its codes and accounts."""
        with smart_transaction(self.db):
            codes = self.codes.delete_for_product(product_id)
            accounts = self.accounts.delete_for_product(product_id)
            deleted = self.products.delete(product_id)
        if deleted:
            log.info(
                "deleted product id=%s (%d accounts, %d codes)", product_id, accounts, codes
            )

    # -- accounts ---------------------------------------------------------

    def list_accounts(self, product_id: int, only_available: bool = False) -> List[Account]:
        with smart_transaction(self.db):
            return self.accounts.list_for_product(product_id, only_available=only_available)

    def _require_product(self, product_id: int) -> Product:
        p = self.products.get(product_id)
        if not p:
            raise NotFoundError("Product not found")
        return p

    def create_account(
        self,
        product_id: int,
        email: str,
        password: str,
        login_via: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Account:
        with smart_transaction(self.db):
            self._require_product(product_id)
            a = self.accounts.create(product_id, email, password, login_via, notes)
            self.products.adjust_stock(product_id, 1)
        return a

    def _insert_many(self, product_id: int, records: Iterable[tuple]) -> Tuple[int, int]:
        added = failed = 0
        for email, password, login_via, notes in records:
            try:
                with savepoint(self.db):
                    self.accounts.create(product_id, email, password, login_via, notes)
                added += 1
            except SQLAlchemyError:
                log.warning("account insert failed for %s", email, exc_info=True)
                failed += 1
        self.products.adjust_stock(product_id, added)
        return added, failed

    def bulk_create_accounts(self, product_id: int, accounts: List[dict]) -> Dict[str, int]:
        """
        Insert every entry that has both email and password; stock grows by
        the number actually inserted. Entries missing either field count as failed.
        """
        records = []
        skipped = 0
        for acc in accounts or []:
            if acc.get("email") and acc.get("password"):
                records.append(
                    (acc["email"], acc["password"], acc.get("login_via"), acc.get("notes"))
                )
            else:
                skipped += 1
        with smart_transaction(self.db):
            self._require_product(product_id)
            added, failed = self._insert_many(product_id, records)
        log.info("bulk import product=%s added=%d failed=%d", product_id, added, failed + skipped)
        return {"added": added, "failed": failed + skipped}

    def import_accounts_from_text(self, product_id: int, text: str) -> Dict[str, int]:
        parsed, bad_lines = parse_account_lines(text)
        with smart_transaction(self.db):
            self._require_product(product_id)
            imported, failed = self._insert_many(
                product_id, ((e, p, via, None) for e, p, via in parsed)
            )
        log.info(
            "text import product=%s imported=%d failed=%d",
            product_id,
            imported,
            failed + bad_lines,
        )
        return {"imported": imported, "failed": failed + bad_lines}

    def delete_account(self, account_id: int) -> None:
        """
        Remove an account and the codes bound to it. Stock only shrinks for
        accounts that were still counted in it (not yet used). A missing
        account is a no-op.
        """
        with smart_transaction(self.db):
            a = self.accounts.get(account_id)
            if not a:
                return
            if a.status != STATUS_USED:
                self.products.adjust_stock(a.product_id, -1)
            self.codes.delete_for_account(account_id)
            self.accounts.delete(account_id)

    # -- stock ------------------------------------------------------------

    def reconcile_stock(self) -> Dict[int, int]:
        """
        Recompute every product's cached stock as its count of non-used
        accounts. Returns {product_id: new_stock} for the products that drifted.
        """
        changed = {}
        with smart_transaction(self.db):
            for product_id, cached, actual in self.products.stock_snapshot():
                if cached != actual:
                    self.products.set_stock(product_id, actual)
                    changed[product_id] = actual
        if changed:
            log.warning("stock drift corrected for products %s", sorted(changed))
        return changed
