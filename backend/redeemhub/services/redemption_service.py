import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from redeemhub.config import settings
from redeemhub.exceptions import (
    CodeGenerationError,
    InsufficientAccountsError,
    InvalidCodeError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from redeemhub.models.account import STATUS_RESERVED, STATUS_USED, Account
from redeemhub.models.product import Product
from redeemhub.models.product_code import ProductCode
from redeemhub.repositories.account_repo import AccountRepository
from redeemhub.repositories.code_repo import CodeRepository
from redeemhub.repositories.product_repo import ProductRepository
from redeemhub.utils.codes import code_prefix, generate_short_code
from redeemhub.utils.locks import resource_lock
from redeemhub.utils.transactions import savepoint, smart_transaction

log = logging.getLogger("redeemhub.redemption")


class RedemptionService:
    """
    Account/code lifecycle: available --generate--> reserved --redeem--> used.

    Generation reserves an account without touching stock; redemption is the
    step that removes the unit from stock.
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.accounts = AccountRepository(db)
        self.codes = CodeRepository(db)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _require_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _mint_code(self, prefix: str, product_id: int, account_id: int) -> ProductCode:
        """
        Insert a fresh code, retrying up to CODE_MAX_ATTEMPTS times.

        Prefixes are shared across products, so a code can still be taken by a
        concurrent insert after the existence check; the unique index rejects
        it and the attempt is retried.
        """
        for attempt in range(1, settings.CODE_MAX_ATTEMPTS + 1):
            code = generate_short_code(prefix)
            if self.codes.exists(code):
                log.debug("code collision on attempt %d: %s", attempt, code)
                continue
            try:
                with savepoint(self.db):
                    return self.codes.create(code, product_id, account_id)
            except IntegrityError:
                log.debug("code %s taken concurrently on attempt %d", code, attempt)
        raise CodeGenerationError(settings.CODE_MAX_ATTEMPTS)

    def _reserve(self, account: Account, prefix: str) -> Dict:
        pc = self._mint_code(prefix, account.product_id, account.id)
        self.accounts.set_status(account.id, STATUS_RESERVED)
        return {"code": pc.code, "code_id": pc.id, "account_id": account.id, "email": account.email}

    def generate_code(
        self, product_id: int, account_id: int, custom_prefix: Optional[str] = None
    ) -> Dict:
        """Mint one code bound to an available account of the product and reserve it."""
        with resource_lock(f"product_{product_id}"):
            with smart_transaction(self.db):
                product = self._require_product(product_id)
                account = self.accounts.get_available_for_product(account_id, product_id)
                if not account:
                    raise NotFoundError("Account not found or not available")
                result = self._reserve(account, code_prefix(product.product_code, custom_prefix))
        log.info("generated code %s for account=%s", result["code"], account_id)
        return result

    def generate_codes_batch(
        self, product_id: int, count: int, custom_prefix: Optional[str] = None
    ) -> List[Dict]:
        """
        Reserve `count` available accounts, one code each, all-or-nothing.

        Raises InsufficientAccountsError (no side effects) when fewer than
        `count` accounts are available. Any failure part-way through rolls
        back the whole batch.
        """
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            raise ValidationError("count must be a positive integer")

        with resource_lock(f"product_{product_id}"):
            with smart_transaction(self.db):
                product = self._require_product(product_id)
                available = self.accounts.list_available(product_id, count)
                if len(available) < count:
                    raise InsufficientAccountsError(len(available), count)
                prefix = code_prefix(product.product_code, custom_prefix)
                generated = [self._reserve(account, prefix) for account in available]
        log.info("generated %d codes for product=%s", len(generated), product_id)
        return [
            {"code": g["code"], "account_id": g["account_id"], "email": g["email"]}
            for g in generated
        ]

    def list_codes(self, product_id: int) -> List[dict]:
        with smart_transaction(self.db):
            return self.codes.list_for_product(product_id)

    def redeem(self, code: str) -> Dict:
        """
        Exchange an unused code for its account credentials.

        Marking the code used, the account used and decrementing stock happen
        in one transaction; a storage failure rolls all three back and is
        re-raised as StorageError with the original message.
        """
        code = (code or "").strip()
        if not code:
            raise InvalidCodeError(code)

        with resource_lock(f"code_{code}"):
            try:
                with smart_transaction(self.db):
                    row = self.codes.find_redeemable(code)
                    if not row:
                        raise InvalidCodeError(code)
                    pc, product, account = row
                    if not self.codes.mark_used(pc.id, self._now()):
                        raise InvalidCodeError(code)
                    self.accounts.set_status(account.id, STATUS_USED)
                    self.products.adjust_stock(product.id, -1)
                    credentials = {
                        "email": account.email,
                        "password": account.password,
                        "login_via": account.login_via,
                        "product": product.name,
                    }
            except SQLAlchemyError as e:
                log.exception("redemption of %s rolled back", code)
                raise StorageError(str(e)) from e
        log.info("redeemed code %s (product=%s account=%s)", code, product.id, account.id)
        return credentials
