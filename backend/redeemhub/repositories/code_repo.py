from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from redeemhub.models.account import Account
from redeemhub.models.product import Product
from redeemhub.models.product_code import ProductCode


class CodeRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists(self, code: str) -> bool:
        return (
            self.db.query(ProductCode.id).filter(ProductCode.code == code).first()
            is not None
        )

    def create(self, code: str, product_id: int, account_id: int) -> ProductCode:
        pc = ProductCode(code=code, product_id=product_id, account_id=account_id, used=False)
        self.db.add(pc)
        self.db.flush()
        return pc

    def list_for_product(self, product_id: int) -> List[dict]:
        """Codes of a product, newest first, with the bound account and product name (outer joins)."""
        rows = (
            self.db.query(
                ProductCode,
                Account.email,
                Account.status.label("account_status"),
                Product.name.label("product_name"),
            )
            .outerjoin(Account, ProductCode.account_id == Account.id)
            .outerjoin(Product, ProductCode.product_id == Product.id)
            .filter(ProductCode.product_id == product_id)
            .order_by(ProductCode.created_at.desc(), ProductCode.id.desc())
            .all()
        )
        out = []
        for pc, email, account_status, product_name in rows:
            d = pc.to_dict()
            d.update(
                {"email": email, "account_status": account_status, "product_name": product_name}
            )
            out.append(d)
        return out

    def find_redeemable(self, code: str) -> Optional[tuple]:
        """
        (ProductCode, Product, Account) for an unused code whose product and
        account both still exist; None otherwise.
        """
        return (
            self.db.query(ProductCode, Product, Account)
            .join(Product, ProductCode.product_id == Product.id)
            .join(Account, ProductCode.account_id == Account.id)
            .filter(ProductCode.code == code, ProductCode.used == False)  # noqa: E712
            .first()
        )

    def mark_used(self, code_id: int, used_at: datetime) -> int:
        """Flip used only if still unused; 0 means someone else redeemed it first."""
        return (
            self.db.query(ProductCode)
            .filter(ProductCode.id == code_id, ProductCode.used == False)  # noqa: E712
            .update({ProductCode.used: True, ProductCode.used_at: used_at})
        )

    def delete_for_product(self, product_id: int) -> int:
        return (
            self.db.query(ProductCode)
            .filter(ProductCode.product_id == product_id)
            .delete(synchronize_session=False)
        )

    def delete_for_account(self, account_id: int) -> int:
        return (
            self.db.query(ProductCode)
            .filter(ProductCode.account_id == account_id)
            .delete(synchronize_session=False)
        )

    def count(self, used: Optional[bool] = None) -> int:
        qry = self.db.query(func.count(ProductCode.id))
        if used is not None:
            qry = qry.filter(ProductCode.used == used)
        return qry.scalar() or 0
