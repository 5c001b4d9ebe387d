from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from redeemhub.models.account import STATUS_AVAILABLE, Account


class AccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_product(self, product_id: int, only_available: bool = False) -> List[Account]:
        qry = self.db.query(Account).filter(Account.product_id == product_id)
        if only_available:
            qry = qry.filter(Account.status == STATUS_AVAILABLE)
        return qry.order_by(Account.status, Account.id).all()

    def list_available(self, product_id: int, limit: int) -> List[Account]:
        return (
            self.db.query(Account)
            .filter(Account.product_id == product_id, Account.status == STATUS_AVAILABLE)
            .order_by(Account.id)
            .limit(limit)
            .all()
        )

    def get(self, account_id: int) -> Optional[Account]:
        return self.db.query(Account).filter(Account.id == account_id).first()

    def get_available_for_product(self, account_id: int, product_id: int) -> Optional[Account]:
        return (
            self.db.query(Account)
            .filter(
                Account.id == account_id,
                Account.product_id == product_id,
                Account.status == STATUS_AVAILABLE,
            )
            .first()
        )

    def create(
        self,
        product_id: int,
        email: str,
        password: str,
        login_via: str = None,
        notes: str = None,
    ) -> Account:
        a = Account(
            product_id=product_id,
            email=email,
            password=password,
            login_via=login_via or "Email",
            notes=notes or "",
            status=STATUS_AVAILABLE,
        )
        self.db.add(a)
        self.db.flush()
        return a

    def set_status(self, account_id: int, status: str) -> int:
        return (
            self.db.query(Account)
            .filter(Account.id == account_id)
            .update({Account.status: status})
        )

    def delete(self, account_id: int) -> int:
        return (
            self.db.query(Account)
            .filter(Account.id == account_id)
            .delete(synchronize_session=False)
        )

    def delete_for_product(self, product_id: int) -> int:
        return (
            self.db.query(Account)
            .filter(Account.product_id == product_id)
            .delete(synchronize_session=False)
        )

    def count(self, status: Optional[str] = None) -> int:
        qry = self.db.query(func.count(Account.id))
        if status:
            qry = qry.filter(Account.status == status)
        return qry.scalar() or 0
