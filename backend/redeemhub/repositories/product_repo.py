from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from redeemhub.models.account import STATUS_AVAILABLE, STATUS_USED, Account
from redeemhub.models.product import DEFAULT_LOGO, Product


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _available_accounts(self):
        return (
            self.db.query(func.count(Account.id))
            .filter(Account.product_id == Product.id, Account.status == STATUS_AVAILABLE)
            .correlate(Product)
            .scalar_subquery()
            .label("available_accounts")
        )

    def list_with_availability(self) -> List[Tuple[Product, int]]:
        """All products, newest first, each paired with its available account count."""
        rows = (
            self.db.query(Product, self._available_accounts())
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )
        return [(p, int(n or 0)) for p, n in rows]

    def get_with_availability(self, product_id: int) -> Optional[Tuple[Product, int]]:
        row = (
            self.db.query(Product, self._available_accounts())
            .filter(Product.id == product_id)
            .first()
        )
        if not row:
            return None
        return row[0], int(row[1] or 0)

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_code(self, product_code: str) -> Optional[Product]:
        return (
            self.db.query(Product).filter(Product.product_code == product_code).first()
        )

    def create(
        self,
        product_code: str,
        name: str,
        description: str = None,
        logo: str = None,
        stock: int = 0,
    ) -> Product:
        p = Product(
            product_code=product_code,
            name=name,
            description=description,
            logo=logo or DEFAULT_LOGO,
            stock=stock or 0,
        )
        self.db.add(p)
        self.db.flush()
        return p

    def update(self, product_id: int, name, description, logo, stock) -> int:
        return (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .update(
                {
                    Product.name: name,
                    Product.description: description,
                    Product.logo: logo,
                    Product.stock: stock,
                }
            )
        )

    def adjust_stock(self, product_id: int, delta: int) -> int:
        """stock = stock + delta, as one UPDATE so concurrent writers do not lose updates."""
        if not delta:
            return 0
        return (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .update({Product.stock: Product.stock + delta})
        )

    def set_stock(self, product_id: int, stock: int) -> int:
        return (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .update({Product.stock: stock})
        )

    def delete(self, product_id: int) -> int:
        return (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .delete(synchronize_session=False)
        )

    def stock_snapshot(self) -> List[Tuple[int, int, int]]:
        """(product_id, cached stock, count of non-used accounts) for every product."""
        not_used = (
            self.db.query(func.count(Account.id))
            .filter(Account.product_id == Product.id, Account.status != STATUS_USED)
            .correlate(Product)
            .scalar_subquery()
        )
        return [
            (pid, int(stock or 0), int(n or 0))
            for pid, stock, n in self.db.query(Product.id, Product.stock, not_used).all()
        ]

    def count(self) -> int:
        return self.db.query(func.count(Product.id)).scalar() or 0
