from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from redeemhub.db import Base

DEFAULT_LOGO = "fas fa-box"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_code = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    logo = Column(String(128), nullable=True, default=DEFAULT_LOGO)
    # cached count of non-used accounts, maintained by CatalogService/RedemptionService
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id": self.id,
            "product_code": self.product_code,
            "name": self.name,
            "description": self.description,
            "logo": self.logo,
            "stock": self.stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Product code={self.product_code} name={self.name}>"
