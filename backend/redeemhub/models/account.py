from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from redeemhub.db import Base

STATUS_AVAILABLE = "available"
STATUS_RESERVED = "reserved"
STATUS_USED = "used"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    email = Column(String(256), nullable=False)
    password = Column(String(256), nullable=False)  # stored in clear text
    login_via = Column(String(64), nullable=True, default="Email")
    status = Column(
        String(32), nullable=False, default=STATUS_AVAILABLE
    )  # available -> reserved -> used
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "email": self.email,
            "password": self.password,
            "login_via": self.login_via,
            "status": self.status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
