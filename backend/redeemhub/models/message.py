from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from redeemhub.db import Base

STATUS_UNREAD = "unread"
STATUS_READ = "read"
ROLE_USER = "user"


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=True, index=True)
    username = Column(String(128), nullable=True)
    message = Column(Text, nullable=False)
    role = Column(String(32), nullable=True, default=ROLE_USER)
    replied_to = Column(Integer, nullable=True)  # not used by any flow yet
    status = Column(String(16), nullable=False, default=STATUS_UNREAD)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "message": self.message,
            "role": self.role,
            "replied_to": self.replied_to,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
