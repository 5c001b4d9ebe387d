from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from redeemhub.models.message import ROLE_USER, STATUS_READ, STATUS_UNREAD, Message


class MessageRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, username: str, message: str, role: str) -> Message:
        m = Message(user_id=user_id, username=username, message=message, role=role)
        self.db.add(m)
        self.db.flush()
        return m

    def list(self, user_id: Optional[str] = None, limit: int = 50) -> List[Message]:
        qry = self.db.query(Message)
        if user_id:
            qry = qry.filter(Message.user_id == user_id)
        return (
            qry.order_by(Message.created_at.desc(), Message.id.desc()).limit(limit).all()
        )

    def count_unread_from_users(self) -> int:
        return (
            self.db.query(func.count(Message.id))
            .filter(Message.status == STATUS_UNREAD, Message.role == ROLE_USER)
            .scalar()
            or 0
        )

    def mark_read(self, message_id: int) -> int:
        return (
            self.db.query(Message)
            .filter(Message.id == message_id)
            .update({Message.status: STATUS_READ})
        )
