from typing import List, Optional

from sqlalchemy.orm import Session

from redeemhub.config import settings
from redeemhub.exceptions import ValidationError
from redeemhub.models.message import ROLE_USER, Message
from redeemhub.repositories.message_repo import MessageRepository
from redeemhub.utils.transactions import smart_transaction


class MessageService:
    """Append-only message log between users and the admin."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MessageRepository(db)

    def post_message(
        self,
        message: str,
        user_id: Optional[str] = None,
        username: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Message:
        if not message or not message.strip():
            raise ValidationError("message is required")
        with smart_transaction(self.db):
            return self.repo.create(
                user_id or "anonymous", username or "User", message, role or ROLE_USER
            )

    def list_messages(self, user_id: Optional[str] = None) -> List[Message]:
        with smart_transaction(self.db):
            return self.repo.list(user_id=user_id, limit=settings.MESSAGES_LIMIT)

    def unread_count(self) -> int:
        # admin-authored messages never count towards the badge
        with smart_transaction(self.db):
            return self.repo.count_unread_from_users()

    def mark_read(self, message_id: int) -> None:
        with smart_transaction(self.db):
            self.repo.mark_read(message_id)
