from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from redeemhub.db import get_db
from redeemhub.exceptions import RedeemError
from redeemhub.schemas.message_schema import MessageIn
from redeemhub.services.message_service import MessageService

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", summary="Post a message")
def post_message(payload: MessageIn, db: Session = Depends(get_db)):
    try:
        m = MessageService(db).post_message(
            payload.message,
            user_id=payload.user_id,
            username=payload.username,
            role=payload.role,
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "messageId": m.id}


@router.get("", summary="List latest messages")
def list_messages(user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return [m.to_dict() for m in MessageService(db).list_messages(user_id=user_id)]


@router.get("/unread/count", summary="Unread messages from users")
def unread_count(db: Session = Depends(get_db)):
    return {"count": MessageService(db).unread_count()}


@router.put("/{message_id}/read", summary="Mark message read")
def mark_read(message_id: int, db: Session = Depends(get_db)):
    MessageService(db).mark_read(message_id)
    return {"success": True}
