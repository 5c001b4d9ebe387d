from typing import Optional

from pydantic import BaseModel


class MessageIn(BaseModel):
    message: str
    user_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
