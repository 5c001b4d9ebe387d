from typing import Optional

from pydantic import BaseModel


class LoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
