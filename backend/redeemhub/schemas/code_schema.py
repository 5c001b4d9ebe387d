from typing import Optional

from pydantic import BaseModel


class GenerateCodeIn(BaseModel):
    product_id: int
    account_id: int
    custom_prefix: Optional[str] = None


class GenerateCodesIn(BaseModel):
    product_id: int
    count: int
    custom_prefix: Optional[str] = None


class RedeemIn(BaseModel):
    code: str
