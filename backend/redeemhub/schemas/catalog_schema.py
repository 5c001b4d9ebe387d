from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreateIn(BaseModel):
    product_code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    logo: Optional[str] = None
    stock: Optional[int] = 0


class ProductUpdateIn(BaseModel):
    # full overwrite: every mutable field is sent
    name: str
    description: Optional[str] = None
    logo: Optional[str] = None
    stock: int = 0


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_code: str
    name: str
    description: Optional[str] = None
    logo: Optional[str] = None
    stock: int
    created_at: Optional[str] = None
    available_accounts: int = 0


class AccountCreateIn(BaseModel):
    product_id: int
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    login_via: Optional[str] = None
    notes: Optional[str] = None


class BulkAccountEntry(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    login_via: Optional[str] = None
    notes: Optional[str] = None


class BulkAccountsIn(BaseModel):
    product_id: int
    accounts: List[BulkAccountEntry] = []


class ImportAccountsIn(BaseModel):
    product_id: int
    text: str = ""
