from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from redeemhub.db import get_db
from redeemhub.exceptions import RedeemError
from redeemhub.schemas.catalog_schema import AccountCreateIn, BulkAccountsIn, ImportAccountsIn
from redeemhub.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.post("", summary="Add one account to a product")
def create_account(payload: AccountCreateIn, db: Session = Depends(get_db)):
    try:
        a = CatalogService(db).create_account(
            payload.product_id,
            payload.email,
            payload.password,
            login_via=payload.login_via,
            notes=payload.notes,
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "accountId": a.id}


@router.post("/bulk", summary="Add many accounts")
def bulk_create(payload: BulkAccountsIn, db: Session = Depends(get_db)):
    """
    payload: { "product_id": 1, "accounts": [{"email": ..., "password": ..., "login_via": ...}] }
    """
    try:
        result = CatalogService(db).bulk_create_accounts(
            payload.product_id, [a.model_dump() for a in payload.accounts]
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, **result}


@router.post("/import", summary="Import accounts from email|password|loginVia lines")
def import_accounts(payload: ImportAccountsIn, db: Session = Depends(get_db)):
    try:
        result = CatalogService(db).import_accounts_from_text(payload.product_id, payload.text)
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, **result}


@router.delete("/{account_id}", summary="Delete account")
def delete_account(account_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_account(account_id)
    return {"success": True}
