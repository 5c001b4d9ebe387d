from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from redeemhub.db import get_db
from redeemhub.exceptions import RedeemError
from redeemhub.schemas.code_schema import GenerateCodeIn, GenerateCodesIn, RedeemIn
from redeemhub.services.redemption_service import RedemptionService

router = APIRouter(prefix="/api", tags=["codes"])


@router.post("/codes/generate", summary="Mint a code for one available account")
def generate_code(payload: GenerateCodeIn, db: Session = Depends(get_db)):
    try:
        r = RedemptionService(db).generate_code(
            payload.product_id, payload.account_id, custom_prefix=payload.custom_prefix
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "code": r["code"], "codeId": r["code_id"]}


@router.post("/codes/generate-multiple", summary="Mint codes for several available accounts")
def generate_codes(payload: GenerateCodesIn, db: Session = Depends(get_db)):
    try:
        codes = RedemptionService(db).generate_codes_batch(
            payload.product_id, payload.count, custom_prefix=payload.custom_prefix
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "codes": codes}


@router.get("/codes/{product_id}", summary="List codes of a product")
def list_codes(product_id: int, db: Session = Depends(get_db)):
    return RedemptionService(db).list_codes(product_id)


@router.post("/redeem", summary="Redeem a code for account credentials")
def redeem(payload: RedeemIn, db: Session = Depends(get_db)):
    try:
        account = RedemptionService(db).redeem(payload.code)
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "account": account}
