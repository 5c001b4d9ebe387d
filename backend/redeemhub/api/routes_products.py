from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from redeemhub.db import get_db
from redeemhub.exceptions import RedeemError
from redeemhub.schemas.catalog_schema import ProductCreateIn, ProductOut, ProductUpdateIn
from redeemhub.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products", tags=["catalogue"])


@router.get("", summary="List products with available account counts")
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_products()


@router.get("/{product_id}", summary="Get product")
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        p = CatalogService(db).get_product(product_id)
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ProductOut.model_validate(p).model_dump()


@router.post("", summary="Create product")
def create_product(payload: ProductCreateIn, db: Session = Depends(get_db)):
    try:
        p = CatalogService(db).create_product(
            payload.product_code,
            payload.name,
            description=payload.description,
            logo=payload.logo,
            stock=payload.stock,
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True, "productId": p.id}


@router.put("/{product_id}", summary="Overwrite product fields")
def update_product(product_id: int, payload: ProductUpdateIn, db: Session = Depends(get_db)):
    try:
        CatalogService(db).update_product(
            product_id, payload.name, payload.description, payload.logo, payload.stock
        )
    except RedeemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"success": True}


@router.delete("/{product_id}", summary="Delete product with its accounts and codes")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_product(product_id)
    return {"success": True}


@router.get("/{product_id}/accounts", summary="List accounts of a product")
def list_accounts(product_id: int, db: Session = Depends(get_db)):
    return [a.to_dict() for a in CatalogService(db).list_accounts(product_id)]


@router.get("/{product_id}/available-accounts", summary="List available accounts of a product")
def list_available_accounts(product_id: int, db: Session = Depends(get_db)):
    accounts = CatalogService(db).list_accounts(product_id, only_available=True)
    return [a.to_dict() for a in accounts]
