from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.catalog import Product, ProductVariant
from ..schemas.inventory import InventoryValue, VariantStockOut
from ..utils.aggregation import inventory_value
from .deps import get_account_id

router = APIRouter()


@router.get("", response_model=List[VariantStockOut], summary="Stock per variant")
def current_inventory(
    low_stock_only: bool = Query(False),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    q = (
        db.query(ProductVariant, Product.product_name)
        .join(Product, ProductVariant.product_id == Product.id)
        .filter(ProductVariant.account_id == account_id)
    )
    if low_stock_only:
        q = q.filter(ProductVariant.stock <= ProductVariant.low_stock_threshold)
    rows = q.order_by(ProductVariant.stock.asc(), ProductVariant.variant_sku.asc()).all()
    return [
        VariantStockOut(
            variant_id=v.id,
            variant_sku=v.variant_sku,
            product_id=v.product_id,
            product_name=product_name,
            stock=v.stock,
            low_stock_threshold=v.low_stock_threshold,
            is_low_stock=v.stock <= v.low_stock_threshold,
        )
        for v, product_name in rows
    ]


@router.get("/value", response_model=InventoryValue, summary="Inventory value at cost")
def current_inventory_value(
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    return InventoryValue(**inventory_value(db, account_id))
