from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..constants import ALL_PLATFORMS
from ..database import get_db
from ..importer import ORDERS
from ..models.catalog import Product, ProductVariant
from ..models.sales import Order
from ..schemas.imports import ImportResult
from ..schemas.sales import OrderOut, OrderPage
from .deps import get_account_id
from .uploads import process_upload, read_upload

router = APIRouter()


@router.get("", response_model=OrderPage, summary="List orders")
def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=200),
    platform: Optional[str] = Query(None, description=f"One of {', '.join(ALL_PLATFORMS)}, or 'all'"),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    search: Optional[str] = Query(None, description="Matches variant SKU or product name"),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    q = (
        db.query(
            Order.id,
            Order.external_order_id,
            Order.order_date,
            Order.platform,
            Order.quantity,
            Order.selling_price,
            Order.total_amount,
            Order.created_at,
            ProductVariant.variant_sku,
            Product.product_name,
        )
        .outerjoin(ProductVariant, Order.variant_id == ProductVariant.id)
        .outerjoin(Product, ProductVariant.product_id == Product.id)
        .filter(Order.account_id == account_id, Order.is_deleted.is_(False))
    )
    if platform and platform.lower() != "all":
        q = q.filter(func.lower(Order.platform) == platform.lower())
    if from_date:
        q = q.filter(Order.order_date >= from_date)
    if to_date:
        q = q.filter(Order.order_date <= to_date)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(ProductVariant.variant_sku.ilike(pattern), Product.product_name.ilike(pattern)))

    total = q.order_by(None).count()
    rows = (
        q.order_by(Order.order_date.desc(), Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return OrderPage(
        data=[OrderOut.model_validate(r) for r in rows],
        total_rows=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/bulk-upload",
    response_model=ImportResult,
    summary="Bulk import orders from CSV",
    description=(
        "Required columns: external_order_id, order_date, platform, variant_sku, quantity, selling_price. "
        "Duplicate order ids, unknown SKUs and rows exceeding available stock are reported per row; "
        "accepted rows are inserted and their stock deducted in one transaction."
    ),
)
async def bulk_upload_orders(
    file: Optional[UploadFile] = File(None, description="Orders CSV"),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    content, filename = await read_upload(file)
    return process_upload(db, ORDERS, account_id, content, filename)
