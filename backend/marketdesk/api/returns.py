from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ..database import get_db
from ..importer import RETURNS
from ..models.catalog import ProductVariant
from ..models.sales import Return
from ..schemas.imports import ImportResult
from ..schemas.sales import ReturnOut
from .deps import get_account_id
from .uploads import process_upload, read_upload

router = APIRouter()


@router.get("", response_model=List[ReturnOut], summary="List returns")
def list_returns(
    limit: int = Query(500, ge=1, le=5000),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(
            Return.id,
            Return.external_return_id,
            Return.return_date,
            Return.platform,
            Return.quantity,
            Return.refund_amount,
            Return.return_type,
            Return.return_reason,
            Return.restockable,
            Return.created_at,
            ProductVariant.variant_sku,
        )
        .outerjoin(ProductVariant, Return.variant_id == ProductVariant.id)
        .filter(Return.account_id == account_id, Return.is_deleted.is_(False))
        .order_by(Return.created_at.desc(), Return.id.desc())
        .limit(limit)
        .all()
    )
    return [ReturnOut.model_validate(r) for r in rows]


@router.post(
    "/bulk-upload",
    response_model=ImportResult,
    summary="Bulk import returns from CSV",
    description=(
        "Required columns: external_return_id, return_date, platform, variant_sku, quantity, "
        "refund_amount, return_type, return_reason. Optional: restockable (default true). "
        "Restockable returns add their quantity back to the variant's stock."
    ),
)
async def bulk_upload_returns(
    file: Optional[UploadFile] = File(None, description="Returns CSV"),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    content, filename = await read_upload(file)
    return process_upload(db, RETURNS, account_id, content, filename)
