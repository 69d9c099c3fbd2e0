"""
Import audit log and CSV templates.

GET /api/imports/logs               — recent bulk uploads for the account
GET /api/imports/templates/{kind}   — header row for an orders / returns upload
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..importer import KINDS
from ..models.imports import ImportLog
from ..schemas.imports import ImportLogOut
from .deps import get_account_id

router = APIRouter()


@router.get("/logs", response_model=List[ImportLogOut], summary="Recent bulk imports")
def import_logs(
    limit: int = Query(50, ge=1, le=500),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    return (
        db.query(ImportLog)
        .filter(ImportLog.account_id == account_id)
        .order_by(ImportLog.start_time.desc(), ImportLog.id.desc())
        .limit(limit)
        .all()
    )


@router.get(
    "/templates/{kind}",
    response_class=PlainTextResponse,
    summary="CSV template header for a bulk upload type",
)
def import_template(kind: str):
    import_kind = KINDS.get(kind.lower())
    if import_kind is None:
        raise HTTPException(status_code=404, detail=f"Unknown upload type '{kind}' (expected one of: {', '.join(KINDS)})")
    return PlainTextResponse(
        import_kind.template_header() + "\n",
        headers={"Content-Disposition": f'attachment; filename="{import_kind.name}_template.csv"'},
    )
