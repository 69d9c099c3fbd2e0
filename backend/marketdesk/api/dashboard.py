from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.dashboard import DashboardOut
from ..utils.aggregation import orders_vs_returns, platform_performance, sales_summary, top_variants
from .deps import get_account_id

router = APIRouter()


@router.get("", response_model=DashboardOut, summary="Sales dashboard rollups")
def dashboard(
    as_of: Optional[date] = Query(None, description="Last day of the 7-day window (default: today)"),
    account_id: int = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    return {
        "summary": sales_summary(db, account_id),
        "platform_performance": platform_performance(db, account_id),
        "top_selling": top_variants(db, account_id),
        "orders_vs_returns": orders_vs_returns(db, account_id, as_of or date.today()),
    }
