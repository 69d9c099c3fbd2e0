from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.accounts import Account


def get_account_id(
    x_account_id: Optional[int] = Header(None, description="Tenant (account) id"),
    db: Session = Depends(get_db),
) -> int:
    """Resolve the request's tenant from the X-Account-Id header."""
    if x_account_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Account context missing")
    if db.get(Account, x_account_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Account {x_account_id} not found")
    return x_account_id
