from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel


class OrderOut(BaseModel):
    id: int
    external_order_id: Optional[str]
    order_date: date
    platform: str
    quantity: int
    selling_price: Decimal
    total_amount: Decimal
    variant_sku: Optional[str]
    product_name: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class OrderPage(BaseModel):
    data: List[OrderOut]
    total_rows: int
    page: int
    page_size: int


class ReturnOut(BaseModel):
    id: int
    external_return_id: Optional[str]
    return_date: date
    platform: str
    quantity: int
    refund_amount: Decimal
    return_type: Optional[str]
    return_reason: Optional[str]
    restockable: bool
    variant_sku: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
