from decimal import Decimal
from pydantic import BaseModel


class VariantStockOut(BaseModel):
    variant_id: int
    variant_sku: str
    product_id: int
    product_name: str
    stock: int
    low_stock_threshold: int
    is_low_stock: bool


class InventoryValue(BaseModel):
    total_value: Decimal        # Σ stock × product cost price
    total_units: int
    unpriced_variants: int      # in-stock variants whose product has no cost price
