from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel


class DashboardSummary(BaseModel):
    total_units: int
    gross_revenue: Decimal
    returned_units: int
    return_rate: float          # returned units / units sold × 100


class PlatformPerformance(BaseModel):
    platform: str
    total_units: int
    total_revenue: Decimal


class TopVariant(BaseModel):
    product_name: str
    variant_sku: str
    total_units_sold: int
    total_revenue: Decimal


class DailyOrdersReturns(BaseModel):
    day: date
    day_label: str              # Mon, Tue, ...
    total_orders: int
    total_returns: int


class DashboardOut(BaseModel):
    summary: DashboardSummary
    platform_performance: List[PlatformPerformance]
    top_selling: List[TopVariant]
    orders_vs_returns: List[DailyOrdersReturns]
