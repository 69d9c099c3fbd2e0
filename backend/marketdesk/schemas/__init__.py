from .imports import ImportRowError, ImportResult, ImportLogOut
from .sales import OrderOut, OrderPage, ReturnOut
from .inventory import VariantStockOut, InventoryValue
from .dashboard import DashboardOut, DashboardSummary, PlatformPerformance, TopVariant, DailyOrdersReturns

__all__ = [
    "ImportRowError", "ImportResult", "ImportLogOut",
    "OrderOut", "OrderPage", "ReturnOut",
    "VariantStockOut", "InventoryValue",
    "DashboardOut", "DashboardSummary", "PlatformPerformance", "TopVariant", "DailyOrdersReturns",
]
