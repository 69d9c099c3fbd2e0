from ..database import Base
from .accounts import Account
from .catalog import Product, ProductVariant
from .sales import Order, Return
from .imports import ImportLog

__all__ = [
    "Base",
    # Tenancy
    "Account",
    # Catalog
    "Product", "ProductVariant",
    # Sales facts
    "Order", "Return",
    # Audit
    "ImportLog",
]
