"""
Shared constants for MarketDesk.
Used by the import pipeline, the API and the CLI scripts.
"""

# ---------------------------------------------------------------------------
# Marketplaces (must match `orders.platform` / `returns.platform` in DB)
# ---------------------------------------------------------------------------
PLATFORM_MEESHO   = "Meesho"
PLATFORM_FLIPKART = "Flipkart"
PLATFORM_AMAZON   = "Amazon"

ALL_PLATFORMS = [
    PLATFORM_MEESHO,
    PLATFORM_FLIPKART,
    PLATFORM_AMAZON,
]

# ---------------------------------------------------------------------------
# Return types
# ---------------------------------------------------------------------------
RETURN_TYPE_RTO             = "RTO"               # returned to origin, never delivered
RETURN_TYPE_DTO             = "DTO"               # delivered, then sent back
RETURN_TYPE_CUSTOMER_RETURN = "CUSTOMER_RETURN"
RETURN_TYPE_EXCHANGE        = "EXCHANGE"
RETURN_TYPE_OTHER           = "OTHER"

ALL_RETURN_TYPES = [
    RETURN_TYPE_RTO,
    RETURN_TYPE_DTO,
    RETURN_TYPE_CUSTOMER_RETURN,
    RETURN_TYPE_EXCHANGE,
    RETURN_TYPE_OTHER,
]

# ---------------------------------------------------------------------------
# Bulk upload CSV columns (header names, lower-case)
# ---------------------------------------------------------------------------
ORDER_CSV_COLUMNS = [
    "external_order_id",
    "order_date",
    "platform",
    "variant_sku",
    "quantity",
    "selling_price",
]

RETURN_CSV_COLUMNS = [
    "external_return_id",
    "return_date",
    "platform",
    "variant_sku",
    "quantity",
    "refund_amount",
    "return_type",
    "return_reason",
]

# Optional on returns uploads; rows default to restockable when absent or blank
RETURN_OPTIONAL_COLUMNS = ["restockable"]

# ---------------------------------------------------------------------------
# Import log source types / statuses
# ---------------------------------------------------------------------------
SOURCE_ORDERS_CSV  = "orders_csv"
SOURCE_RETURNS_CSV = "returns_csv"

IMPORT_STATUS_SUCCESS = "success"
IMPORT_STATUS_FAILED  = "failed"

DEFAULT_LOW_STOCK_THRESHOLD = 5
