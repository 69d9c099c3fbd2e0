"""
Column layout and behaviour of each bulk upload type.
"""
from dataclasses import dataclass

from ..constants import (
    ORDER_CSV_COLUMNS,
    RETURN_CSV_COLUMNS,
    RETURN_OPTIONAL_COLUMNS,
    SOURCE_ORDERS_CSV,
    SOURCE_RETURNS_CSV,
)


@dataclass(frozen=True)
class ImportKind:
    name: str                   # "orders" | "returns"
    label: str                  # used in row error messages ("Duplicate Order ID (...)")
    required_columns: list[str]
    optional_columns: list[str]
    id_column: str
    date_column: str
    amount_column: str
    tracks_stock: bool          # orders are checked against and deduct stock
    source_type: str            # import_logs.source_type

    @property
    def is_returns(self) -> bool:
        return self.name == "returns"

    def template_header(self) -> str:
        return ",".join(self.required_columns + self.optional_columns)


ORDERS = ImportKind(
    name="orders",
    label="Order",
    required_columns=ORDER_CSV_COLUMNS,
    optional_columns=[],
    id_column="external_order_id",
    date_column="order_date",
    amount_column="selling_price",
    tracks_stock=True,
    source_type=SOURCE_ORDERS_CSV,
)

RETURNS = ImportKind(
    name="returns",
    label="Return",
    required_columns=RETURN_CSV_COLUMNS,
    optional_columns=RETURN_OPTIONAL_COLUMNS,
    id_column="external_return_id",
    date_column="return_date",
    amount_column="refund_amount",
    tracks_stock=False,
    source_type=SOURCE_RETURNS_CSV,
)

KINDS = {k.name: k for k in (ORDERS, RETURNS)}
