"""
Value types that flow through the bulk import pipeline.

  ImportRow       — one structurally valid CSV data row (parser output)
  ResolvedVariant — snapshot of a variant's id and stock at validation time
  ResolvedRow     — an ImportRow bound to its variant, ready to commit
  Accepted / Rejected — per-row validation outcome
  StockLedger     — running stock balance threaded through order validation
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Union

# Rejection kinds; duplicates and stock errors are counted separately in the result
REJECT_STRUCTURAL = "structural"
REJECT_NOT_FOUND  = "not_found"
REJECT_DUPLICATE  = "duplicate"
REJECT_STOCK      = "stock"


@dataclass(frozen=True)
class ImportRow:
    row: int                # 1-based, header and blank lines excluded
    external_id: str
    row_date: date
    platform: str
    sku: str
    quantity: int
    amount: Decimal         # selling price (orders) or refund amount (returns)
    return_type: Optional[str] = None
    reason: Optional[str] = None
    restockable: bool = True


@dataclass(frozen=True)
class ResolvedVariant:
    id: int
    sku: str
    stock: int


@dataclass(frozen=True)
class ResolvedRow:
    source: ImportRow
    variant_id: int
    total: Decimal


@dataclass(frozen=True)
class Accepted:
    row: ResolvedRow


@dataclass(frozen=True)
class Rejected:
    row: int
    reason: str
    kind: str


RowOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True)
class StockLedger:
    """Remaining stock per SKU. reserve() returns a new ledger; the original is untouched."""
    balances: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_variants(cls, variants: Mapping[str, ResolvedVariant]) -> "StockLedger":
        return cls({sku: v.stock for sku, v in variants.items()})

    def available(self, sku: str) -> int:
        return self.balances.get(sku, 0)

    def reserve(self, sku: str, quantity: int) -> "StockLedger":
        return StockLedger({**self.balances, sku: self.available(sku) - quantity})
