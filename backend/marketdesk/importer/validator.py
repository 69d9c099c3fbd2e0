"""
Business-rule validation for parsed upload rows.

Two batched lookups per upload (variants by SKU, existing external ids), then a
pure fold over the rows in file order:

  1. external id already imported (not soft-deleted)  → duplicate
  2. SKU unknown for this account                      → SKU not found
  3. orders only: quantity above the running balance   → insufficient stock
  4. otherwise accepted; orders reserve the quantity on the stock ledger so a
     later row for the same SKU sees the reduced balance.

The existing-id snapshot is taken once, before any insert: two new rows sharing
an external id inside the same file are not deduplicated against each other.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.catalog import ProductVariant
from ..models.sales import Order, Return
from ..schemas.imports import ImportRowError
from .kinds import ImportKind
from .rows import (
    REJECT_DUPLICATE,
    REJECT_NOT_FOUND,
    REJECT_STOCK,
    Accepted,
    ImportRow,
    Rejected,
    ResolvedRow,
    ResolvedVariant,
    RowOutcome,
    StockLedger,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationOutcome:
    accepted: list[ResolvedRow] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)
    duplicates: int = 0
    stock_errors: int = 0


# =============================================================================
# Batched lookups
# =============================================================================

def fetch_variants(db: Session, account_id: int, skus: Iterable[str]) -> dict[str, ResolvedVariant]:
    """Return {sku: ResolvedVariant} for the SKUs that exist in this account."""
    skus = list(skus)
    if not skus:
        return {}
    rows = db.execute(
        select(ProductVariant.id, ProductVariant.variant_sku, ProductVariant.stock).where(
            ProductVariant.account_id == account_id,
            ProductVariant.variant_sku.in_(skus),
        )
    ).fetchall()
    return {r.variant_sku: ResolvedVariant(id=r.id, sku=r.variant_sku, stock=r.stock) for r in rows}


def fetch_existing_external_ids(
    db: Session, account_id: int, kind: ImportKind, external_ids: Iterable[str]
) -> set[str]:
    """Return the subset of external_ids already stored (and not soft-deleted) for this account."""
    external_ids = list(external_ids)
    if not external_ids:
        return set()
    model = Return if kind.is_returns else Order
    id_col = getattr(model, kind.id_column)
    rows = db.execute(
        select(id_col).where(
            model.account_id == account_id,
            model.is_deleted.is_(False),
            id_col.in_(external_ids),
        )
    ).fetchall()
    return {r[0] for r in rows}


# =============================================================================
# Pure validation
# =============================================================================

def validate_row(
    row: ImportRow,
    kind: ImportKind,
    variants: Mapping[str, ResolvedVariant],
    existing_ids: set[str],
    ledger: StockLedger,
) -> tuple[RowOutcome, StockLedger]:
    if row.external_id in existing_ids:
        return Rejected(row.row, f"Duplicate {kind.label} ID ({row.external_id})", REJECT_DUPLICATE), ledger

    variant = variants.get(row.sku)
    if variant is None:
        return Rejected(row.row, f"SKU not found ({row.sku})", REJECT_NOT_FOUND), ledger

    if kind.tracks_stock:
        available = ledger.available(row.sku)
        if row.quantity > available:
            return Rejected(
                row.row,
                f"Insufficient stock for {row.sku} (available: {available}, requested: {row.quantity})",
                REJECT_STOCK,
            ), ledger
        ledger = ledger.reserve(row.sku, row.quantity)

    resolved = ResolvedRow(source=row, variant_id=variant.id, total=row.quantity * row.amount)
    return Accepted(resolved), ledger


def validate_rows(
    rows: Iterable[ImportRow],
    kind: ImportKind,
    variants: Mapping[str, ResolvedVariant],
    existing_ids: set[str],
) -> ValidationOutcome:
    outcome = ValidationOutcome()
    ledger = StockLedger.from_variants(variants)

    for row in rows:
        result, ledger = validate_row(row, kind, variants, existing_ids, ledger)
        if isinstance(result, Accepted):
            outcome.accepted.append(result.row)
            continue
        logger.debug("%s upload row %d rejected: %s", kind.name, result.row, result.reason)
        outcome.errors.append(ImportRowError(row=result.row, reason=result.reason))
        if result.kind == REJECT_DUPLICATE:
            outcome.duplicates += 1
        elif result.kind == REJECT_STOCK:
            outcome.stock_errors += 1

    return outcome
