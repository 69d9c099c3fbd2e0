"""
Transactional persistence of accepted upload rows.

Everything for one upload (business rows, stock deltas, audit log) is written in
a single transaction. Any failure rolls the whole batch back and is raised as
ImportCommitError — the caller must treat it as zero rows imported.
"""
import logging
from collections import defaultdict
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.catalog import ProductVariant
from ..models.imports import ImportLog
from ..models.sales import Order, Return
from .rows import ResolvedRow

logger = logging.getLogger(__name__)


class ImportCommitError(Exception):
    """Fatal failure while writing an upload; the transaction was rolled back."""


def _adjust_stock(db: Session, account_id: int, variant_id: int, delta: int) -> None:
    stmt = (
        update(ProductVariant)
        .where(ProductVariant.id == variant_id, ProductVariant.account_id == account_id)
        .values(stock=ProductVariant.stock + delta)
        .execution_options(synchronize_session=False)
    )
    if delta < 0:
        # Guard against a concurrent import having drained the stock since validation
        stmt = stmt.where(ProductVariant.stock >= -delta)
    result = db.execute(stmt)
    if result.rowcount != 1:
        raise ImportCommitError(
            f"Stock for variant {variant_id} changed during import; could not apply {delta:+d} unit(s)"
        )


def _sum_by_variant(rows: list[ResolvedRow]) -> dict[int, int]:
    totals: dict[int, int] = defaultdict(int)
    for r in rows:
        totals[r.variant_id] += r.source.quantity
    return dict(totals)


def _commit(db: Session, write, audit: Optional[ImportLog]) -> None:
    try:
        write()
        if audit is not None:
            db.add(audit)
        db.commit()
    except ImportCommitError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise ImportCommitError(f"Transaction failed during row processing: {exc}") from exc


def commit_orders(
    db: Session,
    account_id: int,
    rows: list[ResolvedRow],
    audit: Optional[ImportLog] = None,
) -> int:
    """Insert orders, then deduct stock once per distinct variant. Returns rows inserted."""
    if not rows:
        return 0

    def write():
        db.add_all([
            Order(
                account_id=account_id,
                external_order_id=r.source.external_id,
                order_date=r.source.row_date,
                platform=r.source.platform,
                variant_id=r.variant_id,
                quantity=r.source.quantity,
                selling_price=r.source.amount,
                total_amount=r.total,
            )
            for r in rows
        ])
        db.flush()
        for variant_id, quantity in _sum_by_variant(rows).items():
            _adjust_stock(db, account_id, variant_id, -quantity)

    _commit(db, write, audit)
    logger.info("Committed %d order(s) for account %s", len(rows), account_id)
    return len(rows)


def commit_returns(
    db: Session,
    account_id: int,
    rows: list[ResolvedRow],
    audit: Optional[ImportLog] = None,
) -> int:
    """Insert returns one by one, restocking each restockable row right after its insert."""
    if not rows:
        return 0

    def write():
        for r in rows:
            db.add(
                Return(
                    account_id=account_id,
                    external_return_id=r.source.external_id,
                    return_date=r.source.row_date,
                    platform=r.source.platform,
                    variant_id=r.variant_id,
                    quantity=r.source.quantity,
                    refund_amount=r.source.amount,
                    return_type=r.source.return_type,
                    return_reason=r.source.reason,
                    restockable=r.source.restockable,
                )
            )
            db.flush()
            if r.source.restockable:
                _adjust_stock(db, account_id, r.variant_id, r.source.quantity)

    _commit(db, write, audit)
    logger.info("Committed %d return(s) for account %s", len(rows), account_id)
    return len(rows)
