"""
Bulk import entry points: parse → validate → commit → summarise.

import_orders() / import_returns() are what the upload endpoints and the CLI call.
Whole-file problems raise EmptyUploadError / ColumnMismatchError before anything
is read from the database; a failed commit raises ImportCommitError after the
rollback has been recorded in import_logs. Row-level problems never raise — they
end up in ImportResult.errors.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import IMPORT_STATUS_FAILED, IMPORT_STATUS_SUCCESS
from ..models.catalog import Product, ProductVariant
from ..models.imports import ImportLog
from ..schemas.imports import ImportResult
from ..utils.slack import notify_import_failure, notify_low_stock
from .committer import ImportCommitError, commit_orders, commit_returns
from .kinds import ORDERS, RETURNS, ImportKind
from .parser import ParsedBatch, parse_upload
from .validator import (
    ValidationOutcome,
    fetch_existing_external_ids,
    fetch_variants,
    validate_rows,
)

logger = logging.getLogger(__name__)


def assemble_result(batch: ParsedBatch, outcome: ValidationOutcome, inserted: int) -> ImportResult:
    errors = sorted(batch.errors + outcome.errors, key=lambda e: e.row)
    return ImportResult(
        total_rows=batch.total_rows,
        inserted=inserted,
        duplicates=outcome.duplicates,
        stock_errors=outcome.stock_errors,
        failed=len(errors) - outcome.duplicates - outcome.stock_errors,
        skipped=batch.total_rows - inserted,
        errors=errors,
    )


def _audit_row(
    kind: ImportKind, account_id: int, file_name: str, result: ImportResult, status: str,
    error_message: str | None = None,
) -> ImportLog:
    return ImportLog(
        account_id=account_id,
        source_type=kind.source_type,
        file_name=file_name,
        status=status,
        total_rows=result.total_rows,
        records_imported=result.inserted if status == IMPORT_STATUS_SUCCESS else 0,
        duplicates=result.duplicates,
        stock_errors=result.stock_errors,
        failed=result.failed,
        error_message=error_message,
        end_time=datetime.now(timezone.utc),
    )


def _record_failure(
    db: Session, kind: ImportKind, account_id: int, file_name: str, result: ImportResult, error: str
) -> None:
    try:
        db.add(_audit_row(kind, account_id, file_name, result, IMPORT_STATUS_FAILED, error))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not record failed %s import for account %s", kind.name, account_id)


def _alert_low_stock(db: Session, account_id: int, variant_ids: set[int]) -> None:
    rows = db.execute(
        select(
            ProductVariant.variant_sku,
            ProductVariant.stock,
            ProductVariant.low_stock_threshold,
            Product.product_name,
        )
        .join(Product, Product.id == ProductVariant.product_id)
        .where(
            ProductVariant.account_id == account_id,
            ProductVariant.id.in_(variant_ids),
            ProductVariant.stock <= ProductVariant.low_stock_threshold,
        )
    ).fetchall()
    for r in rows:
        logger.info("Variant %s is low on stock after import (%d left)", r.variant_sku, r.stock)
        notify_low_stock(account_id, r.product_name, r.variant_sku, r.stock, r.low_stock_threshold)


def run_import(
    db: Session,
    kind: ImportKind,
    account_id: int,
    content: bytes | str,
    file_name: str = "upload.csv",
) -> ImportResult:
    batch = parse_upload(content, kind)

    if batch.rows:
        variants = fetch_variants(db, account_id, batch.skus)
        existing_ids = fetch_existing_external_ids(db, account_id, kind, batch.external_ids)
        outcome = validate_rows(batch.rows, kind, variants, existing_ids)
    else:
        outcome = ValidationOutcome()

    result = assemble_result(batch, outcome, inserted=len(outcome.accepted))

    if outcome.accepted:
        commit = commit_orders if kind.tracks_stock else commit_returns
        audit = _audit_row(kind, account_id, file_name, result, IMPORT_STATUS_SUCCESS)
        try:
            commit(db, account_id, outcome.accepted, audit)
        except ImportCommitError as exc:
            logger.exception("%s import for account %s rolled back", kind.name, account_id)
            _record_failure(db, kind, account_id, file_name, result, str(exc))
            notify_import_failure(account_id, kind.source_type, file_name, str(exc))
            raise

        if kind.tracks_stock:
            # The batch is already committed; alerting failures must not turn it into an error
            try:
                _alert_low_stock(db, account_id, {r.variant_id for r in outcome.accepted})
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Low-stock check after %s import for account %s failed", kind.name, account_id)

    logger.info(
        "%s import for account %s (%s): total=%d inserted=%d duplicates=%d stock_errors=%d failed=%d",
        kind.name, account_id, file_name, result.total_rows, result.inserted,
        result.duplicates, result.stock_errors, result.failed,
    )
    return result


def import_orders(db: Session, account_id: int, content: bytes | str, file_name: str = "orders.csv") -> ImportResult:
    return run_import(db, ORDERS, account_id, content, file_name)


def import_returns(db: Session, account_id: int, content: bytes | str, file_name: str = "returns.csv") -> ImportResult:
    return run_import(db, RETURNS, account_id, content, file_name)
