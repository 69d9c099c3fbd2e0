"""
Bulk import a marketplace orders or returns CSV straight into the database.

Usage:
    # Import an orders export for account 1
    python scripts/run_import.py --account-id 1 --kind orders --file "data/meesho_orders_2026-10.csv"

    # Import a returns export (restockable returns are added back to stock)
    python scripts/run_import.py --account-id 1 --kind returns --file "data/flipkart_returns.csv"

Re-running the same file is safe: rows whose external id is already stored are
reported as duplicates and skipped.
"""
import argparse
import logging
import os
import sys
import time

from marketdesk.database import SessionLocal
from marketdesk.importer import KINDS, ImportCommitError, run_import
from marketdesk.models import Account

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger("run_import")


def main():
    parser = argparse.ArgumentParser(
        description="MarketDesk — import an orders or returns CSV for one account."
    )
    parser.add_argument("--account-id", type=int, required=True, help="Tenant account id")
    parser.add_argument("--kind", choices=sorted(KINDS), required=True, help="Upload type")
    parser.add_argument("--file", required=True, help="Path to the CSV file")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        logger.error("File not found: %r", args.file)
        sys.exit(1)

    with open(args.file, "rb") as fh:
        content = fh.read()

    logger.info("=" * 60)
    logger.info("MarketDesk bulk import")
    logger.info("Account : %s", args.account_id)
    logger.info("Kind    : %s", args.kind)
    logger.info("File    : %s", args.file)
    logger.info("=" * 60)

    t0 = time.time()
    db = SessionLocal()
    try:
        if db.get(Account, args.account_id) is None:
            logger.error("Account %s not found", args.account_id)
            sys.exit(1)
        result = run_import(db, KINDS[args.kind], args.account_id, content, os.path.basename(args.file))
    except ValueError as exc:
        # EmptyUploadError, ColumnMismatchError, or content that could not be read
        logger.error("File rejected: %s", exc)
        sys.exit(1)
    except ImportCommitError as exc:
        logger.error("Import rolled back, no rows imported: %s", exc)
        sys.exit(2)
    finally:
        db.close()

    logger.info("Total rows   : %d", result.total_rows)
    logger.info("Inserted     : %d", result.inserted)
    logger.info("Duplicates   : %d", result.duplicates)
    logger.info("Stock errors : %d", result.stock_errors)
    logger.info("Failed       : %d", result.failed)
    for err in result.errors:
        logger.info("  row %d: %s", err.row, err.reason)
    logger.info("Done in %.1fs", time.time() - t0)


if __name__ == "__main__":
    main()
