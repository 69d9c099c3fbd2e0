"""
Shared handling for the CSV bulk upload endpoints.

POST /api/orders/bulk-upload
POST /api/returns/bulk-upload

Response behaviour:
  - Whole-file problems (no file, empty file, missing columns) → 400 / 413 / 422,
    nothing is read from or written to the DB.
  - Row-level problems (bad values, unknown SKU, duplicate id, insufficient stock)
    are reported in errors[]; HTTP 200 is returned with the counts.
  - A failure while writing rolls back every row and returns 500.
"""
import logging
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ..config import settings
from ..importer import (
    ColumnMismatchError,
    EmptyUploadError,
    ImportCommitError,
    ImportKind,
    run_import,
)
from ..schemas.imports import ImportResult

logger = logging.getLogger(__name__)


async def read_upload(file: Optional[UploadFile]) -> tuple[bytes, str]:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded or file is empty")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded or file is empty")
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_upload_mb} MB limit",
        )
    return content, file.filename or "upload.csv"


def process_upload(
    db: Session,
    kind: ImportKind,
    account_id: int,
    content: bytes,
    filename: str,
) -> ImportResult:
    try:
        return run_import(db, kind, account_id, content, filename)
    except EmptyUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except ColumnMismatchError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": f"{exc}. Expected columns for {kind.name}: {', '.join(kind.required_columns)}",
                "missing_columns": exc.missing,
                "columns_found_in_file": exc.found,
            },
        )
    except ImportCommitError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": f"Critical failure during {kind.name} import. No rows were imported.",
                "detail": str(exc),
            },
        )
    except ValueError as exc:
        # undecodable content, pandas ParserError
        logger.warning("Could not parse %s file %s: %s", kind.name, filename, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": f"Could not parse file: {exc}"},
        )
