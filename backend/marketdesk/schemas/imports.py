from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ─── Bulk upload result ───────────────────────────────────────────────────────

class ImportRowError(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    reason: str


class ImportResult(BaseModel):
    """
    Fully accounted summary of one bulk upload.
    inserted + duplicates + stock_errors + failed == total_rows
    Serialised with camelCase keys (totalRows, stockErrors).
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_rows:   int
    inserted:     int
    duplicates:   int
    stock_errors: int
    failed:       int
    skipped:      int
    errors:       list[ImportRowError] = []


# ─── Audit log ────────────────────────────────────────────────────────────────

class ImportLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_type: str
    file_name: Optional[str]
    status: str
    total_rows: int
    records_imported: int
    duplicates: int
    stock_errors: int
    failed: int
    error_message: Optional[str]
    start_time: datetime
    end_time: Optional[datetime]
