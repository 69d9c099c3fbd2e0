"""
CSV upload parser for order and return bulk imports.

parse_upload():
  - Accepts the raw bytes of the uploaded file and the ImportKind.
  - Normalises lines (CR/LF split, trim, blank lines dropped). Each line is split
    into fields on its own, so one line is always one row, then tabulated with pandas.
  - Returns a ParsedBatch of structurally valid rows plus per-row errors (no DB calls).
  - Raises EmptyUploadError / ColumnMismatchError for whole-file problems — these
    are surfaced to the user before any row is processed.
"""

import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

import pandas as pd

from ..constants import ALL_PLATFORMS, ALL_RETURN_TYPES
from ..schemas.imports import ImportRowError
from .kinds import ImportKind
from .rows import ImportRow

logger = logging.getLogger(__name__)

_PLATFORMS = {p.lower(): p for p in ALL_PLATFORMS}
_RETURN_TYPES = {t.lower(): t for t in ALL_RETURN_TYPES}
_TRUE_WORDS = {"true", "yes", "y", "1"}
_FALSE_WORDS = {"false", "no", "n", "0"}
_QUANTITY_RE = re.compile(r"\+?\d+")
_DATE_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?"
)

# Column limits: Integer quantity, Numeric(10,2) prices, Numeric(14,2) line totals
MAX_QUANTITY = 2**31 - 1
MAX_AMOUNT = Decimal("100000000")
MAX_LINE_TOTAL = Decimal("1000000000000")
_CENTS = Decimal("0.01")


# =============================================================================
# Exceptions
# =============================================================================

class EmptyUploadError(ValueError):
    """Raised when the upload has no header or no data rows."""


class ColumnMismatchError(ValueError):
    """Raised when a required column is absent from the uploaded file."""

    def __init__(self, missing: list[str], found: list[str], kind: str):
        self.missing = missing
        self.found = found
        self.kind = kind
        super().__init__(f"Missing required columns: {', '.join(missing)}")


# =============================================================================
# Result
# =============================================================================

@dataclass
class ParsedBatch:
    total_rows: int
    rows: list[ImportRow] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)
    skus: set[str] = field(default_factory=set)
    external_ids: set[str] = field(default_factory=set)


# =============================================================================
# Internal helpers
# =============================================================================

def decode_upload(content: bytes | str) -> str:
    if isinstance(content, str):
        return content
    # Try common encodings in order
    for enc in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return content.decode(enc)
        except UnicodeDecodeError:
            continue
    raise ValueError("Could not decode upload — tried utf-8-sig, utf-8, latin-1")


def _split_lines(text: str) -> list[str]:
    lines = (line.strip() for line in re.split(r"\r\n|\r|\n", text))
    return [line for line in lines if line]


def _fields(line: str) -> list[str]:
    # One physical line is one record: an unbalanced quote runs to the end of its own line
    return next(csv.reader([line]))


def _header(line: str) -> list[str]:
    return [h.strip().strip('"').strip().lower() for h in _fields(line)]


def _read_rows(lines: list[str], width: int) -> pd.DataFrame:
    # Short rows are padded with empty strings, fields past the header width are dropped
    records = []
    for line in lines:
        fields = _fields(line)[:width]
        records.append(fields + [""] * (width - len(fields)))
    return pd.DataFrame(records, columns=list(range(width)), dtype=str)


def _text(val: Optional[str]) -> str:
    if val is None:
        return ""
    return str(val).strip()


def _parse_quantity(val: str) -> Optional[int]:
    if not _QUANTITY_RE.fullmatch(val):
        return None
    qty = int(val)
    return qty if 0 < qty <= MAX_QUANTITY else None


def _parse_amount(val: str) -> Optional[Decimal]:
    try:
        amount = Decimal(val.replace(",", "").replace("₹", "").strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0 or amount >= MAX_AMOUNT:
        return None
    # Stored with two decimals; reject what would round to zero or up to the limit
    amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return amount if 0 < amount < MAX_AMOUNT else None


def _parse_date(val: str) -> Optional[date]:
    match = _DATE_RE.fullmatch(val)
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_return_type(val: str) -> Optional[str]:
    return _RETURN_TYPES.get(re.sub(r"[\s\-]+", "_", val.lower()))


def _parse_restockable(val: str) -> Optional[bool]:
    word = val.lower()
    if not word or word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def _build_row(idx: int, values: dict[str, str], kind: ImportKind) -> ImportRow | str:
    """Return the parsed row, or the rejection reason."""
    empty = [c for c in kind.required_columns if not values.get(c)]
    if empty:
        return f"Missing required field(s): {', '.join(empty)}"

    quantity = _parse_quantity(values["quantity"])
    if quantity is None:
        return f"Invalid quantity '{values['quantity']}' (must be a whole number from 1 to {MAX_QUANTITY})"

    amount = _parse_amount(values[kind.amount_column])
    if amount is None:
        return (
            f"Invalid {kind.amount_column} '{values[kind.amount_column]}' "
            f"(must be a positive number below {MAX_AMOUNT})"
        )
    if quantity * amount >= MAX_LINE_TOTAL:
        return f"Line total too large ({quantity} x {amount}, must be below {MAX_LINE_TOTAL})"

    row_date = _parse_date(values[kind.date_column])
    if row_date is None:
        return f"Invalid date '{values[kind.date_column]}' (expected YYYY-MM-DD)"

    platform = _PLATFORMS.get(values["platform"].lower())
    if platform is None:
        return f"Invalid platform '{values['platform']}' (expected one of: {', '.join(ALL_PLATFORMS)})"

    return_type = reason = None
    restockable = True
    if kind.is_returns:
        return_type = _parse_return_type(values["return_type"])
        if return_type is None:
            return (
                f"Invalid return_type '{values['return_type']}' "
                f"(expected one of: {', '.join(ALL_RETURN_TYPES)})"
            )
        restockable = _parse_restockable(values.get("restockable", ""))
        if restockable is None:
            return f"Invalid restockable '{values['restockable']}' (expected true or false)"
        reason = values["return_reason"]

    return ImportRow(
        row=idx,
        external_id=values[kind.id_column],
        row_date=row_date,
        platform=platform,
        sku=values["variant_sku"],
        quantity=quantity,
        amount=amount,
        return_type=return_type,
        reason=reason,
        restockable=restockable,
    )


# =============================================================================
# Public API
# =============================================================================

def parse_upload(content: bytes | str, kind: ImportKind) -> ParsedBatch:
    lines = _split_lines(decode_upload(content))
    if len(lines) < 2:
        raise EmptyUploadError("CSV must contain a header and at least one data row")

    header = _header(lines[0])
    missing = [c for c in kind.required_columns if c not in header]
    if missing:
        raise ColumnMismatchError(missing=missing, found=header, kind=kind.name)

    # First occurrence wins when a column name is repeated
    positions = {
        col: header.index(col)
        for col in kind.required_columns + kind.optional_columns
        if col in header
    }

    df = _read_rows(lines[1:], len(header))
    batch = ParsedBatch(total_rows=len(df))

    for idx, record in enumerate(df.itertuples(index=False, name=None), start=1):
        values = {col: _text(record[pos]) for col, pos in positions.items()}
        parsed = _build_row(idx, values, kind)
        if isinstance(parsed, str):
            logger.debug("%s upload row %d rejected: %s", kind.name, idx, parsed)
            batch.errors.append(ImportRowError(row=idx, reason=parsed))
            continue
        batch.rows.append(parsed)
        batch.skus.add(parsed.sku)
        batch.external_ids.add(parsed.external_id)

    return batch
