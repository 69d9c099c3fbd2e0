"""Pure validation fold: duplicate / not-found / stock rules and the running stock ledger."""

from datetime import date
from decimal import Decimal

from marketdesk.importer import ORDERS, RETURNS
from marketdesk.importer.rows import (
    REJECT_DUPLICATE,
    REJECT_STOCK,
    Accepted,
    ImportRow,
    Rejected,
    ResolvedVariant,
    StockLedger,
)
from marketdesk.importer.validator import validate_row, validate_rows

VARIANTS = {
    "KURTA-M": ResolvedVariant(id=11, sku="KURTA-M", stock=10),
    "KURTA-L": ResolvedVariant(id=12, sku="KURTA-L", stock=3),
}


def _row(n: int, ext_id: str, sku: str = "KURTA-M", qty: int = 1, amount: str = "100") -> ImportRow:
    return ImportRow(
        row=n,
        external_id=ext_id,
        row_date=date(2026, 10, 1),
        platform="Meesho",
        sku=sku,
        quantity=qty,
        amount=Decimal(amount),
    )


def test_same_sku_rows_draw_down_a_running_balance():
    rows = [_row(1, "OD-1", qty=4), _row(2, "OD-2", qty=4), _row(3, "OD-3", qty=4)]
    outcome = validate_rows(rows, ORDERS, VARIANTS, existing_ids=set())

    assert [r.source.external_id for r in outcome.accepted] == ["OD-1", "OD-2"]
    assert outcome.stock_errors == 1
    assert outcome.duplicates == 0
    assert len(outcome.errors) == 1
    assert outcome.errors[0].row == 3
    assert outcome.errors[0].reason.startswith("Insufficient stock for KURTA-M (available: 2")
    # the fetched snapshot itself is never modified
    assert VARIANTS["KURTA-M"].stock == 10


def test_rejected_stock_row_does_not_consume_balance():
    rows = [_row(1, "OD-1", qty=8), _row(2, "OD-2", qty=5), _row(3, "OD-3", qty=2)]
    outcome = validate_rows(rows, ORDERS, VARIANTS, existing_ids=set())

    assert [r.source.external_id for r in outcome.accepted] == ["OD-1", "OD-3"]
    assert [e.row for e in outcome.errors] == [2]


def test_duplicate_check_precedes_stock_check():
    rows = [_row(1, "OD-OLD", sku="KURTA-L", qty=99)]
    outcome = validate_rows(rows, ORDERS, VARIANTS, existing_ids={"OD-OLD"})

    assert outcome.duplicates == 1
    assert outcome.stock_errors == 0
    assert outcome.errors[0].reason == "Duplicate Order ID (OD-OLD)"


def test_duplicate_check_precedes_sku_lookup():
    outcome = validate_rows([_row(1, "OD-OLD", sku="NOPE")], ORDERS, VARIANTS, existing_ids={"OD-OLD"})
    assert outcome.duplicates == 1
    assert outcome.errors[0].reason.startswith("Duplicate")


def test_unknown_sku_is_rejected():
    outcome = validate_rows([_row(1, "OD-1", sku="KURTA-XXL")], ORDERS, VARIANTS, existing_ids=set())

    assert outcome.accepted == []
    assert outcome.errors[0].reason == "SKU not found (KURTA-XXL)"
    assert outcome.duplicates == 0
    assert outcome.stock_errors == 0


def test_accepted_row_carries_variant_and_total():
    outcome = validate_rows([_row(1, "OD-1", sku="KURTA-L", qty=3, amount="249.50")], ORDERS, VARIANTS, set())

    resolved = outcome.accepted[0]
    assert resolved.variant_id == 12
    assert resolved.total == Decimal("748.50")


def test_identical_new_ids_in_one_file_are_not_deduplicated_against_each_other():
    rows = [_row(1, "OD-SAME", qty=1), _row(2, "OD-SAME", qty=1)]
    outcome = validate_rows(rows, ORDERS, VARIANTS, existing_ids=set())

    assert len(outcome.accepted) == 2
    assert outcome.duplicates == 0


def test_returns_ignore_stock():
    rows = [_row(1, "RT-1", sku="KURTA-L", qty=50)]
    outcome = validate_rows(rows, RETURNS, VARIANTS, existing_ids={"RT-0"})

    assert len(outcome.accepted) == 1
    assert outcome.stock_errors == 0


def test_duplicate_return_reason_names_the_return():
    outcome = validate_rows([_row(1, "RT-0")], RETURNS, VARIANTS, existing_ids={"RT-0"})
    assert outcome.errors[0].reason == "Duplicate Return ID (RT-0)"


def test_validate_row_returns_a_new_ledger():
    ledger = StockLedger.from_variants(VARIANTS)

    result, after = validate_row(_row(1, "OD-1", qty=4), ORDERS, VARIANTS, set(), ledger)
    assert isinstance(result, Accepted)
    assert ledger.available("KURTA-M") == 10
    assert after.available("KURTA-M") == 6

    result, unchanged = validate_row(_row(2, "OD-2", qty=7), ORDERS, VARIANTS, set(), after)
    assert isinstance(result, Rejected)
    assert result.kind == REJECT_STOCK
    assert unchanged is after


def test_validate_row_flags_duplicates():
    result, _ = validate_row(_row(1, "OD-1"), ORDERS, VARIANTS, {"OD-1"}, StockLedger.from_variants(VARIANTS))
    assert isinstance(result, Rejected)
    assert result.kind == REJECT_DUPLICATE
