"""HTTP surface: upload preconditions and error mapping, listings, dashboard, inventory, import logs."""

from decimal import Decimal

from conftest import ORDER_HEADER, RETURN_HEADER, make_csv
from marketdesk.importer import ImportCommitError
from marketdesk.importer import service

DEMO = {"X-Account-Id": "1"}


def _upload(client, kind: str, content: bytes, headers=DEMO, filename: str = "upload.csv"):
    return client.post(
        f"/api/{kind}/bulk-upload",
        files={"file": (filename, content, "text/csv")},
        headers=headers,
    )


def _seed_orders(client):
    content = make_csv(
        ORDER_HEADER,
        "OD-1,2026-10-01,Meesho,KURTA-M,2,499",
        "OD-2,2026-10-03,Amazon,KURTA-L,1,549",
        "OD-3,2026-10-03,Meesho,KURTA-M,1,450",
    )
    assert _upload(client, "orders", content).status_code == 200


# ─── Upload preconditions ─────────────────────────────────────────────────────

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_upload_without_account_header_is_rejected(client, catalog):
    resp = _upload(client, "orders", make_csv(ORDER_HEADER, "OD-1,2026-10-01,Meesho,KURTA-M,1,100"), headers={})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Account context missing"


def test_upload_for_unknown_account_is_404(client, catalog):
    resp = _upload(client, "orders", make_csv(ORDER_HEADER), headers={"X-Account-Id": "999"})
    assert resp.status_code == 404


def test_upload_without_file_is_400(client, catalog):
    resp = client.post("/api/orders/bulk-upload", headers=DEMO)
    assert resp.status_code == 400


def test_empty_file_is_400(client, catalog):
    assert _upload(client, "orders", b"").status_code == 400
    assert _upload(client, "returns", make_csv(RETURN_HEADER)).status_code == 400


def test_missing_columns_is_422_with_details(client, catalog):
    content = make_csv("external_order_id,order_date,platform,variant_sku,selling_price", "OD-1,2026-10-01,Meesho,KURTA-M,1")
    resp = _upload(client, "orders", content)

    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["missing_columns"] == ["quantity"]
    assert "selling_price" in detail["columns_found_in_file"]
    assert "Missing required columns" in detail["message"]


# ─── Upload results ──────────────────────────────────────────────────────────

def test_order_upload_reports_camel_case_counts(client, catalog):
    content = make_csv(
        ORDER_HEADER,
        "OD-1,2026-10-01,Meesho,KURTA-M,4,100",
        "OD-2,2026-10-01,Meesho,KURTA-L,9,100",
        "OD-3,2026-10-01,Meesho,KURTA-M,x,100",
    )
    resp = _upload(client, "orders", content)

    assert resp.status_code == 200
    body = resp.json()
    assert body["totalRows"] == 3
    assert body["inserted"] == 1
    assert body["stockErrors"] == 1
    assert body["failed"] == 1
    assert body["duplicates"] == 0
    assert body["skipped"] == 2
    assert [e["row"] for e in body["errors"]] == [2, 3]


def test_return_upload_restocks(client, catalog):
    content = make_csv(RETURN_HEADER, "RT-1,2026-10-05,Flipkart,KURTA-L,2,549,RTO,Undelivered")
    resp = _upload(client, "returns", content)

    assert resp.status_code == 200
    assert resp.json()["inserted"] == 1
    stock = {v["variant_sku"]: v["stock"] for v in client.get("/api/inventory", headers=DEMO).json()}
    assert stock["KURTA-L"] == 5


def test_fatal_commit_failure_is_500(client, catalog, monkeypatch):
    def failing_commit(*args, **kwargs):
        raise ImportCommitError("Stock for variant 1 changed during import")

    monkeypatch.setattr(service, "commit_orders", failing_commit)
    monkeypatch.setattr(service, "notify_import_failure", lambda *args: False)

    resp = _upload(client, "orders", make_csv(ORDER_HEADER, "OD-1,2026-10-01,Meesho,KURTA-M,1,100"))

    assert resp.status_code == 500
    detail = resp.json()["detail"]
    assert "No rows were imported" in detail["message"]
    assert "changed during import" in detail["detail"]
    logs = client.get("/api/imports/logs", headers=DEMO).json()
    assert logs[0]["status"] == "failed"


# ─── Listings ────────────────────────────────────────────────────────────────

def test_orders_are_listed_newest_first_with_filters(client, catalog):
    _seed_orders(client)

    page = client.get("/api/orders", headers=DEMO).json()
    assert page["total_rows"] == 3
    assert page["data"][0]["order_date"] == "2026-10-03"
    assert page["data"][-1]["external_order_id"] == "OD-1"

    meesho = client.get("/api/orders", params={"platform": "meesho"}, headers=DEMO).json()
    assert {o["external_order_id"] for o in meesho["data"]} == {"OD-1", "OD-3"}

    ranged = client.get("/api/orders", params={"from_date": "2026-10-02", "to_date": "2026-10-03"}, headers=DEMO).json()
    assert ranged["total_rows"] == 2

    search = client.get("/api/orders", params={"search": "kurta-l"}, headers=DEMO).json()
    assert [o["variant_sku"] for o in search["data"]] == ["KURTA-L"]
    assert search["data"][0]["product_name"] == "Cotton Kurta"

    paged = client.get("/api/orders", params={"page": 2, "page_size": 2}, headers=DEMO).json()
    assert len(paged["data"]) == 1
    assert paged["total_rows"] == 3


def test_orders_are_not_visible_to_other_accounts(client, catalog):
    _seed_orders(client)
    other = client.get("/api/orders", headers={"X-Account-Id": "2"}).json()
    assert other["total_rows"] == 0


def test_returns_are_listed(client, catalog):
    content = make_csv(
        RETURN_HEADER + ",restockable",
        "RT-1,2026-10-05,Flipkart,KURTA-L,1,549,RTO,Undelivered,no",
    )
    _upload(client, "returns", content)

    rows = client.get("/api/returns", headers=DEMO).json()
    assert len(rows) == 1
    assert rows[0]["external_return_id"] == "RT-1"
    assert rows[0]["return_type"] == "RTO"
    assert rows[0]["restockable"] is False
    assert rows[0]["variant_sku"] == "KURTA-L"


# ─── Inventory / dashboard ───────────────────────────────────────────────────

def test_inventory_lists_lowest_stock_first(client, catalog):
    rows = client.get("/api/inventory", headers=DEMO).json()
    assert [r["variant_sku"] for r in rows] == ["SAREE-RED", "KURTA-L", "KURTA-M"]
    assert rows[0]["is_low_stock"] is True
    assert rows[1]["is_low_stock"] is False

    low = client.get("/api/inventory", params={"low_stock_only": True}, headers=DEMO).json()
    assert [r["variant_sku"] for r in low] == ["SAREE-RED"]


def test_inventory_value_uses_cost_price(client, catalog):
    body = client.get("/api/inventory/value", headers=DEMO).json()
    assert Decimal(str(body["total_value"])) == Decimal("3250")
    assert body["total_units"] == 13
    assert body["unpriced_variants"] == 0

    _upload(client, "returns", make_csv(RETURN_HEADER, "RT-1,2026-10-05,Amazon,SAREE-RED,1,999,EXCHANGE,Colour"))
    body = client.get("/api/inventory/value", headers=DEMO).json()
    assert body["unpriced_variants"] == 1
    assert Decimal(str(body["total_value"])) == Decimal("3250")


def test_dashboard_rollups(client, catalog):
    _seed_orders(client)
    _upload(client, "returns", make_csv(RETURN_HEADER, "RT-1,2026-10-05,Meesho,KURTA-M,1,499,DTO,Damaged"))

    body = client.get("/api/dashboard", params={"as_of": "2026-10-05"}, headers=DEMO).json()

    summary = body["summary"]
    assert summary["total_units"] == 4
    assert Decimal(str(summary["gross_revenue"])) == Decimal("1997")
    assert summary["returned_units"] == 1
    assert summary["return_rate"] == 25.0

    platforms = {p["platform"]: p["total_units"] for p in body["platform_performance"]}
    assert platforms == {"Meesho": 3, "Amazon": 1}

    assert body["top_selling"][0]["variant_sku"] == "KURTA-M"
    assert body["top_selling"][0]["total_units_sold"] == 3

    days = body["orders_vs_returns"]
    assert len(days) == 7
    assert days[0]["day"] == "2026-09-29"
    assert days[-1]["day"] == "2026-10-05"
    by_day = {d["day"]: (d["total_orders"], d["total_returns"]) for d in days}
    assert by_day["2026-10-01"] == (1, 0)
    assert by_day["2026-10-03"] == (2, 0)
    assert by_day["2026-10-05"] == (0, 1)


# ─── Import logs / templates ─────────────────────────────────────────────────

def test_import_logs_are_scoped_to_the_account(client, catalog):
    _seed_orders(client)

    logs = client.get("/api/imports/logs", headers=DEMO).json()
    assert len(logs) == 1
    assert logs[0]["status"] == "success"
    assert logs[0]["records_imported"] == 3
    assert client.get("/api/imports/logs", headers={"X-Account-Id": "2"}).json() == []


def test_csv_templates(client):
    resp = client.get("/api/imports/templates/orders")
    assert resp.status_code == 200
    assert resp.text.strip() == ORDER_HEADER
    assert "orders_template.csv" in resp.headers["content-disposition"]

    returns = client.get("/api/imports/templates/returns")
    assert returns.text.strip() == RETURN_HEADER + ",restockable"

    assert client.get("/api/imports/templates/refunds").status_code == 404


def test_stray_quote_is_a_row_error_not_a_rejected_file(client, catalog):
    content = make_csv(
        ORDER_HEADER,
        'OD-1,2026-10-01,Meesho,"KURTA-M,1,100',
        "OD-2,2026-10-01,Meesho,KURTA-M,1,100",
    )
    resp = _upload(client, "orders", content)

    assert resp.status_code == 200
    body = resp.json()
    assert (body["totalRows"], body["inserted"], body["failed"]) == (2, 1, 1)
