"""Pytest configuration: in-memory SQLite database, seeded catalog and an API client."""

from __future__ import annotations

import os

# Must be set before marketdesk.config is imported (settings are cached at import)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SLACK_WEBHOOK_URL"] = ""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from marketdesk.database import Base, SessionLocal, engine
from marketdesk.main import app
from marketdesk.models import Account, Product, ProductVariant

ORDER_HEADER = "external_order_id,order_date,platform,variant_sku,quantity,selling_price"
RETURN_HEADER = (
    "external_return_id,return_date,platform,variant_sku,quantity,"
    "refund_amount,return_type,return_reason"
)


def make_csv(header: str, *rows: str) -> bytes:
    return ("\n".join((header,) + rows) + "\n").encode("utf-8")


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def catalog(db):
    """
    Account 1 "Demo Store":
      Cotton Kurta (cost 250)  → KURTA-M stock 10 (threshold 5), KURTA-L stock 3 (threshold 2)
      Silk Saree (no cost)     → SAREE-RED stock 0
    Account 2 "Other Store":
      Cotton Kurta             → KURTA-M stock 50
    """
    demo = Account(id=1, name="Demo Store")
    other = Account(id=2, name="Other Store")
    db.add_all([demo, other])
    db.flush()

    kurta = Product(account_id=1, product_name="Cotton Kurta", cost_price=Decimal("250.00"))
    saree = Product(account_id=1, product_name="Silk Saree", cost_price=None)
    other_kurta = Product(account_id=2, product_name="Cotton Kurta", cost_price=Decimal("240.00"))
    db.add_all([kurta, saree, other_kurta])
    db.flush()

    variants = {
        "KURTA-M": ProductVariant(account_id=1, product_id=kurta.id, variant_sku="KURTA-M", stock=10, low_stock_threshold=5),
        "KURTA-L": ProductVariant(account_id=1, product_id=kurta.id, variant_sku="KURTA-L", stock=3, low_stock_threshold=2),
        "SAREE-RED": ProductVariant(account_id=1, product_id=saree.id, variant_sku="SAREE-RED", stock=0, low_stock_threshold=5),
        "OTHER-KURTA-M": ProductVariant(account_id=2, product_id=other_kurta.id, variant_sku="KURTA-M", stock=50, low_stock_threshold=5),
    }
    db.add_all(variants.values())
    db.commit()
    return {name: v.id for name, v in variants.items()}


@pytest.fixture
def client():
    return TestClient(app)


def stock_of(db, variant_id: int) -> int:
    db.expire_all()
    return db.get(ProductVariant, variant_id).stock
