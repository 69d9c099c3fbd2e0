"""
Aggregation helpers used by the dashboard and inventory APIs.
All queries are scoped to one account and skip soft-deleted orders/returns.
"""
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.catalog import Product, ProductVariant
from ..models.sales import Order, Return


def _dec(val) -> Decimal:
    return Decimal(str(val)) if val is not None else Decimal(0)


def sales_summary(db: Session, account_id: int) -> dict:
    units, revenue = (
        db.query(
            func.coalesce(func.sum(Order.quantity), 0),
            func.coalesce(func.sum(Order.total_amount), 0),
        )
        .filter(Order.account_id == account_id, Order.is_deleted.is_(False))
        .one()
    )
    returned = (
        db.query(func.coalesce(func.sum(Return.quantity), 0))
        .filter(Return.account_id == account_id, Return.is_deleted.is_(False))
        .scalar()
    )
    units = int(units or 0)
    returned = int(returned or 0)
    return {
        "total_units": units,
        "gross_revenue": _dec(revenue),
        "returned_units": returned,
        "return_rate": round(returned / units * 100, 2) if units > 0 else 0.0,
    }


def platform_performance(db: Session, account_id: int) -> list[dict]:
    rows = (
        db.query(
            Order.platform,
            func.sum(Order.quantity).label("total_units"),
            func.sum(Order.total_amount).label("total_revenue"),
        )
        .filter(Order.account_id == account_id, Order.is_deleted.is_(False))
        .group_by(Order.platform)
        .order_by(func.sum(Order.total_amount).desc())
        .all()
    )
    return [
        {"platform": r.platform, "total_units": int(r.total_units), "total_revenue": _dec(r.total_revenue)}
        for r in rows
    ]


def top_variants(db: Session, account_id: int, limit: int = 5) -> list[dict]:
    rows = (
        db.query(
            Product.product_name,
            ProductVariant.variant_sku,
            func.sum(Order.quantity).label("units"),
            func.sum(Order.total_amount).label("revenue"),
        )
        .join(ProductVariant, Order.variant_id == ProductVariant.id)
        .join(Product, ProductVariant.product_id == Product.id)
        .filter(Order.account_id == account_id, Order.is_deleted.is_(False))
        .group_by(Product.product_name, ProductVariant.variant_sku)
        .order_by(func.sum(Order.quantity).desc(), ProductVariant.variant_sku)
        .limit(limit)
        .all()
    )
    return [
        {
            "product_name": r.product_name,
            "variant_sku": r.variant_sku,
            "total_units_sold": int(r.units),
            "total_revenue": _dec(r.revenue),
        }
        for r in rows
    ]


def orders_vs_returns(db: Session, account_id: int, end: date, days: int = 7) -> list[dict]:
    """Order count and returned units per day for the `days` days ending on `end`, oldest first."""
    start = end - timedelta(days=days - 1)
    orders = dict(
        db.query(Order.order_date, func.count(Order.id))
        .filter(
            Order.account_id == account_id,
            Order.is_deleted.is_(False),
            Order.order_date.between(start, end),
        )
        .group_by(Order.order_date)
        .all()
    )
    returns = dict(
        db.query(Return.return_date, func.sum(Return.quantity))
        .filter(
            Return.account_id == account_id,
            Return.is_deleted.is_(False),
            Return.return_date.between(start, end),
        )
        .group_by(Return.return_date)
        .all()
    )
    result = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        result.append({
            "day": day,
            "day_label": day.strftime("%a"),
            "total_orders": int(orders.get(day, 0)),
            "total_returns": int(returns.get(day, 0) or 0),
        })
    return result


def inventory_value(db: Session, account_id: int) -> dict:
    value, units = (
        db.query(
            func.coalesce(func.sum(ProductVariant.stock * func.coalesce(Product.cost_price, 0)), 0),
            func.coalesce(func.sum(ProductVariant.stock), 0),
        )
        .join(Product, ProductVariant.product_id == Product.id)
        .filter(ProductVariant.account_id == account_id)
        .one()
    )
    unpriced = (
        db.query(func.count(ProductVariant.id))
        .join(Product, ProductVariant.product_id == Product.id)
        .filter(
            ProductVariant.account_id == account_id,
            ProductVariant.stock > 0,
            Product.cost_price.is_(None),
        )
        .scalar()
    )
    return {"total_value": _dec(value), "total_units": int(units), "unpriced_variants": int(unpriced or 0)}
