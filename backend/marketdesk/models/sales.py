from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime,
    Numeric, ForeignKey, Text, func, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship
from ..database import Base


class Order(Base):
    """
    One marketplace order line. Soft-deleted rows keep their external_order_id
    but no longer count as duplicates for imports.
    """
    __tablename__ = "orders"

    id                = Column(Integer, primary_key=True)
    account_id        = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    external_order_id = Column(String(200))
    order_date        = Column(Date, nullable=False)
    platform          = Column(String(30), nullable=False)
    variant_id        = Column(Integer, ForeignKey("product_variants.id"), nullable=False)
    quantity          = Column(Integer, nullable=False)
    selling_price     = Column(Numeric(10, 2), nullable=False)
    total_amount      = Column(Numeric(14, 2), nullable=False)   # quantity × selling_price
    is_deleted        = Column(Boolean, default=False, nullable=False)
    created_at        = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_orders_account_external_id", "account_id", "external_order_id"),
        CheckConstraint("quantity > 0"),
    )

    variant = relationship("ProductVariant", back_populates="orders")


class Return(Base):
    __tablename__ = "returns"

    id                 = Column(Integer, primary_key=True)
    account_id         = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    external_return_id = Column(String(200))
    return_date        = Column(Date, nullable=False)
    platform           = Column(String(30), nullable=False)
    variant_id         = Column(Integer, ForeignKey("product_variants.id"), nullable=False)
    quantity           = Column(Integer, nullable=False)
    refund_amount      = Column(Numeric(10, 2), nullable=False)
    return_type        = Column(String(30))     # RTO | DTO | CUSTOMER_RETURN | EXCHANGE | OTHER
    return_reason      = Column(Text)
    restockable        = Column(Boolean, default=True, nullable=False)
    is_deleted         = Column(Boolean, default=False, nullable=False)
    created_at         = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_returns_account_external_id", "account_id", "external_return_id"),
        CheckConstraint("quantity > 0"),
    )

    variant = relationship("ProductVariant", back_populates="returns")
