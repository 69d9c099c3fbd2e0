from sqlalchemy import (
    Column, Integer, String, DateTime,
    Numeric, ForeignKey, func, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from ..constants import DEFAULT_LOW_STOCK_THRESHOLD
from ..database import Base


class Product(Base):
    __tablename__ = "products"

    id           = Column(Integer, primary_key=True)
    account_id   = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name = Column(String(500), nullable=False)
    cost_price   = Column(Numeric(10, 2))           # purchase cost per unit, used for inventory value
    created_at   = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at   = Column(DateTime, onupdate=func.now())

    account  = relationship("Account",        back_populates="products")
    variants = relationship("ProductVariant", back_populates="product")


class ProductVariant(Base):
    """
    Grain: (account, variant_sku)
    One stock-keeping unit of a product. `stock` is the live on-hand count that
    order imports decrement and restockable return imports increment.
    """
    __tablename__ = "product_variants"

    id                  = Column(Integer, primary_key=True)
    account_id          = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    product_id          = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    variant_sku         = Column(String(200), nullable=False)
    stock               = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=DEFAULT_LOW_STOCK_THRESHOLD)
    created_at          = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at          = Column(DateTime, onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("account_id", "variant_sku"),
        CheckConstraint("stock >= 0", name="ck_product_variants_stock_non_negative"),
    )

    product = relationship("Product", back_populates="variants")
    orders  = relationship("Order",   back_populates="variant")
    returns = relationship("Return",  back_populates="variant")
