from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base


class Account(Base):
    """Tenant boundary. Every other table carries an account_id."""
    __tablename__ = "accounts"

    id         = Column(Integer, primary_key=True)
    name       = Column(String(200), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    products    = relationship("Product",   back_populates="account")
    import_logs = relationship("ImportLog", back_populates="account")
