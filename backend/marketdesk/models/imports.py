from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import relationship
from ..database import Base


class ImportLog(Base):
    """
    Audit log for bulk CSV imports (orders and returns).
    A 'success' row is written inside the import transaction; a 'failed' row is
    written separately after the rollback of a fatal commit error.
    """
    __tablename__ = "import_logs"

    id               = Column(Integer, primary_key=True)
    account_id       = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    source_type      = Column(String(30), nullable=False)   # 'orders_csv' | 'returns_csv'
    file_name        = Column(String(500))
    status           = Column(String(20), nullable=False, default="running")
    total_rows       = Column(Integer, default=0)
    records_imported = Column(Integer, default=0)
    duplicates       = Column(Integer, default=0)
    stock_errors     = Column(Integer, default=0)
    failed           = Column(Integer, default=0)
    error_message    = Column(Text)
    start_time       = Column(DateTime, server_default=func.now(), nullable=False)
    end_time         = Column(DateTime)
    created_at       = Column(DateTime, server_default=func.now(), nullable=False)

    account = relationship("Account", back_populates="import_logs")
