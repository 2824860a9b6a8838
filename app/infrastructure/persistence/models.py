# app/infrastructure/persistence/models.py
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, Integer, Numeric, String

import config
from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceRecord(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(255), nullable=False, unique=True)
    supplier_name = Column(String(255), nullable=False)
    supplier_tax_id = Column(String(255), nullable=False)
    net_amount = Column(Numeric(15, 2), nullable=False)
    vat_amount = Column(Numeric(15, 2), nullable=False)
    gross_amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default=config.DEFAULT_CURRENCY, server_default=config.DEFAULT_CURRENCY)
    status = Column(
        Enum("pending", "approved", "rejected", name="invoice_status"),
        nullable=False,
        default="pending",
        server_default="pending",
    )
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
