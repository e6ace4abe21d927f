from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.acme.models import Base

INVOICE_STATUSES = ("pending", "paid")

# amount is a 32-bit INTEGER on Postgres.
MAX_AMOUNT_CENTS = 2_147_483_647


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        Index("idx_invoices_customer_id", "customer_id"),
        Index("idx_invoices_date", "date"),
        Index("idx_invoices_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # RESTRICT: a customer with invoices cannot be deleted.
    customer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    status: Mapped[str] = mapped_column(String(16), nullable=False)  # pending, paid
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, default=dt.date.today)
