"""Payment model."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel


class PaymentMethod(StrEnum):
    """Payment method options."""

    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"


class Payment(BaseModel):
    """Money received against an invoice."""

    __tablename__ = "payments"

    invoice_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("invoices.id"), nullable=False, index=True
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    method: Mapped[str] = mapped_column(String(20), nullable=False)

    # Relationships
    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="payments")
