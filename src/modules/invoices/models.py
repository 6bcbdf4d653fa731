"""Invoice and InvoiceItem models.

Invoices are created, paid and moved to overdue by the billing lifecycle;
reporting only reads them.
"""

from datetime import date, datetime
from enum import StrEnum

from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel


class InvoiceStatus(StrEnum):
    """Invoice status enumeration."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Invoice(BaseModel):
    """Monthly invoice for a student."""

    __tablename__ = "invoices"

    number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    student_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("students.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvoiceStatus.PENDING.value, index=True
    )
    issue_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student")
    items: Mapped[list["InvoiceItem"]] = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete-orphan"
    )
    payments: Mapped[list["Payment"]] = relationship("Payment", back_populates="invoice")


class InvoiceItem(BaseModel):
    """Line item of an invoice, attributed to one billed month."""

    __tablename__ = "invoice_items"

    invoice_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    class_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("classes.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    billed_month: Mapped[date] = mapped_column(Date, nullable=False, index=True)  # first day of month
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    line_total_cents: Mapped[int] = mapped_column(Integer, nullable=False)  # quantity * unit price
    paid_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="items")
