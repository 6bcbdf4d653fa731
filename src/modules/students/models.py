"""Student model."""

from enum import StrEnum

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel
from src.modules.classes.models import class_students


class StudentPaymentStatus(StrEnum):
    """Billing standing of a student, kept up to date by the invoice lifecycle."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class Student(BaseModel):
    """Student attached to a user account and enrolled in classes."""

    __tablename__ = "students"

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    payment_status: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)

    # Relationships
    user: Mapped["User"] = relationship("User")
    classes: Mapped[list["Class"]] = relationship(
        "Class", secondary=class_students, back_populates="students"
    )
