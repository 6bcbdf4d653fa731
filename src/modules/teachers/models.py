"""Teacher model."""

from datetime import date

from sqlalchemy import BigInteger, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel


class Teacher(BaseModel):
    """Teacher profile attached to a user account."""

    __tablename__ = "teachers"

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    speciality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    hiring_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User")
    classes: Mapped[list["Class"]] = relationship("Class", back_populates="teacher")

    @property
    def full_name(self) -> str:
        return self.user.full_name if self.user else ""
