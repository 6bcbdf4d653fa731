"""Class, ClassTime, enrollment and per-student price override models."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import Base, BaseModel
from src.modules.classes.pricing import ClassPricing, PricingMode

# Enrollment: which students attend which classes
class_students = Table(
    "class_students",
    Base.metadata,
    Column("class_id", BigInteger, ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", BigInteger, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
)


class Class(BaseModel):
    """
    A taught class: one teacher, optional subject, enrolled students,
    weekly times and a monthly pricing policy.
    """

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    teacher_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("teachers.id"), nullable=False, index=True
    )
    subject_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Pricing (cents)
    pricing_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PricingMode.PER_STUDENT.value
    )
    monthly_price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fixed_monthly_price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    teacher_fixed_monthly_pay_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    teacher: Mapped["Teacher"] = relationship("Teacher", back_populates="classes")
    subject: Mapped["Subject | None"] = relationship("Subject")
    students: Mapped[list["Student"]] = relationship(
        "Student", secondary=class_students, back_populates="classes"
    )
    class_times: Mapped[list["ClassTime"]] = relationship(
        "ClassTime",
        back_populates="klass",
        cascade="all, delete-orphan",
        order_by=lambda: [ClassTime.day_of_week, ClassTime.start_minutes],
    )
    price_overrides: Mapped[list["StudentPriceOverride"]] = relationship(
        "StudentPriceOverride", back_populates="klass", cascade="all, delete-orphan"
    )

    @property
    def pricing(self) -> ClassPricing:
        return ClassPricing(
            mode=PricingMode(self.pricing_mode),
            per_student_cents=self.monthly_price_cents,
            fixed_total_cents=self.fixed_monthly_price_cents,
            teacher_fixed_pay_cents=self.teacher_fixed_monthly_pay_cents,
        )

    @property
    def level_name(self) -> str | None:
        """Level reached through subject -> track -> level; relationships must be loaded."""
        return self.subject.level_name if self.subject else None


class ClassTime(BaseModel):
    """Weekly recurring meeting window of a class (UTC)."""

    __tablename__ = "class_times"

    class_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0 = Sunday
    start_minutes: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes since 00:00
    end_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    klass: Mapped["Class"] = relationship("Class", back_populates="class_times")


class StudentPriceOverride(BaseModel):
    """Per-student monthly price for one class, replacing the class price when billing."""

    __tablename__ = "student_price_overrides"

    student_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    class_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    price_override_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    klass: Mapped["Class"] = relationship("Class", back_populates="price_overrides")

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_price_override_student_class"),
    )
