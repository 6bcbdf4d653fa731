"""Schemas for Teachers module."""

from datetime import date

from pydantic import EmailStr, Field

from src.modules.classes.pricing import PricingMode
from src.modules.classes.schemas import ClassTimeResponse, EnrolledStudentResponse
from src.shared.schemas import BaseSchema

UNCATEGORIZED_LEVEL = "Uncategorized"


class TeacherResponse(BaseSchema):
    id: int
    user_id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str
    phone: str | None = None
    speciality: str | None = None
    address: str | None = None
    birth_date: date | None = None
    hiring_date: date | None = None


class TeacherUpdate(BaseSchema):
    """Schema for updating a teacher; only the fields sent are changed."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    speciality: str | None = Field(None, max_length=100)
    address: str | None = None
    birth_date: date | None = None
    hiring_date: date | None = None


class TeacherClassSummary(BaseSchema):
    """One class of a teacher with its revenue figures."""

    id: int
    name: str
    subject: str | None = None
    track: str | None = None
    level: str = UNCATEGORIZED_LEVEL
    student_count: int
    pricing_mode: PricingMode
    monthly_price_cents: int | None = None
    fixed_monthly_price_cents: int | None = None
    teacher_fixed_monthly_pay_cents: int | None = None
    overrides_count: int = 0
    total_monthly_revenue_cents: int = 0
    # Under fixed_total this is the whole total, not a per-head share.
    effective_price_per_student_cents: int = 0
    class_times: list[ClassTimeResponse] = []
    students: list[EnrolledStudentResponse] = []


class TeacherClassesResponse(BaseSchema):
    classes: list[TeacherClassSummary]
    by_level: dict[str, list[TeacherClassSummary]]
