"""Schemas for Classes module."""

from pydantic import BaseModel, Field, model_validator

from src.modules.classes.pricing import PricingMode
from src.shared.schemas import BaseSchema


# --- Class Schemas ---


class ClassCreate(BaseModel):
    """
    Schema for creating a class.

    When `name` is omitted and a subject is given, the name is built from
    the hierarchy: "<level> <track> <subject> [custom_suffix]".
    """

    teacher_id: int
    name: str | None = Field(None, min_length=1, max_length=255)
    subject_id: int | None = None
    custom_suffix: str | None = Field(None, max_length=100)
    pricing_mode: PricingMode = PricingMode.PER_STUDENT
    monthly_price_cents: int | None = Field(None, ge=0)
    fixed_monthly_price_cents: int | None = Field(None, ge=0)
    teacher_fixed_monthly_pay_cents: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def require_name_source(self) -> "ClassCreate":
        if not self.name and self.subject_id is None:
            raise ValueError("Either name or subject_id is required")
        return self


class ClassUpdate(BaseModel):
    """Schema for updating a class; a new subject without a name renames it."""

    name: str | None = Field(None, min_length=1, max_length=255)
    subject_id: int | None = None


class ClassPricingUpdate(BaseModel):
    """Schema for changing the pricing policy; omitted amounts are left as they are."""

    pricing_mode: PricingMode
    monthly_price_cents: int | None = Field(None, ge=0)
    fixed_monthly_price_cents: int | None = Field(None, ge=0)
    teacher_fixed_monthly_pay_cents: int | None = Field(None, ge=0)


# --- Class Time Schemas ---


class ClassTimeCreate(BaseModel):
    """Weekly slot: 0 = Sunday, minutes since midnight UTC."""

    day_of_week: int = Field(..., ge=0, le=6)
    start_minutes: int = Field(..., ge=0, le=1439)
    end_minutes: int = Field(..., ge=0, le=1439)


class ClassTimeUpdate(BaseModel):
    day_of_week: int | None = Field(None, ge=0, le=6)
    start_minutes: int | None = Field(None, ge=0, le=1439)
    end_minutes: int | None = Field(None, ge=0, le=1439)


class ClassTimeResponse(BaseSchema):
    id: int
    class_id: int
    day_of_week: int
    start_minutes: int
    end_minutes: int


# --- Price Override Schemas ---


class PriceOverrideSet(BaseModel):
    price_override_cents: int = Field(..., ge=0)


class PriceOverrideResponse(BaseSchema):
    id: int
    class_id: int
    student_id: int
    price_override_cents: int


# --- Responses ---


class EnrolledStudentResponse(BaseSchema):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    @classmethod
    def from_student(cls, student) -> "EnrolledStudentResponse":
        user = student.user
        return cls(
            id=student.id,
            first_name=user.first_name if user else None,
            last_name=user.last_name if user else None,
            email=user.email if user else None,
        )


class ClassResponse(BaseSchema):
    """Schema for class response."""

    id: int
    name: str
    teacher_id: int
    teacher_name: str | None = None
    subject_id: int | None = None
    subject: str | None = None
    track: str | None = None
    level: str | None = None
    pricing_mode: PricingMode
    monthly_price_cents: int | None = None
    fixed_monthly_price_cents: int | None = None
    teacher_fixed_monthly_pay_cents: int | None = None
    student_count: int = 0


class ClassDetailResponse(ClassResponse):
    """Class with students, weekly times and the computed monthly income."""

    total_monthly_income_cents: int = 0
    students: list[EnrolledStudentResponse] = []
    class_times: list[ClassTimeResponse] = []
