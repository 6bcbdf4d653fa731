"""Monthly pricing rules for classes.

A class is billed either per enrolled student or as one fixed monthly total.
These functions are shared by the class detail view, the teacher class
listing and the dashboard rollups, so they must stay pure.
"""

from enum import StrEnum

from src.shared.schemas.base import ReadModel
from src.shared.utils.money import Cents, cents_or_zero


class PricingMode(StrEnum):
    """How the monthly charge of a class is derived."""

    PER_STUDENT = "per_student"
    FIXED_TOTAL = "fixed_total"


class ClassPricing(ReadModel):
    """
    Pricing policy of one class.

    Only the amount matching `mode` is used; the other one is ignored.
    """

    mode: PricingMode = PricingMode.PER_STUDENT
    per_student_cents: int | None = None
    fixed_total_cents: int | None = None
    teacher_fixed_pay_cents: int | None = None


def compute_monthly_revenue(pricing: ClassPricing, enrolled_count: int) -> Cents:
    """
    Monthly revenue of a class.

    FIXED_TOTAL ignores enrollment; PER_STUDENT multiplies the per-student
    price by the number of enrolled students. Missing prices count as zero.
    """
    if pricing.mode == PricingMode.FIXED_TOTAL:
        return cents_or_zero(pricing.fixed_total_cents)
    return cents_or_zero(pricing.per_student_cents) * enrolled_count


def effective_price_per_student(pricing: ClassPricing) -> Cents:
    """
    Price shown per student.

    Under FIXED_TOTAL this is the whole fixed total, not a share of it:
    every student is currently invoiced the full amount.
    """
    if pricing.mode == PricingMode.FIXED_TOTAL:
        return cents_or_zero(pricing.fixed_total_cents)
    return cents_or_zero(pricing.per_student_cents)
