"""Schemas for the dashboard overview.

`OverviewSnapshot` is the read-only input the overview is composed from;
`OverviewReport` is what the API returns. Money is integer cents and every
timestamp is UTC.
"""

from datetime import datetime

from src.modules.classes.pricing import ClassPricing, PricingMode
from src.modules.classes.schedule import RecurringTimeSlot, SessionInstance
from src.modules.invoices.aggregation import (
    BilledInvoice,
    MonthBucket,
    OverdueSummary,
    RangeSummary,
)
from src.shared.schemas.base import BaseSchema, ReadModel


# --- Snapshot (input) ---


class AccountRef(ReadModel):
    """Name parts and email of the account behind a student."""

    first_name: str | None = None
    last_name: str | None = None
    email: str

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email


class ClassRecord(ReadModel):
    id: int
    name: str
    teacher_name: str | None = None
    pricing: ClassPricing
    student_ids: list[int] = []
    level_name: str | None = None


class StudentRecord(ReadModel):
    id: int
    payment_status: str | None = None
    class_ids: list[int] = []


class InvoiceRecord(BilledInvoice):
    number: str
    issue_date: datetime
    student: AccountRef | None = None


class PaymentRecord(ReadModel):
    id: int
    paid_at: datetime
    amount_cents: int
    method: str
    invoice_number: str | None = None
    payer: AccountRef | None = None


class PaymentStatusGroup(ReadModel):
    status: str | None = None
    count: int


class OverviewCounts(BaseSchema):
    total_students: int = 0
    total_teachers: int = 0
    total_classes: int = 0
    total_subjects: int = 0


class OverviewSnapshot(ReadModel):
    """Everything the overview needs, already fetched."""

    counts: OverviewCounts = OverviewCounts()
    payment_status_groups: list[PaymentStatusGroup] = []
    classes: list[ClassRecord] = []
    students: list[StudentRecord] = []
    invoices: list[InvoiceRecord] = []
    payments: list[PaymentRecord] = []
    time_slots: list[RecurringTimeSlot] = []


# --- Report (output) ---


class RecentInvoice(BaseSchema):
    id: int
    number: str
    issue_date: datetime
    status: str
    student: str | None = None
    subtotal_cents: int
    paid_cents: int


class RecentPayment(BaseSchema):
    id: int
    paid_at: datetime
    amount_cents: int
    student: str | None = None
    invoice_number: str | None = None
    method: str


class TopClass(BaseSchema):
    id: int
    name: str
    teacher: str | None = None
    student_count: int
    pricing_mode: PricingMode
    estimated_revenue_cents: int


class PaymentsOverview(BaseSchema):
    payment_status_distribution: dict[str, int] = {}
    current_month: RangeSummary = RangeSummary()
    overdue: OverdueSummary = OverdueSummary()
    recent_invoices: list[RecentInvoice] = []
    recent_payments: list[RecentPayment] = []
    monthly_revenue: list[MonthBucket] = []


class AcademicsOverview(BaseSchema):
    # A student in classes of several levels counts once in each of them.
    students_by_level: dict[str, int] = {}
    top_classes: list[TopClass] = []


class ScheduleOverview(BaseSchema):
    upcoming_sessions: list[SessionInstance] = []


class OverviewReport(BaseSchema):
    """Dashboard overview: counts, payments, academics and schedule."""

    generated_at: datetime
    counts: OverviewCounts
    payments: PaymentsOverview
    academics: AcademicsOverview
    schedule: ScheduleOverview
