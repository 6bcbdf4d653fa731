"""Composition of the dashboard overview from a data snapshot.

Pure: no I/O, no clock. The caller passes `now` and the snapshot.
"""

from datetime import datetime

from src.modules.classes.pricing import compute_monthly_revenue
from src.modules.classes.schedule import (
    DEFAULT_HORIZON_DAYS,
    RecurringTimeSlot,
    SessionInstance,
    expand,
)
from src.modules.dashboard.schemas import (
    AcademicsOverview,
    ClassRecord,
    InvoiceRecord,
    OverviewReport,
    OverviewSnapshot,
    PaymentRecord,
    PaymentsOverview,
    PaymentStatusGroup,
    RecentInvoice,
    RecentPayment,
    ScheduleOverview,
    StudentRecord,
    TopClass,
)
from src.modules.invoices.aggregation import (
    aggregate_by_month,
    month_range,
    overdue_totals,
    summarize_range,
)
from src.shared.utils.dates import as_utc

UNASSIGNED_LEVEL = "Unassigned"
UNKNOWN_PAYMENT_STATUS = "unknown"

TOP_CLASSES_LIMIT = 5
RECENT_LIMIT = 5
UPCOMING_LIMIT = 15
TREND_MONTHS = 6


def payment_status_distribution(groups: list[PaymentStatusGroup]) -> dict[str, int]:
    distribution: dict[str, int] = {}
    for group in groups:
        key = group.status or UNKNOWN_PAYMENT_STATUS
        distribution[key] = distribution.get(key, 0) + group.count
    return distribution


def top_classes(classes: list[ClassRecord], limit: int = TOP_CLASSES_LIMIT) -> list[TopClass]:
    """Classes by enrolled count, largest first; ties keep snapshot order."""
    rows = [
        TopClass(
            id=c.id,
            name=c.name,
            teacher=c.teacher_name,
            student_count=len(c.student_ids),
            pricing_mode=c.pricing.mode,
            estimated_revenue_cents=compute_monthly_revenue(c.pricing, len(c.student_ids)),
        )
        for c in classes
    ]
    rows.sort(key=lambda row: row.student_count, reverse=True)
    return rows[:limit]


def students_by_level(
    students: list[StudentRecord], classes: list[ClassRecord]
) -> dict[str, int]:
    """
    Count students per level reached through their classes.

    A student counts once in every distinct level it reaches, and once in
    "Unassigned" when it reaches none.
    """
    level_of_class = {c.id: c.level_name for c in classes}
    counts: dict[str, int] = {}
    for student in students:
        levels: list[str] = []
        for class_id in student.class_ids:
            name = level_of_class.get(class_id)
            if name and name not in levels:
                levels.append(name)
        for name in levels or [UNASSIGNED_LEVEL]:
            counts[name] = counts.get(name, 0) + 1
    return counts


def upcoming_sessions(
    slots: list[RecurringTimeSlot],
    now: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    limit: int = UPCOMING_LIMIT,
) -> list[SessionInstance]:
    sessions = expand(slots, now, horizon_days)
    # ISO strings of UTC instants sort chronologically.
    sessions.sort(key=lambda s: s.start.isoformat())
    return sessions[:limit]


def recent_invoices(invoices: list[InvoiceRecord], limit: int = RECENT_LIMIT) -> list[RecentInvoice]:
    latest = sorted(invoices, key=lambda inv: as_utc(inv.issue_date), reverse=True)[:limit]
    return [
        RecentInvoice(
            id=inv.id,
            number=inv.number,
            issue_date=as_utc(inv.issue_date),
            status=inv.status,
            student=inv.student.display_name if inv.student else None,
            subtotal_cents=inv.subtotal_cents,
            paid_cents=inv.paid_cents,
        )
        for inv in latest
    ]


def recent_payments(payments: list[PaymentRecord], limit: int = RECENT_LIMIT) -> list[RecentPayment]:
    latest = sorted(payments, key=lambda p: as_utc(p.paid_at), reverse=True)[:limit]
    return [
        RecentPayment(
            id=p.id,
            paid_at=as_utc(p.paid_at),
            amount_cents=p.amount_cents,
            student=p.payer.display_name if p.payer else None,
            invoice_number=p.invoice_number,
            method=p.method,
        )
        for p in latest
    ]


def compose_overview(
    snapshot: OverviewSnapshot,
    now: datetime,
    *,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    upcoming_limit: int = UPCOMING_LIMIT,
    top_classes_limit: int = TOP_CLASSES_LIMIT,
    recent_limit: int = RECENT_LIMIT,
    trend_months: int = TREND_MONTHS,
) -> OverviewReport:
    """Build the dashboard overview for `now` from an already loaded snapshot."""
    now = as_utc(now)
    items = [item for invoice in snapshot.invoices for item in invoice.items]
    month_start, month_end = month_range(now)

    payments = PaymentsOverview(
        payment_status_distribution=payment_status_distribution(snapshot.payment_status_groups),
        current_month=summarize_range(items, month_start, month_end),
        overdue=overdue_totals(snapshot.invoices),
        recent_invoices=recent_invoices(snapshot.invoices, recent_limit),
        recent_payments=recent_payments(snapshot.payments, recent_limit),
        monthly_revenue=aggregate_by_month(items, trend_months, now),
    )
    academics = AcademicsOverview(
        students_by_level=students_by_level(snapshot.students, snapshot.classes),
        top_classes=top_classes(snapshot.classes, top_classes_limit),
    )
    schedule = ScheduleOverview(
        upcoming_sessions=upcoming_sessions(
            snapshot.time_slots, now, horizon_days, upcoming_limit
        ),
    )

    return OverviewReport(
        generated_at=now,
        counts=snapshot.counts,
        payments=payments,
        academics=academics,
        schedule=schedule,
    )
