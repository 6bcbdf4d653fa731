"""Service for the dashboard overview (admin main page)."""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.config import settings
from src.modules.academics.models import Subject, Track
from src.modules.classes.models import Class
from src.modules.classes.schedule import RecurringTimeSlot
from src.modules.dashboard.overview import compose_overview
from src.modules.dashboard.schemas import (
    AccountRef,
    ClassRecord,
    InvoiceRecord,
    OverviewCounts,
    OverviewReport,
    OverviewSnapshot,
    PaymentRecord,
    PaymentStatusGroup,
    StudentRecord,
)
from src.modules.invoices.aggregation import BilledItem
from src.modules.invoices.models import Invoice
from src.modules.payments.models import Payment
from src.modules.students.models import Student
from src.modules.teachers.models import Teacher
from src.modules.users.models import User
from src.shared.utils.dates import as_utc, utc_now

logger = logging.getLogger(__name__)


def _account(user: User | None) -> AccountRef | None:
    if user is None:
        return None
    return AccountRef(first_name=user.first_name, last_name=user.last_name, email=user.email)


def _student_account(student: Student | None) -> AccountRef | None:
    return _account(student.user) if student else None


class DashboardService:
    """Loads a snapshot of the school data and composes the overview from it."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_overview(self, now: datetime | None = None) -> OverviewReport:
        """
        Build the dashboard overview.

        Queries run one after another on the request session; an AsyncSession
        does not support concurrent statements.
        """
        now = as_utc(now) if now else utc_now()
        snapshot = await self.load_snapshot()

        report = compose_overview(
            snapshot,
            now,
            horizon_days=settings.dashboard_horizon_days,
            upcoming_limit=settings.dashboard_upcoming_limit,
            top_classes_limit=settings.dashboard_top_classes_limit,
            recent_limit=settings.dashboard_recent_limit,
            trend_months=settings.dashboard_trend_months,
        )
        logger.info(
            "Built dashboard overview: %d classes, %d invoices, %d upcoming sessions",
            len(snapshot.classes),
            len(snapshot.invoices),
            len(report.schedule.upcoming_sessions),
        )
        return report

    async def load_snapshot(self) -> OverviewSnapshot:
        # Each loader turns its rows into read models before the next query runs.
        counts = await self._counts()
        status_groups = await self._payment_status_groups()
        classes, slots = await self._classes_and_slots()
        students = await self._students()
        invoices = await self._invoices()
        payments = await self._payments()

        degenerate = [s.id for s in slots if s.end_minutes <= s.start_minutes]
        if degenerate:
            logger.warning("Class times with end before start: %s", degenerate)

        return OverviewSnapshot(
            counts=counts,
            payment_status_groups=status_groups,
            classes=classes,
            students=students,
            invoices=invoices,
            payments=payments,
            time_slots=slots,
        )

    async def _count(self, column) -> int:
        result = await self.db.execute(select(func.count(column)))
        return result.scalar() or 0

    async def _counts(self) -> OverviewCounts:
        return OverviewCounts(
            total_students=await self._count(Student.id),
            total_teachers=await self._count(Teacher.id),
            total_classes=await self._count(Class.id),
            total_subjects=await self._count(Subject.id),
        )

    async def _payment_status_groups(self) -> list[PaymentStatusGroup]:
        result = await self.db.execute(
            select(Student.payment_status, func.count(Student.id)).group_by(Student.payment_status)
        )
        return [PaymentStatusGroup(status=status, count=count) for status, count in result.all()]

    async def _classes_and_slots(self) -> tuple[list[ClassRecord], list[RecurringTimeSlot]]:
        result = await self.db.execute(
            select(Class)
            .options(
                selectinload(Class.teacher).selectinload(Teacher.user),
                selectinload(Class.students),
                selectinload(Class.class_times),
                selectinload(Class.subject).selectinload(Subject.track).selectinload(Track.level),
            )
            .order_by(Class.id)
            .execution_options(populate_existing=True)
        )
        classes: list[ClassRecord] = []
        slots: list[RecurringTimeSlot] = []
        for klass in result.scalars().all():
            name = klass.name or "Unnamed"
            teacher_name = klass.teacher.full_name if klass.teacher and klass.teacher.user else None
            classes.append(
                ClassRecord(
                    id=klass.id,
                    name=name,
                    teacher_name=teacher_name,
                    pricing=klass.pricing,
                    student_ids=[s.id for s in klass.students],
                    level_name=klass.level_name,
                )
            )
            slots.extend(
                RecurringTimeSlot(
                    id=t.id,
                    class_id=klass.id,
                    class_name=name,
                    teacher_name=teacher_name,
                    day_of_week=t.day_of_week,
                    start_minutes=t.start_minutes,
                    end_minutes=t.end_minutes,
                )
                for t in klass.class_times
            )
        return classes, slots

    async def _students(self) -> list[StudentRecord]:
        result = await self.db.execute(
            select(Student)
            .options(selectinload(Student.classes))
            .order_by(Student.id)
            .execution_options(populate_existing=True)
        )
        return [
            StudentRecord(
                id=student.id,
                payment_status=student.payment_status,
                class_ids=[c.id for c in student.classes],
            )
            for student in result.scalars().all()
        ]

    async def _invoices(self) -> list[InvoiceRecord]:
        result = await self.db.execute(
            select(Invoice)
            .options(
                selectinload(Invoice.items),
                selectinload(Invoice.student).selectinload(Student.user),
            )
            .order_by(Invoice.id)
            .execution_options(populate_existing=True)
        )
        return [
            InvoiceRecord(
                id=invoice.id,
                number=invoice.number,
                status=invoice.status,
                issue_date=as_utc(invoice.issue_date),
                student=_student_account(invoice.student),
                items=[
                    BilledItem(
                        billed_month=item.billed_month,
                        line_total_cents=item.line_total_cents,
                        paid_cents=item.paid_cents,
                    )
                    for item in invoice.items
                ],
            )
            for invoice in result.scalars().all()
        ]

    async def _payments(self) -> list[PaymentRecord]:
        result = await self.db.execute(
            select(Payment)
            .options(
                selectinload(Payment.invoice)
                .selectinload(Invoice.student)
                .selectinload(Student.user)
            )
            .order_by(Payment.id)
            .execution_options(populate_existing=True)
        )
        return [
            PaymentRecord(
                id=payment.id,
                paid_at=as_utc(payment.paid_at),
                amount_cents=payment.amount_cents,
                method=payment.method,
                invoice_number=payment.invoice.number if payment.invoice else None,
                payer=_student_account(payment.invoice.student) if payment.invoice else None,
            )
            for payment in result.scalars().all()
        ]
