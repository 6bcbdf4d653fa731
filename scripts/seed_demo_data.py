#!/usr/bin/env python3
"""
Fill the database with realistic demo data for a tutoring center.

The data is not random: names, classes, weekly times and prices are chosen
so that the dashboard overview looks meaningful.

Usage:
    python scripts/seed_demo_data.py --dry-run   # nothing written
    python scripts/seed_demo_data.py --confirm   # write to the database

Requires: migrations applied (alembic upgrade head), database reachable.
"""

import asyncio
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.database.session import async_session
from src.modules.academics.models import Level, Subject, Track
from src.modules.classes.models import Class, ClassTime, StudentPriceOverride
from src.modules.classes.pricing import PricingMode
from src.modules.invoices.models import Invoice, InvoiceItem, InvoiceStatus
from src.modules.payments.models import Payment, PaymentMethod
from src.modules.students.models import Student, StudentPaymentStatus
from src.modules.teachers.models import Teacher
from src.modules.users.models import User, UserRole
from src.shared.utils.dates import first_of_month, shift_months

ADMIN_EMAIL = "admin@tutoring.demo"

# Level -> track -> subjects
HIERARCHY = {
    "Primary": {"General": ["Maths", "French"]},
    "Secondary": {"Scientific": ["Physics", "Maths"], "Literary": ["Philosophy"]},
}

# first name, last name, speciality, phone
TEACHERS_DATA = [
    ("Amina", "Diallo", "Mathematics", "+212600000101"),
    ("Karim", "Benali", "Physics", "+212600000102"),
    ("Sofia", "Martins", "Languages", "+212600000103"),
]

# first name, last name, payment status
STUDENTS_DATA = [
    ("Lina", "Haddad", StudentPaymentStatus.PAID),
    ("Omar", "Idrissi", StudentPaymentStatus.PENDING),
    ("Yasmine", "Alaoui", StudentPaymentStatus.PAID),
    ("Adam", "Cherkaoui", StudentPaymentStatus.OVERDUE),
    ("Nora", "Tazi", StudentPaymentStatus.PAID),
    ("Ilyas", "Berrada", None),
    ("Salma", "Fassi", StudentPaymentStatus.PENDING),
    ("Hugo", "Lefebvre", StudentPaymentStatus.PAID),
]

# name, teacher index, (level, track, subject) or None, pricing, weekly times, student indexes
# pricing: (mode, monthly price per student, fixed monthly total, teacher fixed pay), cents
# times: (day of week with 0 = Sunday, start minutes, end minutes), UTC
CLASSES_DATA = [
    (
        "Primary General Maths",
        0,
        ("Primary", "General", "Maths"),
        (PricingMode.PER_STUDENT, 25000, None, None),
        [(1, 16 * 60, 17 * 60), (3, 16 * 60, 17 * 60)],
        [0, 1, 2, 5],
    ),
    (
        "Secondary Scientific Physics",
        1,
        ("Secondary", "Scientific", "Physics"),
        (PricingMode.PER_STUDENT, 40000, None, 150000),
        [(2, 18 * 60, 19 * 60 + 30), (6, 10 * 60, 11 * 60 + 30)],
        [3, 4, 6, 7],
    ),
    (
        "Secondary Scientific Maths Intensive",
        0,
        ("Secondary", "Scientific", "Maths"),
        (PricingMode.FIXED_TOTAL, None, 120000, 80000),
        [(0, 9 * 60, 12 * 60)],
        [3, 4],
    ),
    (
        "French Conversation",
        2,
        None,
        (PricingMode.PER_STUDENT, 18000, None, None),
        [(4, 17 * 60, 18 * 60)],
        [0, 2, 7],
    ),
]

# (student index, class index, monthly price in cents)
OVERRIDES_DATA = [(5, 0, 20000)]

# Months of invoices to generate, ending with the current month
INVOICE_MONTHS = 3


async def seed_users(session: AsyncSession) -> bool:
    """Create the admin account. Returns False when demo data already exists."""
    result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
    if result.scalar_one_or_none():
        print("  Demo data already exists, skip.")
        return False
    session.add(
        User(email=ADMIN_EMAIL, first_name="Center", last_name="Admin", role=UserRole.ADMIN.value)
    )
    await session.flush()
    print("  Created admin user.")
    return True


async def seed_hierarchy(session: AsyncSession) -> dict[tuple[str, str, str], int]:
    """Levels, tracks and subjects. Returns (level, track, subject) -> subject id."""
    subject_ids: dict[tuple[str, str, str], int] = {}
    for level_name, tracks in HIERARCHY.items():
        level = Level(name=level_name)
        for track_name, subjects in tracks.items():
            track = Track(name=track_name, subjects=[Subject(name=s) for s in subjects])
            level.tracks.append(track)
        session.add(level)
        await session.flush()
        for track in level.tracks:
            for subject in track.subjects:
                subject_ids[(level_name, track.name, subject.name)] = subject.id
    print(f"  Created {len(HIERARCHY)} levels and {len(subject_ids)} subjects.")
    return subject_ids


async def seed_teachers(session: AsyncSession) -> list[Teacher]:
    teachers = []
    for first_name, last_name, speciality, phone in TEACHERS_DATA:
        user = User(
            email=f"{first_name.lower()}.{last_name.lower()}@tutoring.demo",
            first_name=first_name,
            last_name=last_name,
            role=UserRole.TEACHER.value,
        )
        teachers.append(Teacher(user=user, speciality=speciality, phone=phone))
    session.add_all(teachers)
    await session.flush()
    print(f"  Created {len(teachers)} teachers.")
    return teachers


async def seed_students(session: AsyncSession) -> list[Student]:
    students = []
    for first_name, last_name, status in STUDENTS_DATA:
        user = User(
            email=f"{first_name.lower()}.{last_name.lower()}@tutoring.demo",
            first_name=first_name,
            last_name=last_name,
            role=UserRole.STUDENT.value,
        )
        students.append(Student(user=user, payment_status=status.value if status else None))
    session.add_all(students)
    await session.flush()
    print(f"  Created {len(students)} students.")
    return students


async def seed_classes(
    session: AsyncSession,
    subject_ids: dict[tuple[str, str, str], int],
    teachers: list[Teacher],
    students: list[Student],
) -> list[Class]:
    classes = []
    for name, teacher_idx, subject_key, pricing, times, student_idxs in CLASSES_DATA:
        mode, per_student, fixed_total, teacher_pay = pricing
        classes.append(
            Class(
                name=name,
                teacher_id=teachers[teacher_idx].id,
                subject_id=subject_ids[subject_key] if subject_key else None,
                pricing_mode=mode.value,
                monthly_price_cents=per_student,
                fixed_monthly_price_cents=fixed_total,
                teacher_fixed_monthly_pay_cents=teacher_pay,
                students=[students[i] for i in student_idxs],
                class_times=[
                    ClassTime(day_of_week=day, start_minutes=start, end_minutes=end)
                    for day, start, end in times
                ],
            )
        )
    session.add_all(classes)
    await session.flush()

    for student_idx, class_idx, price in OVERRIDES_DATA:
        session.add(
            StudentPriceOverride(
                student_id=students[student_idx].id,
                class_id=classes[class_idx].id,
                price_override_cents=price,
            )
        )
    await session.flush()
    print(f"  Created {len(classes)} classes and {len(OVERRIDES_DATA)} price overrides.")
    return classes


def _student_price(class_idx: int, student_idx: int) -> int:
    """Monthly price one student pays for one class (override first)."""
    for s_idx, c_idx, price in OVERRIDES_DATA:
        if (s_idx, c_idx) == (student_idx, class_idx):
            return price
    mode, per_student, fixed_total, _ = CLASSES_DATA[class_idx][3]
    if mode == PricingMode.FIXED_TOTAL:
        return fixed_total or 0
    return per_student or 0


async def seed_invoices_and_payments(
    session: AsyncSession, students: list[Student], today: date
) -> tuple[int, int]:
    """
    One invoice per student and month for the last INVOICE_MONTHS months.

    Older months are paid, except for students marked overdue; the current
    month is partly paid.
    """
    invoices = 0
    payments = 0
    current_month = first_of_month(today)
    for months_ago in range(INVOICE_MONTHS - 1, -1, -1):
        billed_month = shift_months(current_month, -months_ago)
        issued_at = datetime(
            billed_month.year, billed_month.month, billed_month.day, 8, 0, tzinfo=timezone.utc
        )
        for student_idx, student in enumerate(students):
            lines = [
                (CLASSES_DATA[class_idx][0], _student_price(class_idx, student_idx))
                for class_idx, data in enumerate(CLASSES_DATA)
                if student_idx in data[5]
            ]
            if not lines:
                continue

            overdue = STUDENTS_DATA[student_idx][2] == StudentPaymentStatus.OVERDUE
            if months_ago == 0:
                status = InvoiceStatus.PENDING
                paid_share = 0.5 if student_idx % 2 == 0 else 0.0
            elif overdue:
                status = InvoiceStatus.OVERDUE
                paid_share = 0.0
            else:
                status = InvoiceStatus.PAID
                paid_share = 1.0

            items = [
                InvoiceItem(
                    description=f"{name} {billed_month:%B %Y}",
                    billed_month=billed_month,
                    unit_price_cents=price,
                    quantity=1,
                    line_total_cents=price,
                    paid_cents=int(price * paid_share),
                )
                for name, price in lines
            ]
            invoice = Invoice(
                number=f"INV-{billed_month:%Y%m}-{student_idx + 1:04d}",
                student_id=student.id,
                status=status.value,
                issue_date=issued_at,
                due_date=billed_month + timedelta(days=10),
                items=items,
            )
            session.add(invoice)
            await session.flush()
            invoices += 1

            paid = sum(item.paid_cents for item in items)
            if paid:
                session.add(
                    Payment(
                        invoice_id=invoice.id,
                        amount_cents=paid,
                        paid_at=issued_at + timedelta(days=3 + student_idx % 5),
                        method=(PaymentMethod.CASH if student_idx % 3 else PaymentMethod.BANK_TRANSFER).value,
                    )
                )
                payments += 1
    await session.flush()
    print(f"  Created {invoices} invoices and {payments} payments.")
    return invoices, payments


async def run_seed(session: AsyncSession, dry_run: bool, today: date | None = None) -> None:
    if not await seed_users(session):
        return

    subject_ids = await seed_hierarchy(session)
    teachers = await seed_teachers(session)
    students = await seed_students(session)
    await seed_classes(session, subject_ids, teachers, students)
    await seed_invoices_and_payments(
        session, students, today or datetime.now(timezone.utc).date()
    )

    if dry_run:
        await session.rollback()
        print("\n[DRY-RUN] Rolled back, no data written.")
    else:
        await session.commit()
        print("\nSeed completed successfully.")


async def main() -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Seed database with tutoring center demo data")
    parser.add_argument("--dry-run", action="store_true", help="Do not commit")
    parser.add_argument("--confirm", action="store_true", help="Commit changes")
    args = parser.parse_args()
    if not args.dry_run and not args.confirm:
        print("Use --dry-run or --confirm")
        sys.exit(1)

    print("Database:", settings.database_url.split("@")[-1] if "@" in settings.database_url else "?")
    print("Mode:", "DRY-RUN" if args.dry_run else "CONFIRM")
    async with async_session() as session:
        await run_seed(session, dry_run=args.dry_run)
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
