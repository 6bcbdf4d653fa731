"""Service for teachers and their class listings."""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import DuplicateError, NotFoundError
from src.modules.academics.models import Subject, Track
from src.modules.classes.models import Class
from src.modules.classes.pricing import compute_monthly_revenue, effective_price_per_student
from src.modules.classes.schemas import ClassTimeResponse, EnrolledStudentResponse
from src.modules.students.models import Student
from src.modules.teachers.models import Teacher
from src.modules.teachers.schemas import (
    UNCATEGORIZED_LEVEL,
    TeacherClassesResponse,
    TeacherClassSummary,
    TeacherUpdate,
)
from src.modules.users.models import User

logger = logging.getLogger(__name__)

USER_FIELDS = ("email", "first_name", "last_name")
TEACHER_FIELDS = ("phone", "speciality", "address", "birth_date", "hiring_date")


def summarize_class(klass: Class) -> TeacherClassSummary:
    """Revenue summary of a class with students, times, subject and overrides loaded."""
    subject = klass.subject
    pricing = klass.pricing
    student_count = len(klass.students)
    return TeacherClassSummary(
        id=klass.id,
        name=klass.name,
        subject=subject.name if subject else None,
        track=subject.track.name if subject and subject.track else None,
        level=klass.level_name or UNCATEGORIZED_LEVEL,
        student_count=student_count,
        pricing_mode=pricing.mode,
        monthly_price_cents=klass.monthly_price_cents,
        fixed_monthly_price_cents=klass.fixed_monthly_price_cents,
        teacher_fixed_monthly_pay_cents=klass.teacher_fixed_monthly_pay_cents,
        overrides_count=len(klass.price_overrides),
        total_monthly_revenue_cents=compute_monthly_revenue(pricing, student_count),
        effective_price_per_student_cents=effective_price_per_student(pricing),
        class_times=[ClassTimeResponse.model_validate(t) for t in klass.class_times],
        students=[EnrolledStudentResponse.from_student(s) for s in klass.students],
    )


class TeacherService:
    """Read access to teachers and the classes they teach."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_teachers(self, search: str | None = None) -> list[Teacher]:
        """List teachers, optionally filtered by name, email, phone or speciality."""
        stmt = select(Teacher).join(Teacher.user).options(selectinload(Teacher.user))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                    Teacher.phone.ilike(pattern),
                    Teacher.speciality.ilike(pattern),
                )
            )
        stmt = stmt.order_by(User.last_name, User.first_name, Teacher.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_teacher(self, teacher_id: int) -> Teacher:
        stmt = select(Teacher).where(Teacher.id == teacher_id).options(selectinload(Teacher.user))
        result = await self.session.execute(stmt)
        teacher = result.scalar_one_or_none()
        if not teacher:
            raise NotFoundError("Teacher", teacher_id)
        return teacher

    async def update_teacher(self, teacher_id: int, data: TeacherUpdate) -> Teacher:
        """
        Apply the fields present in the request to the teacher and its user
        account. Email cannot be cleared and must stay unique.
        """
        teacher = await self.get_teacher(teacher_id)
        user = teacher.user
        sent = data.model_fields_set

        if "email" in sent and data.email is not None and data.email != user.email:
            result = await self.session.execute(select(User.id).where(User.email == data.email))
            if result.scalar_one_or_none() is not None:
                raise DuplicateError("User", "email", data.email)

        for field in USER_FIELDS:
            value = getattr(data, field)
            if field in sent and not (field == "email" and value is None):
                setattr(user, field, value)
        for field in TEACHER_FIELDS:
            if field in sent:
                setattr(teacher, field, getattr(data, field))

        await self.session.flush()
        logger.info("Updated teacher %s", teacher_id)
        return teacher

    async def list_teacher_classes(self, teacher_id: int) -> TeacherClassesResponse:
        """
        Classes of a teacher by name with revenue figures, plus the same
        summaries grouped by level name.
        """
        await self.get_teacher(teacher_id)

        stmt = (
            select(Class)
            .where(Class.teacher_id == teacher_id)
            .options(
                selectinload(Class.students).selectinload(Student.user),
                selectinload(Class.subject).selectinload(Subject.track).selectinload(Track.level),
                selectinload(Class.class_times),
                selectinload(Class.price_overrides),
            )
            .order_by(Class.name, Class.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        classes = [summarize_class(c) for c in result.scalars().all()]

        by_level: dict[str, list[TeacherClassSummary]] = {}
        for summary in classes:
            by_level.setdefault(summary.level, []).append(summary)

        return TeacherClassesResponse(classes=classes, by_level=by_level)
