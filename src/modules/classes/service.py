"""Service for classes: CRUD, enrollment, weekly times, pricing and overrides."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import NotFoundError, ValidationError
from src.modules.academics.models import Subject, Track
from src.modules.academics.service import AcademicsService
from src.modules.classes.models import Class, ClassTime, StudentPriceOverride
from src.modules.classes.pricing import compute_monthly_revenue
from src.modules.classes.schemas import (
    ClassCreate,
    ClassPricingUpdate,
    ClassTimeCreate,
    ClassTimeUpdate,
    ClassUpdate,
)
from src.modules.students.models import Student
from src.modules.teachers.models import Teacher

logger = logging.getLogger(__name__)


def _class_load_options():
    return (
        selectinload(Class.teacher).selectinload(Teacher.user),
        selectinload(Class.students).selectinload(Student.user),
        selectinload(Class.class_times),
        selectinload(Class.subject).selectinload(Subject.track).selectinload(Track.level),
        selectinload(Class.price_overrides),
    )


def hierarchy_name(subject: Subject, suffix: str | None = None) -> str:
    """Default class name "<level> <track> <subject> [suffix]"; relationships must be loaded."""
    parts = [subject.track.level.name, subject.track.name, subject.name, suffix]
    return " ".join(part for part in parts if part)


def monthly_income_cents(klass: Class) -> int:
    """Monthly income of a loaded class under its pricing policy."""
    return compute_monthly_revenue(klass.pricing, len(klass.students))


class ClassService:
    """Service for class management."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.academics = AcademicsService(session)

    # --- Classes ---

    async def list_classes(self) -> list[Class]:
        stmt = select(Class).options(*_class_load_options()).order_by(Class.name, Class.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_class(self, class_id: int) -> Class:
        """Get class by ID with teacher, students, times, subject and overrides loaded."""
        stmt = (
            select(Class)
            .where(Class.id == class_id)
            .options(*_class_load_options())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        klass = result.scalar_one_or_none()
        if not klass:
            raise NotFoundError("Class", class_id)
        return klass

    async def create_class(self, data: ClassCreate) -> Class:
        await self._get_teacher(data.teacher_id)

        name = data.name
        if data.subject_id is not None:
            subject = await self.academics.get_subject(data.subject_id, with_hierarchy=True)
            if not name:
                name = hierarchy_name(subject, data.custom_suffix)

        klass = Class(
            name=name,
            teacher_id=data.teacher_id,
            subject_id=data.subject_id,
            pricing_mode=data.pricing_mode.value,
            monthly_price_cents=data.monthly_price_cents,
            fixed_monthly_price_cents=data.fixed_monthly_price_cents,
            teacher_fixed_monthly_pay_cents=data.teacher_fixed_monthly_pay_cents,
        )
        self.session.add(klass)
        await self.session.flush()
        logger.info("Created class %s (%s)", klass.id, klass.name)
        return await self.get_class(klass.id)

    async def update_class(self, class_id: int, data: ClassUpdate) -> Class:
        klass = await self.get_class(class_id)

        name = data.name
        if data.subject_id is not None:
            subject = await self.academics.get_subject(data.subject_id, with_hierarchy=True)
            klass.subject_id = subject.id
            if not name:
                name = hierarchy_name(subject)
        if name:
            klass.name = name

        await self.session.flush()
        logger.info("Updated class %s", class_id)
        return await self.get_class(class_id)

    async def delete_class(self, class_id: int) -> None:
        """Delete a class together with its weekly times and overrides."""
        klass = await self.get_class(class_id)
        await self.session.delete(klass)
        await self.session.flush()
        logger.info("Deleted class %s", class_id)

    async def assign_teacher(self, class_id: int, teacher_id: int) -> Class:
        klass = await self.get_class(class_id)
        await self._get_teacher(teacher_id)
        klass.teacher_id = teacher_id
        await self.session.flush()
        logger.info("Assigned teacher %s to class %s", teacher_id, class_id)
        return await self.get_class(class_id)

    async def update_pricing(self, class_id: int, data: ClassPricingUpdate) -> Class:
        klass = await self.get_class(class_id)
        klass.pricing_mode = data.pricing_mode.value
        # Amounts not sent keep their stored values.
        for field in (
            "monthly_price_cents",
            "fixed_monthly_price_cents",
            "teacher_fixed_monthly_pay_cents",
        ):
            if field in data.model_fields_set:
                setattr(klass, field, getattr(data, field))
        await self.session.flush()
        logger.info("Updated pricing of class %s to %s", class_id, klass.pricing_mode)
        return await self.get_class(class_id)

    # --- Enrollment ---

    async def add_student(self, class_id: int, student_id: int) -> Class:
        klass = await self.get_class(class_id)
        student = await self._get_student(student_id)
        if student not in klass.students:
            klass.students.append(student)
            await self.session.flush()
            logger.info("Enrolled student %s in class %s", student_id, class_id)
        return await self.get_class(class_id)

    async def remove_student(self, class_id: int, student_id: int) -> Class:
        klass = await self.get_class(class_id)
        student = await self._get_student(student_id)
        if student in klass.students:
            klass.students.remove(student)
            await self.session.flush()
            logger.info("Removed student %s from class %s", student_id, class_id)
        return await self.get_class(class_id)

    # --- Weekly times ---

    async def list_times(self, class_id: int) -> list[ClassTime]:
        await self._ensure_class(class_id)
        stmt = (
            select(ClassTime)
            .where(ClassTime.class_id == class_id)
            .order_by(ClassTime.day_of_week, ClassTime.start_minutes)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_time(self, class_id: int, data: ClassTimeCreate) -> ClassTime:
        await self._ensure_class(class_id)
        _validate_window(data.start_minutes, data.end_minutes)

        class_time = ClassTime(
            class_id=class_id,
            day_of_week=data.day_of_week,
            start_minutes=data.start_minutes,
            end_minutes=data.end_minutes,
        )
        self.session.add(class_time)
        await self.session.flush()
        logger.info("Added time %s to class %s", class_time.id, class_id)
        return class_time

    async def update_time(self, class_id: int, time_id: int, data: ClassTimeUpdate) -> ClassTime:
        await self._ensure_class(class_id)
        class_time = await self._get_time(class_id, time_id)

        day_of_week = data.day_of_week if data.day_of_week is not None else class_time.day_of_week
        start = data.start_minutes if data.start_minutes is not None else class_time.start_minutes
        end = data.end_minutes if data.end_minutes is not None else class_time.end_minutes
        _validate_window(start, end)

        class_time.day_of_week = day_of_week
        class_time.start_minutes = start
        class_time.end_minutes = end
        await self.session.flush()
        return class_time

    async def remove_time(self, class_id: int, time_id: int) -> None:
        await self._ensure_class(class_id)
        class_time = await self._get_time(class_id, time_id)
        await self.session.delete(class_time)
        await self.session.flush()
        logger.info("Removed time %s from class %s", time_id, class_id)

    # --- Price overrides ---

    async def set_price_override(
        self, class_id: int, student_id: int, price_override_cents: int
    ) -> StudentPriceOverride:
        """Create or replace the monthly price one student pays for one class."""
        await self._ensure_class(class_id)
        await self._get_student(student_id)

        override = await self._find_override(class_id, student_id)
        if override:
            override.price_override_cents = price_override_cents
        else:
            override = StudentPriceOverride(
                class_id=class_id,
                student_id=student_id,
                price_override_cents=price_override_cents,
            )
            self.session.add(override)
        await self.session.flush()
        logger.info(
            "Set price override for student %s in class %s: %s cents",
            student_id,
            class_id,
            price_override_cents,
        )
        return override

    async def remove_price_override(self, class_id: int, student_id: int) -> None:
        override = await self._find_override(class_id, student_id)
        if not override:
            raise NotFoundError("Price override")
        await self.session.delete(override)
        await self.session.flush()

    # --- Helpers ---

    async def _ensure_class(self, class_id: int) -> None:
        result = await self.session.execute(select(Class.id).where(Class.id == class_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Class", class_id)

    async def _get_time(self, class_id: int, time_id: int) -> ClassTime:
        class_time = await self.session.get(ClassTime, time_id)
        if not class_time or class_time.class_id != class_id:
            raise NotFoundError("Class time", time_id)
        return class_time

    async def _get_teacher(self, teacher_id: int) -> Teacher:
        teacher = await self.session.get(Teacher, teacher_id)
        if not teacher:
            raise NotFoundError("Teacher", teacher_id)
        return teacher

    async def _get_student(self, student_id: int) -> Student:
        student = await self.session.get(Student, student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    async def _find_override(self, class_id: int, student_id: int) -> StudentPriceOverride | None:
        result = await self.session.execute(
            select(StudentPriceOverride).where(
                StudentPriceOverride.class_id == class_id,
                StudentPriceOverride.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()


def _validate_window(start_minutes: int, end_minutes: int) -> None:
    if end_minutes <= start_minutes:
        raise ValidationError("end_minutes must be greater than start_minutes", field="end_minutes")
