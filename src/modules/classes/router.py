"""API endpoints for Classes module."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_db
from src.modules.classes.models import Class
from src.modules.classes.schemas import (
    ClassCreate,
    ClassDetailResponse,
    ClassPricingUpdate,
    ClassResponse,
    ClassTimeCreate,
    ClassTimeResponse,
    ClassTimeUpdate,
    ClassUpdate,
    EnrolledStudentResponse,
    PriceOverrideResponse,
    PriceOverrideSet,
)
from src.modules.classes.service import ClassService, monthly_income_cents
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/classes", tags=["Classes"])


def _class_fields(klass: Class) -> dict:
    subject = klass.subject
    return {
        "id": klass.id,
        "name": klass.name,
        "teacher_id": klass.teacher_id,
        "teacher_name": klass.teacher.full_name if klass.teacher else None,
        "subject_id": klass.subject_id,
        "subject": subject.name if subject else None,
        "track": subject.track.name if subject and subject.track else None,
        "level": klass.level_name,
        "pricing_mode": klass.pricing_mode,
        "monthly_price_cents": klass.monthly_price_cents,
        "fixed_monthly_price_cents": klass.fixed_monthly_price_cents,
        "teacher_fixed_monthly_pay_cents": klass.teacher_fixed_monthly_pay_cents,
        "student_count": len(klass.students),
    }


def _class_to_response(klass: Class) -> ClassResponse:
    return ClassResponse(**_class_fields(klass))


def _class_to_detail(klass: Class) -> ClassDetailResponse:
    """Helper to convert a loaded Class to the detailed response."""
    return ClassDetailResponse(
        **_class_fields(klass),
        total_monthly_income_cents=monthly_income_cents(klass),
        students=[EnrolledStudentResponse.from_student(s) for s in klass.students],
        class_times=[ClassTimeResponse.model_validate(t) for t in klass.class_times],
    )


# --- Class Endpoints ---


@router.get("", response_model=ApiResponse[list[ClassResponse]])
async def list_classes(db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    classes = await service.list_classes()
    return ApiResponse(success=True, data=[_class_to_response(c) for c in classes])


@router.post(
    "",
    response_model=ApiResponse[ClassDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_class(data: ClassCreate, db: AsyncSession = Depends(get_db)):
    """Create a class. Without a name, it is built from the subject hierarchy."""
    service = ClassService(db)
    klass = await service.create_class(data)
    return ApiResponse(
        success=True,
        message="Class created successfully",
        data=_class_to_detail(klass),
    )


@router.get("/{class_id}", response_model=ApiResponse[ClassDetailResponse])
async def get_class(class_id: int, db: AsyncSession = Depends(get_db)):
    """Get class with students, times and its total monthly income."""
    service = ClassService(db)
    klass = await service.get_class(class_id)
    return ApiResponse(success=True, data=_class_to_detail(klass))


@router.patch("/{class_id}", response_model=ApiResponse[ClassDetailResponse])
async def update_class(class_id: int, data: ClassUpdate, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    klass = await service.update_class(class_id, data)
    return ApiResponse(
        success=True,
        message="Class updated successfully",
        data=_class_to_detail(klass),
    )


@router.delete("/{class_id}", response_model=ApiResponse[None])
async def delete_class(class_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    await service.delete_class(class_id)
    return ApiResponse(success=True, message="Class deleted", data=None)


@router.put("/{class_id}/teacher/{teacher_id}", response_model=ApiResponse[ClassDetailResponse])
async def assign_teacher(class_id: int, teacher_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    klass = await service.assign_teacher(class_id, teacher_id)
    return ApiResponse(success=True, message="Teacher assigned", data=_class_to_detail(klass))


@router.put("/{class_id}/pricing", response_model=ApiResponse[ClassDetailResponse])
async def update_pricing(
    class_id: int, data: ClassPricingUpdate, db: AsyncSession = Depends(get_db)
):
    """Change pricing mode and amounts. Amounts not sent are kept."""
    service = ClassService(db)
    klass = await service.update_pricing(class_id, data)
    return ApiResponse(success=True, message="Pricing updated", data=_class_to_detail(klass))


# --- Enrollment ---


@router.post("/{class_id}/students/{student_id}", response_model=ApiResponse[ClassDetailResponse])
async def add_student(class_id: int, student_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    klass = await service.add_student(class_id, student_id)
    return ApiResponse(success=True, message="Student enrolled", data=_class_to_detail(klass))


@router.delete(
    "/{class_id}/students/{student_id}", response_model=ApiResponse[ClassDetailResponse]
)
async def remove_student(class_id: int, student_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    klass = await service.remove_student(class_id, student_id)
    return ApiResponse(success=True, message="Student removed", data=_class_to_detail(klass))


# --- Weekly times ---


@router.get("/{class_id}/times", response_model=ApiResponse[list[ClassTimeResponse]])
async def list_times(class_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    times = await service.list_times(class_id)
    return ApiResponse(success=True, data=[ClassTimeResponse.model_validate(t) for t in times])


@router.post(
    "/{class_id}/times",
    response_model=ApiResponse[ClassTimeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_time(class_id: int, data: ClassTimeCreate, db: AsyncSession = Depends(get_db)):
    """Add a weekly slot. end_minutes must be greater than start_minutes."""
    service = ClassService(db)
    class_time = await service.add_time(class_id, data)
    return ApiResponse(
        success=True,
        message="Class time added",
        data=ClassTimeResponse.model_validate(class_time),
    )


@router.patch("/{class_id}/times/{time_id}", response_model=ApiResponse[ClassTimeResponse])
async def update_time(
    class_id: int,
    time_id: int,
    data: ClassTimeUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = ClassService(db)
    class_time = await service.update_time(class_id, time_id, data)
    return ApiResponse(
        success=True,
        message="Class time updated",
        data=ClassTimeResponse.model_validate(class_time),
    )


@router.delete("/{class_id}/times/{time_id}", response_model=ApiResponse[None])
async def remove_time(class_id: int, time_id: int, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    await service.remove_time(class_id, time_id)
    return ApiResponse(success=True, message="Class time removed", data=None)


# --- Price overrides ---


@router.put(
    "/{class_id}/overrides/{student_id}", response_model=ApiResponse[PriceOverrideResponse]
)
async def set_price_override(
    class_id: int,
    student_id: int,
    data: PriceOverrideSet,
    db: AsyncSession = Depends(get_db),
):
    """Set the monthly price one student pays for this class."""
    service = ClassService(db)
    override = await service.set_price_override(class_id, student_id, data.price_override_cents)
    return ApiResponse(
        success=True,
        message="Price override saved",
        data=PriceOverrideResponse.model_validate(override),
    )


@router.delete("/{class_id}/overrides/{student_id}", response_model=ApiResponse[None])
async def remove_price_override(
    class_id: int, student_id: int, db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    await service.remove_price_override(class_id, student_id)
    return ApiResponse(success=True, message="Price override removed", data=None)
