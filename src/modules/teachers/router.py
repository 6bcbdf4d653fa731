"""API endpoints for Teachers module."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_db
from src.modules.teachers.models import Teacher
from src.modules.teachers.schemas import TeacherClassesResponse, TeacherResponse, TeacherUpdate
from src.modules.teachers.service import TeacherService
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/teachers", tags=["Teachers"])


def _teacher_to_response(teacher: Teacher) -> TeacherResponse:
    return TeacherResponse(
        id=teacher.id,
        user_id=teacher.user_id,
        first_name=teacher.user.first_name,
        last_name=teacher.user.last_name,
        email=teacher.user.email,
        phone=teacher.phone,
        speciality=teacher.speciality,
        address=teacher.address,
        birth_date=teacher.birth_date,
        hiring_date=teacher.hiring_date,
    )


@router.get("", response_model=ApiResponse[list[TeacherResponse]])
async def list_teachers(
    search: str | None = Query(None, description="Name, email, phone or speciality"),
    db: AsyncSession = Depends(get_db),
):
    service = TeacherService(db)
    teachers = await service.list_teachers(search=search)
    return ApiResponse(success=True, data=[_teacher_to_response(t) for t in teachers])


@router.get("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def get_teacher(teacher_id: int, db: AsyncSession = Depends(get_db)):
    service = TeacherService(db)
    teacher = await service.get_teacher(teacher_id)
    return ApiResponse(success=True, data=_teacher_to_response(teacher))


@router.patch("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def update_teacher(
    teacher_id: int,
    data: TeacherUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update profile and account fields of a teacher; omitted fields are kept."""
    service = TeacherService(db)
    teacher = await service.update_teacher(teacher_id, data)
    return ApiResponse(success=True, message="Teacher updated", data=_teacher_to_response(teacher))


@router.get("/{teacher_id}/classes", response_model=ApiResponse[TeacherClassesResponse])
async def list_teacher_classes(teacher_id: int, db: AsyncSession = Depends(get_db)):
    """Classes of a teacher with pricing, revenue and overrides, also grouped by level."""
    service = TeacherService(db)
    data = await service.list_teacher_classes(teacher_id)
    return ApiResponse(success=True, data=data)
