"""API endpoints for the academic hierarchy."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_db
from src.modules.academics.schemas import (
    LevelCreate,
    LevelDetailResponse,
    LevelResponse,
    SubjectCreate,
    SubjectResponse,
    TrackCreate,
    TrackResponse,
)
from src.modules.academics.service import AcademicsService
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/academics", tags=["Academics"])


# --- Levels ---


@router.get(
    "/levels",
    response_model=ApiResponse[list[LevelDetailResponse]],
)
async def list_levels(db: AsyncSession = Depends(get_db)):
    """List levels with their tracks and subjects."""
    service = AcademicsService(db)
    levels = await service.list_levels()
    return ApiResponse(
        success=True,
        data=[LevelDetailResponse.model_validate(level) for level in levels],
    )


@router.post(
    "/levels",
    response_model=ApiResponse[LevelResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_level(data: LevelCreate, db: AsyncSession = Depends(get_db)):
    service = AcademicsService(db)
    level = await service.create_level(data)
    return ApiResponse(
        success=True,
        message="Level created successfully",
        data=LevelResponse.model_validate(level),
    )


@router.delete("/levels/{level_id}", response_model=ApiResponse[None])
async def delete_level(level_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a level. Fails while any class sits under it."""
    service = AcademicsService(db)
    await service.delete_level(level_id)
    return ApiResponse(success=True, message="Level deleted", data=None)


# --- Tracks ---


@router.post(
    "/tracks",
    response_model=ApiResponse[TrackResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_track(data: TrackCreate, db: AsyncSession = Depends(get_db)):
    service = AcademicsService(db)
    track = await service.create_track(data)
    return ApiResponse(
        success=True,
        message="Track created successfully",
        data=TrackResponse.model_validate(track),
    )


@router.delete("/tracks/{track_id}", response_model=ApiResponse[None])
async def delete_track(track_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a track. Fails while any class uses one of its subjects."""
    service = AcademicsService(db)
    await service.delete_track(track_id)
    return ApiResponse(success=True, message="Track deleted", data=None)


# --- Subjects ---


@router.post(
    "/subjects",
    response_model=ApiResponse[SubjectResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_subject(data: SubjectCreate, db: AsyncSession = Depends(get_db)):
    service = AcademicsService(db)
    subject = await service.create_subject(data)
    return ApiResponse(
        success=True,
        message="Subject created successfully",
        data=SubjectResponse.model_validate(subject),
    )


@router.delete("/subjects/{subject_id}", response_model=ApiResponse[None])
async def delete_subject(subject_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a subject. Fails while any class references it."""
    service = AcademicsService(db)
    await service.delete_subject(subject_id)
    return ApiResponse(success=True, message="Subject deleted", data=None)
