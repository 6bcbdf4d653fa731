"""API for the dashboard overview (admin main page)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_db
from src.modules.dashboard.schemas import OverviewReport
from src.modules.dashboard.service import DashboardService
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/overview", response_model=ApiResponse[OverviewReport])
async def get_overview(db: AsyncSession = Depends(get_db)):
    """
    Get the dashboard overview: entity counts, payment figures, students per
    level, top classes and the sessions of the next days.
    """
    service = DashboardService(db)
    report = await service.get_overview()
    return ApiResponse(data=report)
